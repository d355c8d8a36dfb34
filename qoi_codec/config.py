"""
Configuration for qoi_codec.

Environment variables:
  QOI_CODEC_COLORSPACE  - colorspace byte written when none is given: 0 (sRGB) or 1 (linear) (default: 0)
  QOI_CODEC_LOG_LEVEL   - log level used by the command line tool (default: WARNING)
"""

import logging
import os

logger = logging.getLogger(__name__)


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default)


def _env_int(name: str, default: int, choices: tuple = ()) -> int:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        parsed = int(val)
    except ValueError:
        logger.warning("%s=%s invalid, using default=%s", name, val, default)
        return default
    if choices and parsed not in choices:
        logger.warning("%s=%s not one of %s, using default=%s", name, val, choices, default)
        return default
    return parsed


def get_colorspace() -> int:
    return _env_int("QOI_CODEC_COLORSPACE", 0, choices=(0, 1))


def get_log_level() -> str:
    level = _env_str("QOI_CODEC_LOG_LEVEL", "WARNING").upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        logger.warning("QOI_CODEC_LOG_LEVEL=%s invalid, using default=WARNING", level)
        return "WARNING"
    return level
