"""
Command line front end for qoi_codec.

Usage:
    python -m qoi_codec encode picture.png picture.qoi [--colorspace 1]
    python -m qoi_codec decode picture.qoi picture.png
    python -m qoi_codec info picture.qoi
"""

import argparse
import logging
import sys
from typing import List, Optional

from PIL import Image

from qoi_codec import config
from qoi_codec.reader import read, read_file
from qoi_codec.errors import QoiError
from qoi_codec.writer import write_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qoi-codec",
        description="Convert images to and from the QOI format",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at debug level")
    commands = parser.add_subparsers(dest="command", required=True)

    encode_parser = commands.add_parser("encode", help="Encode any image Pillow can open into QOI")
    encode_parser.add_argument("input", help="Source image")
    encode_parser.add_argument("output", help="Destination .qoi file")
    encode_parser.add_argument(
        "--colorspace",
        type=int,
        choices=(0, 1),
        default=None,
        help="0 = sRGB with linear alpha, 1 = all channels linear (default: QOI_CODEC_COLORSPACE or 0)"
    )

    decode_parser = commands.add_parser("decode", help="Decode a QOI file into any format Pillow can save")
    decode_parser.add_argument("input", help="Source .qoi file")
    decode_parser.add_argument("output", help="Destination image, format taken from the extension")

    info_parser = commands.add_parser("info", help="Print the header of a QOI file and check it decodes")
    info_parser.add_argument("input", help="Source .qoi file")
    return parser


def _encode(args: argparse.Namespace) -> int:
    with Image.open(args.input) as image:
        write_file(image, args.output, args.colorspace)
    logger.info("encoded %s to %s", args.input, args.output)
    return 0


def _decode(args: argparse.Namespace) -> int:
    image = read_file(args.input)
    image.save(args.output)
    logger.info("decoded %s to %s", args.input, args.output)
    return 0


def _info(args: argparse.Namespace) -> int:
    with open(args.input, "rb") as file:
        decoded = read(file.read())
    print(f"{args.input}: {decoded.width}x{decoded.height}, channels: {decoded.channels}, "
          f"colorspace: {decoded.colorspace}, status: {decoded.status.name.lower()}")
    return 0 if decoded.valid else 1


COMMANDS = {
    "encode": _encode,
    "decode": _decode,
    "info": _info,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.get_log_level(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    try:
        return COMMANDS[args.command](args)
    except (QoiError, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
