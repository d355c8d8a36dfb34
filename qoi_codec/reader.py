import enum
import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Union

from PIL import Image

from qoi_codec.chunks import match_chunk
from qoi_codec.errors import QoiDecodeError
from qoi_codec.utils import ByteReader, ByteWriter, Context, QOI_MAGIC, QOI_PADDING

logger = logging.getLogger(__name__)


class DecodeStatus(enum.Enum):
    OK = 0
    BAD_MAGIC = 1
    BAD_PADDING = 2


@dataclass
class QoiImage:
    """
    Result of decoding a QOI stream.

    With BAD_MAGIC nothing past the magic was read: geometry is zero and pixels is empty.
    With BAD_PADDING pixels is fully sized but the image should not be trusted.
    """

    width: int = 0
    height: int = 0
    channels: int = 0
    colorspace: int = 0
    pixels: bytes = b""
    status: DecodeStatus = field(default=DecodeStatus.OK)

    @property
    def valid(self) -> bool:
        return self.status is DecodeStatus.OK


def _read_magic(reader: ByteReader) -> bool:
    # all four characters are consumed before comparing
    magic = "".join(reader.read_char() for _ in range(len(QOI_MAGIC)))
    return magic == QOI_MAGIC


def read(data: Union[bytes, bytearray, memoryview]) -> QoiImage:
    """
    Decodes a whole QOI stream.

    Raises QoiReadError if the stream ends inside the header or the chunks, a stream cut
    inside the end marker decodes with status BAD_PADDING instead.
    """
    reader = ByteReader(data)
    if not _read_magic(reader):
        logger.warning("stream does not start with %r", QOI_MAGIC)
        return QoiImage(status=DecodeStatus.BAD_MAGIC)
    image = QoiImage(
        width=reader.read_u32(),
        height=reader.read_u32(),
        channels=reader.read_u8(),
        colorspace=reader.read_u8()
    )
    logger.debug("header: %dx%d, %d channels, colorspace %d",
                 image.width, image.height, image.channels, image.colorspace)

    pixels_buffer = BytesIO()
    output = ByteWriter(pixels_buffer)
    context = Context()
    pixel_count: int = image.width * image.height
    produced: int = 0
    while produced < pixel_count:
        tag: int = reader.read_u8()
        chunk = match_chunk(tag)
        # a run can't spill over the end of the image
        decoded = chunk.read(tag, context, reader)[:pixel_count - produced]
        for pixel in decoded:
            context.running_array.add(pixel)
            output.write_u8(pixel.r)
            output.write_u8(pixel.g)
            output.write_u8(pixel.b)
            if image.channels == 4:
                output.write_u8(pixel.a)
            context.next_pixel(pixel)
            context.shift_pixel()
        produced += len(decoded)
    image.pixels = pixels_buffer.getvalue()

    padding = tuple(reader.read_and_shift(min(len(QOI_PADDING), reader.remaining)))
    if padding != QOI_PADDING:
        logger.warning("end marker mismatch after %d pixels: %s", produced, bytes(padding).hex())
        image.status = DecodeStatus.BAD_PADDING
    return image


def read_image(data: Union[bytes, bytearray, memoryview]) -> Image.Image:
    decoded = read(data)
    if not decoded.valid:
        raise QoiDecodeError(decoded.status)
    mode = "RGBA" if decoded.channels == 4 else "RGB"
    return Image.frombytes(mode, (decoded.width, decoded.height), decoded.pixels, "raw", mode)


def read_file(path: str) -> Image.Image:
    with open(path, "rb") as file:
        return read_image(file.read())
