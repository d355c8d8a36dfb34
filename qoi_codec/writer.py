import logging
from io import BytesIO
from typing import BinaryIO, Optional, Union

from PIL import Image

from qoi_codec import config
from qoi_codec.chunks import WRITE_CHUNK_QUEUE, INDEXChunk, RUNChunk
from qoi_codec.utils import ByteReader, ByteWriter, Context, Pixel, QOI_MAGIC, QOI_PADDING

logger = logging.getLogger(__name__)

PixelSource = Union[bytes, bytearray, memoryview]


def write_header(width: int, height: int, channels: int, colorspace: int, writer: ByteWriter):
    for char in QOI_MAGIC:
        writer.write_char(char)
    writer.write_u32(width)
    writer.write_u32(height)
    writer.write_u8(channels)
    writer.write_u8(colorspace)


def write_stream_end(writer: ByteWriter):
    for byte in QOI_PADDING:
        writer.write_u8(byte)


def _read_pixel(reader: ByteReader, channels: int, alpha: int) -> Pixel:
    red: int = reader.read_u8()
    green: int = reader.read_u8()
    blue: int = reader.read_u8()
    if channels == 4:
        alpha = reader.read_u8()
    return Pixel(red, green, blue, alpha)


def write(width: int, height: int, channels: int, colorspace: int, pixels: PixelSource,
          destination: BinaryIO) -> bool:
    """
    Encodes width * height row-major pixels of the given channel count into destination.

    Only r, g, b are read from pixels when channels is 3, alpha then stays at 255.
    A pixel source shorter than the geometry requires raises QoiReadError.
    """
    source = ByteReader(pixels)
    writer = ByteWriter(destination)
    write_header(width, height, channels, colorspace, writer)
    context = Context()
    pixel_count: int = width * height
    for position in range(pixel_count):
        context.next_pixel(_read_pixel(source, channels, context.previous_pixel.a))
        if RUNChunk.can_be_used(context):
            context.run += 1
            if RUNChunk.is_full(context) or position == pixel_count - 1:
                RUNChunk.write(context, writer)
            context.shift_pixel()
            continue
        if context.run > 0:
            RUNChunk.write(context, writer)
        if INDEXChunk.can_be_used(context):
            INDEXChunk.write(context, writer)
        else:
            context.running_array.add(context.current_pixel)
            for chunk in WRITE_CHUNK_QUEUE:
                if chunk.can_be_used(context):
                    chunk.write(context, writer)
                    break
        context.shift_pixel()
    write_stream_end(writer)
    logger.debug("encoded %dx%d image (%d channels) into %d bytes", width, height, channels, writer.written)
    return True


def encode(width: int, height: int, channels: int, colorspace: int, pixels: PixelSource) -> bytes:
    destination = BytesIO()
    write(width, height, channels, colorspace, pixels, destination)
    return destination.getvalue()


def write_image(image: Image.Image, destination: BinaryIO, colorspace: Optional[int] = None) -> bool:
    """ Encodes a Pillow image, keeping the alpha channel only when the image has one """
    if colorspace is None:
        colorspace = config.get_colorspace()
    if image.mode != "RGBA" and ("A" in image.getbands() or "transparency" in image.info):
        image = image.convert("RGBA")
    elif image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGB")
    channels: int = len(image.getbands())
    return write(image.width, image.height, channels, colorspace, image.tobytes(), destination)


def write_file(image: Image.Image, path: str, colorspace: Optional[int] = None) -> bool:
    with open(path, "wb") as file:
        return write_image(image, file, colorspace)
