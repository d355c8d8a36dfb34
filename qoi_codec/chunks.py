from typing import List, Type

from qoi_codec.utils import Context, Pixel, ByteReader, ByteWriter, MAX_RUN_LENGTH, QOI_MASK_2


class GenericChunk:

    TAG: int
    TAG_BIT_MASK: int

    @classmethod
    def match_tag(cls, tag: int) -> bool:
        """ returns whether the given byte matches the chunk's tag """
        return cls.TAG == tag & cls.TAG_BIT_MASK

    @classmethod
    def write(cls, context: Context, writer: ByteWriter):
        """ Writes the chunk for the current pixel of the context """
        raise NotImplementedError

    @classmethod
    def read(cls, tag: int, context: Context, reader: ByteReader) -> List[Pixel]:
        """ Returns the pixels described by the chunk starting with the given tag """
        raise NotImplementedError

    @staticmethod
    def can_be_used(context: Context) -> bool:
        """ returns whether the chunk can be used in writing given the current context """
        return True


class RGBChunk(GenericChunk):

    TAG = 0xfe
    TAG_BIT_MASK = 0xff

    @classmethod
    def write(cls, context: Context, writer: ByteWriter):
        writer.write_u8(cls.TAG)
        writer.write_u8(context.current_pixel.r)
        writer.write_u8(context.current_pixel.g)
        writer.write_u8(context.current_pixel.b)

    @classmethod
    def read(cls, tag: int, context: Context, reader: ByteReader) -> List[Pixel]:
        red: int = reader.read_u8()
        green: int = reader.read_u8()
        blue: int = reader.read_u8()
        return [Pixel(red, green, blue, context.previous_pixel.a)]

    @staticmethod
    def can_be_used(context: Context) -> bool:
        return context.previous_pixel.a == context.current_pixel.a


class RGBAChunk(GenericChunk):

    TAG = 0xff
    TAG_BIT_MASK = 0xff

    @classmethod
    def write(cls, context: Context, writer: ByteWriter):
        writer.write_u8(cls.TAG)
        for channel in context.current_pixel.as_tuple():
            writer.write_u8(channel)

    @classmethod
    def read(cls, tag: int, context: Context, reader: ByteReader) -> List[Pixel]:
        red: int = reader.read_u8()
        green: int = reader.read_u8()
        blue: int = reader.read_u8()
        alpha: int = reader.read_u8()
        return [Pixel(red, green, blue, alpha)]


class INDEXChunk(GenericChunk):

    TAG = 0x00
    TAG_BIT_MASK = QOI_MASK_2

    @classmethod
    def write(cls, context: Context, writer: ByteWriter):
        writer.write_u8(cls.TAG | context.current_pixel.qoi_index)

    @classmethod
    def read(cls, tag: int, context: Context, reader: ByteReader) -> List[Pixel]:
        return [context.running_array.get(tag & 0x3f)]

    @staticmethod
    def can_be_used(context: Context) -> bool:
        return context.running_array.holds(context.current_pixel)


class DIFFChunk(GenericChunk):

    TAG = 0x40
    TAG_BIT_MASK = QOI_MASK_2

    @classmethod
    def write(cls, context: Context, writer: ByteWriter):
        r_diff, g_diff, b_diff = context.current_pixel.deltas(context.previous_pixel)
        writer.write_u8(cls.TAG | (r_diff + 2) << 4 | (g_diff + 2) << 2 | (b_diff + 2))

    @classmethod
    def read(cls, tag: int, context: Context, reader: ByteReader) -> List[Pixel]:
        r_diff: int = ((tag & 0x30) >> 4) - 2
        g_diff: int = ((tag & 0x0c) >> 2) - 2
        b_diff: int = (tag & 0x03) - 2
        previous = context.previous_pixel
        return [Pixel(
            (previous.r + r_diff) & 0xff,
            (previous.g + g_diff) & 0xff,
            (previous.b + b_diff) & 0xff,
            previous.a
        )]

    @staticmethod
    def can_be_used(context: Context) -> bool:
        if context.current_pixel.a != context.previous_pixel.a:
            return False
        return all(-2 <= diff <= 1 for diff in context.current_pixel.deltas(context.previous_pixel))


class LUMAChunk(GenericChunk):

    TAG = 0x80
    TAG_BIT_MASK = QOI_MASK_2

    @classmethod
    def write(cls, context: Context, writer: ByteWriter):
        r_diff, green_diff, b_diff = context.current_pixel.deltas(context.previous_pixel)
        dr_dg: int = r_diff - green_diff + 8
        db_dg: int = b_diff - green_diff + 8
        writer.write_u8(cls.TAG | (green_diff + 32))
        writer.write_u8(dr_dg << 4 | db_dg)

    @classmethod
    def read(cls, tag: int, context: Context, reader: ByteReader) -> List[Pixel]:
        green_diff: int = (tag & 0x3f) - 32
        second_byte: int = reader.read_u8()
        dr_dg: int = ((second_byte & 0xf0) >> 4) - 8
        db_dg: int = (second_byte & 0x0f) - 8
        previous = context.previous_pixel
        return [Pixel(
            (previous.r + green_diff + dr_dg) & 0xff,  # current red
            (previous.g + green_diff) & 0xff,  # current green
            (previous.b + green_diff + db_dg) & 0xff,  # current blue
            previous.a
        )]

    @staticmethod
    def can_be_used(context: Context) -> bool:
        if context.current_pixel.a != context.previous_pixel.a:
            return False
        r_diff, green_diff, b_diff = context.current_pixel.deltas(context.previous_pixel)
        return (
            -32 <= green_diff <= 31
            and -8 <= r_diff - green_diff <= 7
            and -8 <= b_diff - green_diff <= 7
        )


class RUNChunk(GenericChunk):

    TAG = 0xc0
    TAG_BIT_MASK = QOI_MASK_2

    @classmethod
    def write(cls, context: Context, writer: ByteWriter):
        writer.write_u8(cls.TAG | (context.run - 1))
        context.run = 0

    @classmethod
    def read(cls, tag: int, context: Context, reader: ByteReader) -> List[Pixel]:
        return [context.previous_pixel] * ((tag & 0x3f) + 1)

    @staticmethod
    def can_be_used(context: Context) -> bool:
        return context.current_pixel == context.previous_pixel

    @staticmethod
    def is_full(context: Context) -> bool:
        return context.run == MAX_RUN_LENGTH


# Chunk queues, determine the priority of each chunk on the others while writing/reading.
# Runs and index hits are checked by the writer before the queue, as the history table
# only gets updated once they have been ruled out.

WRITE_CHUNK_QUEUE: List[Type[GenericChunk]] = [
    DIFFChunk,
    LUMAChunk,
    RGBChunk,
    RGBAChunk
]

# the literal tags overlap with the run tag under the 2 bit mask, so they go first
READ_CHUNK_QUEUE: List[Type[GenericChunk]] = [
    RGBAChunk,
    RGBChunk,
    INDEXChunk,
    DIFFChunk,
    LUMAChunk,
    RUNChunk
]


def match_chunk(tag: int) -> Type[GenericChunk]:
    """ returns the chunk type a tag byte belongs to """
    for chunk in READ_CHUNK_QUEUE:
        if chunk.match_tag(tag):
            return chunk
    # unreachable while the queue covers all 256 tag values
    raise ValueError(f"no chunk matches tag {tag:#04x}")
