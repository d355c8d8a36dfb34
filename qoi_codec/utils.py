import struct
from functools import cache
from typing import BinaryIO, Tuple, Union

from qoi_codec.errors import QoiReadError

QOI_MAGIC = "qoif"
QOI_PADDING = (0, 0, 0, 0, 0, 0, 0, 1)
QOI_MASK_2 = 0xc0
RUNNING_ARRAY_LENGTH = 64
MAX_RUN_LENGTH = 62


@cache
def to_u8bit(num: int) -> bytes:
    return struct.pack(">B", num)


def to_u32bit(num: int) -> bytes:
    return struct.pack(">I", num)


def to_signed8(num: int) -> int:
    """ wraps an integer to a byte and reads it back as a signed value in [-128, 127] """
    num &= 0xff
    return num - 256 if num > 127 else num


def color_hash(red: int, green: int, blue: int, alpha: int) -> int:
    return (red * 3 + green * 5 + blue * 7 + alpha * 11) % RUNNING_ARRAY_LENGTH


class Pixel:

    __slots__ = ("r", "g", "b", "a", "qoi_index")

    def __init__(self, red: int, green: int, blue: int, alpha: int):
        self.r = red
        self.g = green
        self.b = blue
        self.a = alpha
        self.qoi_index = color_hash(red, green, blue, alpha)

    def deltas(self, pixel: "Pixel") -> Tuple[int, int, int]:
        """ signed, byte-wrapped rgb differences between this pixel and the given one """
        return (
            to_signed8(self.r - pixel.r),
            to_signed8(self.g - pixel.g),
            to_signed8(self.b - pixel.b)
        )

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.a

    def __eq__(self, other: object):
        if not isinstance(other, Pixel):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return f"Pixel({self.r}, {self.g}, {self.b}, {self.a})"


class RunningArray:
    """ A 64 value long hash map that is constantly updated """

    DEFAULT_PIXEL = Pixel(0, 0, 0, 0)

    def __init__(self):
        self._pixels = [self.DEFAULT_PIXEL for _ in range(RUNNING_ARRAY_LENGTH)]

    def add(self, pixel: Pixel):
        self._pixels[pixel.qoi_index] = pixel

    def get(self, qoi_index: int) -> Pixel:
        return self._pixels[qoi_index]

    def holds(self, pixel: Pixel) -> bool:
        """ returns whether the slot the pixel hashes to already contains that exact pixel """
        return self._pixels[pixel.qoi_index] == pixel


class ByteReader:
    """ Sequential reader over an in-memory buffer, never moves backwards """

    def __init__(self, array: Union[bytes, bytearray, memoryview]):
        self.array = array
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self.array) - self._offset

    def read_and_shift(self, number_of_bytes: int) -> bytes:
        """ reads number_of_bytes bytes at the current offset & moves past them """
        if number_of_bytes > self.remaining:
            raise QoiReadError(self._offset, number_of_bytes, self.remaining)
        result = bytes(self.array[self._offset:self._offset + number_of_bytes])
        self._offset += number_of_bytes
        return result

    def read_u8(self) -> int:
        return self.read_and_shift(1)[0]

    def read_char(self) -> str:
        return chr(self.read_u8())

    def read_u32(self) -> int:
        return struct.unpack(">I", self.read_and_shift(4))[0]


class ByteWriter:
    """ Sequential writer on top of any binary file object """

    def __init__(self, destination: BinaryIO):
        self.destination = destination
        self.written = 0

    def write_u8(self, num: int):
        self.destination.write(to_u8bit(num))
        self.written += 1

    def write_char(self, char: str):
        self.destination.write(char.encode("ascii"))
        self.written += 1

    def write_u32(self, num: int):
        self.destination.write(to_u32bit(num))
        self.written += 4


class Context:
    """ Per-pass codec state, a fresh one is built for every encode or decode """

    def __init__(self):
        self.current_pixel: Pixel = Pixel(0, 0, 0, 255)
        self.previous_pixel: Pixel = Pixel(0, 0, 0, 255)
        self.running_array = RunningArray()
        self.run: int = 0

    def next_pixel(self, next_pixel: Pixel):
        """ sets the pixel currently being encoded or decoded """
        self.current_pixel = next_pixel

    def shift_pixel(self):
        """ the current pixel becomes the previous one """
        self.previous_pixel = self.current_pixel
