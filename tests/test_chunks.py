import itertools

import pytest

from qoi_codec.chunks import GenericChunk, READ_CHUNK_QUEUE, match_chunk, RGBChunk, RGBAChunk, INDEXChunk, \
    DIFFChunk, LUMAChunk, RUNChunk
from qoi_codec.utils import Pixel, Context, RunningArray, color_hash, to_signed8, to_u8bit, to_u32bit


class CH1(GenericChunk):
    TAG = 0xf0
    TAG_BIT_MASK = 0xf0


class CH2(GenericChunk):
    TAG = 0xff
    TAG_BIT_MASK = 0xff


def test_mask_test():
    assert CH1.match_tag(0xf0)
    assert CH1.match_tag(0xf7)
    assert not CH2.match_tag(CH1.TAG)


def test_pixel_equality():
    p1 = Pixel(0, 0, 0, 255)
    p2 = Pixel(0, 0, 0, 255)
    p3 = Pixel(12, 35, 56, 45)
    assert p1 == p2
    assert p1 != p3


def test_hash_known_values():
    assert Pixel(0, 0, 0, 255).qoi_index == 53
    assert Pixel(0, 0, 0, 0).qoi_index == 0
    assert Pixel(10, 10, 10, 255).qoi_index == 11


def test_hash_range_and_determinism():
    levels = (0, 1, 63, 64, 127, 128, 254, 255)
    for r, g, b, a in itertools.product(levels, repeat=4):
        index = color_hash(r, g, b, a)
        assert 0 <= index <= 63
        assert index == color_hash(r, g, b, a) == Pixel(r, g, b, a).qoi_index


def test_running_array_starts_zeroed():
    running_array = RunningArray()
    for index in range(64):
        assert running_array.get(index) == Pixel(0, 0, 0, 0)


def test_running_array_last_writer_wins():
    running_array = RunningArray()
    occupant = Pixel(2, 5, 0, 0)  # 6 + 25 = 31
    colliding = Pixel(0, 0, 1, 8)  # 7 + 88 = 95 -> 31
    assert occupant.qoi_index == colliding.qoi_index == 31
    running_array.add(occupant)
    assert running_array.holds(occupant)
    running_array.add(colliding)
    assert running_array.holds(colliding)
    assert not running_array.holds(occupant)
    assert running_array.holds(Pixel(0, 0, 0, 0))


def test_signed_wrap():
    assert to_signed8(255 - 0) == -1
    assert to_signed8(0 - 255) == 1
    assert to_signed8(127) == 127
    assert to_signed8(128) == -128


@pytest.mark.parametrize("tag, expected", [
    (0xfe, RGBChunk),
    (0xff, RGBAChunk),
    (0x00, INDEXChunk),
    (0x3f, INDEXChunk),
    (0x40, DIFFChunk),
    (0x7f, DIFFChunk),
    (0x80, LUMAChunk),
    (0xbf, LUMAChunk),
    (0xc0, RUNChunk),
    (0xfd, RUNChunk),
])
def test_match_chunk(tag, expected):
    assert match_chunk(tag) is expected


def test_every_tag_has_a_chunk():
    for tag in range(256):
        assert match_chunk(tag) in READ_CHUNK_QUEUE


def _context(previous: Pixel, current: Pixel) -> Context:
    context = Context()
    context.previous_pixel = previous
    context.next_pixel(current)
    return context


def test_diff_bounds():
    previous = Pixel(100, 100, 100, 255)
    assert DIFFChunk.can_be_used(_context(previous, Pixel(101, 100, 99, 255)))
    assert DIFFChunk.can_be_used(_context(previous, Pixel(98, 98, 98, 255)))
    assert not DIFFChunk.can_be_used(_context(previous, Pixel(102, 100, 100, 255)))
    assert not DIFFChunk.can_be_used(_context(previous, Pixel(97, 100, 100, 255)))
    assert not DIFFChunk.can_be_used(_context(previous, Pixel(101, 100, 99, 254)))


def test_diff_wraps_around():
    assert DIFFChunk.can_be_used(_context(Pixel(0, 0, 0, 255), Pixel(255, 0, 1, 255)))


def test_luma_bounds():
    previous = Pixel(100, 100, 100, 255)
    assert LUMAChunk.can_be_used(_context(previous, Pixel(131, 131, 131, 255)))
    assert LUMAChunk.can_be_used(_context(previous, Pixel(60, 68, 75, 255)))
    assert not LUMAChunk.can_be_used(_context(previous, Pixel(132, 132, 132, 255)))
    assert not LUMAChunk.can_be_used(_context(previous, Pixel(108, 100, 100, 255)))
    assert not LUMAChunk.can_be_used(_context(previous, Pixel(110, 110, 110, 0)))


def test_rgb_only_when_alpha_unchanged():
    previous = Pixel(0, 0, 0, 255)
    assert RGBChunk.can_be_used(_context(previous, Pixel(200, 10, 30, 255)))
    assert not RGBChunk.can_be_used(_context(previous, Pixel(200, 10, 30, 128)))
    assert RGBAChunk.can_be_used(_context(previous, Pixel(200, 10, 30, 128)))


def test_byte_packing():
    assert to_u8bit(0) == b"\x00"
    assert to_u8bit(255) == b"\xff"
    assert to_u32bit(500) == b"\x00\x00\x01\xf4"
    assert to_u32bit(4294967295) == b"\xff\xff\xff\xff"
