import random

import pytest

from agbtools.font import (
    decode_fullwidth_japanese_font,
    decode_halfwidth_japanese_font,
    decode_latin_font,
    encode_fullwidth_japanese_font,
    encode_halfwidth_japanese_font,
    encode_latin_font,
    read_fullwidth_japanese_font,
    read_halfwidth_japanese_font,
    read_latin_font,
    write_fullwidth_japanese_font,
    write_halfwidth_japanese_font,
    write_latin_font,
)
from agbtools.gfx import Image
from agbtools.util import ToolError


def _random_bytes(count, seed=5):
    return random.Random(seed).randbytes(count)


def _check_decoded(image, width):
    assert image.width == width
    assert image.height == 2 * 16
    assert image.bit_depth == 2
    assert len(image.pixels) == image.height * width // 4


def _check_palette(image):
    assert image.has_palette
    assert not image.has_transparency
    assert len(image.palette) == 4
    first = image.palette.colors[0]
    assert (first.red, first.green, first.blue) == (0x90, 0xC8, 0xFF)


def test_latin_round_trip():
    data = _random_bytes(32 * 64)
    image = decode_latin_font(data)
    _check_decoded(image, 256)
    assert encode_latin_font(image) == data


def test_halfwidth_round_trip():
    data = _random_bytes(32 * 32)
    image = decode_halfwidth_japanese_font(data)
    _check_decoded(image, 128)
    assert encode_halfwidth_japanese_font(image) == data


def test_fullwidth_round_trip():
    data = _random_bytes(32 * 64)
    image = decode_fullwidth_japanese_font(data)
    _check_decoded(image, 256)
    assert encode_fullwidth_japanese_font(image) == data


def test_latin_sets_font_palette():
    _check_palette(decode_latin_font(_random_bytes(16 * 64)))


def test_halfwidth_sets_font_palette():
    _check_palette(decode_halfwidth_japanese_font(_random_bytes(16 * 32)))


def test_fullwidth_sets_font_palette():
    _check_palette(decode_fullwidth_japanese_font(_random_bytes(16 * 64)))


def test_latin_first_row_bytes_swapped():
    data = b"\x12\x34" + bytes(16 * 64 - 2)
    image = decode_latin_font(data)
    assert image.pixels[:2] == b"\x34\x12"


def test_latin_glyph_count_not_multiple_of_16():
    with pytest.raises(ToolError):
        decode_latin_font(bytes(17 * 64))


def test_halfwidth_glyph_count_not_multiple_of_16():
    with pytest.raises(ToolError):
        decode_halfwidth_japanese_font(bytes(17 * 32))


def test_fullwidth_glyph_count_not_multiple_of_16():
    with pytest.raises(ToolError):
        decode_fullwidth_japanese_font(bytes(17 * 64))


def test_halfwidth_size_not_multiple_of_32():
    with pytest.raises(ToolError):
        decode_halfwidth_japanese_font(bytes(16 * 32 + 1))


def _image(width, height):
    return Image(width=width, height=height, bit_depth=2, pixels=bytes(height * width))


def test_latin_encode_wrong_width():
    with pytest.raises(ToolError):
        encode_latin_font(_image(264, 16))


def test_halfwidth_encode_wrong_width():
    with pytest.raises(ToolError):
        encode_halfwidth_japanese_font(_image(136, 16))


def test_fullwidth_encode_wrong_width():
    with pytest.raises(ToolError):
        encode_fullwidth_japanese_font(_image(264, 16))


def test_latin_encode_height_not_multiple_of_16():
    with pytest.raises(ToolError):
        encode_latin_font(_image(256, 8))


def test_halfwidth_encode_height_not_multiple_of_16():
    with pytest.raises(ToolError):
        encode_halfwidth_japanese_font(_image(128, 8))


def test_fullwidth_encode_height_not_multiple_of_16():
    with pytest.raises(ToolError):
        encode_fullwidth_japanese_font(_image(256, 8))


def test_latin_file_round_trip(tmp_path):
    data = _random_bytes(16 * 64, seed=9)
    src = tmp_path / "font.bin"
    src.write_bytes(data)
    out = tmp_path / "out.bin"
    write_latin_font(out, read_latin_font(src))
    assert out.read_bytes() == data


def test_halfwidth_file_round_trip(tmp_path):
    data = _random_bytes(16 * 32, seed=9)
    src = tmp_path / "font.bin"
    src.write_bytes(data)
    out = tmp_path / "out.bin"
    write_halfwidth_japanese_font(out, read_halfwidth_japanese_font(src))
    assert out.read_bytes() == data


def test_fullwidth_file_round_trip(tmp_path):
    data = _random_bytes(16 * 64, seed=9)
    src = tmp_path / "font.bin"
    src.write_bytes(data)
    out = tmp_path / "out.bin"
    write_fullwidth_japanese_font(out, read_fullwidth_japanese_font(src))
    assert out.read_bytes() == data