"""GBA font files: Latin, half-width and full-width Japanese glyph sheets."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from agbtools.gfx import Image
from agbtools.palette import Color, Palette
from agbtools.util import ToolError, read_whole_file, write_whole_file

FONT_PALETTE = (
    (0x90, 0xC8, 0xFF),  # background: saturated blue that contrasts with the shadow
    (0x38, 0x38, 0x38),  # foreground: dark grey
    (0xD8, 0xD8, 0xD8),  # shadow: light grey
    (0xFF, 0xFF, 0xFF),  # box: white
)

_Pairs = Callable[[int], Iterator[tuple[int, int]]]


def _latin_pairs(num_rows: int) -> Iterator[tuple[int, int]]:
    font_offset = 0
    for row in range(num_rows):
        for column in range(16):
            for tile in range(4):
                x = column * 16 + (tile & 1) * 8
                for i in range(8):
                    y = row * 16 + (tile >> 1) * 8 + i
                    yield font_offset, y * 64 + x // 4
                    font_offset += 2


def _halfwidth_pairs(num_rows: int) -> Iterator[tuple[int, int]]:
    for row in range(num_rows):
        for column in range(16):
            glyph = row * 16 + column
            for tile in range(2):
                x = column * 8
                font_offset = 512 * (glyph >> 4) + 16 * (glyph & 0xF) + 256 * tile
                for i in range(8):
                    y = row * 16 + tile * 8 + i
                    yield font_offset + 2 * i, y * 32 + x // 4


def _fullwidth_pairs(num_rows: int) -> Iterator[tuple[int, int]]:
    for row in range(num_rows):
        for column in range(16):
            glyph = row * 16 + column
            for tile in range(4):
                x = column * 16 + (tile & 1) * 8
                font_offset = (
                    512 * (glyph >> 3) + 32 * (glyph & 7) + 256 * (tile >> 1) + 16 * (tile & 1)
                )
                for i in range(8):
                    y = row * 16 + (tile >> 1) * 8 + i
                    yield font_offset + 2 * i, y * 64 + x // 4


def _font_palette() -> Palette:
    return Palette([Color(r, g, b) for r, g, b in FONT_PALETTE])


def _unpack(data: bytes, pairs: _Pairs, num_rows: int, width: int) -> Image:
    row_bytes = width // 4
    pixels = bytearray(num_rows * 16 * row_bytes)
    for font_offset, image_offset in pairs(num_rows):
        pixels[image_offset] = data[font_offset + 1]
        pixels[image_offset + 1] = data[font_offset]
    return Image(
        width=width,
        height=num_rows * 16,
        bit_depth=2,
        pixels=bytes(pixels),
        has_palette=True,
        palette=_font_palette(),
        has_transparency=False,
    )


def _pack(image: Image, pairs: _Pairs, width: int) -> bytes:
    if image.width != width:
        raise ToolError(f"The width of the font image ({image.width}) is not {width}.")
    if image.height % 16 != 0:
        raise ToolError(f"The height of the font image ({image.height}) is not a multiple of 16.")
    num_rows = image.height // 16
    row_bytes = width // 4
    pixels = bytes(image.pixels)
    if len(pixels) < image.height * row_bytes:
        raise ToolError("The pixel data is shorter than the font image requires.")
    out = bytearray(num_rows * 16 * row_bytes)
    for font_offset, image_offset in pairs(num_rows):
        out[font_offset] = pixels[image_offset + 1]
        out[font_offset + 1] = pixels[image_offset]
    return bytes(out)


def _glyph_rows(num_glyphs: int) -> int:
    if num_glyphs % 16 != 0:
        raise ToolError(f"The number of glyphs ({num_glyphs}) is not a multiple of 16.")
    return num_glyphs // 16


def decode_latin_font(data: bytes) -> Image:
    """Turn Latin font data into a 256-pixel-wide glyph sheet."""
    data = bytes(data)
    return _unpack(data, _latin_pairs, _glyph_rows(len(data) // 64), 256)


def encode_latin_font(image: Image) -> bytes:
    """Turn a 256-pixel-wide glyph sheet into Latin font data."""
    return _pack(image, _latin_pairs, 256)


def decode_halfwidth_japanese_font(data: bytes) -> Image:
    """Turn half-width Japanese font data into a 128-pixel-wide glyph sheet."""
    data = bytes(data)
    glyph_size = 32
    if len(data) % glyph_size != 0:
        raise ToolError(f"The file size ({len(data)}) is not a multiple of {glyph_size}.")
    return _unpack(data, _halfwidth_pairs, _glyph_rows(len(data) // glyph_size), 128)


def encode_halfwidth_japanese_font(image: Image) -> bytes:
    """Turn a 128-pixel-wide glyph sheet into half-width Japanese font data."""
    return _pack(image, _halfwidth_pairs, 128)


def decode_fullwidth_japanese_font(data: bytes) -> Image:
    """Turn full-width Japanese font data into a 256-pixel-wide glyph sheet."""
    data = bytes(data)
    return _unpack(data, _fullwidth_pairs, _glyph_rows(len(data) // 64), 256)


def encode_fullwidth_japanese_font(image: Image) -> bytes:
    """Turn a 256-pixel-wide glyph sheet into full-width Japanese font data."""
    return _pack(image, _fullwidth_pairs, 256)


def read_latin_font(path) -> Image:
    """Read a .latfont file."""
    return decode_latin_font(read_whole_file(path))


def write_latin_font(path, image: Image) -> None:
    """Write a .latfont file."""
    write_whole_file(path, encode_latin_font(image))


def read_halfwidth_japanese_font(path) -> Image:
    """Read a .hwjpnfont file."""
    return decode_halfwidth_japanese_font(read_whole_file(path))


def write_halfwidth_japanese_font(path, image: Image) -> None:
    """Write a .hwjpnfont file."""
    write_whole_file(path, encode_halfwidth_japanese_font(image))


def read_fullwidth_japanese_font(path) -> Image:
    """Read a .fwjpnfont file."""
    return decode_fullwidth_japanese_font(read_whole_file(path))


def write_fullwidth_japanese_font(path, image: Image) -> None:
    """Write a .fwjpnfont file."""
    write_whole_file(path, encode_fullwidth_japanese_font(image))