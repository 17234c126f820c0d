"""Tiled GBA graphics and GBA palettes."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from agbtools.palette import MAX_COLORS, Color, Palette
from agbtools.util import ToolError, read_whole_file, write_whole_file

_TILE_PIXELS = 8

# Per-byte transforms between tile data and linear pixel rows.
_BIT_REVERSE = bytes(int(f"{i:08b}"[::-1], 2) for i in range(256))
_NIBBLE_SWAP = bytes(((i & 0xF) << 4) | (i >> 4) for i in range(256))
_IDENTITY = bytes(range(256))
_TABLES = {1: _BIT_REVERSE, 4: _NIBBLE_SWAP, 8: _IDENTITY}


@dataclass
class Image:
    """A linear, row-major indexed image."""

    width: int
    height: int
    bit_depth: int
    pixels: bytes = b""
    has_palette: bool = False
    palette: Palette = field(default_factory=Palette)
    has_transparency: bool = False


def _byte_table(bit_depth: int, invert_colors: bool) -> bytes:
    try:
        table = _TABLES[bit_depth]
    except KeyError:
        raise ToolError(f"Unsupported bit depth {bit_depth}; must be 1, 4 or 8.") from None
    if invert_colors:
        table = bytes(b ^ 0xFF for b in table)
    return table


def _check_layout(tiles_width: int, tiles_height: int, metatile_width: int, metatile_height: int) -> None:
    if tiles_width < 1 or metatile_width < 1 or metatile_height < 1:
        raise ToolError("Tile and metatile dimensions must be positive.")
    if tiles_width % metatile_width != 0:
        raise ToolError(
            f"The width in tiles ({tiles_width}) isn't a multiple of the "
            f"specified metatile width ({metatile_width})"
        )
    if tiles_height % metatile_height != 0:
        raise ToolError(
            f"The height in tiles ({tiles_height}) isn't a multiple of the "
            f"specified metatile height ({metatile_height})"
        )


def _tile_positions(
    num_tiles: int, metatiles_wide: int, metatile_width: int, metatile_height: int
) -> Iterator[tuple[int, int]]:
    """Yield the (x, y) tile coordinates of each tile in storage order."""
    per_metatile = metatile_width * metatile_height
    for index in range(num_tiles):
        sub_x = index % metatile_width
        sub_y = (index // metatile_width) % metatile_height
        metatile = index // per_metatile
        meta_x = metatile % metatiles_wide
        meta_y = metatile // metatiles_wide
        yield meta_x * metatile_width + sub_x, meta_y * metatile_height + sub_y


def decode_tiles(
    data: bytes,
    tiles_width: int,
    bit_depth: int,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> Image:
    """Lay out tile data as a linear image ``tiles_width`` tiles wide."""
    table = _byte_table(bit_depth, invert_colors)
    if tiles_width < 1:
        raise ToolError("Width must be positive.")
    tile_size = bit_depth * _TILE_PIXELS
    source = bytes(data).translate(table)
    num_tiles = len(source) // tile_size
    tiles_height = -(-num_tiles // tiles_width)
    _check_layout(tiles_width, tiles_height, metatile_width, metatile_height)

    pitch = tiles_width * bit_depth
    pixels = bytearray(tiles_width * tiles_height * tile_size)
    positions = _tile_positions(num_tiles, tiles_width // metatile_width, metatile_width, metatile_height)
    for index, (tile_x, tile_y) in enumerate(positions):
        base = index * tile_size
        for row in range(_TILE_PIXELS):
            dest = (tile_y * _TILE_PIXELS + row) * pitch + tile_x * bit_depth
            src = base + row * bit_depth
            pixels[dest:dest + bit_depth] = source[src:src + bit_depth]

    return Image(
        width=tiles_width * _TILE_PIXELS,
        height=tiles_height * _TILE_PIXELS,
        bit_depth=bit_depth,
        pixels=bytes(pixels),
    )


def encode_tiles(
    image: Image,
    num_tiles: int = 0,
    bit_depth: int | None = None,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> bytes:
    """Cut a linear image into tiles; ``num_tiles`` of 0 means all of them."""
    if bit_depth is None:
        bit_depth = image.bit_depth
    table = _byte_table(bit_depth, invert_colors)
    tile_size = bit_depth * _TILE_PIXELS

    if image.width % _TILE_PIXELS != 0:
        raise ToolError(f"The width in pixels ({image.width}) isn't a multiple of 8.")
    if image.height % _TILE_PIXELS != 0:
        raise ToolError(f"The height in pixels ({image.height}) isn't a multiple of 8.")

    tiles_width = image.width // _TILE_PIXELS
    tiles_height = image.height // _TILE_PIXELS
    _check_layout(tiles_width, tiles_height, metatile_width, metatile_height)

    max_tiles = tiles_width * tiles_height
    if num_tiles == 0:
        num_tiles = max_tiles
    elif num_tiles > max_tiles:
        raise ToolError(
            f"The specified number of tiles ({num_tiles}) is greater than "
            f"the maximum possible value ({max_tiles})."
        )

    pitch = tiles_width * bit_depth
    pixels = bytes(image.pixels)
    if len(pixels) < pitch * image.height:
        raise ToolError("The pixel data is shorter than the image dimensions require.")

    out = bytearray(num_tiles * tile_size)
    positions = _tile_positions(num_tiles, tiles_width // metatile_width, metatile_width, metatile_height)
    for index, (tile_x, tile_y) in enumerate(positions):
        base = index * tile_size
        for row in range(_TILE_PIXELS):
            src = (tile_y * _TILE_PIXELS + row) * pitch + tile_x * bit_depth
            dest = base + row * bit_depth
            out[dest:dest + bit_depth] = pixels[src:src + bit_depth]

    return bytes(out).translate(table)


def read_image(
    path,
    tiles_width: int,
    bit_depth: int,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> Image:
    """Read a tile file into a linear image."""
    return decode_tiles(
        read_whole_file(path), tiles_width, bit_depth, metatile_width, metatile_height, invert_colors
    )


def write_image(
    path,
    image: Image,
    num_tiles: int = 0,
    bit_depth: int | None = None,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> None:
    """Write a linear image as a tile file."""
    write_whole_file(
        path, encode_tiles(image, num_tiles, bit_depth, metatile_width, metatile_height, invert_colors)
    )


def _upconvert(value: int) -> int:
    return ((value * 255) // 31) & 0xF8


def decode_gba_palette(data: bytes) -> Palette:
    """Decode 15-bit little-endian GBA colours."""
    data = bytes(data)
    if len(data) % 2 != 0:
        raise ToolError(f"The file size ({len(data)}) is not a multiple of 2.")
    if len(data) // 2 > MAX_COLORS:
        raise ToolError(f"Palettes with more than {MAX_COLORS} colors are not supported.")
    colors = [
        Color(
            red=_upconvert(entry & 0x1F),
            green=_upconvert((entry >> 5) & 0x1F),
            blue=_upconvert((entry >> 10) & 0x1F),
            green_lsb=(entry >> 15) & 1,
        )
        for (entry,) in struct.iter_unpack("<H", data)
    ]
    return Palette(colors)


def encode_gba_palette(palette: Palette) -> bytes:
    """Encode colours as 15-bit little-endian GBA palette entries."""
    return b"".join(
        struct.pack(
            "<H",
            (
                ((c.green_lsb & 1) << 15)
                | (((c.blue & 0xFF) // 8) << 10)
                | (((c.green & 0xFF) // 8) << 5)
                | ((c.red & 0xFF) // 8)
            ),
        )
        for c in palette.colors
    )


def read_gba_palette(path) -> Palette:
    """Read a .gbapal file."""
    return decode_gba_palette(read_whole_file(path))


def write_gba_palette(path, palette: Palette) -> None:
    """Write a .gbapal file."""
    try:
        Path(path).write_bytes(encode_gba_palette(palette))
    except OSError as exc:
        raise ToolError(f'Failed to open "{path}" for writing.') from exc