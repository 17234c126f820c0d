"""Reading and writing indexed and greyscale PNG images."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass, field
from pathlib import Path

from agbtools.gfx import Image
from agbtools.palette import MAX_COLORS, Color, Palette
from agbtools.util import ToolError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
COLOR_TYPE_GRAY = 0
COLOR_TYPE_PALETTE = 3

_IHDR = struct.Struct(">IIBBBBB")
_VALID_DEPTHS = {COLOR_TYPE_GRAY: (1, 2, 4, 8, 16), COLOR_TYPE_PALETTE: (1, 2, 4, 8)}


@dataclass
class _PngFile:
    width: int
    height: int
    bit_depth: int
    color_type: int
    interlace: int
    palette: list[tuple[int, int, int]] = field(default_factory=list)
    has_palette_chunk: bool = False
    image_data: bytes = b""


def _read_bytes(path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ToolError(f'Failed to open "{path}" for reading.') from exc


def _parse(data: bytes, path) -> _PngFile:
    if len(data) < len(PNG_SIGNATURE):
        raise ToolError(f'Failed to read PNG signature from "{path}".')
    if data[:len(PNG_SIGNATURE)] != PNG_SIGNATURE:
        raise ToolError(f'"{path}" does not have a valid PNG signature.')

    png: _PngFile | None = None
    idat = bytearray()
    pos = len(PNG_SIGNATURE)
    while pos + 8 <= len(data):
        length, chunk_type = struct.unpack_from(">I4s", data, pos)
        body = data[pos + 8:pos + 8 + length]
        crc = data[pos + 8 + length:pos + 12 + length]
        if len(body) < length or len(crc) < 4:
            raise ToolError(f'Error reading from "{path}".')
        if zlib.crc32(chunk_type + body) != int.from_bytes(crc, "big"):
            raise ToolError(f'Error reading from "{path}".')
        pos += 12 + length

        if chunk_type == b"IHDR":
            if length != _IHDR.size:
                raise ToolError(f'Failed to init I/O for reading "{path}".')
            width, height, depth, color_type, _, _, interlace = _IHDR.unpack(body)
            png = _PngFile(width, height, depth, color_type, interlace)
        elif png is None:
            raise ToolError(f'Failed to init I/O for reading "{path}".')
        elif chunk_type == b"PLTE":
            if length % 3 != 0:
                raise ToolError(f'Error reading from "{path}".')
            png.palette = [tuple(body[i:i + 3]) for i in range(0, length, 3)]
            png.has_palette_chunk = True
        elif chunk_type == b"IDAT":
            idat += body
        elif chunk_type == b"IEND":
            break

    if png is None:
        raise ToolError(f'Failed to init I/O for reading "{path}".')
    if png.width == 0 or png.height == 0:
        raise ToolError(f'Error reading from "{path}".')
    png.image_data = bytes(idat)
    return png


def _paeth(left: int, up: int, up_left: int) -> int:
    estimate = left + up - up_left
    dist_left = abs(estimate - left)
    dist_up = abs(estimate - up)
    dist_up_left = abs(estimate - up_left)
    if dist_left <= dist_up and dist_left <= dist_up_left:
        return left
    if dist_up <= dist_up_left:
        return up
    return up_left


def _unfilter(raw: bytes, height: int, rowbytes: int, bpp: int, path) -> bytes:
    out = bytearray()
    prev = bytes(rowbytes)
    pos = 0
    for _ in range(height):
        if pos + 1 + rowbytes > len(raw):
            raise ToolError(f'Error reading from "{path}".')
        filter_type = raw[pos]
        line = bytearray(raw[pos + 1:pos + 1 + rowbytes])
        pos += 1 + rowbytes

        if filter_type == 1:
            for i in range(bpp, rowbytes):
                line[i] = (line[i] + line[i - bpp]) & 0xFF
        elif filter_type == 2:
            for i in range(rowbytes):
                line[i] = (line[i] + prev[i]) & 0xFF
        elif filter_type == 3:
            for i in range(rowbytes):
                left = line[i - bpp] if i >= bpp else 0
                line[i] = (line[i] + ((left + prev[i]) >> 1)) & 0xFF
        elif filter_type == 4:
            for i in range(rowbytes):
                left = line[i - bpp] if i >= bpp else 0
                up_left = prev[i - bpp] if i >= bpp else 0
                line[i] = (line[i] + _paeth(left, prev[i], up_left)) & 0xFF
        elif filter_type != 0:
            raise ToolError(f'Error reading from "{path}".')

        out += line
        prev = bytes(line)
    return bytes(out)


def _convert_bit_depth(src: bytes, src_depth: int, dest_depth: int, num_pixels: int) -> bytes:
    """Repack a contiguous stream of pixels from one bit depth to another."""
    src_size = (num_pixels * src_depth + 7) // 8
    dest_size = (num_pixels * dest_depth + 7) // 8
    src_mask = (1 << src_depth) - 1
    limit = 1 << dest_depth

    def pixels():
        for byte in src[:src_size]:
            for shift in range(8 - src_depth, -1, -src_depth):
                yield (byte >> shift) & src_mask

    out = bytearray(dest_size)
    for index, pixel in zip(range(num_pixels), pixels()):
        if pixel >= limit:
            raise ToolError(
                f"Image exceeds the maximum color value for a {dest_depth}bpp image."
            )
        bit = index * dest_depth
        out[bit // 8] |= pixel << (8 - dest_depth - bit % 8)
    return bytes(out)


def read_png(path, bit_depth: int | None = None) -> Image:
    """Read a greyscale or indexed PNG, repacking pixels to ``bit_depth`` if given."""
    png = _parse(_read_bytes(path), path)

    if png.color_type not in (COLOR_TYPE_GRAY, COLOR_TYPE_PALETTE):
        raise ToolError(f'"{path}" has an unsupported color type.')
    if png.bit_depth not in _VALID_DEPTHS[png.color_type]:
        raise ToolError(f'Error reading from "{path}".')
    if png.interlace != 0:
        raise ToolError(f'Error reading from "{path}".')

    rowbytes = (png.width * png.bit_depth + 7) // 8
    try:
        raw = zlib.decompress(png.image_data)
    except zlib.error as exc:
        raise ToolError(f'Error reading from "{path}".') from exc
    bpp = max(1, png.bit_depth // 8)
    pixels = _unfilter(raw, png.height, rowbytes, bpp, path)

    depth = png.bit_depth
    if bit_depth is not None and bit_depth != png.bit_depth:
        if png.bit_depth not in (1, 2, 4, 8):
            raise ToolError("Bit depth of image must be 1, 2, 4, or 8.")
        pixels = _convert_bit_depth(pixels, png.bit_depth, bit_depth, png.width * png.height)
        depth = bit_depth

    return Image(
        width=png.width,
        height=png.height,
        bit_depth=depth,
        pixels=pixels,
        has_palette=png.color_type == COLOR_TYPE_PALETTE,
    )


def read_png_palette(path) -> Palette:
    """Read the palette of an indexed PNG."""
    png = _parse(_read_bytes(path), path)
    if png.color_type != COLOR_TYPE_PALETTE:
        raise ToolError(f'The image "{path}" does not contain a palette.')
    if not png.has_palette_chunk:
        raise ToolError(f'Failed to retrieve palette from "{path}".')
    if len(png.palette) > MAX_COLORS:
        raise ToolError("Images with more than 256 colors are not supported.")
    return Palette([Color(r, g, b) for r, g, b in png.palette])


def _chunk(chunk_type: bytes, body: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + body)
    return struct.pack(">I", len(body)) + chunk_type + body + struct.pack(">I", crc)


def write_png(path, image: Image) -> None:
    """Write an image as an indexed PNG if it has a palette, greyscale otherwise."""
    color_type = COLOR_TYPE_PALETTE if image.has_palette else COLOR_TYPE_GRAY
    if image.bit_depth not in _VALID_DEPTHS[color_type]:
        raise ToolError(f'Error writing header for "{path}".')
    if image.width <= 0 or image.height <= 0:
        raise ToolError(f'Error writing header for "{path}".')

    chunks = [
        _chunk(
            b"IHDR",
            _IHDR.pack(image.width, image.height, image.bit_depth, color_type, 0, 0, 0),
        )
    ]

    if image.has_palette:
        colors = image.palette.colors
        if not colors or len(colors) > (1 << image.bit_depth):
            raise ToolError(f'Error writing header for "{path}".')
        chunks.append(
            _chunk(
                b"PLTE",
                b"".join(
                    bytes((c.red & 0xFF, c.green & 0xFF, c.blue & 0xFF)) for c in colors
                ),
            )
        )
        if image.has_transparency:
            chunks.append(_chunk(b"tRNS", b"\x00"))

    rowbytes = (image.width * image.bit_depth + 7) // 8
    pixels = bytes(image.pixels)
    if len(pixels) < rowbytes * image.height:
        raise ToolError(f'Error writing "{path}".')
    raw = b"".join(
        b"\x00" + pixels[row * rowbytes:(row + 1) * rowbytes] for row in range(image.height)
    )
    chunks.append(_chunk(b"IDAT", zlib.compress(raw)))
    chunks.append(_chunk(b"IEND", b""))

    try:
        Path(path).write_bytes(PNG_SIGNATURE + b"".join(chunks))
    except OSError as exc:
        raise ToolError(f'Failed to open "{path}" for writing.') from exc