"""Command-line converter between GBA graphics formats and PNG."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from agbtools.font import (
    read_fullwidth_japanese_font,
    read_halfwidth_japanese_font,
    read_latin_font,
    write_fullwidth_japanese_font,
    write_halfwidth_japanese_font,
    write_latin_font,
)
from agbtools.gfx import read_gba_palette, read_image, write_gba_palette, write_image
from agbtools.lz import lz_compress, lz_decompress
from agbtools.palette import MAX_COLORS, Color, read_jasc_palette, write_jasc_palette
from agbtools.png import read_png, read_png_palette, write_png
from agbtools.rl import rl_compress, rl_decompress
from agbtools.util import (
    ToolError,
    get_file_extension,
    parse_number,
    read_whole_file,
    read_whole_file_zero_padded,
    write_whole_file,
)

_FONT_BIT_DEPTH = 2


@dataclass
class GbaToPngOptions:
    """Options for turning tile data into a PNG."""

    bit_depth: int
    palette_file_path: str | None = None
    has_transparency: bool = False
    width: int = 1
    metatile_width: int = 1
    metatile_height: int = 1


@dataclass
class PngToGbaOptions:
    """Options for turning a PNG into tile data."""

    bit_depth: int
    num_tiles: int = 0
    metatile_width: int = 1
    metatile_height: int = 1


def convert_gba_to_png(input_path, output_path, options: GbaToPngOptions) -> None:
    """Convert a tile file into a PNG, using a GBA palette if one is given."""
    palette = None
    if options.palette_file_path is not None:
        palette = read_gba_palette(options.palette_file_path)

    has_palette = palette is not None
    image = read_image(
        input_path,
        options.width,
        options.bit_depth,
        options.metatile_width,
        options.metatile_height,
        not has_palette,
    )
    image.has_palette = has_palette
    if palette is not None:
        image.palette = palette
    image.has_transparency = options.has_transparency
    write_png(output_path, image)


def convert_png_to_gba(input_path, output_path, options: PngToGbaOptions) -> None:
    """Convert a PNG into a tile file."""
    image = read_png(input_path, options.bit_depth)
    write_image(
        output_path,
        image,
        options.num_tiles,
        options.bit_depth,
        options.metatile_width,
        options.metatile_height,
        not image.has_palette,
    )


def _next_value(args: Iterator[str], message: str) -> str:
    value = next(args, None)
    if value is None:
        raise ToolError(message)
    return value


def _positive(text: str, failure: str, not_positive: str) -> int:
    try:
        value, _ = parse_number(text, 10)
    except ValueError as exc:
        raise ToolError(failure) from exc
    if value < 1:
        raise ToolError(not_positive)
    return value


def _unrecognized(option: str) -> ToolError:
    return ToolError(f'Unrecognized option "{option}".')


def _no_options(options: list[str]) -> None:
    del options


def _metatile_option(option: str, args: Iterator[str]) -> int:
    if option == "-mwidth":
        text = _next_value(args, 'No metatile width value following "-mwidth".')
        return _positive(text, "Failed to parse metatile width.",
                         "metatile width must be positive.")
    text = _next_value(args, 'No metatile height value following "-mheight".')
    return _positive(text, "Failed to parse metatile height.",
                     "metatile height must be positive.")


def _gba_to_png(input_path: str, output_path: str, options: list[str]) -> None:
    extension = get_file_extension(input_path) or "0"
    parsed = GbaToPngOptions(bit_depth=ord(extension[0]) - ord("0"))

    args = iter(options)
    for option in args:
        if option == "-palette":
            parsed.palette_file_path = _next_value(
                args, 'No palette file path following "-palette".'
            )
        elif option == "-object":
            parsed.has_transparency = True
        elif option == "-width":
            text = _next_value(args, 'No width following "-width".')
            parsed.width = _positive(text, "Failed to parse width.", "Width must be positive.")
        elif option == "-mwidth":
            parsed.metatile_width = _metatile_option(option, args)
        elif option == "-mheight":
            parsed.metatile_height = _metatile_option(option, args)
        else:
            raise _unrecognized(option)

    parsed.width = max(parsed.width, parsed.metatile_width)
    convert_gba_to_png(input_path, output_path, parsed)


def _png_to_gba(input_path: str, output_path: str, options: list[str]) -> None:
    extension = get_file_extension(output_path) or "0"
    parsed = PngToGbaOptions(bit_depth=ord(extension[0]) - ord("0"))

    args = iter(options)
    for option in args:
        if option == "-num_tiles":
            text = _next_value(args, 'No number of tiles following "-num_tiles".')
            parsed.num_tiles = _positive(text, "Failed to parse number of tiles.",
                                         "Number of tiles must be positive.")
        elif option == "-mwidth":
            parsed.metatile_width = _metatile_option(option, args)
        elif option == "-mheight":
            parsed.metatile_height = _metatile_option(option, args)
        else:
            raise _unrecognized(option)

    convert_png_to_gba(input_path, output_path, parsed)


def _png_to_gba_palette(input_path: str, output_path: str, options: list[str]) -> None:
    _no_options(options)
    write_gba_palette(output_path, read_png_palette(input_path))


def _gba_to_jasc_palette(input_path: str, output_path: str, options: list[str]) -> None:
    _no_options(options)
    write_jasc_palette(output_path, read_gba_palette(input_path))


def _jasc_to_gba_palette(input_path: str, output_path: str, options: list[str]) -> None:
    num_colors = 0
    args = iter(options)
    for option in args:
        if option == "-num_colors":
            text = _next_value(args, 'No number of colors following "-num_colors".')
            num_colors = _positive(text, "Failed to parse number of colors.",
                                   "Number of colors must be positive.")
        else:
            raise _unrecognized(option)

    palette = read_jasc_palette(input_path)
    if num_colors != 0:
        if num_colors > MAX_COLORS:
            raise ToolError(f"Number of colors ({num_colors}) exceeds {MAX_COLORS}.")
        colors = palette.colors[:num_colors]
        colors += [Color(0, 0, 0) for _ in range(num_colors - len(colors))]
        palette.colors = colors
    write_gba_palette(output_path, palette)


def _font_to_png(reader: Callable) -> Callable[[str, str, list[str]], None]:
    def handler(input_path: str, output_path: str, options: list[str]) -> None:
        _no_options(options)
        write_png(output_path, reader(input_path))

    return handler


def _png_to_font(writer: Callable) -> Callable[[str, str, list[str]], None]:
    def handler(input_path: str, output_path: str, options: list[str]) -> None:
        _no_options(options)
        writer(output_path, read_png(input_path, _FONT_BIT_DEPTH))

    return handler


def _lz_compress(input_path: str, output_path: str, options: list[str]) -> None:
    overflow = 0
    args = iter(options)
    for option in args:
        if option == "-overflow":
            text = _next_value(args, 'No size following "-overflow".')
            overflow = _positive(text, "Failed to parse overflow size.",
                                 "Overflow size must be positive.")
        else:
            raise _unrecognized(option)

    # Padding the input with zeros and then restoring the original size in
    # the header reproduces tilesets that overflow when decompressed.
    buffer = read_whole_file_zero_padded(input_path, overflow)
    file_size = len(buffer) - overflow
    compressed = bytearray(lz_compress(buffer))
    compressed[1:4] = bytes(
        [file_size & 0xFF, (file_size >> 8) & 0xFF, (file_size >> 16) & 0xFF]
    )
    write_whole_file(output_path, bytes(compressed))


def _lz_decompress(input_path: str, output_path: str, options: list[str]) -> None:
    _no_options(options)
    write_whole_file(output_path, lz_decompress(read_whole_file(input_path)))


def _rl_compress(input_path: str, output_path: str, options: list[str]) -> None:
    _no_options(options)
    write_whole_file(output_path, rl_compress(read_whole_file(input_path)))


def _rl_decompress(input_path: str, output_path: str, options: list[str]) -> None:
    _no_options(options)
    write_whole_file(output_path, rl_decompress(read_whole_file(input_path)))


_HANDLERS: tuple[tuple[str | None, str | None, Callable[[str, str, list[str]], None]], ...] = (
    ("1bpp", "png", _gba_to_png),
    ("4bpp", "png", _gba_to_png),
    ("8bpp", "png", _gba_to_png),
    ("png", "1bpp", _png_to_gba),
    ("png", "4bpp", _png_to_gba),
    ("png", "8bpp", _png_to_gba),
    ("png", "gbapal", _png_to_gba_palette),
    ("gbapal", "pal", _gba_to_jasc_palette),
    ("pal", "gbapal", _jasc_to_gba_palette),
    ("latfont", "png", _font_to_png(read_latin_font)),
    ("png", "latfont", _png_to_font(write_latin_font)),
    ("hwjpnfont", "png", _font_to_png(read_halfwidth_japanese_font)),
    ("png", "hwjpnfont", _png_to_font(write_halfwidth_japanese_font)),
    ("fwjpnfont", "png", _font_to_png(read_fullwidth_japanese_font)),
    ("png", "fwjpnfont", _png_to_font(write_fullwidth_japanese_font)),
    (None, "lz", _lz_compress),
    ("lz", None, _lz_decompress),
    (None, "rl", _rl_compress),
    ("rl", None, _rl_decompress),
)


def _run(args: list[str]) -> None:
    if len(args) < 2:
        raise ToolError("Usage: gbagfx INPUT_PATH OUTPUT_PATH [options...]")

    input_path, output_path, options = args[0], args[1], args[2:]
    input_extension = get_file_extension(input_path)
    output_extension = get_file_extension(output_path)

    if input_extension is None:
        raise ToolError(f'Input file "{input_path}" has no extension.')
    if output_extension is None:
        raise ToolError(f'Output file "{output_path}" has no extension.')

    for wanted_input, wanted_output, handler in _HANDLERS:
        if wanted_input in (None, input_extension) and wanted_output in (None, output_extension):
            handler(input_path, output_path, options)
            return

    raise ToolError(f'Don\'t know how to convert "{input_path}" to "{output_path}".')


def main(argv=None) -> int:
    """Command-line entry point; returns the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        _run(args)
    except ToolError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())