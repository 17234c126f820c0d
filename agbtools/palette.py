"""Palette model and Paint Shop Pro (JASC-PAL) palette files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from agbtools.util import ToolError, parse_number

MAX_COLORS = 256
_MAX_LINE_LENGTH = 11
_SIGNATURE = "JASC-PAL"
_VERSION = "0100"


@dataclass
class Color:
    """An RGB colour; ``green_lsb`` is the extra GBA green bit."""

    red: int
    green: int
    blue: int
    green_lsb: int = 0


@dataclass
class Palette:
    """An ordered list of up to 256 colours."""

    colors: list[Color] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.colors)


class _LineReader:
    """Reads CRLF-terminated lines from a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def _next(self) -> int | None:
        if self.at_end:
            return None
        byte = self._data[self._pos]
        self._pos += 1
        return byte

    def read_line(self) -> str:
        line = bytearray()
        while True:
            byte = self._next()
            if byte == 0x0D:
                if self._next() != 0x0A:
                    raise ToolError("CR line endings aren't supported.")
                return line.decode("latin-1")
            if byte == 0x0A:
                raise ToolError("LF line endings aren't supported.")
            if byte is None:
                raise ToolError("Unexpected EOF. No CRLF at end of file.")
            if byte == 0:
                raise ToolError("NUL character in file.")
            if len(line) == _MAX_LINE_LENGTH:
                raise ToolError(f'The line "{line.decode("latin-1")}" is too long.')
            line.append(byte)


def _component(text: str, name: str) -> tuple[int, str]:
    try:
        return parse_number(text, 10)
    except ValueError as exc:
        raise ToolError(f"Failed to parse {name} color component.") from exc


def _skip_separator(text: str, before: str, after: str) -> str:
    if text[:1] != " ":
        raise ToolError(f"Expected a space after {before} color component.")
    text = text[1:]
    if not text[:1] or text[0] not in "0123456789":
        raise ToolError(
            f"Expected only a space between {before} and {after} color components."
        )
    return text


def _parse_color(line: str) -> Color:
    red, rest = _component(line, "red")
    rest = _skip_separator(rest, "red", "green")
    green, rest = _component(rest, "green")
    rest = _skip_separator(rest, "green", "blue")
    blue, rest = _component(rest, "blue")
    if rest:
        raise ToolError("Garbage after blue color component.")

    for name, value in (("Red", red), ("Green", green), ("Blue", blue)):
        if not 0 <= value <= 255:
            raise ToolError(
                f"{name} color component ({value}) is outside the range [0, 255]."
            )

    return Color(red & 0xF8, green & 0xF8, blue & 0xF8, (green >> 2) & 1)


def parse_jasc_palette(data: bytes) -> Palette:
    """Parse the contents of a JASC-PAL file."""
    reader = _LineReader(bytes(data))

    if reader.read_line() != _SIGNATURE:
        raise ToolError("Invalid JASC-PAL signature.")
    if reader.read_line() != _VERSION:
        raise ToolError("Unsupported JASC-PAL version.")

    try:
        num_colors, _ = parse_number(reader.read_line(), 10)
    except ValueError as exc:
        raise ToolError("Failed to parse number of colors.") from exc

    if not 1 <= num_colors <= MAX_COLORS:
        raise ToolError(
            f"{num_colors} is an invalid number of colors. "
            f"The number of colors must be in the range [1, {MAX_COLORS}]."
        )

    colors = [_parse_color(reader.read_line()) for _ in range(num_colors)]

    if not reader.at_end:
        raise ToolError("Garbage after color data.")

    return Palette(colors)


def format_jasc_palette(palette: Palette) -> bytes:
    """Render a palette as JASC-PAL file contents."""
    lines = [_SIGNATURE, _VERSION, str(len(palette.colors))]
    lines.extend(
        f"{c.red} {c.green | (c.green_lsb << 2)} {c.blue}" for c in palette.colors
    )
    return "".join(f"{line}\r\n" for line in lines).encode("ascii")


def read_jasc_palette(path) -> Palette:
    """Read a JASC-PAL file."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ToolError(f'Failed to open JASC-PAL file "{path}" for reading.') from exc
    return parse_jasc_palette(data)


def write_jasc_palette(path, palette: Palette) -> None:
    """Write a palette to a JASC-PAL file."""
    try:
        Path(path).write_bytes(format_jasc_palette(palette))
    except OSError as exc:
        raise ToolError(f'Failed to open "{path}" for writing.') from exc