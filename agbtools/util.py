"""Shared helpers: number parsing, file extensions and whole-file I/O."""

from __future__ import annotations

import string
from pathlib import Path

_C_SPACE = " \t\n\v\f\r"
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class ToolError(Exception):
    """Raised when a conversion cannot be carried out."""


def _digit_value(ch: str) -> int | None:
    if ch.isascii() and ch.isalnum():
        return int(ch, 36)
    return None


def parse_number(text: str, radix: int) -> tuple[int, str]:
    """Parse a leading integer the way strtol does.

    Returns the value and the unparsed remainder of ``text``. Raises
    ValueError when no digits are found or the value does not fit in a
    32-bit signed integer.
    """
    if radix != 0 and not 2 <= radix <= 36:
        raise ValueError(f"invalid radix {radix}")

    pos = len(text) - len(text.lstrip(_C_SPACE))
    negative = False
    if text[pos:pos + 1] in ("+", "-"):
        negative = text[pos] == "-"
        pos += 1

    after_prefix = text[pos + 2:pos + 3]
    if (
        radix in (0, 16)
        and text[pos:pos + 2] in ("0x", "0X")
        and after_prefix
        and after_prefix in string.hexdigits
    ):
        pos += 2
        radix = 16
    elif radix == 0:
        radix = 8 if text[pos:pos + 1] == "0" else 10

    start = pos
    value = 0
    while pos < len(text):
        digit = _digit_value(text[pos])
        if digit is None or digit >= radix:
            break
        value = value * radix + digit
        pos += 1

    if pos == start:
        raise ValueError(f"not a number: {text!r}")
    if negative:
        value = -value
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"number out of range: {text!r}")
    return value, text[pos:]


def get_file_extension(path: str) -> str | None:
    """Return the text after the last dot, or None if there is none."""
    index = path.rfind(".")
    if index <= 0:
        return None
    extension = path[index + 1:]
    return extension or None


def read_whole_file(path) -> bytes:
    """Read a whole file; an empty or unreadable file is an error."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ToolError(f'Failed to open "{path}" for reading.') from exc
    if not data:
        raise ToolError(f'Failed to read "{path}".')
    return data


def read_whole_file_zero_padded(path, pad_amount: int) -> bytes:
    """Read a whole file and append ``pad_amount`` zero bytes."""
    return read_whole_file(path) + bytes(max(pad_amount, 0))


def write_whole_file(path, data: bytes) -> None:
    """Write ``data`` to ``path``; writing nothing is an error."""
    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise ToolError(f'Failed to open "{path}" for writing.') from exc
    with handle:
        if not data:
            raise ToolError(f'Failed to write to "{path}".')
        try:
            handle.write(data)
        except OSError as exc:
            raise ToolError(f'Failed to write to "{path}".') from exc