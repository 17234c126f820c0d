"""Turn a binary file into a C array definition."""

from __future__ import annotations

import sys

from agbtools.util import ToolError, parse_number, read_whole_file

_VALID_SIZES = (1, 2, 4)
_HEADER = "// Generated file. Do not edit.\n\n"


def extract_data(buffer: bytes, offset: int, size: int) -> int:
    """Read a little-endian value of ``size`` bytes as a C int would hold it."""
    if size not in _VALID_SIZES:
        raise ToolError("Invalid size passed to ExtractData.")
    chunk = bytes(buffer[offset:offset + size])
    if len(chunk) < size:
        raise ToolError("Not enough data to extract a value.")
    return int.from_bytes(chunk, "little", signed=size == 4)


def _justify(text: str, pad: int) -> str:
    if pad < 0:
        return text.ljust(-pad)
    return text.rjust(pad)


def _format_value(value: int, pad: int, is_signed: bool, is_decimal: bool) -> str:
    if is_decimal:
        if is_signed:
            return _justify(str(value), pad) + ", "
        return _justify(str(value & 0xFFFFFFFF), pad) + "u, "
    unsigned = value & 0xFFFFFFFF
    text = "0" if unsigned == 0 else f"0x{unsigned:x}"
    return _justify(text, pad) + "u, "


def render_c_array(
    data: bytes,
    var_name: str,
    col: int = 1,
    pad: int = 0,
    size: int = 1,
    is_signed: bool = False,
    is_static: bool = False,
    is_decimal: bool = False,
) -> str:
    """Render ``data`` as the text of a C array of 8, 16 or 32-bit values."""
    if size not in _VALID_SIZES:
        raise ToolError("Size must be 1, 2, or 4.")
    if col < 1:
        raise ToolError("Column count must be positive.")
    data = bytes(data)
    if len(data) & (size - 1):
        raise ToolError(f"Size {size} doesn't evenly divide file size {len(data)}.")

    parts = [_HEADER]
    if is_static:
        parts.append("static ")
    parts.append("const ")
    parts.append(f"{'s' if is_signed else 'u'}{8 * size} ")
    parts.append(f"{var_name}[] =\n{{")

    for index, offset in enumerate(range(0, len(data), size)):
        if index % col == 0:
            parts.append("\n    ")
        value = extract_data(data, offset, size)
        parts.append(_format_value(value, pad, is_signed, is_decimal))

    parts.append("\n};\n")
    return "".join(parts)


def _atoi(text: str) -> int:
    try:
        value, _ = parse_number(text, 10)
    except ValueError:
        return 0
    return value


def _run(args: list[str]) -> str:
    if len(args) < 2:
        raise ToolError("Usage: bin2c INPUT_FILE VAR_NAME [OPTIONS...]")

    data = read_whole_file(args[0])
    var_name = args[1]
    col = 1
    pad = 0
    size = 1
    is_signed = False
    is_static = False
    is_decimal = False

    options = iter(args[2:])
    for option in options:
        if option in ("-col", "-pad", "-size"):
            value = next(options, None)
            if value is None:
                raise ToolError(f"Missing argument after '{option}'.")
            number = _atoi(value)
            if option == "-col":
                col = number
            elif option == "-pad":
                pad = number
            else:
                if number not in _VALID_SIZES:
                    raise ToolError("Size must be 1, 2, or 4.")
                size = number
        elif option == "-signed":
            is_signed = True
            is_decimal = True
        elif option == "-static":
            is_static = True
        elif option == "-decimal":
            is_decimal = True
        else:
            raise ToolError(f"Unrecognized option '{option}'.")

    return render_c_array(data, var_name, col, pad, size, is_signed, is_static, is_decimal)


def main(argv=None) -> int:
    """Command-line entry point; writes the array to standard output."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        text = _run(args)
    except ToolError as exc:
        print(exc, file=sys.stderr)
        return 1
    sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())