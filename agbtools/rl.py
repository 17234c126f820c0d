"""Run-length compression in the format of the GBA BIOS (type 0x30)."""

from __future__ import annotations

from agbtools.util import ToolError

_MAX_LITERAL = 0x7F + 1
_MAX_RUN = 0x7F + 3


def _decompress_error() -> ToolError:
    return ToolError("Fatal error while decompressing RL file.")


def rl_decompress(data: bytes) -> bytes:
    """Decompress run-length data with a four-byte header."""
    src = bytes(data)
    size = len(src)
    if size < 4:
        raise _decompress_error()

    dest_size = src[1] | (src[2] << 8) | (src[3] << 16)
    out = bytearray()
    pos = 4

    while True:
        if pos >= size:
            raise _decompress_error()
        flags = src[pos]
        pos += 1

        if flags & 0x80:
            length = (flags & 0x7F) + 3
            if pos >= size:
                raise _decompress_error()
            value = src[pos]
            pos += 1
            if len(out) + length > dest_size:
                raise _decompress_error()
            out += bytes([value]) * length
        else:
            length = (flags & 0x7F) + 1
            if len(out) + length > dest_size:
                raise _decompress_error()
            chunk = src[pos:pos + length]
            if len(chunk) < length:
                raise _decompress_error()
            out += chunk
            pos += length

        if len(out) == dest_size:
            return bytes(out)


def rl_compress(data: bytes) -> bytes:
    """Compress data with run-length encoding, padded to four bytes."""
    src = bytes(data)
    size = len(src)
    if size <= 0:
        raise ToolError("Fatal error while compressing RL file.")

    out = bytearray([0x30, size & 0xFF, (size >> 8) & 0xFF, (size >> 16) & 0xFF])
    pos = 0

    while True:
        compress = False
        start = pos
        while pos < size and pos - start < _MAX_LITERAL:
            compress = pos + 2 < size and src[pos] == src[pos + 1] == src[pos + 2]
            if compress:
                break
            pos += 1

        if pos > start:
            out.append(pos - start - 1)
            out += src[start:pos]

        if compress:
            value = src[pos]
            run = 0
            while run < _MAX_RUN and pos + run < size and src[pos + run] == value:
                run += 1
            out.append(0x80 | (run - 3))
            out.append(value)
            pos += run

        if pos == size:
            out.extend(bytes(-len(out) % 4))
            return bytes(out)