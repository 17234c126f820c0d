"""LZ77 compression in the format of the GBA BIOS (type 0x10)."""

from __future__ import annotations

import logging

from agbtools.util import ToolError

_log = logging.getLogger(__name__)

_MIN_DISTANCE = 2  # matches the constraint of LZ77UnCompVram
_MAX_DISTANCE = 0x1000
_MAX_BLOCK = 18


def _decompress_error() -> ToolError:
    return ToolError("Fatal error while decompressing LZ file.")


def lz_decompress(data: bytes) -> bytes:
    """Decompress LZ77 data with a four-byte header."""
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

        for _ in range(8):
            if flags & 0x80:
                if pos + 1 >= size:
                    raise _decompress_error()
                block_size = (src[pos] >> 4) + 3
                distance = (((src[pos] & 0xF) << 8) | src[pos + 1]) + 1
                pos += 2
                block_pos = len(out) - distance

                # Some tilesets overflow the declared size.
                if len(out) + block_size > dest_size:
                    block_size = dest_size - len(out)
                    _log.warning("Destination buffer overflow.")

                if block_pos < 0:
                    raise _decompress_error()

                chunk = out[block_pos:]
                repeats = -(-block_size // distance)
                out += (chunk * repeats)[:block_size]
            else:
                if pos >= size or len(out) >= dest_size:
                    raise _decompress_error()
                out.append(src[pos])
                pos += 1

            if len(out) == dest_size:
                return bytes(out)

            flags = (flags << 1) & 0xFF


def _find_match(src: bytes, pos: int) -> tuple[int, int]:
    best_distance = 0
    best_size = 0
    max_size = min(_MAX_BLOCK, len(src) - pos)
    for distance in range(_MIN_DISTANCE, min(pos, _MAX_DISTANCE) + 1):
        start = pos - distance
        size = 0
        while size < max_size and src[start + size] == src[pos + size]:
            size += 1
        if size > best_size:
            best_distance, best_size = distance, size
            if size == _MAX_BLOCK:
                break
    return best_distance, best_size


def lz_compress(data: bytes) -> bytes:
    """Compress data to LZ77 with a four-byte header, padded to four bytes."""
    src = bytes(data)
    size = len(src)
    if size <= 0:
        raise ToolError("Fatal error while compressing LZ file.")

    out = bytearray([0x10, size & 0xFF, (size >> 8) & 0xFF, (size >> 16) & 0xFF])
    pos = 0

    while True:
        flags_index = len(out)
        out.append(0)

        for i in range(8):
            distance, block_size = _find_match(src, pos)
            if block_size >= 3:
                out[flags_index] |= 0x80 >> i
                pos += block_size
                block_size -= 3
                distance -= 1
                out.append(((block_size << 4) | (distance >> 8)) & 0xFF)
                out.append(distance & 0xFF)
            else:
                out.append(src[pos])
                pos += 1

            if pos == size:
                out.extend(bytes(-len(out) % 4))
                return bytes(out)