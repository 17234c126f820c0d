"""Delta compression of 8-bit PCM samples as used by the GBA sound engine."""

from __future__ import annotations

DELTA_ENCODING_TABLE = (
    0, 1, 4, 9, 16, 25, 36, 49,
    -64, -49, -36, -25, -16, -9, -4, -1,
)

# Each block holds one raw sample, one full-byte delta and 31 packed delta pairs.
_PAIRS_PER_BLOCK = 31


def _step(base: int, index: int) -> int:
    return (base + DELTA_ENCODING_TABLE[index]) & 0xFF


def get_delta_index(sample: int, prev_sample: int) -> int:
    """Return the table index whose delta from ``prev_sample`` lands nearest ``sample``."""
    return min(
        range(len(DELTA_ENCODING_TABLE)),
        key=lambda index: abs(sample - _step(prev_sample, index)),
    )


def delta_compress(pcm: bytes) -> bytes:
    """Delta-encode 8-bit samples in blocks of 64.

    A lone trailing sample that would fill only half of a packed byte is
    dropped.
    """
    out = bytearray()
    stream = iter(bytes(pcm))

    for first in stream:
        base = first
        out.append(base)

        second = next(stream, None)
        if second is None:
            break
        index = get_delta_index(second, base)
        base = _step(base, index)
        out.append(index)

        for _ in range(_PAIRS_PER_BLOCK):
            high_sample = next(stream, None)
            if high_sample is None:
                break
            high = get_delta_index(high_sample, base)
            base = _step(base, high)

            low_sample = next(stream, None)
            if low_sample is None:
                break
            low = get_delta_index(low_sample, base)
            base = _step(base, low)
            out.append((high << 4) | low)

    return bytes(out)


def delta_decompress(delta: bytes, expected_length: int) -> bytes:
    """Decode delta-encoded samples, stopping at ``expected_length`` samples."""
    out = bytearray()
    stream = iter(bytes(delta))

    for first in stream:
        base = first
        out.append(base)
        if len(out) >= expected_length:
            break

        second = next(stream, None)
        if second is None:
            break
        base = _step(base, second & 0xF)
        out.append(base)
        if len(out) >= expected_length:
            break

        for _ in range(_PAIRS_PER_BLOCK):
            packed = next(stream, None)
            if packed is None:
                break
            base = _step(base, (packed >> 4) & 0xF)
            out.append(base)
            if len(out) >= expected_length:
                break
            base = _step(base, packed & 0xF)
            out.append(base)
            if len(out) >= expected_length:
                break

        if len(out) >= expected_length:
            break

    return bytes(out)