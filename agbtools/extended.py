"""80-bit IEEE 754 extended precision numbers, big endian, as used by AIFF."""

from __future__ import annotations

import math
import struct

_LAYOUT = struct.Struct(">BBII")
_BIAS = 16383
_SPECIAL_EXPONENT = 32767


def write_extended(value: float) -> bytes:
    """Encode a float as ten big-endian bytes of extended precision."""
    if value == 0.0:
        return bytes(10)

    sign = 0
    if value < 0.0:
        value = abs(value)
        sign = 1

    fraction, exponent = math.frexp(value)

    if exponent == 0 or exponent > 16384:
        low, high = (0, 0) if exponent > 16384 else (0x80000000, 0)
        exponent = _SPECIAL_EXPONENT
    else:
        fraction = math.ldexp(fraction, 32)
        low = math.floor(fraction)
        fraction -= low
        high = math.floor(math.ldexp(fraction, 32))
        exponent += _BIAS - 1

    return _LAYOUT.pack((sign << 7) | (exponent >> 8), exponent & 0xFF, low, high)


def read_extended(data: bytes) -> float:
    """Decode ten big-endian bytes of extended precision into a float."""
    if len(data) < 10:
        raise ValueError("an extended precision number takes 10 bytes")

    first, second, low, high = _LAYOUT.unpack(bytes(data[:10]))
    negative = bool(first & 0x80)
    exponent = ((first & 0x7F) << 8) | second

    if exponent == 0 and low == 0 and high == 0:
        return -0.0 if negative else 0.0

    if exponent == _SPECIAL_EXPONENT:
        result = math.inf
    else:
        exponent -= _BIAS
        try:
            result = math.ldexp(low, exponent - 31) + math.ldexp(high, exponent - 63)
        except OverflowError:
            result = math.inf

    return -result if negative else result