import logging
import random

import pytest

from agbtools.lz import lz_compress, lz_decompress
from agbtools.util import ToolError


@pytest.mark.parametrize(
    "data",
    [
        b"A",
        b"ABC",
        b"ABCABCABCABC",
        bytes(1000),
        bytes(range(256)) * 3,
        random.Random(1234).randbytes(300),
    ],
)
def test_round_trip(data):
    assert lz_decompress(lz_compress(data)) == data


def test_header_and_padding():
    data = b"hello hello hello"
    packed = lz_compress(data)
    assert packed[0] == 0x10
    assert int.from_bytes(packed[1:4], "little") == len(data)
    assert len(packed) % 4 == 0


def test_compress_empty_fails():
    with pytest.raises(ToolError):
        lz_compress(b"")


def test_decompress_literals():
    assert lz_decompress(bytes([0x10, 3, 0, 0, 0x00, 0x41, 0x42, 0x43])) == b"ABC"


def test_decompress_back_reference():
    packed = bytes([0x10, 6, 0, 0, 0x10, 0x41, 0x42, 0x43, 0x00, 0x02])
    assert lz_decompress(packed) == b"ABCABC"


def test_decompress_overlapping_reference():
    packed = bytes([0x10, 6, 0, 0, 0x40, 0x41, 0x20, 0x00])
    assert lz_decompress(packed) == b"A" * 6


def test_decompress_overflow_is_truncated(caplog):
    packed = bytes([0x10, 4, 0, 0, 0x40, 0x41, 0x20, 0x00])
    with caplog.at_level(logging.WARNING):
        result = lz_decompress(packed)
    assert result == b"AAAA"
    assert "overflow" in caplog.text


def test_decompress_reference_before_start_fails():
    with pytest.raises(ToolError):
        lz_decompress(bytes([0x10, 4, 0, 0, 0x80, 0x00, 0x00]))


@pytest.mark.parametrize(
    "packed",
    [b"", b"\x10\x01\x00", bytes([0x10, 4, 0, 0]), bytes([0x10, 4, 0, 0, 0x00, 0x41])],
)
def test_decompress_truncated_fails(packed):
    with pytest.raises(ToolError):
        lz_decompress(packed)