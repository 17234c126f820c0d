import random

import pytest

from agbtools.rl import rl_compress, rl_decompress
from agbtools.util import ToolError


@pytest.mark.parametrize(
    "data",
    [
        b"A",
        b"AB",
        b"AAA",
        b"\x07" * 5,
        bytes(300),
        bytes(range(256)) * 2,
        b"abc" + b"x" * 200 + b"def" + b"y" * 3,
        random.Random(1234).randbytes(500),
    ],
)
def test_round_trip(data):
    assert rl_decompress(rl_compress(data)) == data


def test_header_and_padding():
    data = b"hello world"
    packed = rl_compress(data)
    assert packed[0] == 0x30
    assert int.from_bytes(packed[1:4], "little") == len(data)
    assert len(packed) % 4 == 0


def test_single_run_layout():
    assert rl_compress(b"\x07" * 5) == bytes([0x30, 5, 0, 0, 0x82, 0x07, 0, 0])


def test_long_run_shrinks():
    assert len(rl_compress(bytes(300))) < 20


def test_compress_empty_fails():
    with pytest.raises(ToolError):
        rl_compress(b"")


def test_decompress_run():
    assert rl_decompress(bytes([0x30, 5, 0, 0, 0x82, 0x7A])) == b"z" * 5


def test_decompress_literal():
    assert rl_decompress(bytes([0x30, 3, 0, 0, 0x02, 1, 2, 3])) == b"\x01\x02\x03"


@pytest.mark.parametrize(
    "packed",
    [
        b"\x30\x01",
        bytes([0x30, 5, 0, 0]),
        bytes([0x30, 2, 0, 0, 0x82, 0x7A]),
        bytes([0x30, 5, 0, 0, 0x04, 1, 2]),
        bytes([0x30, 5, 0, 0, 0x82]),
    ],
)
def test_decompress_malformed_fails(packed):
    with pytest.raises(ToolError):
        rl_decompress(packed)