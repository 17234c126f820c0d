import math

import pytest

from agbtools.extended import read_extended, write_extended


def test_standard_sample_rate_encoding():
    assert write_extended(44100.0) == bytes.fromhex("400EAC44000000000000")


def test_standard_sample_rate_decoding():
    assert read_extended(bytes.fromhex("400EAC44000000000000")) == 44100.0


def test_zero_encodes_to_zero_bytes():
    assert write_extended(0.0) == bytes(10)
    assert read_extended(bytes(10)) == 0.0


@pytest.mark.parametrize(
    "value", [1.0, 2.0, 8000.0, 13379.0, 22050.5, -440.0, 1e-300, 1e300, math.pi]
)
def test_round_trip(value):
    assert read_extended(write_extended(value)) == value


def test_negative_sets_sign_bit():
    assert write_extended(-1.0)[0] & 0x80
    assert write_extended(-1.0)[1:] == write_extended(1.0)[1:]


def test_negative_zero_is_read_with_sign():
    assert math.copysign(1.0, read_extended(b"\x80" + bytes(9))) == -1.0


def test_max_exponent_reads_as_infinity():
    assert read_extended(b"\x7f\xff" + bytes(8)) == math.inf
    assert read_extended(b"\xff\xff" + bytes(8)) == -math.inf
    assert read_extended(b"\x7f\xff\x80" + bytes(7)) == math.inf


def test_infinity_round_trip():
    encoded = write_extended(math.inf)
    assert encoded[:2] == b"\x7f\xff"
    assert read_extended(encoded) == math.inf


def test_short_input_rejected():
    with pytest.raises(ValueError):
        read_extended(bytes(9))