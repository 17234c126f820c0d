import itertools

import pytest

from agbtools.delta import (
    DELTA_ENCODING_TABLE,
    delta_compress,
    delta_decompress,
    get_delta_index,
)


def _representable(length, start=0x80):
    """Samples whose successive differences all appear in the delta table."""
    value = start
    samples = [value]
    for step in itertools.islice(itertools.cycle(DELTA_ENCODING_TABLE), length - 1):
        value = (value + step) & 0xFF
        samples.append(value)
    return bytes(samples)


def test_same_sample_uses_zero_delta():
    assert get_delta_index(100, 100) == 0


def test_nearest_delta_chosen():
    assert get_delta_index(5, 0) == 2


def test_delta_wraps_around_byte():
    index = get_delta_index(0, 255)
    assert (255 + DELTA_ENCODING_TABLE[index]) & 0xFF == 0


@pytest.mark.parametrize("prev", [0, 17, 128, 200, 255])
def test_chosen_delta_has_minimal_error(prev):
    for sample in range(0, 256, 7):
        index = get_delta_index(sample, prev)
        chosen = abs(sample - ((prev + DELTA_ENCODING_TABLE[index]) & 0xFF))
        for other in DELTA_ENCODING_TABLE:
            assert chosen <= abs(sample - ((prev + other) & 0xFF))


def test_constant_block_compresses_to_zero_deltas():
    encoded = delta_compress(bytes([100]) * 64)
    assert len(encoded) == 33
    assert encoded == bytes([100]) + bytes(32)


def test_two_full_blocks_size():
    assert len(delta_compress(bytes(128))) == 2 * 33


@pytest.mark.parametrize("length", [2, 64, 66, 128, 130])
def test_exact_round_trip(length):
    samples = _representable(length)
    assert delta_decompress(delta_compress(samples), length) == samples


def test_decompress_stops_at_expected_length():
    samples = _representable(128)
    assert delta_decompress(delta_compress(samples), 50) == samples[:50]


def test_decompress_empty():
    assert delta_decompress(b"", 10) == b""


def test_decompress_never_exceeds_expected_length():
    samples = _representable(128)
    for expected in (1, 3, 63, 64, 65, 127):
        assert len(delta_decompress(delta_compress(samples), expected)) == expected