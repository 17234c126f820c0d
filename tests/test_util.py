import pytest

from agbtools.util import (
    ToolError,
    get_file_extension,
    parse_number,
    read_whole_file,
    read_whole_file_zero_padded,
    write_whole_file,
)


def test_parse_plain_decimal():
    assert parse_number("123", 10) == (123, "")


def test_parse_keeps_remainder_and_sign():
    assert parse_number("  -42xyz", 10) == (-42, "xyz")


def test_parse_hex_prefix():
    assert parse_number("0x1F", 16) == (31, "")
    assert parse_number("0x1F", 0) == parse_number("1f", 16)


def test_parse_rejects_non_number():
    with pytest.raises(ValueError):
        parse_number("abc", 10)
    with pytest.raises(ValueError):
        parse_number("", 10)


def test_parse_int32_limits():
    assert parse_number("2147483647", 10) == (2147483647, "")
    assert parse_number("-2147483648", 10) == (-2147483648, "")
    with pytest.raises(ValueError):
        parse_number("2147483648", 10)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("foo.png", "png"),
        ("a/b.c.lz", "lz"),
        ("foo", None),
        (".png", None),
        ("foo.", None),
        ("", None),
    ],
)
def test_get_file_extension(path, expected):
    assert get_file_extension(path) == expected


def test_write_then_read(tmp_path):
    target = tmp_path / "data.bin"
    write_whole_file(target, b"\x01\x02\x03")
    assert read_whole_file(target) == b"\x01\x02\x03"


def test_zero_padded_read(tmp_path):
    target = tmp_path / "data.bin"
    target.write_bytes(b"abc")
    assert read_whole_file_zero_padded(target, 3) == b"abc" + bytes(3)


def test_read_missing_file(tmp_path):
    with pytest.raises(ToolError, match="for reading"):
        read_whole_file(tmp_path / "missing.bin")


def test_read_empty_file_fails(tmp_path):
    target = tmp_path / "empty.bin"
    target.write_bytes(b"")
    with pytest.raises(ToolError, match="Failed to read"):
        read_whole_file(target)


def test_write_empty_fails(tmp_path):
    with pytest.raises(ToolError, match="Failed to write"):
        write_whole_file(tmp_path / "out.bin", b"")