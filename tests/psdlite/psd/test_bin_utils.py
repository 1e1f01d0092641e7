import io
import logging

import pytest

from psdlite.psd.bin_utils import (
    bounded_section,
    is_readable,
    length_writer,
    pack,
    read_fmt,
    read_length_block,
    read_pascal_string,
    write_fmt,
    write_length_block,
    write_pascal_string,
)

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "fmt, values, expected",
    [
        ("H", (1,), b"\x00\x01"),
        ("h", (-2,), b"\xff\xfe"),
        ("I", (0x01020304,), b"\x01\x02\x03\x04"),
        ("i", (-1,), b"\xff\xff\xff\xff"),
        ("Q", (1,), b"\x00" * 7 + b"\x01"),
        ("q", (-2,), b"\xff" * 7 + b"\xfe"),
    ],
)
def test_big_endian(fmt, values, expected):
    with io.BytesIO() as f:
        assert write_fmt(f, fmt, *values) == len(expected)
        assert f.getvalue() == expected
        f.seek(0)
        assert read_fmt(fmt, f) == values


def test_read_fmt_short():
    with pytest.raises(IOError):
        read_fmt("I", io.BytesIO(b"\x00\x01"))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Test", b"\x04Test\x00"),
        ("Abc", b"\x03Abc"),
        ("", b"\x00\x00"),
    ],
)
def test_pascal_string(value, expected):
    with io.BytesIO() as f:
        written = write_pascal_string(f, value)
        assert written == len(expected)
        assert f.getvalue() == expected
        assert written % 2 == 0
        f.seek(0)
        assert read_pascal_string(f) == value
        assert f.tell() == len(expected)


def test_pascal_string_unpadded():
    data = b"\x04Test\x03Abc"
    with io.BytesIO(data) as f:
        assert read_pascal_string(f, padding=1) == "Test"
        assert read_pascal_string(f, padding=1) == "Abc"
        assert f.tell() == len(data)


def test_pascal_string_truncated_on_write():
    with io.BytesIO() as f:
        write_pascal_string(f, "x" * 300)
        data = f.getvalue()
    assert data[0] == 255
    assert len(data) == 256


def test_pascal_string_short():
    with pytest.raises(IOError):
        read_pascal_string(io.BytesIO(b"\x05ab"))


def test_length_block():
    with io.BytesIO() as f:
        written = write_length_block(f, lambda fp: fp.write(b"abc"), padding=2)
        assert written == 8
        assert f.getvalue() == b"\x00\x00\x00\x03abc\x00"
        f.seek(0)
        assert read_length_block(f, padding=2) == b"abc"
        assert f.tell() == 8


def test_length_writer():
    with io.BytesIO() as f:
        write_fmt(f, "H", 7)
        with length_writer(f) as position:
            assert position == 2
            write_fmt(f, "3H", 1, 2, 3)
        write_fmt(f, "B", 9)
        assert f.getvalue() == pack("HI3HB", 7, 6, 1, 2, 3, 9)


@pytest.mark.parametrize("consumed", [0, 3, 8, 12])
def test_bounded_section(consumed):
    with io.BytesIO(bytes(range(16))) as f:
        f.seek(2)
        with bounded_section(f, 8) as end_pos:
            assert end_pos == 10
            f.read(consumed)
        assert f.tell() == 10


def test_is_readable():
    with io.BytesIO(b"\x00\x01") as f:
        assert is_readable(f, 2)
        assert not is_readable(f, 3)
        assert f.tell() == 0
