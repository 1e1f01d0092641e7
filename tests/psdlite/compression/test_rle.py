import io
import logging
import random

import pytest

import psdlite.compression.rle as rle

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"", b""),
        (b"\x07", b"\x00\x07"),
        (b"\x05\x05\x01\x02\x03", b"\xff\x05\x02\x01\x02\x03"),
        (b"\x01\x02\x03\x03", b"\x01\x01\x02\xff\x03"),
        (b"\x05\x05\x05", b"\xfe\x05"),
        (b"\x01\x02\x02\x03", b"\x00\x01\xff\x02\x00\x03"),
        (b"\x09" * 128, b"\x81\x09"),
        (b"\x09" * 129, b"\x81\x09\x00\x09"),
        (bytes(range(128)), b"\x7f" + bytes(range(128))),
        (bytes(range(129)), b"\x7f" + bytes(range(128)) + b"\x00\x80"),
    ],
)
def test_encode(data: bytes, expected: bytes) -> None:
    assert rle.encode(data) == expected
    assert rle.decode(expected, len(data)) == data


@pytest.mark.parametrize(
    "data, size, expected",
    [
        # b'\x01\x01\x01\x01'
        (b"\xfd\x01", 3, b"\x01\x01\x01"),
        (b"\xfd\x01", 5, b"\x01\x01\x01\x01\x00"),
        # b'\x01\x02\x03'
        (b"\x02\x01\x02\x03", 2, b"\x01\x02"),
        (b"\x02\x01\x02\x03", 4, b"\x01\x02\x03\x00"),
        # no-op header
        (b"\x80\x00\x07", 1, b"\x07"),
    ],
)
def test_decode_tolerant(data: bytes, size: int, expected: bytes) -> None:
    assert rle.decode(data, size) == expected


def test_decode_row_offset() -> None:
    dst = bytearray(6)
    with io.BytesIO(b"\xfe\x0a\x01\x0b\x0c") as f:
        assert rle.decode_row(f, dst, 0, 3) == 3
        assert rle.decode_row(f, dst, 3, 3) == 2
        assert f.read() == b""
    assert dst == bytearray(b"\x0a\x0a\x0a\x0b\x0c\x00")


def test_decode_row_clamped() -> None:
    dst = bytearray(4)
    with io.BytesIO(b"\xfb\x01") as f:
        written = rle.decode_row(f, dst, 2, 2)
    assert written == 6
    assert dst == bytearray(b"\x00\x00\x01\x01")


@pytest.mark.parametrize("length", [1, 2, 127, 128, 129, 256, 1000])
def test_round_trip(length: int) -> None:
    rng = random.Random(length)
    for _ in range(20):
        alphabet = rng.choice([2, 4, 256])
        data = bytes(rng.randrange(alphabet) for _ in range(length))
        encoded = rle.encode(data)
        assert rle.decode(encoded, length) == data
        assert len(encoded) <= 2 * length


def test_encode_idempotent() -> None:
    data = b"\x00" * 100 + b"\xff" * 50 + bytes(range(40))
    assert rle.encode(rle.decode(rle.encode(data), len(data))) == rle.encode(data)
