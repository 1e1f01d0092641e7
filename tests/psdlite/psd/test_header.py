from typing import Iterator

import pytest

from psdlite.constants import ColorMode
from psdlite.errors import FormatError, PSDError
from psdlite.psd.header import FileHeader

from ..utils import check_write_read


@pytest.fixture
def fixture() -> Iterator[bytes]:
    yield (
        b"8BPS\x00\x01\x00\x00\x00\x00\x00\x00\x00\x03\x00\x00\x00\x96\x00"
        b"\x00\x00d\x00\x08\x00\x03"
    )


def test_header_from_to(fixture: bytes) -> None:
    header = FileHeader.frombytes(fixture)
    assert header.channels == 3
    assert header.height == 150
    assert header.width == 100
    assert header.depth == 8
    assert header.color_mode == ColorMode.RGB
    assert header.tobytes() == fixture


def test_header_exception(fixture: bytes) -> None:
    with pytest.raises(ValueError):
        FileHeader.frombytes(b" " + fixture)


@pytest.mark.parametrize(
    "offset, value",
    [
        (0, b"8BPX"),  # signature
        (4, b"\x00\x02"),  # version
        (12, b"\x00\x00"),  # channels
        (12, b"\x00\x19"),  # channels
        (14, b"\x00\x00\x75\x31"),  # height
        (18, b"\x00\x00\x75\x31"),  # width
        (22, b"\x00\x20"),  # depth
        (24, b"\x00\x05"),  # color mode
    ],
)
def test_header_format_error(fixture: bytes, offset: int, value: bytes) -> None:
    data = fixture[:offset] + value + fixture[offset + len(value) :]
    with pytest.raises(FormatError) as excinfo:
        FileHeader.frombytes(data)
    assert isinstance(excinfo.value, PSDError)


@pytest.mark.parametrize("color_mode", list(ColorMode))
def test_header_color_modes(color_mode: ColorMode) -> None:
    check_write_read(FileHeader(channels=1, color_mode=color_mode))


def test_header_limits() -> None:
    check_write_read(FileHeader(channels=24, height=30000, width=30000, depth=16))
    check_write_read(FileHeader(channels=1, height=0, width=0, depth=1))


@pytest.mark.parametrize(
    "depth, plane_size",
    [(1, 150 * 100), (8, 150 * 100), (16, 150 * 200)],
)
def test_header_plane_size(depth: int, plane_size: int) -> None:
    header = FileHeader(channels=1, height=150, width=100, depth=depth)
    assert header.size == (100, 150)
    assert header.plane_size == plane_size
