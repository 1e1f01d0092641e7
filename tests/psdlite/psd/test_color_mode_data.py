import pytest

from psdlite.psd.color_mode_data import ColorModeData

from ..utils import check_read_write, check_write_read


@pytest.mark.parametrize(
    "fixture",
    [
        b"\x00\x00\x00\x00",
        b"\x00\x00\x00\x04\x01\x02\x03\x04",
    ],
)
def test_color_mode_data(fixture: bytes) -> None:
    check_read_write(ColorModeData, fixture)


def test_color_mode_data_palette() -> None:
    table = bytes(range(256)) + bytes(256) + b"\xff" * 256
    data = ColorModeData(table)
    check_write_read(data)
    assert data.palette() == table
    interleaved = data.interleave()
    assert len(interleaved) == 768
    assert interleaved[:6] == b"\x00\x00\xff\x01\x00\xff"


def test_color_mode_data_short_palette() -> None:
    data = ColorModeData(b"\x01\x02")
    assert len(data.palette()) == 768
    assert data.palette()[:3] == b"\x01\x02\x00"


def test_color_mode_data_frominterleaved() -> None:
    data = ColorModeData.frominterleaved([10, 20, 30, 40, 50, 60])
    assert len(data.value) == 768
    assert data.value[0:2] == b"\x0a\x28"
    assert data.value[256:258] == b"\x14\x32"
    assert data.value[512:514] == b"\x1e\x3c"
    assert data.interleave()[:6] == bytes([10, 20, 30, 40, 50, 60])
