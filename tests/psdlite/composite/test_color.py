import numpy as np
import pytest

from psdlite.composite import color


def _px(*values: int) -> list:
    return [np.array([value], dtype=np.float64) for value in values]


@pytest.mark.parametrize(
    "cmyk, expected",
    [
        # Stored bytes are inverted ink: 255 is no ink.
        ((255, 255, 255, 255), (255, 255, 255)),
        ((0, 0, 0, 0), (0, 0, 0)),
        ((0, 255, 255, 255), (0, 255, 255)),
        ((255, 255, 255, 0), (0, 0, 0)),
    ],
)
def test_cmyk(cmyk: tuple, expected: tuple) -> None:
    assert tuple(color.cmyk(*_px(*cmyk))[0]) == expected


def test_cmyk_intermediate() -> None:
    r, g, b = color.cmyk(*_px(128, 64, 255, 255))[0]
    assert abs(int(r) - 128) <= 1
    assert abs(int(g) - 64) <= 1
    assert b == 255


def test_multichannel() -> None:
    # Without a black plane no black ink is applied.
    assert tuple(color.cmyk(*_px(255, 0, 255))[0]) == (255, 0, 255)


@pytest.mark.parametrize(
    "lab, expected",
    [
        ((255, 128, 128), (255, 255, 255)),
        ((0, 128, 128), (0, 0, 0)),
    ],
)
def test_lab(lab: tuple, expected: tuple) -> None:
    result = color.lab(*_px(*lab))[0]
    for value, target in zip(result, expected):
        assert abs(int(value) - target) <= 1


def test_lab_gray_is_neutral() -> None:
    r, g, b = color.lab(*_px(128, 128, 128))[0]
    assert max(r, g, b) - min(r, g, b) <= 2
    assert 100 < r < 160


def test_lab_saturates() -> None:
    result = color.lab(*_px(128, 255, 0))[0]
    assert result.dtype == np.uint8
    assert result[2] == 255


def test_indexed() -> None:
    palette = bytes(range(256)) + bytes(range(255, -1, -1)) + b"\x07" * 256
    result = color.indexed(np.array([[0, 1, 255]]), palette)
    assert result.shape == (1, 3, 3)
    assert tuple(result[0, 0]) == (palette[0], palette[256], palette[512])
    assert tuple(result[0, 1]) == (1, 254, 7)
    assert tuple(result[0, 2]) == (255, 0, 7)


def test_indexed_short_palette() -> None:
    result = color.indexed(np.array([0, 5]), b"\x01\x02")
    assert tuple(result[0]) == (1, 0, 0)
    assert tuple(result[1]) == (0, 0, 0)


def test_grayscale() -> None:
    assert tuple(color.grayscale(np.array([42]))[0]) == (42, 42, 42)
