import pytest

from psdlite.composite import (
    MaskPlane,
    composite,
    composite_image,
    composite_layer,
    composite_mask,
)
from psdlite.constants import ColorMode
from psdlite.psd import Document
from psdlite.psd.layer_and_mask import LayerRecord


def _pixels(data: bytes) -> list:
    return [tuple(data[i : i + 4]) for i in range(0, len(data), 4)]


def test_composite_rgb() -> None:
    data = composite(ColorMode.RGB, [b"\x01\x02", b"\x03\x04", b"\x05\x06"], 2, 1)
    assert _pixels(data) == [(1, 3, 5, 255), (2, 4, 6, 255)]


def test_composite_alpha() -> None:
    data = composite(ColorMode.GRAYSCALE, [b"\x10\x20"], 2, 1, alpha=b"\x00\x80")
    assert _pixels(data) == [(16, 16, 16, 0), (32, 32, 32, 128)]


def test_composite_missing_planes() -> None:
    data = composite(ColorMode.RGB, [b"\x09"], 1, 1)
    assert _pixels(data) == [(9, 0, 0, 255)]


def test_composite_16bit() -> None:
    data = composite(ColorMode.GRAYSCALE, [b"\x12\x34\xff\x00"], 2, 1, depth=16)
    assert _pixels(data) == [(0x12, 0x12, 0x12, 255), (255, 255, 255, 255)]


@pytest.mark.parametrize(
    "color_mode, planes, expected",
    [
        (ColorMode.CMYK, [b"\xff", b"\xff", b"\xff", b"\xff"], (255, 255, 255, 255)),
        (ColorMode.CMYK, [b"\x00", b"\x00", b"\x00", b"\x00"], (0, 0, 0, 255)),
        (ColorMode.MULTICHANNEL, [b"\xff", b"\x00", b"\xff"], (255, 0, 255, 255)),
        (ColorMode.DUOTONE, [b"\x33"], (0x33, 0x33, 0x33, 255)),
        (ColorMode.BITMAP, [b"\xff"], (255, 255, 255, 255)),
    ],
)
def test_composite_color_modes(color_mode, planes, expected) -> None:
    assert _pixels(composite(color_mode, planes, 1, 1)) == [expected]


def test_composite_indexed() -> None:
    palette = b"\x00\x0a" + b"\x00" * 254 + b"\x00\x0b" + b"\x00" * 254 + b"\x00\x0c"
    data = composite(ColorMode.INDEXED, [b"\x01"], 1, 1, palette=palette)
    assert _pixels(data) == [(10, 11, 12, 255)]


def test_mask_modulates_alpha() -> None:
    mask = MaskPlane(b"\x80", left=0, top=0, right=1, bottom=1)
    data = composite(ColorMode.GRAYSCALE, [b"\x00"], 1, 1, alpha=b"\xff", mask=mask)
    assert _pixels(data)[0][3] == 128


def test_mask_truncates() -> None:
    mask = MaskPlane(b"\x80", left=0, top=0, right=1, bottom=1)
    data = composite(ColorMode.GRAYSCALE, [b"\x00"], 1, 1, alpha=b"\x03", mask=mask)
    assert _pixels(data)[0][3] == 1  # 3 * 128 // 255


def test_mask_absolute_position() -> None:
    mask = MaskPlane(b"\x00", left=3, top=2, right=4, bottom=3)
    data = composite(
        ColorMode.GRAYSCALE, [b"\x00\x00"], 2, 1, mask=mask, origin=(2, 2)
    )
    assert [pixel[3] for pixel in _pixels(data)] == [255, 0]


def test_mask_relative_position() -> None:
    mask = MaskPlane(b"\x00", left=1, top=0, right=2, bottom=1, relative=True)
    data = composite(
        ColorMode.GRAYSCALE, [b"\x00\x00"], 2, 1, mask=mask, origin=(5, 5)
    )
    assert [pixel[3] for pixel in _pixels(data)] == [255, 0]


def test_mask_short_plane() -> None:
    mask = MaskPlane(b"\x00", left=0, top=0, right=2, bottom=1)
    data = composite(ColorMode.GRAYSCALE, [b"\x00\x00"], 2, 1, mask=mask)
    assert [pixel[3] for pixel in _pixels(data)] == [0, 255]


def test_composite_image(rgb_document: Document) -> None:
    assert _pixels(composite_image(rgb_document)) == [(10, 20, 30, 255)] * 12


def test_composite_layer(rgb_document: Document) -> None:
    background, top = rgb_document.layer_records
    assert _pixels(composite_layer(background, rgb_document))[:2] == [
        (0, 128, 0, 255),
        (1, 128, 0, 255),
    ]
    assert _pixels(composite_layer(top, rgb_document)) == [
        (1, 2, 3, 128),
        (1, 2, 3, 0),
        (1, 2, 3, 255),
        (1, 2, 3, 255),
    ]


def test_composite_empty_layer(rgb_document: Document) -> None:
    assert composite_layer(LayerRecord.new("empty"), rgb_document) is None


def test_composite_mask(rgb_document: Document) -> None:
    background, top = rgb_document.layer_records
    assert composite_mask(background) is None
    assert _pixels(composite_mask(top)) == [(128, 128, 128, 255), (0, 0, 0, 255)]
