"""
Color conversion to display RGB.

Every function takes 8-bit sample arrays of the same shape and returns a
``uint8`` array with a trailing axis of size 3. Each output pixel only
depends on the samples at the same index, so the functions work on any
slice of rows.
"""

from typing import Optional

import numpy as np
from numpy.typing import NDArray

# D65 reference white, observer = 2 degrees.
REF_X = 95.047
REF_Y = 100.0
REF_Z = 108.883

XYZ_TO_SRGB = np.array(
    [
        [3.2406, -1.5372, -0.4986],
        [-0.9689, 1.8758, 0.0415],
        [0.0557, -0.2040, 1.0570],
    ]
)


def _clip(value: NDArray) -> NDArray[np.uint8]:
    return np.clip(value, 0, 255).astype(np.uint8)


def rgb(r: NDArray, g: NDArray, b: NDArray) -> NDArray[np.uint8]:
    return np.stack([r, g, b], axis=-1).astype(np.uint8)


def grayscale(gray: NDArray) -> NDArray[np.uint8]:
    return rgb(gray, gray, gray)


def indexed(index: NDArray, palette: bytes) -> NDArray[np.uint8]:
    """
    Looks up ``index`` in a non-interleaved 768-byte color table. A shorter
    table is zero-padded.
    """
    table = np.frombuffer(bytes(palette[:768]).ljust(768, b"\x00"), np.uint8)
    table = table.reshape((3, 256))
    index = index.astype(np.intp)
    return rgb(table[0][index], table[1][index], table[2][index])


def cmyk(
    c: NDArray, m: NDArray, y: NDArray, k: Optional[NDArray] = None
) -> NDArray[np.uint8]:
    """
    Converts stored CMYK samples. Stored samples are inverted ink amounts:
    255 is no ink and 0 is full ink. Without ``k`` no black ink is applied.

    Stored ``(0, 0, 0, 0)`` is therefore full ink on every plate and renders
    black, while paper white is stored as ``(255, 255, 255, 255)``. Code that
    builds CMYK planes from uninverted ink amounts, such as Pillow's ``CMYK``
    mode, must invert them first.

    The result is truncated toward zero, then clamped.
    """
    C = 1.0 - c / 255.0
    M = 1.0 - m / 255.0
    Y = 1.0 - y / 255.0
    K = np.zeros_like(C) if k is None else 1.0 - k / 255.0
    values = [255.0 * (1.0 - (X * (1.0 - K) + K)) for X in (C, M, Y)]
    return np.stack([_clip(np.trunc(v)) for v in values], axis=-1)


def lab(l: NDArray, a: NDArray, b: NDArray) -> NDArray[np.uint8]:
    """
    Converts 8-bit Lab samples, where L is scaled to [0, 255] and a, b are
    offset by 128, through XYZ to sRGB.
    """
    L = l * (100.0 / 255.0)
    A = a - 128.0
    B = b - 128.0

    fy = (L + 16.0) / 116.0
    fx = A / 500.0 + fy
    fz = fy - B / 200.0

    def finv(v: NDArray) -> NDArray:
        cube = v**3
        return np.where(cube > 0.008856, cube, (v - 16.0 / 116.0) / 7.787)

    xyz = np.stack(
        [REF_X * finv(fx) / 100.0, REF_Y * finv(fy) / 100.0, REF_Z * finv(fz) / 100.0],
        axis=-1,
    )
    linear = xyz @ XYZ_TO_SRGB.T
    srgb = np.where(
        linear > 0.0031308,
        1.055 * np.power(np.maximum(linear, 0.0031308), 1.0 / 2.4) - 0.055,
        12.92 * linear,
    )
    return _clip(np.round(srgb * 255.0))
