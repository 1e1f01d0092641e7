"""
PIL IO module.

Conversions between decoded planes and :py:class:`PIL.Image.Image`. The
composition math lives in :py:mod:`psdlite.composite`; this module only moves
buffers in and out of Pillow.
"""

import io
import logging
from typing import Optional

import numpy as np
from PIL import Image, ImageChops

from psdlite.constants import ColorMode, ThumbnailFormat
from psdlite.psd.image_resources import ThumbnailResource

logger = logging.getLogger(__name__)


def get_color_mode(mode: str) -> ColorMode:
    """Convert PIL mode to ColorMode."""
    name = mode.upper()
    name = name.rstrip("A")  # Trim alpha.
    name = {"1": "BITMAP", "L": "GRAYSCALE", "P": "INDEXED"}.get(name, name)
    try:
        return getattr(ColorMode, name)
    except AttributeError:
        raise ValueError("Unsupported PIL mode %r" % mode)


def get_pil_mode(color_mode: int, alpha: bool = False) -> str:
    """Get the PIL mode that holds the color planes of the ColorMode."""
    name = {
        ColorMode.BITMAP: "L",
        ColorMode.GRAYSCALE: "L",
        ColorMode.DUOTONE: "L",
        ColorMode.INDEXED: "P",
        ColorMode.RGB: "RGB",
        ColorMode.CMYK: "CMYK",
        ColorMode.MULTICHANNEL: "RGB",
        ColorMode.LAB: "LAB",
    }[ColorMode(color_mode)]
    if alpha and name in ("L", "RGB"):
        name += "A"
    return name


def convert_rgba_to_pil(data: Optional[bytes], size: tuple[int, int]) -> Optional[Image.Image]:
    """Wrap a composed RGBA buffer. Returns None for an empty buffer."""
    if not data:
        return None
    return Image.frombytes("RGBA", size, data)


def convert_pil_to_planes(
    image: Image.Image, color_mode: int, depth: int = 8
) -> tuple[list[bytes], Optional[bytes]]:
    """
    Split a PIL image into PSD planes for the given color mode.

    :return: tuple of the color planes and the alpha plane, or None when the
        image has no alpha.
    """
    alpha = None
    if image.mode in ("RGBA", "LA"):
        alpha = image.getchannel("A")

    mode = get_pil_mode(color_mode)
    if image.mode != mode:
        image = image.convert(mode)
    bands = list(image.split())
    if color_mode == ColorMode.CMYK:
        # PSD stores inverted ink amounts.
        bands = [ImageChops.invert(band) for band in bands]

    planes = [_widen(band.tobytes(), depth) for band in bands]
    return planes, (_widen(alpha.tobytes(), depth) if alpha is not None else None)


def _widen(data: bytes, depth: int) -> bytes:
    if depth != 16:
        return data
    values = np.frombuffer(data, np.uint8).astype(np.uint16) * 257
    return values.astype(">u2").tobytes()


def convert_thumbnail_to_pil(thumbnail: ThumbnailResource) -> Image.Image:
    """Convert thumbnail resource."""
    if thumbnail.fmt == ThumbnailFormat.RAW_RGB:
        size = (thumbnail.width, thumbnail.height)
        stride = thumbnail.row
        return Image.frombytes(
            "RGB", size, thumbnail.data, "raw", thumbnail._RAW_MODE, stride
        )
    elif thumbnail.fmt == ThumbnailFormat.JPEG_RGB:
        image = Image.open(io.BytesIO(thumbnail.data))
        if thumbnail._RAW_MODE == "BGR":
            logger.debug("swapping red and blue of legacy thumbnail")
            r, g, b = image.convert("RGB").split()[:3]
            image = Image.merge("RGB", (b, g, r))
        return image
    else:
        raise ValueError("Unknown thumbnail format %d" % (thumbnail.fmt))
