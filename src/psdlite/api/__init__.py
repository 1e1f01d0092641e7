"""
High-level API.

:py:class:`~psdlite.api.psd_image.PSDImage` wraps the low-level
:py:class:`~psdlite.psd.Document` and exposes each layer record as a
:py:class:`~psdlite.api.layers.Layer`. Conversions to and from Pillow live in
:py:mod:`psdlite.api.pil_io`.
"""

from .layers import Layer
from .psd_image import PSDImage

__all__ = ["Layer", "PSDImage"]
