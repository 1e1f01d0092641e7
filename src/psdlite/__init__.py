"""
psdlite: reading and writing layered PSD raster documents.

Basic usage::

    from psdlite import PSDImage

    psd = PSDImage.open('example.psd')

    for layer in psd:
        print(layer.name)

    psd.composite().save('output.png')

Architecture:

- :py:mod:`psdlite.psd`: Low-level binary structure parsing/writing
- :py:mod:`psdlite.compression`: Channel plane codecs (RAW, RLE)
- :py:mod:`psdlite.composite`: Color mode conversion to RGBA
- :py:mod:`psdlite.api`: High-level user-facing API

Low-level structures are available through the ``_record`` attribute of
:py:class:`PSDImage`.
"""

from psdlite.api.psd_image import PSDImage
from psdlite.version import __version__

__all__ = ["PSDImage", "__version__"]
