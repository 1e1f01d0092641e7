"""
Layer module.

:py:class:`Layer` is a thin, writable view over one
:py:class:`~psdlite.psd.layer_and_mask.LayerRecord`. Layers are flat and kept
in file order, bottom-most first; there are no groups.

Example usage::

    from psdlite import PSDImage

    psd = PSDImage.open('document.psd')
    layer = psd[0]

    layer.visible = False
    layer.opacity = 128

    image = layer.composite()   # PIL Image, None for an empty layer
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

from PIL import Image

from psdlite.api import pil_io
from psdlite.composite import composite_layer, composite_mask
from psdlite.constants import BlendMode, ChannelID, Clipping
from psdlite.psd.layer_and_mask import LayerRecord

if TYPE_CHECKING:
    from psdlite.api.psd_image import PSDImage

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


class Layer:
    """
    Pixel layer of a :py:class:`~psdlite.api.psd_image.PSDImage`.

    Geometry is read-only; the rectangle follows the pixel data. Name,
    visibility, opacity and blend mode are writable and saved with the
    document.
    """

    def __init__(self, psd: "PSDImage", record: LayerRecord):
        self._psd = psd
        self._record = record

    @property
    def name(self) -> str:
        """Layer name. Writable, at most 255 characters."""
        return self._record.name

    @name.setter
    def name(self, value: str) -> None:
        if len(value) > MAX_NAME_LENGTH:
            raise ValueError(
                "Layer name has %d characters, at most %d are stored"
                % (len(value), MAX_NAME_LENGTH)
            )
        self._record.name = value

    @property
    def visible(self) -> bool:
        """Visibility flag. Writable."""
        return self._record.flags.visible

    @visible.setter
    def visible(self, value: bool) -> None:
        self._record.flags.visible = bool(value)

    @property
    def transparency_protected(self) -> bool:
        return self._record.flags.transparency_protected

    @property
    def opacity(self) -> int:
        """Opacity in [0, 255]. Writable."""
        return self._record.opacity

    @opacity.setter
    def opacity(self, value: int) -> None:
        if not 0 <= value <= 255:
            raise ValueError("Opacity %r is outside of [0, 255]" % (value,))
        self._record.opacity = int(value)

    @property
    def blend_mode(self) -> Union[BlendMode, bytes]:
        """
        Blend mode, see :py:class:`~psdlite.constants.BlendMode`. Writable
        from the enum or its 4-character key. A key this package does not
        know reads back as raw bytes.
        """
        return self._record.blend_mode

    @blend_mode.setter
    def blend_mode(self, value: Union[bytes, str, BlendMode]) -> None:
        if isinstance(value, str):
            value = value.encode("ascii")
        self._record.blend_mode = BlendMode(value)

    @property
    def clipping(self) -> bool:
        """True when the layer clips to the one below."""
        return self._record.clipping != Clipping.BASE

    # Geometry, in document coordinates.
    @property
    def left(self) -> int:
        return self._record.left

    @property
    def top(self) -> int:
        return self._record.top

    @property
    def right(self) -> int:
        return self._record.right

    @property
    def bottom(self) -> int:
        return self._record.bottom

    @property
    def width(self) -> int:
        return self._record.width

    @property
    def height(self) -> int:
        return self._record.height

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) tuple."""
        return self.left, self.top, self.right, self.bottom

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def has_mask(self) -> bool:
        """True when the layer carries a user mask channel."""
        return self._record.mask is not None and (
            self._record.get_channel(ChannelID.USER_LAYER_MASK) is not None
        )

    def composite(self) -> Optional[Image.Image]:
        """
        Renders the layer into an RGBA image sized to its rectangle, with
        the transparency channel and the user mask applied. Opacity and
        blending are not applied.

        :return: :py:class:`PIL.Image.Image`, or None for an empty layer.
        """
        data = composite_layer(self._record, self._psd._record)
        return pil_io.convert_rgba_to_pil(data, self.size)

    def topil(self) -> Optional[Image.Image]:
        """Alias of :py:meth:`composite`."""
        return self.composite()

    def mask(self) -> Optional[Image.Image]:
        """
        Renders the user mask as an opaque gray RGBA image sized to the mask
        rectangle, or None without a mask.
        """
        mask = self._record.mask
        data = composite_mask(self._record, self._psd.depth)
        if mask is None or data is None:
            return None
        return pil_io.convert_rgba_to_pil(data, (mask.width, mask.height))

    def __repr__(self) -> str:
        blend_key = getattr(self.blend_mode, "value", self.blend_mode)
        flags = []
        if not self.is_empty():
            flags.append("size=%dx%d" % self.size)
        if not self.visible:
            flags.append("invisible")
        if self.clipping:
            flags.append("clip")
        if self.has_mask():
            flags.append("mask")
        flags.append("blend=%s" % blend_key.decode("ascii", "replace"))
        return "%s(%r %s)" % (self.__class__.__name__, self.name, " ".join(flags))
