"""
Composite module for converting channel planes to display RGBA.

The compositor never touches the stream. It takes decoded planes and returns
a flat RGBA buffer, ``width * height * 4`` bytes in row-major order, that
imaging libraries read directly::

    from PIL import Image
    from psdlite.composite import composite_image

    data = composite_image(document)
    image = Image.frombytes("RGBA", (width, height), data)

Supported color modes are RGB, CMYK, Multichannel, Grayscale, Duotone,
Bitmap, Indexed and Lab. 16-bit planes are reduced to their most significant
byte first.
"""

import logging
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np
from attrs import define, field
from numpy.typing import NDArray

from psdlite.composite import color
from psdlite.constants import ChannelID, ColorMode
from psdlite.psd.bin_utils import trimmed_repr

if TYPE_CHECKING:
    from psdlite.psd.document import Document
    from psdlite.psd.layer_and_mask import LayerRecord

logger = logging.getLogger(__name__)


@define
class MaskPlane:
    """
    User mask plane with its rectangle.

    .. py:attribute:: data

        Decoded mask plane, sized to the mask rectangle.

    .. py:attribute:: left
    .. py:attribute:: top
    .. py:attribute:: right
    .. py:attribute:: bottom
    .. py:attribute:: relative

        Whether the position is relative to the layer.
    """

    data: bytes = field(default=b"", repr=trimmed_repr)
    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0
    relative: bool = False

    @property
    def width(self) -> int:
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        return max(self.bottom - self.top, 0)

    def sample(
        self, width: int, height: int, origin: tuple[int, int], depth: int = 8
    ) -> NDArray[np.uint8]:
        """
        Samples the mask over a ``width`` x ``height`` area whose top-left
        corner is at ``origin``. Pixels outside of the mask rectangle read
        255.
        """
        result = np.full((height, width), 255, dtype=np.uint8)
        mask_width, mask_height = self.width, self.height
        if mask_width == 0 or mask_height == 0:
            return result

        values = _to_8bit(self.data, depth)
        ys, xs = np.mgrid[0:height, 0:width]
        if self.relative:
            xs = xs - self.left
            ys = ys - self.top
        else:
            xs = xs + origin[0] - self.left
            ys = ys + origin[1] - self.top
        inside = (xs >= 0) & (xs < mask_width) & (ys >= 0) & (ys < mask_height)
        pos = ys * mask_width + xs
        valid = inside & (pos < len(values))
        result[valid] = values[pos[valid]]
        return result


def _to_8bit(data: bytes, depth: int) -> NDArray[np.uint8]:
    if depth == 16:
        size = len(data) // 2
        return (np.frombuffer(data[: size * 2], ">u2") >> 8).astype(np.uint8)
    return np.frombuffer(data, np.uint8)


def _plane(data: Optional[bytes], width: int, height: int, depth: int) -> NDArray:
    values = np.zeros(width * height, dtype=np.uint8)
    if data:
        array = _to_8bit(data, depth)[: width * height]
        values[: len(array)] = array
    return values.reshape((height, width)).astype(np.float64)


def composite(
    color_mode: int,
    planes: Sequence[Optional[bytes]],
    width: int,
    height: int,
    depth: int = 8,
    palette: bytes = b"",
    alpha: Optional[bytes] = None,
    mask: Optional[MaskPlane] = None,
    origin: tuple[int, int] = (0, 0),
) -> bytes:
    """
    Composes color planes into an RGBA buffer.

    :param color_mode: See :py:class:`~psdlite.constants.ColorMode`.
    :param planes: decoded color planes in channel order. Missing planes read
        as zeros.
    :param width: width of the planes.
    :param height: height of the planes.
    :param depth: bit depth of the planes.
    :param palette: 768-byte color table for indexed images.
    :param alpha: transparency plane, opaque when None.
    :param mask: :py:class:`MaskPlane` modulating the alpha, or None.
    :param origin: (left, top) position of the planes in the document, used
        to place an absolute mask.
    :return: RGBA bytes.
    """
    channels = list(planes) + [None] * max(4 - len(planes), 0)

    def get(index: int) -> NDArray:
        return _plane(channels[index], width, height, depth)

    if color_mode == ColorMode.RGB:
        rgb = color.rgb(get(0), get(1), get(2))
    elif color_mode == ColorMode.CMYK:
        rgb = color.cmyk(get(0), get(1), get(2), get(3))
    elif color_mode == ColorMode.MULTICHANNEL:
        rgb = color.cmyk(get(0), get(1), get(2))
    elif color_mode in (ColorMode.GRAYSCALE, ColorMode.DUOTONE, ColorMode.BITMAP):
        rgb = color.grayscale(get(0))
    elif color_mode == ColorMode.INDEXED:
        rgb = color.indexed(get(0), palette)
    elif color_mode == ColorMode.LAB:
        rgb = color.lab(get(0), get(1), get(2))
    else:
        logger.warning("Unsupported color mode %s, rendering white" % color_mode)
        rgb = np.full((height, width, 3), 255, dtype=np.uint8)

    if alpha is None:
        a = np.full((height, width), 255, dtype=np.int32)
    else:
        a = _plane(alpha, width, height, depth).astype(np.int32)
    if mask is not None:
        a = a * mask.sample(width, height, origin, depth).astype(np.int32) // 255

    result = np.concatenate([rgb, a.astype(np.uint8)[:, :, np.newaxis]], axis=2)
    return result.tobytes()


def composite_image(document: "Document") -> bytes:
    """
    Composes the merged image of the document into an RGBA buffer. The merged
    image is always opaque.
    """
    header = document.header
    count = ColorMode.channels(header.color_mode)
    return composite(
        header.color_mode,
        document.image_data.channels[:count],
        header.width,
        header.height,
        header.depth,
        palette=document.color_mode_data.palette(),
    )


def composite_layer(record: "LayerRecord", document: "Document") -> Optional[bytes]:
    """
    Composes a layer into an RGBA buffer sized to the layer rectangle.

    The transparency channel gives the alpha, and the user mask channel, when
    present, modulates it.

    :return: RGBA bytes, or None for an empty layer.
    """
    width, height = record.width, record.height
    if width == 0 or height == 0:
        return None

    header = document.header
    count = ColorMode.channels(header.color_mode)
    planes = []
    for index in range(count):
        channel = record.get_channel(index)
        planes.append(channel.data if channel is not None else None)

    transparency = record.get_channel(ChannelID.TRANSPARENCY_MASK)
    mask = None
    if record.get_channel(ChannelID.USER_LAYER_MASK) is not None:
        info = record.mask
        mask = MaskPlane(
            data=record.mask_data or b"",
            left=info.left if info else 0,
            top=info.top if info else 0,
            right=info.right if info else 0,
            bottom=info.bottom if info else 0,
            relative=info.flags.pos_relative_to_layer if info else False,
        )

    return composite(
        header.color_mode,
        planes,
        width,
        height,
        header.depth,
        palette=document.color_mode_data.palette(),
        alpha=transparency.data if transparency is not None else None,
        mask=mask,
        origin=(record.left, record.top),
    )


def composite_mask(record: "LayerRecord", depth: int = 8) -> Optional[bytes]:
    """
    Renders the user mask of a layer as an opaque gray RGBA buffer sized to
    the mask rectangle.

    :return: RGBA bytes, or None when the layer has no mask or the mask is
        empty.
    """
    if record.mask is None or record.mask_data is None:
        return None
    width, height = record.mask.width, record.mask.height
    if width == 0 or height == 0:
        return None
    return composite(
        ColorMode.GRAYSCALE, [record.mask_data], width, height, depth
    )
