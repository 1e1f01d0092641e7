"""
PSD Image module.

:py:class:`PSDImage` is the entry point for reading, editing and saving
documents. It wraps the low-level :py:class:`~psdlite.psd.Document` and
exposes its layers as :py:class:`~psdlite.api.layers.Layer` views.

Example usage::

    from psdlite import PSDImage

    psd = PSDImage.open('document.psd')
    print("Size: %dx%d" % psd.size)

    for layer in psd:
        print(layer)

    psd.composite().save('output.png')
    psd.save('copy.psd')
"""

import io
import logging
import os
from typing import Any, BinaryIO, Iterator, Optional, Sequence, Union

from PIL import Image

from psdlite.api import layers, pil_io
from psdlite.composite import composite_image
from psdlite.constants import BlendMode, ChannelID, ColorMode, Compression
from psdlite.psd.color_mode_data import ColorModeData
from psdlite.psd.document import Document
from psdlite.psd.image_resources import ImageResources, ResolutionInfo
from psdlite.psd.layer_and_mask import LayerRecord

logger = logging.getLogger(__name__)

PathOrFile = Union[BinaryIO, str, bytes, os.PathLike]


class PSDImage:
    """
    Layered raster document.

    The wrapped structure is available as ``_record`` for low-level access;
    edits made through either side are seen by both.
    """

    def __init__(self, data: Document):
        if not isinstance(data, Document):
            raise TypeError("Expected Document instance, got %s" % type(data).__name__)
        self._record = data
        self._layers = [layers.Layer(self, record) for record in data.layer_records]

    @classmethod
    def new(
        cls,
        mode: str,
        size: tuple[int, int],
        color: Union[int, Sequence[int]] = 0,
        depth: int = 8,
        compression: int = Compression.RAW,
    ) -> "PSDImage":
        """
        Creates a flat document without layers.

        :param mode: PIL mode naming the color mode, e.g. ``'RGB'`` or
            ``'L'``. A trailing ``'A'`` adds an alpha channel.
        :param size: (width, height) in pixels.
        :param color: fill value, one int for every channel or one per
            channel.
        :param depth: bits per sample, 8 or 16.
        :param compression: compression of the merged image on save.
        """
        color_mode = pil_io.get_color_mode(mode)
        alpha = mode.upper().endswith("A")
        document = Document.new(
            color_mode,
            size,
            channels=ColorMode.channels(color_mode, alpha),
            depth=depth,
            color=color,
            compression=compression,
        )
        return cls(document)

    @classmethod
    def frompil(
        cls, image: Image.Image, compression: int = Compression.RLE
    ) -> "PSDImage":
        """
        Creates a flat document whose merged image holds the pixels of a PIL
        image. Palette images keep their color table.

        :param image: :py:class:`PIL.Image.Image`.
        :param compression: see :py:class:`~psdlite.constants.Compression`.
        """
        color_mode = pil_io.get_color_mode(image.mode)
        planes, alpha = pil_io.convert_pil_to_planes(image, color_mode)
        if alpha is not None:
            planes.append(alpha)
        document = Document.new(
            color_mode, image.size, channels=len(planes), compression=compression
        )
        document.set_data(planes)
        if color_mode == ColorMode.INDEXED:
            document.color_mode_data = ColorModeData.frominterleaved(
                image.getpalette() or []
            )
        return cls(document)

    @classmethod
    def open(cls, fp: PathOrFile, **kwargs: Any) -> "PSDImage":
        """
        Reads a document from a path or a binary stream.

        :param fp: path or file-like object.
        :param encoding: charset of the stored names, default ``'macroman'``.
        """
        if isinstance(fp, (str, bytes, os.PathLike)):
            with open(fp, "rb") as f:
                return cls(Document.read(f, **kwargs))
        return cls(Document.read(fp, **kwargs))

    @classmethod
    def frombytes(cls, data: bytes, **kwargs: Any) -> "PSDImage":
        """Reads a document from an in-memory buffer."""
        with io.BytesIO(data) as f:
            return cls(Document.read(f, **kwargs))

    def save(self, fp: PathOrFile, mode: str = "wb", **kwargs: Any) -> None:
        """
        Writes the document.

        :param fp: path or file-like object.
        :param mode: open mode used for a path.
        :param encoding: charset of the stored names, default ``'macroman'``.
        """
        if isinstance(fp, (str, bytes, os.PathLike)):
            with open(fp, mode) as f:
                self._record.write(f, **kwargs)
        else:
            self._record.write(fp, **kwargs)

    def tobytes(self, **kwargs: Any) -> bytes:
        """Serializes the document to bytes."""
        return self._record.tobytes(**kwargs)

    def composite(self) -> Image.Image:
        """
        Renders the merged image as an opaque RGBA image.

        :raise ValueError: when the document has no pixels.
        """
        image = pil_io.convert_rgba_to_pil(composite_image(self._record), self.size)
        if image is None:
            raise ValueError("Cannot composite an empty %dx%d image" % self.size)
        return image

    def topil(self) -> Image.Image:
        """Alias of :py:meth:`composite`."""
        return self.composite()

    @property
    def width(self) -> int:
        return self._record.header.width

    @property
    def height(self) -> int:
        return self._record.header.height

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self._record.header.size

    @property
    def color_mode(self) -> ColorMode:
        return self._record.header.color_mode

    @property
    def channels(self) -> int:
        """Channel count of the merged image, alpha included."""
        return self._record.header.channels

    @property
    def depth(self) -> int:
        return self._record.header.depth

    @property
    def image_resources(self) -> ImageResources:
        return self._record.image_resources

    @property
    def resolution(self) -> Optional[ResolutionInfo]:
        return self._record.resolution

    def has_thumbnail(self) -> bool:
        return self._record.thumbnail is not None

    def thumbnail(self) -> Optional[Image.Image]:
        """
        Decodes the embedded thumbnail, or returns None when the document
        has none.
        """
        thumbnail = self._record.thumbnail
        if thumbnail is None:
            return None
        return thumbnail.topil()

    def __iter__(self) -> Iterator[layers.Layer]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def __getitem__(self, index: int) -> layers.Layer:
        return self._layers[index]

    def create_pixel_layer(
        self,
        image: Image.Image,
        name: str = "Layer",
        top: int = 0,
        left: int = 0,
        compression: int = Compression.RLE,
        opacity: int = 255,
        blend_mode: BlendMode = BlendMode.NORMAL,
    ) -> layers.Layer:
        """
        Adds a layer holding the pixels of a PIL image above the others.
        The image is converted to the document color mode and depth; its
        alpha, if any, becomes the transparency channel.

        Example::

            psdimage = PSDImage.new("RGB", (640, 480))
            layer = psdimage.create_pixel_layer(image, name="Stamp", top=8)

        :param image: :py:class:`PIL.Image.Image`.
        :param top: top edge in document coordinates.
        :param left: left edge in document coordinates.
        :param compression: compression of the channels on save.
        """
        planes, alpha = pil_io.convert_pil_to_planes(
            image, self.color_mode, self.depth
        )
        channels = dict(enumerate(planes))
        if alpha is not None:
            channels[ChannelID.TRANSPARENCY_MASK] = alpha
        width, height = image.size
        record = LayerRecord.new(
            name=name,
            bbox=(left, top, left + width, top + height),
            channels=channels,
            compression=compression,
            opacity=opacity,
            blend_mode=blend_mode,
        )
        self._record.add_layer(record)
        layer = layers.Layer(self, record)
        self._layers.append(layer)
        logger.debug("added %r" % layer)
        return layer

    def remove(self, layer: Union[layers.Layer, int]) -> layers.Layer:
        """Removes a layer, given either the layer or its index."""
        if isinstance(layer, int):
            layer = self._layers[layer]
        self._layers.remove(layer)
        self._record.remove_layer(layer._record)
        return layer

    def __repr__(self) -> str:
        return "%s(mode=%s size=%dx%d depth=%d channels=%d)" % (
            self.__class__.__name__,
            getattr(self.color_mode, "name", self.color_mode),
            self.width,
            self.height,
            self.depth,
            self.channels,
        )
