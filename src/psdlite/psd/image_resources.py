"""
Image resources section structure. Image resources are used to store non-pixel
data associated with images, such as the resolution or the thumbnail.

The section is an ordered list of :py:class:`ImageResource` blocks. Most
blocks keep their payload as plain bytes; the following ids are parsed into
typed views through the ``TYPES`` registry:

- ``Resource.RESOLUTION_INFO`` (1005): :py:class:`ResolutionInfo`
- ``Resource.ALPHA_NAMES_PASCAL`` (1006): :py:class:`AlphaChannelNames`
- ``Resource.THUMBNAIL_RESOURCE_PS4`` (1033): :py:class:`ThumbnailResourceV4`
- ``Resource.THUMBNAIL_RESOURCE`` (1036): :py:class:`ThumbnailResource`

Example::

    from psdlite.constants import Resource

    resolution = document.image_resources.get_data(Resource.RESOLUTION_INFO)
"""

import logging
from typing import TYPE_CHECKING, Any, BinaryIO, Optional, TypeVar

from attrs import define, field

from psdlite.constants import (
    DimensionUnit,
    Resource,
    ResolutionUnit,
    ThumbnailFormat,
)
from psdlite.errors import FormatError
from psdlite.psd.base import BaseElement, ListElement
from psdlite.psd.bin_utils import (
    bounded_section,
    is_readable,
    length_writer,
    read_fmt,
    read_length_block,
    read_pascal_string,
    trimmed_repr,
    write_bytes,
    write_fmt,
    write_pascal_string,
)
from psdlite.registry import new_registry

if TYPE_CHECKING:
    from PIL import Image

logger = logging.getLogger(__name__)

T_ImageResources = TypeVar("T_ImageResources", bound="ImageResources")
T_ImageResource = TypeVar("T_ImageResource", bound="ImageResource")

TYPES, register = new_registry()


class ImageResources(ListElement):
    """
    Image resources section. Ordered list of :py:class:`.ImageResource`.
    """

    def get(self, key: int) -> Optional["ImageResource"]:
        """Returns the first resource with the given id, or None."""
        for item in self:
            if item.key == key:
                return item
        return None

    def get_data(self, key: int, default: Any = None) -> Any:
        """
        Get data from the image resources.

        Shortcut for the following::

            if key in image_resources:
                value = image_resources.get(key).data
        """
        item = self.get(key)
        if item is None:
            return default
        return item.data

    def set_data(self, key: int, data: Any, name: str = "") -> "ImageResource":
        """
        Replaces the first resource with the given id, or appends a new one.
        """
        item = self.get(key)
        if item is None:
            item = ImageResource(key=key, name=name, data=data)
            self.append(item)
        else:
            item.data = data
        return item

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    @classmethod
    def read(
        cls: type[T_ImageResources],
        fp: BinaryIO,
        encoding: str = "macroman",
        **kwargs: Any,
    ) -> T_ImageResources:
        length = read_fmt("I", fp)[0]
        logger.debug("reading image resources, len=%d" % length)
        items = []
        with bounded_section(fp, length, "image resources") as end_pos:
            while fp.tell() < end_pos:
                items.append(ImageResource.read(fp, encoding))
        return cls(items)

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        start_pos = fp.tell()
        with length_writer(fp):
            for item in self:
                item.write(fp, encoding)
        written = fp.tell() - start_pos
        logger.debug("writing image resources, len=%d" % (written - 4))
        return written


@define(repr=False)
class ImageResource(BaseElement):
    """
    Image resource block.

    .. py:attribute:: signature

        Binary signature, ``b'8BIM'`` or ``b'MeSa'``.

    .. py:attribute:: key

        Signed 16-bit identifier of the resource. See
        :py:class:`~psdlite.constants.Resource`.

    .. py:attribute:: name

        Resource name, usually empty.

    .. py:attribute:: data

        The resource data. A typed view for the registered ids, opaque bytes
        otherwise.
    """

    signature: bytes = field(default=b"8BIM", repr=False)
    key: int = 1000
    name: str = ""
    data: Any = field(default=b"", repr=trimmed_repr)

    @signature.validator
    def _validate_signature(self, attribute: Any, value: bytes) -> None:
        if value not in (b"8BIM", b"MeSa"):
            raise FormatError("Invalid image resource signature %r" % value)

    @classmethod
    def read(
        cls: type[T_ImageResource],
        fp: BinaryIO,
        encoding: str = "macroman",
        **kwargs: Any,
    ) -> T_ImageResource:
        signature, key = read_fmt("4sh", fp)
        if signature not in (b"8BIM", b"MeSa"):
            raise FormatError(
                "Invalid image resource signature %r at offset %d"
                % (signature, fp.tell() - 6)
            )
        try:
            key = Resource(key)
        except ValueError:
            logger.info("Unknown image resource %d" % (key))
        name = read_pascal_string(fp, encoding, padding=2)
        raw_data = read_length_block(fp)
        if fp.tell() % 2:
            fp.read(1)

        data: Any = raw_data
        if key in TYPES:
            try:
                data = TYPES[key].frombytes(raw_data, encoding=encoding)
            except (IOError, ValueError) as e:
                logger.warning(
                    "Failed to parse image resource %d, keeping raw bytes: %s"
                    % (key, e)
                )
        return cls(signature, key, name, data)

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        start_pos = fp.tell()
        write_fmt(fp, "4sh", self.signature, getattr(self.key, "value", self.key))
        write_pascal_string(fp, self.name, encoding, padding=2)
        with length_writer(fp):
            if hasattr(self.data, "write"):
                self.data.write(fp, encoding=encoding)
            else:
                write_bytes(fp, self.data)
        if fp.tell() % 2:
            write_fmt(fp, "x")
        return fp.tell() - start_pos


@register(Resource.RESOLUTION_INFO)
@define(repr=True)
class ResolutionInfo(BaseElement):
    """
    Resolution info structure.

    Resolutions are stored as 16.16 fixed-point numbers.

    .. py:attribute:: horizontal

        Horizontal resolution in pixels per ``horizontal_unit``.

    .. py:attribute:: horizontal_unit

        See :py:class:`~psdlite.constants.ResolutionUnit`.

    .. py:attribute:: width_unit

        See :py:class:`~psdlite.constants.DimensionUnit`.

    .. py:attribute:: vertical
    .. py:attribute:: vertical_unit
    .. py:attribute:: height_unit
    """

    _FORMAT = "I2HI2H"

    horizontal: float = 72.0
    horizontal_unit: int = ResolutionUnit.PIXELS_PER_INCH
    width_unit: int = DimensionUnit.INCH
    vertical: float = 72.0
    vertical_unit: int = ResolutionUnit.PIXELS_PER_INCH
    height_unit: int = DimensionUnit.INCH

    @classmethod
    def read(cls, fp: BinaryIO, **kwargs: Any) -> "ResolutionInfo":
        h_res, h_unit, w_unit, v_res, v_unit, h_unit2 = read_fmt(cls._FORMAT, fp)
        return cls(h_res / 65536.0, h_unit, w_unit, v_res / 65536.0, v_unit, h_unit2)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(
            fp,
            self._FORMAT,
            int(round(self.horizontal * 65536)),
            self.horizontal_unit,
            self.width_unit,
            int(round(self.vertical * 65536)),
            self.vertical_unit,
            self.height_unit,
        )


@register(Resource.ALPHA_NAMES_PASCAL)
class AlphaChannelNames(ListElement):
    """
    List of alpha channel names.

    Names are stored back to back as length-prefixed strings without
    alignment padding. Empty names are skipped.
    """

    @classmethod
    def read(
        cls, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any
    ) -> "AlphaChannelNames":
        items = []
        while is_readable(fp):
            name = read_pascal_string(fp, encoding, padding=1)
            if name:
                items.append(name)
        return cls(items)

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        return sum(write_pascal_string(fp, item, encoding, padding=1) for item in self)


@register(Resource.THUMBNAIL_RESOURCE)
@define(repr=True)
class ThumbnailResource(BaseElement):
    """
    Thumbnail resource structure.

    The embedded image is kept as opaque bytes; decoding it is left to an
    imaging library, see :py:func:`psdlite.api.pil_io.convert_thumbnail_to_pil`.

    .. py:attribute:: fmt

        See :py:class:`~psdlite.constants.ThumbnailFormat`.

    .. py:attribute:: width
    .. py:attribute:: height
    .. py:attribute:: row

        Padded row bytes.

    .. py:attribute:: total_size
    .. py:attribute:: bits
    .. py:attribute:: planes
    .. py:attribute:: data

        Embedded image bytes.
    """

    _RAW_MODE = "RGB"

    fmt: int = ThumbnailFormat.JPEG_RGB
    width: int = 0
    height: int = 0
    row: int = 0
    total_size: int = 0
    bits: int = 24
    planes: int = 1
    data: bytes = field(default=b"", repr=trimmed_repr)

    @classmethod
    def read(cls, fp: BinaryIO, **kwargs: Any) -> "ThumbnailResource":
        fmt, width, height, row, total_size, size, bits, planes = read_fmt("6I2H", fp)
        data = fp.read()
        if len(data) != size:
            logger.debug(
                "thumbnail declares %d bytes, payload has %d" % (size, len(data))
            )
        return cls(fmt, width, height, row, total_size, bits, planes, data)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        written = write_fmt(
            fp,
            "6I2H",
            self.fmt,
            self.width,
            self.height,
            self.row,
            self.total_size,
            len(self.data),
            self.bits,
            self.planes,
        )
        written += write_bytes(fp, self.data)
        return written

    def topil(self) -> "Image.Image":
        """
        Decodes the thumbnail with Pillow.

        :return: :py:class:`PIL.Image.Image`.
        """
        from psdlite.api.pil_io import convert_thumbnail_to_pil

        return convert_thumbnail_to_pil(self)


@register(Resource.THUMBNAIL_RESOURCE_PS4)
@define(repr=True)
class ThumbnailResourceV4(ThumbnailResource):
    """Legacy thumbnail resource, stored in BGR order."""

    _RAW_MODE = "BGR"
