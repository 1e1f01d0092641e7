"""
Document structure module.

This module contains the :py:class:`Document` class that represents the
binary structure of a whole file. Sections are read in file order; each
length-prefixed section is repositioned to its declared end once parsed.
"""

import logging
from typing import Any, BinaryIO, Optional, Sequence, TypeVar, Union

from attrs import define, field

from psdlite.constants import ColorMode, Compression, Resource
from psdlite.psd.base import BaseElement
from psdlite.psd.color_mode_data import ColorModeData
from psdlite.psd.header import FileHeader
from psdlite.psd.image_data import ImageData
from psdlite.psd.image_resources import (
    ImageResources,
    ResolutionInfo,
    ThumbnailResource,
)
from psdlite.psd.layer_and_mask import LayerAndMaskInformation, LayerRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Document")


@define(repr=False)
class Document(BaseElement):
    """
    Low-level document structure.

    Example::

        from psdlite.psd import Document

        with open(input_file, 'rb') as f:
            document = Document.read(f)

        with open(output_file, 'wb') as f:
            document.write(f)


    .. py:attribute:: header

        See :py:class:`.FileHeader`.

    .. py:attribute:: color_mode_data

        See :py:class:`.ColorModeData`.

    .. py:attribute:: image_resources

        See :py:class:`.ImageResources`.

    .. py:attribute:: layer_and_mask_information

        See :py:class:`.LayerAndMaskInformation`.

    .. py:attribute:: image_data

        See :py:class:`.ImageData`.
    """

    header: FileHeader = field(factory=FileHeader)
    color_mode_data: ColorModeData = field(factory=ColorModeData)
    image_resources: ImageResources = field(factory=ImageResources)
    layer_and_mask_information: LayerAndMaskInformation = field(
        factory=LayerAndMaskInformation
    )
    image_data: ImageData = field(factory=ImageData)

    @classmethod
    def read(
        cls: type[T], fp: BinaryIO, encoding: str = "macroman", **kwargs: Any
    ) -> T:
        header = FileHeader.read(fp)
        logger.debug("read %s" % header)
        return cls(
            header,
            ColorModeData.read(fp),
            ImageResources.read(fp, encoding),
            LayerAndMaskInformation.read(fp, encoding, header.depth),
            ImageData.read(fp, header),
        )

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        logger.debug("writing %s" % self.header)
        written = self.header.write(fp)
        written += self.color_mode_data.write(fp)
        written += self.image_resources.write(fp, encoding)
        written += self.layer_and_mask_information.write(
            fp, encoding, self.header.depth
        )
        written += self.image_data.write(fp, self.header)
        return written

    @classmethod
    def new(
        cls: type[T],
        color_mode: ColorMode,
        size: tuple[int, int],
        channels: Optional[int] = None,
        depth: int = 8,
        color: Union[int, Sequence[int]] = 0,
        compression: int = Compression.RAW,
    ) -> T:
        """
        Create a new document with a flat merged image and no layers.

        :param color_mode: See :py:class:`~psdlite.constants.ColorMode`.
        :param size: A tuple containing (width, height) in pixels.
        :param channels: number of channels, defaults to the color channels
            of the mode.
        :param depth: bit depth of the pixel.
        :param color: fill value, int or one per channel.
        :param compression: compression type of the merged image.
        """
        width, height = size
        header = FileHeader(
            channels=channels or ColorMode.channels(color_mode),
            height=height,
            width=width,
            depth=depth,
            color_mode=color_mode,
        )
        return cls(
            header=header,
            image_data=ImageData.new(header, color=color, compression=compression),
        )

    @property
    def layer_records(self) -> list[LayerRecord]:
        """Layer records, bottom-most first."""
        return self.layer_and_mask_information.layer_info.layer_records

    @property
    def merged_alpha(self) -> bool:
        """Whether the merged image carries its own transparency."""
        return self.layer_and_mask_information.layer_info.merged_alpha

    @merged_alpha.setter
    def merged_alpha(self, value: bool) -> None:
        self.layer_and_mask_information.layer_info.merged_alpha = bool(value)

    @property
    def global_layer_mask(self) -> bytes:
        """Global layer mask info as opaque bytes."""
        return self.layer_and_mask_information.global_layer_mask

    def add_layer(
        self, record: LayerRecord, index: Optional[int] = None
    ) -> LayerRecord:
        """
        Add a layer record.

        :param record: See :py:class:`~psdlite.psd.layer_and_mask.LayerRecord`.
        :param index: position in the bottom-to-top list, default is the top.
        """
        if index is None:
            self.layer_records.append(record)
        else:
            self.layer_records.insert(index, record)
        return record

    def remove_layer(self, record: Union[LayerRecord, int]) -> LayerRecord:
        """
        Remove a layer record, given either the record or its index.
        """
        if isinstance(record, int):
            return self.layer_records.pop(record)
        self.layer_records.remove(record)
        return record

    def set_data(
        self, data: Sequence[bytes], compression: Optional[int] = None
    ) -> None:
        """Replace the merged image planes."""
        self.image_data.set_data(data, self.header, compression)

    @property
    def resolution(self) -> Optional[ResolutionInfo]:
        """Resolution info resource, or None."""
        data = self.image_resources.get_data(Resource.RESOLUTION_INFO)
        return data if isinstance(data, ResolutionInfo) else None

    def set_resolution(self, horizontal: float, vertical: Optional[float] = None) -> None:
        """Set the resolution in pixels per inch."""
        self.image_resources.set_data(
            Resource.RESOLUTION_INFO,
            ResolutionInfo(
                horizontal=horizontal,
                vertical=horizontal if vertical is None else vertical,
            ),
        )

    @property
    def thumbnail(self) -> Optional[ThumbnailResource]:
        """Thumbnail resource, or None."""
        for key in (Resource.THUMBNAIL_RESOURCE, Resource.THUMBNAIL_RESOURCE_PS4):
            data = self.image_resources.get_data(key)
            if isinstance(data, ThumbnailResource):
                return data
        return None
