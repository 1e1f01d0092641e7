"""
Image data section structure.

:py:class:`ImageData` corresponds to the last section of the file where the
merged image is stored. When the file does not contain layers, this is the
only place pixels are saved.
"""

import logging
from typing import Any, BinaryIO, Optional, Sequence, TypeVar, Union

from attrs import define, field

from psdlite.compression import decode_image, encode_image
from psdlite.constants import Compression
from psdlite.psd.base import BaseElement
from psdlite.psd.bin_utils import pack
from psdlite.psd.header import FileHeader

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ImageData")


@define(repr=False)
class ImageData(BaseElement):
    """
    Merged channel image data.

    .. py:attribute:: compression

        See :py:class:`~psdlite.constants.Compression`.

    .. py:attribute:: channels

        `list` of decoded planes, one per channel of the document.
    """

    compression: int = Compression.RAW
    channels: list[bytes] = field(factory=list)

    @classmethod
    def read(cls: type[T], fp: BinaryIO, header: FileHeader, **kwargs: Any) -> T:
        start_pos = fp.tell()
        compression, channels = decode_image(
            fp, header.channels, header.width, header.height, header.depth
        )
        logger.debug("  read image data, len=%d" % (fp.tell() - start_pos))
        return cls(compression, channels)

    def write(self, fp: BinaryIO, header: FileHeader, **kwargs: Any) -> int:
        if len(self.channels) != header.channels:
            raise ValueError(
                "Image data has %d planes but the header declares %d channels"
                % (len(self.channels), header.channels)
            )
        start_pos = fp.tell()
        written = encode_image(
            fp,
            self.channels,
            self.compression,
            header.width,
            header.height,
            header.depth,
        )
        logger.debug("  wrote image data, len=%d" % (fp.tell() - start_pos))
        return written

    def get_data(self) -> list[bytes]:
        """
        Get decoded data.

        :return: `list` of bytes corresponding each channel.
        """
        return list(self.channels)

    def set_data(
        self,
        data: Sequence[bytes],
        header: FileHeader,
        compression: Optional[int] = None,
    ) -> None:
        """
        Replaces the planes. Every plane must hold exactly
        :py:attr:`FileHeader.plane_size` bytes and there must be one plane
        per header channel.

        :param compression: compression used on save, unchanged when None.
        """
        if len(data) != header.channels:
            raise ValueError(
                "Expected %d planes, got %d" % (header.channels, len(data))
            )
        for index, plane in enumerate(data):
            if len(plane) != header.plane_size:
                raise ValueError(
                    "Plane %d has %d bytes, expected %d"
                    % (index, len(plane), header.plane_size)
                )
        self.channels = [bytes(plane) for plane in data]
        if compression is not None:
            self.compression = Compression(compression)

    @classmethod
    def new(
        cls: type[T],
        header: FileHeader,
        color: Union[int, Sequence[int]] = 0,
        compression: int = Compression.RAW,
    ) -> T:
        """
        Creates planes filled with a solid color.

        :param color: one sample value for all channels, or one per channel.
            16-bit documents take 16-bit values.
        """
        values = (int(color),) * header.channels if isinstance(color, int) else color
        if len(values) != header.channels:
            raise ValueError(
                "Fill color %r does not match %d channels" % (color, header.channels)
            )
        sample = "H" if header.depth == 16 else "B"
        count = header.width * header.height
        self = cls(compression=Compression(compression))
        self.set_data([pack(sample, value) * count for value in values], header)
        return self
