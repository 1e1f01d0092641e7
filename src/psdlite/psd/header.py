"""
File header section, the fixed 26 bytes at the start of every document.
"""

import logging
from typing import Any, BinaryIO, TypeVar

from attrs import define, field

from psdlite.compression import bytes_per_row
from psdlite.constants import ColorMode
from psdlite.errors import FormatError
from psdlite.psd.base import BaseElement
from psdlite.psd.bin_utils import read_fmt, write_fmt
from psdlite.validators import in_, range_

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="FileHeader")


def _color_mode(value: int) -> Any:
    try:
        return ColorMode(value)
    except ValueError:
        return value


@define(repr=True)
class FileHeader(BaseElement):
    """
    Document header.

    Fields are validated on construction; a header read from a stream with
    an out-of-range field raises :py:class:`~psdlite.errors.FormatError`.

    Example::

        header = FileHeader(channels=3, width=640, height=480)

    .. py:attribute:: signature

        Always ``b'8BPS'``.

    .. py:attribute:: version

        Always 1.

    .. py:attribute:: channels

        Number of channels of the merged image, alpha included, in [1, 24].

    .. py:attribute:: height
    .. py:attribute:: width

        Dimensions in pixels, each in [0, 30000].

    .. py:attribute:: depth

        Bits per sample: 1, 8 or 16.

    .. py:attribute:: color_mode

        See :py:class:`~psdlite.constants.ColorMode`.
    """

    # signature, version, 6 reserved bytes, channels, rows, columns, depth, mode
    _FORMAT = "4sH6xHIIHH"

    signature: bytes = field(default=b"8BPS", repr=False)
    version: int = field(default=1, validator=in_((1,)))
    channels: int = field(default=4, validator=range_(1, 24))
    height: int = field(default=64, validator=range_(0, 30000))
    width: int = field(default=64, validator=range_(0, 30000))
    depth: int = field(default=8, validator=in_((1, 8, 16)))
    color_mode: ColorMode = field(
        default=ColorMode.RGB, converter=_color_mode, validator=in_(ColorMode)
    )

    @signature.validator
    def _validate_signature(self, attribute: Any, value: bytes) -> None:
        if value != b"8BPS":
            raise FormatError("Invalid file signature %r, expected b'8BPS'" % value)

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        signature, version, channels, height, width, depth, color_mode = read_fmt(
            cls._FORMAT, fp
        )
        return cls(signature, version, channels, height, width, depth, color_mode)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(
            fp,
            self._FORMAT,
            self.signature,
            self.version,
            self.channels,
            self.height,
            self.width,
            self.depth,
            self.color_mode,
        )

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def plane_size(self) -> int:
        """Byte size of one decoded plane of the merged image."""
        return bytes_per_row(self.width, self.depth) * self.height
