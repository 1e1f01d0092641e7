"""
Color mode data section.

Only indexed documents give this section a meaning: a 768-byte color table
stored plane by plane, 256 red values followed by 256 green and 256 blue
values. Duotone documents store an undocumented blob here, which is kept as
is.
"""

import logging
from typing import Any, BinaryIO, Iterable, TypeVar

from attrs import define

from psdlite.psd.base import ValueElement
from psdlite.psd.bin_utils import length_writer, read_length_block, write_bytes

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ColorModeData")

PALETTE_SIZE = 768


@define(repr=False, eq=False)
class ColorModeData(ValueElement):
    """
    Color mode data, opaque bytes.

    .. py:attribute:: value

        Raw section payload.
    """

    value: bytes = b""

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        value = read_length_block(fp)
        logger.debug("reading color mode data, len=%d" % len(value))
        return cls(value)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        logger.debug("writing color mode data, len=%d" % len(self.value))
        start_pos = fp.tell()
        with length_writer(fp):
            write_bytes(fp, self.value)
        return fp.tell() - start_pos

    @classmethod
    def frominterleaved(cls: type[T], palette: Iterable[int]) -> T:
        """
        Builds the color table from ``r, g, b, r, g, b, ...`` triplets such
        as :py:meth:`PIL.Image.Image.getpalette` returns. Missing entries are
        black.
        """
        data = bytes(palette)[:PALETTE_SIZE].ljust(PALETTE_SIZE, b"\x00")
        return cls(data[0::3] + data[1::3] + data[2::3])

    def palette(self) -> bytes:
        """
        Returns the planar 768-byte color table. A shorter table is
        zero-padded.
        """
        return bytes(self.value[:PALETTE_SIZE]).ljust(PALETTE_SIZE, b"\x00")

    def interleave(self) -> bytes:
        """Returns the color table as ``r, g, b`` triplets."""
        table = self.palette()
        return bytes(
            table[plane * 256 + index] for index in range(256) for plane in range(3)
        )
