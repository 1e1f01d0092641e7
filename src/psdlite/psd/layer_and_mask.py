"""
Layer and mask data structures.

This module implements the binary structures of the "Layer and Mask
Information" section.

Key classes:

- :py:class:`LayerAndMaskInformation`: Top-level container for all layer data
- :py:class:`LayerInfo`: Layer records followed by their channel image data
- :py:class:`LayerRecord`: Single layer metadata (name, bounds, blend mode, etc.)
- :py:class:`Channel`: Channel directory entry and its decoded pixel plane
- :py:class:`MaskData`: Layer mask parameters
- :py:class:`AdjustmentInfo`: Opaque tagged block attached to a layer

The channel pixel data is not interleaved with the layer records. All the
records come first; then, for every layer in order, each channel other than
the user mask loads its block, and finally the user mask channel loads its
block sized to the mask rectangle. The writer emits the blocks in the same
order.

Every length-prefixed part of the section is read inside a bounded reader:
once its body is parsed, the stream is moved to the declared end whatever the
body consumed. A broken adjustment block therefore only truncates the list of
adjustment blocks of its own layer.

Example of reading layer metadata::

    from psdlite.psd import Document

    with open('file.psd', 'rb') as f:
        document = Document.read(f)

    for record in document.layer_and_mask_information.layer_info.layer_records:
        print(record.name, record.left, record.top, record.width, record.height)
"""

import io
import logging
from typing import Any, BinaryIO, Iterator, Optional, TypeVar, Union

from attrs import define, field, fields

from psdlite.compression import decode_channel, encode_channel
from psdlite.constants import BlendMode, ChannelID, Clipping, Compression
from psdlite.errors import FormatError, MalformedSubrecordError
from psdlite.psd.base import BaseElement
from psdlite.psd.bin_utils import (
    bounded_section,
    length_writer,
    read_fmt,
    read_length_block,
    read_pascal_string,
    trimmed_repr,
    write_bytes,
    write_fmt,
    write_length_block,
    write_pascal_string,
)
from psdlite.validators import range_

logger = logging.getLogger(__name__)

T_LayerAndMaskInformation = TypeVar(
    "T_LayerAndMaskInformation", bound="LayerAndMaskInformation"
)
T_LayerInfo = TypeVar("T_LayerInfo", bound="LayerInfo")
T_Channel = TypeVar("T_Channel", bound="Channel")
T_FlagByte = TypeVar("T_FlagByte", bound="FlagByte")
T_LayerRecord = TypeVar("T_LayerRecord", bound="LayerRecord")
T_MaskData = TypeVar("T_MaskData", bound="MaskData")
T_AdjustmentInfo = TypeVar("T_AdjustmentInfo", bound="AdjustmentInfo")


def _blend_mode(value: Any) -> Union[BlendMode, bytes]:
    try:
        return BlendMode(value)
    except ValueError:
        return value


@define(repr=False)
class LayerAndMaskInformation(BaseElement):
    """
    Layer and mask information section.

    .. py:attribute:: layer_info

        See :py:class:`.LayerInfo`.

    .. py:attribute:: global_layer_mask

        Global layer mask info, kept as opaque bytes.
    """

    layer_info: "LayerInfo" = field(factory=lambda: LayerInfo())
    global_layer_mask: bytes = field(default=b"", repr=trimmed_repr)

    @classmethod
    def read(
        cls: type[T_LayerAndMaskInformation],
        fp: BinaryIO,
        encoding: str = "macroman",
        depth: int = 8,
        **kwargs: Any,
    ) -> T_LayerAndMaskInformation:
        start_pos = fp.tell()
        length = read_fmt("I", fp)[0]
        logger.debug(
            "reading layer and mask info, len=%d, offset=%d" % (length, start_pos)
        )
        if length == 0:
            return cls()

        with bounded_section(fp, length, "layer and mask information") as end_pos:
            layer_info = LayerInfo.read(fp, encoding, depth)
            global_layer_mask = b""
            if fp.tell() + 4 <= end_pos:
                global_layer_mask = read_length_block(fp)
                logger.debug(
                    "reading global layer mask info, len=%d" % len(global_layer_mask)
                )
        return cls(layer_info, global_layer_mask)

    def write(
        self,
        fp: BinaryIO,
        encoding: str = "macroman",
        depth: int = 8,
        **kwargs: Any,
    ) -> int:
        start_pos = fp.tell()
        with length_writer(fp):
            self.layer_info.write(fp, encoding, depth)
            write_length_block(fp, lambda f: write_bytes(f, self.global_layer_mask))
        written = fp.tell() - start_pos
        logger.debug("writing layer and mask info, len=%d" % (written - 4))
        return written


@define(repr=False)
class LayerInfo(BaseElement):
    """
    High-level organization of the layer information.

    .. py:attribute:: layer_records

        Information about each layer, bottom-most first. See
        :py:class:`.LayerRecord`.

    .. py:attribute:: merged_alpha

        Whether the layer count is stored as a negative number, meaning that
        the first alpha channel of the merged image contains the transparency
        data for the merged result.
    """

    layer_records: list["LayerRecord"] = field(factory=list)
    merged_alpha: bool = False

    @property
    def layer_count(self) -> int:
        """Layer count as stored in the file."""
        count = len(self.layer_records)
        return -count if self.merged_alpha else count

    @classmethod
    def read(
        cls: type[T_LayerInfo],
        fp: BinaryIO,
        encoding: str = "macroman",
        depth: int = 8,
        **kwargs: Any,
    ) -> T_LayerInfo:
        length = read_fmt("I", fp)[0]
        logger.debug("reading layer info, len=%d" % length)
        if length == 0:
            return cls()

        with bounded_section(fp, length, "layer info"):
            self = cls._read_body(fp, encoding, depth)
        return self

    @classmethod
    def _read_body(
        cls: type[T_LayerInfo], fp: BinaryIO, encoding: str, depth: int
    ) -> T_LayerInfo:
        start_pos = fp.tell()
        layer_count = read_fmt("h", fp)[0]
        layer_records = [
            LayerRecord.read(fp, encoding) for _ in range(abs(layer_count))
        ]
        logger.debug("  read layer records, len=%d" % (fp.tell() - start_pos))

        start_pos = fp.tell()
        for record in layer_records:
            for channel, width, height in record._iter_channel_data():
                channel.load_pixel_data(fp, width, height, depth)
        logger.debug("  read channel image data, len=%d" % (fp.tell() - start_pos))
        return cls(layer_records=layer_records, merged_alpha=layer_count < 0)

    def write(
        self,
        fp: BinaryIO,
        encoding: str = "macroman",
        depth: int = 8,
        **kwargs: Any,
    ) -> int:
        if not self.layer_records:
            return write_fmt(fp, "I", 0)

        start_pos = fp.tell()
        with length_writer(fp):
            self._write_body(fp, encoding, depth)
        written = fp.tell() - start_pos
        logger.debug("writing layer info, len=%d" % (written - 4))
        return written

    def _write_body(self, fp: BinaryIO, encoding: str, depth: int) -> None:
        # Channel lengths go into the records, so encode the pixels first.
        blocks = [
            [
                channel.encode(width, height, depth)
                for channel, width, height in record._iter_channel_data()
            ]
            for record in self.layer_records
        ]

        start_pos = fp.tell()
        write_fmt(fp, "h", self.layer_count)
        for record in self.layer_records:
            record.write(fp, encoding)
        logger.debug("  wrote layer records, len=%d" % (fp.tell() - start_pos))

        start_pos = fp.tell()
        for layer_blocks in blocks:
            for block in layer_blocks:
                write_bytes(fp, block)
        logger.debug("  wrote channel image data, len=%d" % (fp.tell() - start_pos))

        if fp.tell() % 2:
            write_fmt(fp, "x")


@define(repr=False)
class Channel(BaseElement):
    """
    Channel of a layer.

    The directory entry (``id`` and ``length``) is part of the layer record,
    while the pixel block is loaded later by
    :py:meth:`load_pixel_data`.

    .. py:attribute:: id

        Channel ID: 0 = red, 1 = green, etc.; -1 = transparency mask; -2 =
        user supplied layer mask. See
        :py:class:`~psdlite.constants.ChannelID`.

    .. py:attribute:: length

        Byte length of the compressed pixel block, including the compression
        mode. Updated on write.

    .. py:attribute:: compression

        Compression mode. See :py:class:`~psdlite.constants.Compression`.

    .. py:attribute:: data

        Decoded pixel plane.
    """

    id: int = ChannelID.CHANNEL_0
    length: int = 0
    compression: int = Compression.RAW
    data: bytes = field(default=b"", repr=trimmed_repr)

    @classmethod
    def read(cls: type[T_Channel], fp: BinaryIO, **kwargs: Any) -> T_Channel:
        channel_id, length = read_fmt("hI", fp)
        try:
            channel_id = ChannelID(channel_id)
        except ValueError:
            pass
        return cls(id=channel_id, length=length)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, "hI", self.id, self.length)

    def load_pixel_data(self, fp: BinaryIO, width: int, height: int, depth: int) -> None:
        """Read the pixel block of ``length`` bytes and decode it.

        :param fp: file-like object positioned at the block.
        :param width: width of the plane.
        :param height: height of the plane.
        :param depth: bit depth of the pixel.
        """
        self.compression, self.data = decode_channel(
            fp, self.length, width, height, depth
        )

    def encode(self, width: int, height: int, depth: int) -> bytes:
        """Encode the pixel block and update ``length``.

        :return: compressed block bytes, including the compression mode.
        """
        with io.BytesIO() as f:
            encode_channel(f, self.data, self.compression, width, height, depth)
            block = f.getvalue()
        self.length = len(block)
        return block

    def set_data(self, data: bytes, compression: Optional[int] = None) -> None:
        """Set raw pixel data.

        :param data: raw plane bytes.
        :param compression: compression mode used on write, see
            :py:class:`~psdlite.constants.Compression`.
        """
        self.data = bytes(data)
        if compression is not None:
            self.compression = Compression(compression)


class FlagByte(BaseElement):
    """
    Base of the single-byte flag sets. Subclasses declare eight boolean
    attrs fields; the ``i``-th field maps to bit ``i``. Fields named in
    ``_INVERTED`` are stored negated.
    """

    _INVERTED: tuple[str, ...] = ()

    @classmethod
    def read(cls: type[T_FlagByte], fp: BinaryIO, **kwargs: Any) -> T_FlagByte:
        value = read_fmt("B", fp)[0]
        bits = {}
        for index, item in enumerate(fields(cls)):  # type: ignore[arg-type]
            bits[item.name] = bool(value & (1 << index)) != (
                item.name in cls._INVERTED
            )
        return cls(**bits)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        value = 0
        for index, item in enumerate(fields(self.__class__)):  # type: ignore[arg-type]
            if bool(getattr(self, item.name)) != (item.name in self._INVERTED):
                value |= 1 << index
        return write_fmt(fp, "B", value)


@define(repr=False)
class LayerFlags(FlagByte):
    """
    Layer flags. Bit 1 is stored as "hidden" and read as :py:attr:`visible`.

    .. py:attribute:: transparency_protected
    .. py:attribute:: visible
    .. py:attribute:: pixel_data_irrelevant

        Set when the pixels do not contribute to the document appearance.
    """

    _INVERTED = ("visible",)

    transparency_protected: bool = False
    visible: bool = True
    obsolete: bool = field(default=False, repr=False)
    photoshop_v5_later: bool = field(default=True, repr=False)
    pixel_data_irrelevant: bool = False
    bit_5: bool = field(default=False, repr=False)
    bit_6: bool = field(default=False, repr=False)
    bit_7: bool = field(default=False, repr=False)


@define(repr=False)
class LayerRecord(BaseElement):
    """
    Layer record.

    .. py:attribute:: top

        Top position.

    .. py:attribute:: left

        Left position.

    .. py:attribute:: bottom

        Bottom position.

    .. py:attribute:: right

        Right position.

    .. py:attribute:: channels

        List of :py:class:`.Channel`.

    .. py:attribute:: signature

        Blend mode signature ``b'8BIM'``.

    .. py:attribute:: blend_mode

        Blend mode key. See :py:class:`~psdlite.constants.BlendMode`. Unknown
        keys are kept as bytes.

    .. py:attribute:: opacity

        Opacity, 0 = transparent, 255 = opaque.

    .. py:attribute:: clipping

        Clipping, 0 = base, non-zero = non-base. See
        :py:class:`~psdlite.constants.Clipping`.

    .. py:attribute:: flags

        See :py:class:`.LayerFlags`.

    .. py:attribute:: mask

        :py:class:`.MaskData` or None.

    .. py:attribute:: blending_ranges

        Layer blending ranges, kept as opaque bytes.

    .. py:attribute:: name

        Layer name.

    .. py:attribute:: adjustments

        List of :py:class:`.AdjustmentInfo`.
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    channels: list[Channel] = field(factory=list)
    signature: bytes = field(default=b"8BIM", repr=False)
    blend_mode: Union[BlendMode, bytes] = field(
        default=BlendMode.NORMAL, converter=_blend_mode
    )
    opacity: int = field(default=255, validator=range_(0, 255))
    clipping: int = Clipping.BASE
    flags: LayerFlags = field(factory=LayerFlags)
    mask: Optional["MaskData"] = None
    blending_ranges: bytes = field(default=b"", repr=trimmed_repr)
    name: str = ""
    adjustments: list["AdjustmentInfo"] = field(factory=list)

    @signature.validator
    def _validate_signature(self, attribute: Any, value: bytes) -> None:
        if value != b"8BIM":
            raise FormatError("Invalid layer blend signature %r" % value)

    @classmethod
    def new(
        cls: type[T_LayerRecord],
        name: str = "Layer",
        bbox: tuple[int, int, int, int] = (0, 0, 0, 0),
        channels: Optional[dict[int, bytes]] = None,
        compression: int = Compression.RAW,
        **kwargs: Any,
    ) -> T_LayerRecord:
        """
        Create a new layer record.

        :param name: layer name.
        :param bbox: (left, top, right, bottom) tuple.
        :param channels: dict of channel id to raw plane bytes.
        :param compression: compression mode used on write.
        :param kwargs: other fields, e.g. ``opacity`` or ``blend_mode``.
        """
        left, top, right, bottom = bbox
        return cls(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            channels=[
                Channel(id=key, compression=compression, data=bytes(value))
                for key, value in (channels or {}).items()
            ],
            name=name,
            **kwargs,
        )

    @classmethod
    def read(
        cls: type[T_LayerRecord],
        fp: BinaryIO,
        encoding: str = "macroman",
        **kwargs: Any,
    ) -> T_LayerRecord:
        start_pos = fp.tell()
        top, left, bottom, right, num_channels = read_fmt("4iH", fp)
        channels = [Channel.read(fp) for _ in range(num_channels)]
        signature, blend_mode, opacity, clipping = read_fmt("4s4sBB", fp)
        if signature != b"8BIM":
            raise FormatError(
                "Invalid layer blend signature %r at offset %d"
                % (signature, fp.tell() - 10)
            )
        flags = LayerFlags.read(fp)
        read_fmt("x", fp)

        length = read_fmt("I", fp)[0]
        with bounded_section(fp, length, "layer extra data") as end_pos:
            mask = MaskData.read(fp)
            blending_ranges = read_length_block(fp)
            name_pos = fp.tell()
            name = read_pascal_string(fp, encoding, padding=2)
            fp.read((fp.tell() - name_pos) % 4)
            adjustments = cls._read_adjustments(fp, end_pos, name)
        logger.debug("  read layer record, len=%d" % (fp.tell() - start_pos))

        return cls(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            channels=channels,
            signature=signature,
            blend_mode=blend_mode,
            opacity=opacity,
            clipping=clipping,
            flags=flags,
            mask=mask,
            blending_ranges=blending_ranges,
            name=name,
            adjustments=adjustments,
        )

    @staticmethod
    def _read_adjustments(
        fp: BinaryIO, end_pos: int, name: str
    ) -> list["AdjustmentInfo"]:
        adjustments = []
        while fp.tell() < end_pos:
            try:
                adjustments.append(AdjustmentInfo.read(fp, end_pos=end_pos))
            except (MalformedSubrecordError, IOError) as e:
                logger.warning(
                    "%s in layer %r, skipping %d remaining bytes"
                    % (e, name, end_pos - fp.tell())
                )
                break
        return adjustments

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        start_pos = fp.tell()
        write_fmt(
            fp,
            "4iH",
            self.top,
            self.left,
            self.bottom,
            self.right,
            len(self.channels),
        )
        for channel in self.channels:
            channel.write(fp)
        write_fmt(
            fp,
            "4s4sBB",
            self.signature,
            getattr(self.blend_mode, "value", self.blend_mode),
            self.opacity,
            self.clipping,
        )
        self.flags.write(fp)
        write_fmt(fp, "x")

        with length_writer(fp):
            if self.mask is not None:
                self.mask.write(fp)
            else:
                write_fmt(fp, "I", 0)
            write_length_block(fp, lambda f: write_bytes(f, self.blending_ranges))
            name_pos = fp.tell()
            write_pascal_string(fp, self.name, encoding, padding=2)
            write_bytes(fp, b"\x00" * ((fp.tell() - name_pos) % 4))
            for item in self.adjustments:
                item.write(fp)
        logger.debug("  wrote layer record, len=%d" % (fp.tell() - start_pos))
        return fp.tell() - start_pos

    def _iter_channel_data(self) -> Iterator[tuple[Channel, int, int]]:
        """
        Channels in pixel data order, with the size of their plane: the color
        and transparency channels first, then the user mask.
        """
        for channel in self.channels:
            if channel.id != ChannelID.USER_LAYER_MASK:
                yield channel, self.width, self.height
        for channel in self.channels:
            if channel.id == ChannelID.USER_LAYER_MASK:
                if self.mask is None:
                    yield channel, 0, 0
                else:
                    yield channel, self.mask.width, self.mask.height

    def get_channel(self, channel_id: int) -> Optional[Channel]:
        """Returns the channel with the given id, or None."""
        for channel in self.channels:
            if channel.id == channel_id:
                return channel
        return None

    def set_channel(
        self, channel_id: int, data: bytes, compression: Optional[int] = None
    ) -> Channel:
        """Sets the pixel data of a channel, adding the channel if needed."""
        channel = self.get_channel(channel_id)
        if channel is None:
            channel = Channel(id=channel_id)
            self.channels.append(channel)
        channel.set_data(data, compression)
        return channel

    def set_mask(
        self,
        data: bytes,
        bbox: tuple[int, int, int, int],
        background_color: int = 0,
        compression: Optional[int] = None,
        **kwargs: Any,
    ) -> "MaskData":
        """
        Set the user mask.

        :param data: raw mask plane bytes, sized to the mask rectangle.
        :param bbox: (left, top, right, bottom) tuple of the mask.
        :param background_color: default color outside the mask, 0 or 255.
        :param kwargs: :py:class:`.MaskFlags` fields.
        """
        left, top, right, bottom = bbox
        self.mask = MaskData(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            background_color=background_color,
            flags=MaskFlags(**kwargs),
        )
        self.set_channel(ChannelID.USER_LAYER_MASK, data, compression)
        return self.mask

    @property
    def mask_data(self) -> Optional[bytes]:
        """Decoded user mask plane, or None."""
        if self.mask is None:
            return None
        channel = self.get_channel(ChannelID.USER_LAYER_MASK)
        return channel.data if channel is not None else None

    @property
    def width(self) -> int:
        """Width of the layer."""
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        """Height of the layer."""
        return max(self.bottom - self.top, 0)


@define(repr=False)
class MaskFlags(FlagByte):
    """
    Mask flags, one bit per field from the least significant bit.

    .. py:attribute:: pos_relative_to_layer

        The mask rectangle is relative to the layer origin.

    .. py:attribute:: mask_disabled
    .. py:attribute:: invert_mask

        Obsolete inversion flag, stored as is.
    """

    pos_relative_to_layer: bool = False
    mask_disabled: bool = False
    invert_mask: bool = False
    user_mask_from_render: bool = field(default=False, repr=False)
    parameters_applied: bool = field(default=False, repr=False)
    bit_5: bool = field(default=False, repr=False)
    bit_6: bool = field(default=False, repr=False)
    bit_7: bool = field(default=False, repr=False)


@define(repr=False)
class MaskData(BaseElement):
    """
    Mask data.

    A zero-length block means the layer has no mask, and reads as None.

    .. py:attribute:: top

        Top position.

    .. py:attribute:: left

        Left position.

    .. py:attribute:: bottom

        Bottom position.

    .. py:attribute:: right

        Right position.

    .. py:attribute:: background_color

        Default color. 0 or 255.

    .. py:attribute:: flags

        See :py:class:`.MaskFlags`.
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    background_color: int = 0
    flags: MaskFlags = field(factory=MaskFlags)

    @classmethod
    def read(cls: type[T_MaskData], fp: BinaryIO, **kwargs: Any) -> Optional[T_MaskData]:
        length = read_fmt("I", fp)[0]
        if length == 0:
            return None

        with bounded_section(fp, length, "layer mask"):
            top, left, bottom, right, background_color = read_fmt("4iB", fp)
            flags = MaskFlags.read(fp)
            if length == 36:
                # Duplicate flags, background and rectangle of the real user
                # mask; not kept.
                MaskFlags.read(fp)
                read_fmt("B4i", fp)
        return cls(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            background_color=background_color,
            flags=flags,
        )

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        start_pos = fp.tell()
        with length_writer(fp):
            write_fmt(
                fp,
                "4iB",
                self.top,
                self.left,
                self.bottom,
                self.right,
                self.background_color,
            )
            self.flags.write(fp)
            write_fmt(fp, "2x")
        return fp.tell() - start_pos

    @property
    def width(self) -> int:
        """Width of the mask."""
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        """Height of the mask."""
        return max(self.bottom - self.top, 0)


@define(repr=False)
class AdjustmentInfo(BaseElement):
    """
    Adjustment layer info block, kept as opaque bytes.

    .. py:attribute:: key

        4-byte block key, e.g. ``b'luni'``.

    .. py:attribute:: data

        Block payload.
    """

    key: bytes = b"    "
    data: bytes = field(default=b"", repr=trimmed_repr)

    @classmethod
    def read(
        cls: type[T_AdjustmentInfo], fp: BinaryIO,
        end_pos: Optional[int] = None,
        **kwargs: Any,
    ) -> T_AdjustmentInfo:
        """
        :param end_pos: end of the enclosing extra data. A block reaching past
            it raises :py:class:`~psdlite.errors.MalformedSubrecordError`.
        """
        start_pos = fp.tell()
        signature, key = read_fmt("4s4s", fp)
        if signature != b"8BIM":
            raise MalformedSubrecordError(
                "Invalid adjustment info signature %r at offset %d"
                % (signature, start_pos)
            )
        length = read_fmt("I", fp)[0]
        if end_pos is not None and fp.tell() + length > end_pos:
            raise MalformedSubrecordError(
                "Adjustment info %r at offset %d declares %d bytes past the "
                "end of the layer extra data" % (key, start_pos, length)
            )
        data = fp.read(length)
        if len(data) != length:
            raise IOError(
                "Unexpected end of stream at offset %d: adjustment info of %d "
                "bytes has only %d" % (fp.tell(), length, len(data))
            )
        return cls(key=key, data=data)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        written = write_fmt(fp, "4s4s", b"8BIM", self.key)
        written += write_length_block(fp, lambda f: write_bytes(f, self.data))
        return written
