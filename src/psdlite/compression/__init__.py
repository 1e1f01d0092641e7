"""
Channel plane codec.

Pixel planes are stored either uncompressed (``Compression.RAW``) or as
PackBits rows (``Compression.RLE``) preceded by a table of row byte counts.
ZIP compressed planes are not decoded: they read as zeros and a warning is
logged.

Layer channels and the merged image share the row codec but lay out their
data differently:

- a layer channel is one length-bounded block, starting with its own
  compression mode and, for RLE, its own row table;
- the merged image has a single compression mode and, for RLE, one row table
  covering all channels, followed by every channel's rows in turn.

Key functions:

- :py:func:`decode_channel` / :py:func:`encode_channel`: layer channel block
- :py:func:`decode_image` / :py:func:`encode_image`: merged image data

The row table is never used to bound decoding; every row is decoded by the
RLE packet stream itself. On write, the table is filled with placeholders,
then patched once the rows have been encoded.
"""

import logging
from typing import BinaryIO, Sequence

from psdlite.compression import rle
from psdlite.constants import Compression
from psdlite.psd.bin_utils import (
    bounded_section,
    is_readable,
    read_fmt,
    write_bytes,
    write_fmt,
)

logger = logging.getLogger(__name__)


def bytes_per_row(width: int, depth: int) -> int:
    """Byte size of a row. 1-bit planes are stored one byte per sample."""
    if depth == 16:
        return width * 2
    return width


def fit_plane(data: bytes, size: int) -> bytes:
    """Zero-pads or truncates ``data`` to ``size`` bytes."""
    if len(data) == size:
        return bytes(data)
    if len(data) > size:
        return bytes(data[:size])
    return bytes(data) + b"\x00" * (size - len(data))


def decode_channel(
    fp: BinaryIO, length: int, width: int, height: int, depth: int
) -> tuple[int, bytes]:
    """Decode a layer channel block of ``length`` bytes.

    :param fp: file-like object positioned at the block.
    :param length: declared byte length of the block, including the
        compression mode.
    :param width: width of the plane.
    :param height: height of the plane.
    :param depth: bit depth of the pixel.
    :return: tuple of the compression mode and the decoded plane.
    """
    row_size = bytes_per_row(width, depth)
    size = row_size * height
    with bounded_section(fp, length, "channel data"):
        if length < 2:
            return Compression.RAW, bytes(size)

        compression = read_fmt("H", fp)[0]
        if compression == Compression.RAW:
            data = fit_plane(fp.read(min(size, length - 2)), size)
        elif compression == Compression.RLE:
            read_fmt("%dH" % height, fp)
            plane = bytearray(size)
            for row in range(height):
                rle.decode_row(fp, plane, row * row_size, row_size)
            data = bytes(plane)
        else:
            logger.warning(
                "Unsupported channel compression %d, filling %dx%d plane with zeros"
                % (compression, width, height)
            )
            data = bytes(size)
    return _to_compression(compression), data


def encode_channel(
    fp: BinaryIO,
    data: bytes,
    compression: int,
    width: int,
    height: int,
    depth: int,
) -> int:
    """Encode a layer channel block.

    :param fp: file-like object.
    :param data: raw plane bytes. Resized to the plane size when needed.
    :param compression: compression mode. Anything other than RLE is written
        as RAW.
    :param width: width of the plane.
    :param height: height of the plane.
    :param depth: bit depth of the pixel.
    :return: written byte size.
    """
    row_size = bytes_per_row(width, depth)
    data = fit_plane(data, row_size * height)
    compression = _writable_compression(compression)
    written = write_fmt(fp, "H", compression)
    if compression == Compression.RLE:
        written += _write_rle_rows(fp, [data], row_size, height)
    else:
        written += write_bytes(fp, data)
    return written


def decode_image(
    fp: BinaryIO, channels: int, width: int, height: int, depth: int
) -> tuple[int, list[bytes]]:
    """Decode the merged image data.

    :param fp: file-like object positioned at the compression mode.
    :param channels: number of channels in the image.
    :param width: width of the image.
    :param height: height of the image.
    :param depth: bit depth of the pixel.
    :return: tuple of the compression mode and the list of decoded planes.
    """
    row_size = bytes_per_row(width, depth)
    size = row_size * height
    if not is_readable(fp, 2):
        logger.debug("  no image data, using empty planes")
        return Compression.RAW, [bytes(size) for _ in range(channels)]

    compression = read_fmt("H", fp)[0]
    if compression == Compression.RAW:
        planes = [fit_plane(fp.read(size), size) for _ in range(channels)]
    elif compression == Compression.RLE:
        fp.seek(height * channels * 2, 1)
        planes = []
        for _ in range(channels):
            plane = bytearray(size)
            for row in range(height):
                rle.decode_row(fp, plane, row * row_size, row_size)
            planes.append(bytes(plane))
    else:
        logger.warning(
            "Unsupported image data compression %d, filling planes with zeros"
            % compression
        )
        planes = [bytes(size) for _ in range(channels)]
    return _to_compression(compression), planes


def encode_image(
    fp: BinaryIO,
    planes: Sequence[bytes],
    compression: int,
    width: int,
    height: int,
    depth: int,
) -> int:
    """Encode the merged image data.

    :param fp: file-like object.
    :param planes: list of raw plane bytes, one per channel.
    :param compression: compression mode.
    :param width: width of the image.
    :param height: height of the image.
    :param depth: bit depth of the pixel.
    :return: written byte size.
    """
    row_size = bytes_per_row(width, depth)
    planes = [fit_plane(plane, row_size * height) for plane in planes]
    compression = _writable_compression(compression)
    written = write_fmt(fp, "H", compression)
    if compression == Compression.RLE:
        written += _write_rle_rows(fp, planes, row_size, height)
    else:
        written += sum(write_bytes(fp, plane) for plane in planes)
    return written


def _write_rle_rows(
    fp: BinaryIO, planes: Sequence[bytes], row_size: int, height: int
) -> int:
    count = len(planes) * height
    table_position = fp.tell()
    written = write_fmt(fp, "%dH" % count, *([0] * count))
    lengths = []
    for plane in planes:
        for row in range(height):
            offset = row * row_size
            encoded = rle.encode(plane[offset : offset + row_size])
            lengths.append(len(encoded))
            written += write_bytes(fp, encoded)

    end_position = fp.tell()
    fp.seek(table_position)
    write_fmt(fp, "%dH" % count, *lengths)
    fp.seek(end_position)
    return written


def _writable_compression(compression: int) -> int:
    if compression in (Compression.RAW, Compression.RLE):
        return Compression(compression)
    logger.warning("Cannot write compression %d, writing RAW instead" % compression)
    return Compression.RAW


def _to_compression(value: int) -> int:
    try:
        return Compression(value)
    except ValueError:
        return value
