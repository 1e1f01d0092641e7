"""
PackBits RLE (Run-Length Encoding) codec.

The PackBits scheme uses a single header byte to indicate:

- Values 0-127: Copy the next (n+1) literal bytes
- Values 129-255: Repeat the next byte (257-n) times
- Value 128: No-op

Encoding example::

    Input:  [5, 5, 1, 2, 3]
    Output: [255, 5, 2, 1, 2, 3]
            (repeat 5 2x, copy 1 2 3)

The encoder is a greedy packetizer with a maximum packet length of 128. Two
equal bytes arriving inside a literal packet end that packet at once and
open a repeat packet, which keeps the output byte-identical to the reference
Photoshop encoders.

Example usage::

    from psdlite.compression.rle import encode, decode

    raw_data = b'\\x00' * 100 + b'\\xff' * 50
    compressed = encode(raw_data)
    assert decode(compressed, len(raw_data)) == raw_data
"""

import io
import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)

MAX_PACKET_LENGTH = 128


def decode_row(fp: BinaryIO, dst: bytearray, offset: int, count: int) -> int:
    """
    Decodes packets from ``fp`` into ``dst`` starting at ``offset`` until at
    least ``count`` bytes have been produced.

    Bytes that would land outside of ``dst`` are dropped, so a damaged stream
    never writes past the plane. A stream that ends early stops the row.

    :param fp: file-like object positioned at the first packet.
    :param dst: destination buffer, typically the whole channel plane.
    :param offset: index of the first destination byte.
    :param count: number of bytes in the row.
    :return: number of bytes produced, which may exceed ``count`` when the
        last packet overruns the row.
    """
    size = len(dst)
    written = 0
    while written < count:
        header = fp.read(1)
        if not header:
            logger.warning(
                "RLE data ended after %d of %d bytes at offset %d"
                % (written, count, offset)
            )
            break

        bit = header[0]
        if bit < 128:
            length = bit + 1
            data = fp.read(length)
        elif bit > 128:
            length = (bit ^ 0xFF) + 2
            data = fp.read(1) * length
        else:
            continue

        start = offset + written
        stop = min(start + len(data), size)
        if start < stop:
            dst[start:stop] = data[: stop - start]
        written += length
    return written


def decode(data: bytes, size: int) -> bytes:
    """decode(data, size) -> bytes

    Decodes a PackBits stream into exactly ``size`` bytes. Missing bytes are
    left zero.
    """
    result = bytearray(size)
    with io.BytesIO(data) as f:
        decode_row(f, result, 0, size)
    return bytes(result)


class _Packet:
    """Pending packet of the encoder."""

    def __init__(self, result: bytearray) -> None:
        self.result = result
        self.data = bytearray()
        self.is_rle = False

    def push(self, value: int) -> None:
        data = self.data
        if len(data) == 0:
            data.append(value)
            self.is_rle = False
        elif len(data) == MAX_PACKET_LENGTH:
            self.flush()
            self.push(value)
        elif len(data) == 1:
            self.is_rle = data[0] == value
            data.append(value)
        elif self.is_rle:
            if data[-1] == value:
                data.append(value)
            else:
                self.flush()
                self.push(value)
        elif data[-1] != value:
            data.append(value)
        else:
            del data[-1]
            self.flush()
            self.push(value)
            self.push(value)

    def flush(self) -> None:
        data = self.data
        if not data:
            return
        if self.is_rle:
            self.result.append(-(len(data) - 1) & 0xFF)
            self.result.append(data[0])
        else:
            self.result.append(len(data) - 1)
            self.result.extend(data)
        self.data = bytearray()
        self.is_rle = False


def encode(data: bytes) -> bytes:
    """encode(data) -> bytes

    PackBits RLE encoder.
    """
    result = bytearray()
    packet = _Packet(result)
    for value in bytearray(data):
        packet.push(value)
    packet.flush()
    return bytes(result)
