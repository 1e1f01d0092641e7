"""
Binary I/O helpers.

All multi-byte values in the file are big-endian regardless of the host, so
every format string passed to :py:func:`read_fmt` and :py:func:`write_fmt` is
prefixed with ``>``.
"""

import contextlib
import logging
import struct
from typing import Any, BinaryIO, Callable, Generator

logger = logging.getLogger(__name__)


def pack(fmt: str, *args: Any) -> bytes:
    fmt = str(">" + fmt)
    return struct.pack(fmt, *args)


def read_fmt(fmt: str, fp: BinaryIO) -> tuple:
    """
    Reads data from ``fp`` according to ``fmt``.

    :raise IOError: when the stream ends before ``fmt`` is satisfied.
    """
    fmt = str(">" + fmt)
    fmt_size = struct.calcsize(fmt)
    data = fp.read(fmt_size)
    if len(data) != fmt_size:
        raise IOError(
            "Unexpected end of stream at offset %d: expected %d bytes, got %d"
            % (fp.tell(), fmt_size, len(data))
        )
    return struct.unpack(fmt, data)


def write_fmt(fp: BinaryIO, fmt: str, *args: Any) -> int:
    """
    Writes data to ``fp`` according to ``fmt``.
    """
    fmt = str(">" + fmt)
    fmt_size = struct.calcsize(fmt)
    written = write_bytes(fp, struct.pack(fmt, *args))
    assert written == fmt_size, "written=%d, expected=%d" % (written, fmt_size)
    return written


def write_bytes(fp: BinaryIO, data: bytes) -> int:
    """
    Write bytes to the file object and returns bytes written.

    :return: written byte size
    """
    pos = fp.tell()
    fp.write(data)
    written = fp.tell() - pos
    assert written == len(data), "written=%d, expected=%d" % (written, len(data))
    return written


def read_length_block(fp: BinaryIO, fmt: str = "I", padding: int = 1) -> bytes:
    """
    Read a block of data with a length marker at the beginning.

    :param fp: file-like
    :param fmt: format of the length marker
    :return: bytes object
    """
    length = read_fmt(fmt, fp)[0]
    data = fp.read(length)
    if len(data) != length:
        raise IOError(
            "Unexpected end of stream at offset %d: block of %d bytes has only %d"
            % (fp.tell(), length, len(data))
        )
    read_padding(fp, length, padding)
    return data


def write_length_block(
    fp: BinaryIO,
    writer: Callable[[BinaryIO], int],
    fmt: str = "I",
    padding: int = 1,
) -> int:
    """
    Writes a block of data with a length marker at the beginning.

    Example::

        with io.BytesIO() as fp:
            write_length_block(fp, lambda f: f.write(b'\\x00\\x00'))

    :param fp: file-like
    :param writer: function object that takes file-like object as an argument
    :param fmt: format of the length marker
    :return: written byte size
    """
    length_position = reserve_position(fp, fmt)
    written = writer(fp)
    size = written
    written += write_position(fp, length_position, written, fmt)
    written += write_padding(fp, size, padding)
    return written


def reserve_position(fp: BinaryIO, fmt: str = "I") -> int:
    """
    Reserves the current position for write. The reserved area is filled
    with zeros until :py:func:`write_position` replaces it.

    :param fp: file-like object
    :param fmt: format of the reserved position
    :return: the position
    """
    position = fp.tell()
    fp.write(b"\x00" * struct.calcsize(str(">" + fmt)))
    return position


def write_position(fp: BinaryIO, position: int, value: Any, fmt: str = "I") -> int:
    """
    Writes a value to the specified position.

    :param fp: file-like object
    :param position: position of the value marker
    :param value: value to write
    :param fmt: format of the value
    :return: written byte size
    """
    current_position = fp.tell()
    fp.seek(position)
    written = write_bytes(fp, pack(fmt, value))
    fp.seek(current_position)
    return written


@contextlib.contextmanager
def length_writer(fp: BinaryIO, fmt: str = "I") -> Generator[int, None, None]:
    """
    Scoped length marker. A zero placeholder is written on entry, and on exit
    it is overwritten with the number of bytes written inside the scope.

    Example::

        with length_writer(fp):
            write_fmt(fp, "2H", 1, 2)

    :param fp: file-like object
    :param fmt: format of the length marker
    """
    position = reserve_position(fp, fmt)
    start = fp.tell()
    yield position
    write_position(fp, position, fp.tell() - start, fmt)


@contextlib.contextmanager
def bounded_section(
    fp: BinaryIO, length: int, name: str = "section"
) -> Generator[int, None, None]:
    """
    Bounded reader. The body parses the next ``length`` bytes, and on exit the
    stream is repositioned to exactly ``start + length`` whatever the body
    consumed.

    :param fp: file-like object
    :param length: declared length of the section
    :param name: section name for logging
    :return: the end position of the section
    """
    start = fp.tell()
    end = start + length
    yield end
    if fp.tell() > end:
        logger.warning(
            "%s is broken: current fp=%d, expected=%d" % (name, fp.tell(), end)
        )
    elif fp.tell() < end:
        logger.debug("  skipping %d bytes of %s" % (end - fp.tell(), name))
    fp.seek(end, 0)


def pad(number: int, divisor: int) -> int:
    if number % divisor:
        number = (number // divisor + 1) * divisor
    return number


def read_padding(fp: BinaryIO, size: int, divisor: int = 2) -> bytes:
    """
    Read padding bytes for the given byte size.

    :param fp: file-like object
    :param divisor: divisor of the byte alignment
    :return: read bytes
    """
    remainder = size % divisor
    if remainder:
        return fp.read(divisor - remainder)
    return b""


def write_padding(fp: BinaryIO, size: int, divisor: int = 2) -> int:
    """
    Writes padding bytes given the currently written size.

    :param fp: file-like object
    :param divisor: divisor of the byte alignment
    :return: written byte size
    """
    remainder = size % divisor
    if remainder:
        return write_bytes(fp, struct.pack("%dx" % (divisor - remainder)))
    return 0


def is_readable(fp: BinaryIO, size: int = 1) -> bool:
    """
    Check if the file-like object is readable.

    :param fp: file-like object
    :param size: byte size
    :return: bool
    """
    read_size = len(fp.read(size))
    fp.seek(-read_size, 1)
    return read_size == size


def read_pascal_string(fp: BinaryIO, encoding: str = "macroman", padding: int = 2) -> str:
    """
    Reads a length-prefixed string. The whole field, length byte included, is
    padded to a multiple of ``padding``: with the default of 2 one extra byte
    follows when the string length is even.
    """
    length = read_fmt("B", fp)[0]
    if length == 0:
        fp.seek(padding - 1, 1)
        return ""

    data = fp.read(length)
    if len(data) != length:
        raise IOError(
            "Unexpected end of stream at offset %d: string of %d bytes has only %d"
            % (fp.tell(), length, len(data))
        )
    # -1 accounts for the length byte
    padded_length = pad(length + 1, padding) - 1
    fp.seek(padded_length - length, 1)
    return data.decode(encoding, "replace")


def write_pascal_string(
    fp: BinaryIO, value: str, encoding: str = "macroman", padding: int = 2
) -> int:
    data = value.encode(encoding, "replace")
    if len(data) > 255:
        logger.debug("truncating %d-byte pascal string" % len(data))
        data = data[:255]
    written = write_fmt(fp, "B", len(data))
    written += write_bytes(fp, data)
    written += write_padding(fp, written, padding)
    return written


def trimmed_repr(data: Any, trim_length: int = 16) -> str:
    if isinstance(data, bytes):
        if len(data) > trim_length:
            return repr(
                data[:trim_length] + b" ... =" + str(len(data)).encode("ascii")
            )
    return repr(data)
