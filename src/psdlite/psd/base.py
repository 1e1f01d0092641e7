"""
Base data structures intended for inheritance.

Every section of the file format is modelled by a subclass of
:py:class:`BaseElement`, usually decorated with attrs_ to declare its fields.
A subclass implements :py:meth:`~BaseElement.read` and
:py:meth:`~BaseElement.write`; the byte-buffer helpers come for free::

    header = FileHeader.frombytes(data)
    assert header.tobytes() == data

.. _attrs: https://www.attrs.org/en/stable/index.html
"""

import io
import logging
from enum import Enum
from typing import Any, BinaryIO, Iterator, TypeVar

from attrs import define, field, fields, has

from psdlite.psd.bin_utils import trimmed_repr

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseElement")


def _field_repr(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return trimmed_repr(value)
    if isinstance(value, Enum):
        return value.name
    return repr(value)


class BaseElement:
    """
    Base element of the document structs.

    .. py:classmethod:: read(cls, fp, **kwargs)

        Read the element from a file-like object positioned at its first
        byte.

    .. py:method:: write(self, fp, **kwargs)

        Write the element and return the number of bytes written.
    """

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        raise NotImplementedError()

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        raise NotImplementedError()

    @classmethod
    def frombytes(cls: type[T], data: bytes, *args: Any, **kwargs: Any) -> T:
        """Read the element from an in-memory buffer."""
        with io.BytesIO(data) as f:
            return cls.read(f, *args, **kwargs)

    def tobytes(self, *args: Any, **kwargs: Any) -> bytes:
        """Serialize the element to bytes."""
        with io.BytesIO() as f:
            self.write(f, *args, **kwargs)
            return f.getvalue()

    def __repr__(self) -> str:
        if not has(self.__class__):
            return object.__repr__(self)
        items = [
            "%s=%s" % (item.name.lstrip("_"), _field_repr(getattr(self, item.name)))
            for item in fields(self.__class__)  # type: ignore[arg-type]
            if item.repr
        ]
        return "%s(%s)" % (self.__class__.__name__, ", ".join(items))


@define(repr=False, eq=False, order=False)
class ValueElement(BaseElement):
    """
    Wrapper of a single ``value`` that compares equal to the bare value.
    """

    value: object = None

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ValueElement):
            return bool(self.value == other.value)
        return bool(self.value == other)

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self.value)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __repr__(self) -> str:
        return "%s(%s)" % (self.__class__.__name__, _field_repr(self.value))


@define(repr=False)
class ListElement(BaseElement):
    """
    Ordered collection element with the mutable sequence operations the
    document model needs.
    """

    _items: list = field(factory=list, converter=list)

    def append(self, x: Any) -> None:
        self._items.append(x)

    def extend(self, items: Any) -> None:
        self._items.extend(items)

    def insert(self, i: int, x: Any) -> None:
        self._items.insert(i, x)

    def remove(self, x: Any) -> None:
        self._items.remove(x)

    def pop(self, *args: Any) -> Any:
        return self._items.pop(*args)

    def index(self, x: Any) -> int:
        return self._items.index(x)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __getitem__(self, key: Any) -> Any:
        return self._items[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._items[key] = value

    def __delitem__(self, key: Any) -> None:
        del self._items[key]

    def __repr__(self) -> str:
        return "%s[%s]" % (
            self.__class__.__name__,
            ", ".join(_field_repr(item) for item in self._items),
        )
