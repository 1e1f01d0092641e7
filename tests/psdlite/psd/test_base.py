from psdlite.constants import ColorMode
from psdlite.psd.base import ListElement, ValueElement
from psdlite.psd.header import FileHeader
from psdlite.psd.layer_and_mask import Channel


def test_element_repr() -> None:
    channel = Channel(id=0, data=b"\x00" * 64)
    text = repr(channel)
    assert text.startswith("Channel(id=")
    assert "... =64" in text


def test_header_bytes() -> None:
    header = FileHeader(channels=3, width=2, height=2, color_mode=ColorMode.RGB)
    assert FileHeader.frombytes(header.tobytes()) == header


def test_value_element() -> None:
    value = ValueElement(b"abc")
    assert value == b"abc"
    assert value == ValueElement(b"abc")
    assert value != b"abd"
    assert bool(ValueElement(b"")) is False
    assert hash(value) == hash(b"abc")


def test_list_element() -> None:
    items = ListElement([1, 2])
    items.append(4)
    items.insert(2, 3)
    assert list(items) == [1, 2, 3, 4]
    assert items.pop() == 4
    items.remove(1)
    del items[0]
    assert len(items) == 1
    assert items[0] == 3
    assert repr(items) == "ListElement[3]"
