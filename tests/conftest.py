"""Pytest configuration for psdlite tests."""

import io
from typing import Iterator

import pytest

from psdlite.constants import ColorMode
from psdlite.psd import Document
from psdlite.psd.layer_and_mask import LayerRecord


@pytest.fixture
def rgb_document() -> Iterator[Document]:
    """4x3 RGB document with two layers, the top one masked."""
    document = Document.new(ColorMode.RGB, (4, 3), color=(10, 20, 30))
    document.add_layer(
        LayerRecord.new(
            "Background",
            bbox=(0, 0, 4, 3),
            channels={
                -1: b"\xff" * 12,
                0: bytes(range(12)),
                1: b"\x80" * 12,
                2: b"\x00" * 12,
            },
        )
    )
    record = document.add_layer(
        LayerRecord.new(
            "Top",
            bbox=(1, 1, 3, 3),
            channels={0: b"\x01" * 4, 1: b"\x02" * 4, 2: b"\x03" * 4},
            compression=1,
        )
    )
    record.set_mask(b"\x80\x00", bbox=(1, 1, 3, 2), compression=1)
    yield document


@pytest.fixture
def rgb_bytes(rgb_document: Document) -> Iterator[bytes]:
    with io.BytesIO() as f:
        rgb_document.write(f)
        yield f.getvalue()
