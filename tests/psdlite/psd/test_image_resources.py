import io
import logging

import pytest

from psdlite.constants import Resource
from psdlite.errors import FormatError
from psdlite.psd.bin_utils import pack
from psdlite.psd.image_resources import (
    AlphaChannelNames,
    ImageResource,
    ImageResources,
    ResolutionInfo,
    ThumbnailResource,
    ThumbnailResourceV4,
)

from ..utils import check_read_write, check_write_read

logger = logging.getLogger(__name__)


def test_image_resources_from_to() -> None:
    check_read_write(ImageResources, b"\x00\x00\x00\x00")


def test_image_resources_exception() -> None:
    with pytest.raises(IOError):
        ImageResources.frombytes(b"\x00\x00\x00\x01")


@pytest.mark.parametrize(
    ["fixture"],
    [
        (ImageResource(name="", data=b"\x01\x04\x02"),),
        (ImageResource(name="foo", data=b"\x01\x04\x02"),),
        (ImageResource(signature=b"MeSa", key=4000, data=b""),),
    ],
)
def test_image_resource_from_to(fixture: ImageResource) -> None:
    check_write_read(fixture)


def test_image_resource_layout() -> None:
    data = ImageResource(key=1000, name="foo", data=b"\x01\x04\x02").tobytes()
    assert data == (
        b"8BIM\x03\xe8"  # signature, id
        b"\x03foo"  # odd name length, no pad
        b"\x00\x00\x00\x03\x01\x04\x02"  # payload
        b"\x00"  # odd payload, one pad byte
    )


def test_image_resource_exception() -> None:
    with pytest.raises(IOError):
        ImageResource.frombytes(b"8BIM\x03")


def test_image_resource_bad_signature() -> None:
    with pytest.raises(FormatError):
        ImageResource.frombytes(b"8BIX\x03\xe8\x00\x00\x00\x00\x00\x00")
    with pytest.raises(FormatError):
        ImageResource(signature=b"ABCD")


def test_image_resources_sequence() -> None:
    resources = ImageResources(
        [
            ImageResource(key=1000, data=b"\x01\x02"),
            ImageResource(key=Resource.RESOLUTION_INFO, data=ResolutionInfo(300.0)),
            ImageResource(key=-3, name="x", data=b"\x01"),
        ]
    )
    check_write_read(resources)
    parsed = ImageResources.frombytes(resources.tobytes())
    assert [item.key for item in parsed] == [1000, 1005, -3]
    assert Resource.RESOLUTION_INFO in parsed
    assert parsed.get_data(Resource.RESOLUTION_INFO).horizontal == 300.0
    assert parsed.get_data(9999, "default") == "default"


def test_image_resources_longer_typed_payload() -> None:
    # A resolution payload with 4 extra bytes does not derail the next block.
    payload = ResolutionInfo(96.0).tobytes() + b"\x00" * 4
    blocks = ImageResource(key=Resource.RESOLUTION_INFO, data=payload).tobytes()
    blocks += ImageResource(key=1000, data=b"\xaa\xbb").tobytes()
    with io.BytesIO(pack("I", len(blocks)) + blocks + b"tail") as f:
        resources = ImageResources.read(f)
        assert f.tell() == 4 + len(blocks)
    assert resources[0].data.horizontal == 96.0
    assert resources[1].data == b"\xaa\xbb"


def test_image_resources_set_data() -> None:
    resources = ImageResources()
    resources.set_data(Resource.RESOLUTION_INFO, ResolutionInfo(72.0))
    resources.set_data(Resource.RESOLUTION_INFO, ResolutionInfo(144.0))
    assert len(resources) == 1
    assert resources.get_data(Resource.RESOLUTION_INFO).horizontal == 144.0


def test_resolution_info() -> None:
    check_write_read(ResolutionInfo(horizontal=72.5, vertical=300.0))
    data = ResolutionInfo(horizontal=72.0, vertical=72.0).tobytes()
    assert len(data) == 16
    assert data[:4] == b"\x00\x48\x00\x00"


def test_alpha_channel_names() -> None:
    names = AlphaChannelNames(["Alpha 1", "Mask"])
    data = names.tobytes()
    assert data == b"\x07Alpha 1\x04Mask"
    assert AlphaChannelNames.frombytes(data) == names


def test_alpha_channel_names_skip_empty() -> None:
    names = AlphaChannelNames.frombytes(b"\x00\x03abc\x00")
    assert list(names) == ["abc"]


@pytest.mark.parametrize("kls", [ThumbnailResource, ThumbnailResourceV4])
def test_thumbnail_resource(kls) -> None:
    thumbnail = kls(
        fmt=1, width=2, height=2, row=8, total_size=16, data=b"\xff\xd8\xff\xd9"
    )
    check_write_read(thumbnail)
    data = thumbnail.tobytes()
    assert len(data) == 28 + 4


def test_typed_resource_dispatch() -> None:
    resource = ImageResource(
        key=Resource.ALPHA_NAMES_PASCAL, data=AlphaChannelNames(["Alpha"])
    )
    parsed = ImageResource.frombytes(resource.tobytes())
    assert isinstance(parsed.data, AlphaChannelNames)
    assert list(parsed.data) == ["Alpha"]


def test_typed_resource_broken_payload() -> None:
    # Resolution info needs 16 bytes.
    resource = ImageResource(key=Resource.RESOLUTION_INFO, data=b"\x00\x01")
    parsed = ImageResource.frombytes(resource.tobytes())
    assert parsed.data == b"\x00\x01"
