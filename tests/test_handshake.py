import pytest

from ofwire.handshake import (
    AsyncConfig,
    ControllerRole,
    Experimenter,
    Hello,
    HelloElemType,
    HelloElemVersionBitmap,
    RoleRequest,
    encode_hello_elems,
    read_hello_elems,
)
from ofwire.packet import PacketInReason
from ofwire.port import PortReason
from ofwire.wire import DecodeError, Reader

HELLO_BYTES = bytes([
    0x00, 0x01,
    0x00, 0x18,
    0x00, 0x00, 0x00, 0x10,
    0x00, 0x00, 0x00, 0x13,
    0x00, 0x00, 0x00, 0x14,
    0x00, 0x00, 0x00, 0x15,
    0x00, 0x00, 0x00, 0x00,
])


def test_empty_hello_encodes_to_nothing():
    assert Hello().encode() == b""


def test_empty_hello_decodes():
    assert Hello.decode(b"") == Hello()


def test_hello_encode():
    hello = Hello([HelloElemVersionBitmap([0x10, 0x13, 0x14, 0x15])])
    assert hello.encode() == HELLO_BYTES


def test_hello_decode():
    hello = Hello.decode(HELLO_BYTES)
    assert hello == Hello([HelloElemVersionBitmap([0x10, 0x13, 0x14, 0x15])])


def test_version_bitmap_type():
    assert HelloElemVersionBitmap().type is HelloElemType.VERSION_BITMAP


def test_version_bitmap_single_word_needs_no_padding():
    elem = HelloElemVersionBitmap([0x12])
    assert elem.encode() == bytes([0x00, 0x01, 0x00, 0x08, 0x00, 0x00, 0x00, 0x12])


def test_version_bitmap_length_is_aligned():
    data = HelloElemVersionBitmap([1, 2]).encode()
    assert len(data) == 16
    assert data[2:4] == bytes([0x00, 0x10])


@pytest.mark.parametrize("bitmaps", [[], [0x12], [1, 2], [1, 2, 3], [5, 6, 7, 8, 9]])
def test_version_bitmap_round_trip(bitmaps):
    elem = HelloElemVersionBitmap(bitmaps)
    assert HelloElemVersionBitmap.read(Reader(elem.encode())) == elem


def test_hello_elems_round_trip():
    elems = [HelloElemVersionBitmap([0x12]), HelloElemVersionBitmap([1, 2])]
    reader = Reader(encode_hello_elems(elems))
    assert read_hello_elems(reader) == elems
    assert reader.remaining() == 0


def test_unknown_hello_element_raises():
    with pytest.raises(DecodeError):
        Hello.decode(bytes([0x00, 0x07, 0x00, 0x08, 0, 0, 0, 0]))


def test_truncated_hello_element_raises():
    with pytest.raises(DecodeError):
        Hello.decode(bytes([0x00, 0x01]))


EXPERIMENTER_BYTES = bytes([
    0x00, 0x00, 0x00, 0x2a,
    0x00, 0x00, 0x00, 0x2b,
])


def test_experimenter_encode():
    assert Experimenter(experimenter=42, exp_type=43).encode() == EXPERIMENTER_BYTES


def test_experimenter_decode():
    assert Experimenter.decode(EXPERIMENTER_BYTES) == Experimenter(42, 43)


ROLE_BYTES = bytes([
    0x00, 0x00, 0x00, 0x02,
    0x00, 0x00, 0x00, 0x00,
    0x22, 0xe9, 0x2b, 0x72, 0xb3, 0x9c, 0xab, 0x3a,
])


def test_role_request_encode():
    req = RoleRequest(role=ControllerRole.MASTER, generation_id=0x22E92B72B39CAB3A)
    assert req.encode() == ROLE_BYTES


def test_role_request_decode():
    req = RoleRequest.decode(ROLE_BYTES)
    assert req.role is ControllerRole.MASTER
    assert req.generation_id == 0x22E92B72B39CAB3A


def test_role_request_truncated_raises():
    with pytest.raises(DecodeError):
        RoleRequest.decode(ROLE_BYTES[:10])


ASYNC_BYTES = bytes([
    0x00, 0x00, 0x00, 0x02, 0x00, 0x00, 0x00, 0x00,
    0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x04,
    0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x08,
])


def _async_config():
    return AsyncConfig(
        (1 << PacketInReason.ACTION, 0),
        (0, 1 << PortReason.MODIFY),
        (0, 1 << 3),
    )


def test_async_config_encode():
    assert _async_config().encode() == ASYNC_BYTES


def test_async_config_decode():
    assert AsyncConfig.decode(ASYNC_BYTES) == _async_config()


def test_async_config_rejects_wrong_mask_size():
    with pytest.raises(ValueError):
        AsyncConfig(packet_in_mask=(1, 2, 3))