"""Hello handshake, experimenter header, role request and async configuration."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import ClassVar

from ofwire.wire import DecodeError, Reader

__all__ = [
    "HelloElemType",
    "HelloElemVersionBitmap",
    "Hello",
    "Experimenter",
    "ControllerRole",
    "RoleRequest",
    "AsyncConfig",
    "encode_hello_elems",
    "read_hello_elems",
]

# Length of the common hello element header (type and length).
_HELLO_ELEM_HEADER = struct.Struct("!HH")
_EXPERIMENTER = struct.Struct("!II")
_ROLE_REQUEST = struct.Struct("!I4xQ")
_ASYNC_CONFIG = struct.Struct("!6I")


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


class HelloElemType(enum.IntEnum):
    """Types of the optional hello elements."""

    VERSION_BITMAP = 1


@dataclass
class HelloElemVersionBitmap:
    """Bitmaps of the protocol versions a device supports.

    Bit ``n`` of the first bitmap stands for wire version ``n``; a device
    supporting versions 0x01 and 0x04 sets the first bitmap to 0x12.
    """

    type: ClassVar[HelloElemType] = HelloElemType.VERSION_BITMAP

    bitmaps: list[int] = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the element, padded to a 64-bit boundary."""
        map_len = len(self.bitmaps) * 4
        padding = (_HELLO_ELEM_HEADER.size + map_len) % 8
        total = _HELLO_ELEM_HEADER.size + map_len + padding
        if total > 0xFFFF:
            raise ValueError(f"hello element too long: {total} bytes")
        header = _HELLO_ELEM_HEADER.pack(int(self.type), total)
        body = struct.pack(f"!{len(self.bitmaps)}I", *self.bitmaps)
        return header + body + bytes(padding)

    @classmethod
    def read(cls, reader: Reader) -> "HelloElemVersionBitmap":
        """Read the element, header included.

        Trailing all-zero words carry no versions and are taken as padding.
        """
        _, length = reader.unpack(_HELLO_ELEM_HEADER.format)
        body = reader.limit(length - _HELLO_ELEM_HEADER.size)
        count = body.remaining() // 4
        bitmaps = list(body.unpack(f"!{count}I"))
        body.read_all()
        while bitmaps and bitmaps[-1] == 0:
            bitmaps.pop()
        return cls(bitmaps)


_HELLO_ELEM_TYPES = {
    HelloElemType.VERSION_BITMAP: HelloElemVersionBitmap,
}


def encode_hello_elems(elems) -> bytes:
    """Serialize a sequence of hello elements."""
    return b"".join(elem.encode() for elem in elems)


def read_hello_elems(reader: Reader) -> list:
    """Read hello elements until the reader is exhausted."""
    elems = []
    while reader.remaining():
        header = reader.read(_HELLO_ELEM_HEADER.size)
        elem_type, length = _HELLO_ELEM_HEADER.unpack(header)
        elem_cls = _HELLO_ELEM_TYPES.get(elem_type)
        if elem_cls is None:
            raise DecodeError(f"unknown hello element type: {elem_type:#x}")
        body = reader.read(max(0, min(length - len(header), reader.remaining())))
        elems.append(elem_cls.read(Reader(header + body)))
    return elems


@dataclass
class Hello:
    """Message exchanged right after connecting to negotiate the version."""

    elements: list = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the hello message into the wire format."""
        return encode_hello_elems(self.elements)

    @classmethod
    def read(cls, reader: Reader) -> "Hello":
        """Read a hello message; elements take all remaining bytes."""
        return cls(read_hello_elems(reader))

    @classmethod
    def decode(cls, data: bytes) -> "Hello":
        """Decode a hello message from bytes."""
        return cls.read(Reader(data))


@dataclass
class Experimenter:
    """Experimenter message header."""

    experimenter: int = 0
    exp_type: int = 0

    def encode(self) -> bytes:
        """Serialize the experimenter header into the wire format."""
        return _EXPERIMENTER.pack(self.experimenter, self.exp_type)

    @classmethod
    def read(cls, reader: Reader) -> "Experimenter":
        """Read an experimenter header from a reader."""
        return cls(*reader.unpack(_EXPERIMENTER.format))

    @classmethod
    def decode(cls, data: bytes) -> "Experimenter":
        """Decode an experimenter header from bytes."""
        return cls.read(Reader(data))


class ControllerRole(enum.IntEnum):
    """Role a controller wants to assume."""

    NO_CHANGE = 0
    EQUAL = 1
    MASTER = 2
    SLAVE = 3


@dataclass
class RoleRequest:
    """Request by a controller to change its role."""

    role: int = ControllerRole.NO_CHANGE
    generation_id: int = 0

    def encode(self) -> bytes:
        """Serialize the role request into the wire format."""
        return _ROLE_REQUEST.pack(int(self.role), self.generation_id)

    @classmethod
    def read(cls, reader: Reader) -> "RoleRequest":
        """Read a role request from a reader."""
        role, generation_id = reader.unpack(_ROLE_REQUEST.format)
        return cls(_as_enum(ControllerRole, role), generation_id)

    @classmethod
    def decode(cls, data: bytes) -> "RoleRequest":
        """Decode a role request from bytes."""
        return cls.read(Reader(data))


def _pair(values) -> tuple[int, int]:
    pair = tuple(int(v) for v in values)
    if len(pair) != 2:
        raise ValueError(f"mask must hold exactly two words, got {len(pair)}")
    return pair


@dataclass
class AsyncConfig:
    """Selection of asynchronous messages for master/equal and slave roles."""

    packet_in_mask: tuple[int, int] = (0, 0)
    port_status_mask: tuple[int, int] = (0, 0)
    flow_removed_mask: tuple[int, int] = (0, 0)

    def __post_init__(self) -> None:
        self.packet_in_mask = _pair(self.packet_in_mask)
        self.port_status_mask = _pair(self.port_status_mask)
        self.flow_removed_mask = _pair(self.flow_removed_mask)

    def encode(self) -> bytes:
        """Serialize the asynchronous configuration into the wire format."""
        return _ASYNC_CONFIG.pack(
            *self.packet_in_mask, *self.port_status_mask, *self.flow_removed_mask
        )

    @classmethod
    def read(cls, reader: Reader) -> "AsyncConfig":
        """Read an asynchronous configuration from a reader."""
        values = reader.unpack(_ASYNC_CONFIG.format)
        return cls(values[0:2], values[2:4], values[4:6])

    @classmethod
    def decode(cls, data: bytes) -> "AsyncConfig":
        """Decode an asynchronous configuration from bytes."""
        return cls.read(Reader(data))