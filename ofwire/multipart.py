"""Multipart requests and replies used to query the datapath state."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

from ofwire.wire import Reader

__all__ = [
    "MultipartType",
    "MultipartRequestFlag",
    "MultipartReplyFlag",
    "MultipartRequest",
    "MultipartReply",
    "ExperimenterMultipartHeader",
    "new_multipart_request",
]

_HEADER = struct.Struct("!HH4x")
_EXPERIMENTER = struct.Struct("!II")


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


class MultipartType(enum.IntEnum):
    """Kind of information carried by a multipart message."""

    DESCRIPTION = 0
    FLOW = 1
    AGGREGATE = 2
    TABLE = 3
    PORT_STATS = 4
    QUEUE = 5
    GROUP = 6
    GROUP_DESCRIPTION = 7
    GROUP_FEATURES = 8
    METER = 9
    METER_CONFIG = 10
    METER_FEATURES = 11
    TABLE_FEATURES = 12
    PORT_DESCRIPTION = 13
    EXPERIMENTER = 0xFFFF


class MultipartRequestFlag(enum.IntFlag):
    """Multipart request flags."""

    MORE = 1 << 0


class MultipartReplyFlag(enum.IntFlag):
    """Multipart reply flags."""

    MORE = 1 << 0


@dataclass
class MultipartRequest:
    """Request for datapath state; the body is kept as raw bytes."""

    type: int = MultipartType.DESCRIPTION
    flags: int = MultipartRequestFlag(0)
    body: bytes = b""

    def encode(self) -> bytes:
        """Serialize the multipart request into the wire format."""
        return _HEADER.pack(int(self.type), int(self.flags)) + bytes(self.body)

    @classmethod
    def read(cls, reader: Reader) -> "MultipartRequest":
        """Read a multipart request; the body takes all remaining bytes."""
        mp_type, flags = reader.unpack(_HEADER.format)
        return cls(
            _as_enum(MultipartType, mp_type),
            MultipartRequestFlag(flags),
            reader.read_all(),
        )

    @classmethod
    def decode(cls, data: bytes) -> "MultipartRequest":
        """Decode a multipart request from bytes."""
        return cls.read(Reader(data))


def new_multipart_request(multipart_type, body=None) -> MultipartRequest:
    """Create a multipart request of the given type.

    The body may be None, raw bytes, or any message with an ``encode`` method.
    """
    if body is None:
        payload = b""
    elif isinstance(body, (bytes, bytearray, memoryview)):
        payload = bytes(body)
    else:
        payload = body.encode()
    return MultipartRequest(multipart_type, MultipartRequestFlag(0), payload)


@dataclass
class MultipartReply:
    """Header of a multipart reply sent by the datapath."""

    type: int = MultipartType.DESCRIPTION
    flags: int = MultipartReplyFlag(0)

    def encode(self) -> bytes:
        """Serialize the multipart reply header into the wire format."""
        return _HEADER.pack(int(self.type), int(self.flags))

    @classmethod
    def read(cls, reader: Reader) -> "MultipartReply":
        """Read a multipart reply header from a reader."""
        mp_type, flags = reader.unpack(_HEADER.format)
        return cls(_as_enum(MultipartType, mp_type), MultipartReplyFlag(flags))

    @classmethod
    def decode(cls, data: bytes) -> "MultipartReply":
        """Decode a multipart reply header from bytes."""
        return cls.read(Reader(data))


@dataclass
class ExperimenterMultipartHeader:
    """Header of experimenter multipart requests and replies."""

    experimenter: int = 0
    exp_type: int = 0

    def encode(self) -> bytes:
        """Serialize the experimenter header into the wire format."""
        return _EXPERIMENTER.pack(self.experimenter, self.exp_type)

    @classmethod
    def read(cls, reader: Reader) -> "ExperimenterMultipartHeader":
        """Read the experimenter header from a reader."""
        return cls(*reader.unpack(_EXPERIMENTER.format))

    @classmethod
    def decode(cls, data: bytes) -> "ExperimenterMultipartHeader":
        """Decode the experimenter header from bytes."""
        return cls.read(Reader(data))