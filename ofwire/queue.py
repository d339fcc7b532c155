"""Packet queues, queue properties, queue statistics and queue configuration."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import ClassVar

from ofwire.port import PortNo
from ofwire.wire import DecodeError, Reader

__all__ = [
    "QueuePropType",
    "Queue",
    "QUEUE_MIN_RATE_UNCFG",
    "QUEUE_MAX_RATE_UNCFG",
    "QueuePropMinRate",
    "QueuePropMaxRate",
    "QueuePropExperimenter",
    "PacketQueue",
    "QueueStatsRequest",
    "QueueStats",
    "QueueGetConfigRequest",
    "QueueGetConfigReply",
    "encode_queue_props",
    "read_queue_props",
]

# Minimum-rate and maximum-rate values meaning "not configured".
QUEUE_MIN_RATE_UNCFG = 0xFFFF
QUEUE_MAX_RATE_UNCFG = 0xFFFF

_PROP_HEADER = struct.Struct("!HH")
_PROP_RATE = struct.Struct("!HH4xH6x")
_PROP_EXPERIMENTER = struct.Struct("!HH4xI4x")
_PACKET_QUEUE = struct.Struct("!IIH6x")
_STATS_REQUEST = struct.Struct("!II")
_STATS = struct.Struct("!IIQQQII")
_CONFIG_REQUEST = struct.Struct("!I4x")


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


def _checked_length(length: int) -> int:
    if length > 0xFFFF:
        raise ValueError(f"message too long: {length} bytes")
    return length


class QueuePropType(enum.IntEnum):
    """Types of queue properties."""

    MIN_RATE = 1
    MAX_RATE = 2
    EXPERIMENTER = 0xFFFF


class Queue(enum.IntEnum):
    """Reserved queue identifiers."""

    ALL = 0xFFFFFFFF


@dataclass
class QueuePropMinRate:
    """Minimum-rate queue property; the rate is in tenths of a percent."""

    type: ClassVar[QueuePropType] = QueuePropType.MIN_RATE

    rate: int = 0

    def encode(self) -> bytes:
        """Serialize the property, header included."""
        return _PROP_RATE.pack(int(self.type), _PROP_RATE.size, self.rate)

    @classmethod
    def read(cls, reader: Reader) -> "QueuePropMinRate":
        """Read the property, header included."""
        _, _, rate = reader.unpack(_PROP_RATE.format)
        return cls(rate)


@dataclass
class QueuePropMaxRate:
    """Maximum-rate queue property; the rate is in tenths of a percent."""

    type: ClassVar[QueuePropType] = QueuePropType.MAX_RATE

    rate: int = 0

    def encode(self) -> bytes:
        """Serialize the property, header included."""
        return _PROP_RATE.pack(int(self.type), _PROP_RATE.size, self.rate)

    @classmethod
    def read(cls, reader: Reader) -> "QueuePropMaxRate":
        """Read the property, header included."""
        _, _, rate = reader.unpack(_PROP_RATE.format)
        return cls(rate)


@dataclass
class QueuePropExperimenter:
    """Experimenter-defined queue property."""

    type: ClassVar[QueuePropType] = QueuePropType.EXPERIMENTER

    experimenter: int = 0
    data: bytes = b""

    def encode(self) -> bytes:
        """Serialize the property, header included."""
        length = _checked_length(_PROP_EXPERIMENTER.size + len(self.data))
        header = _PROP_EXPERIMENTER.pack(int(self.type), length, self.experimenter)
        return header + bytes(self.data)

    @classmethod
    def read(cls, reader: Reader) -> "QueuePropExperimenter":
        """Read the property, header included."""
        _, length, experimenter = reader.unpack(_PROP_EXPERIMENTER.format)
        data = reader.limit(length - _PROP_EXPERIMENTER.size).read_all()
        return cls(experimenter, data)

    @classmethod
    def decode(cls, data: bytes) -> "QueuePropExperimenter":
        """Decode the property from bytes."""
        return cls.read(Reader(data))


_QUEUE_PROP_TYPES = {
    QueuePropType.MIN_RATE: QueuePropMinRate,
    QueuePropType.MAX_RATE: QueuePropMaxRate,
    QueuePropType.EXPERIMENTER: QueuePropExperimenter,
}


def encode_queue_props(props) -> bytes:
    """Serialize a sequence of queue properties."""
    return b"".join(prop.encode() for prop in props)


def read_queue_props(reader: Reader) -> list:
    """Read queue properties until the reader is exhausted."""
    props = []
    while reader.remaining():
        header = reader.read(_PROP_HEADER.size)
        prop_type, length = _PROP_HEADER.unpack(header)
        prop_cls = _QUEUE_PROP_TYPES.get(prop_type)
        if prop_cls is None:
            raise DecodeError(f"unknown queue property type: {prop_type:#x}")
        body = reader.read(max(0, min(length - len(header), reader.remaining())))
        props.append(prop_cls.read(Reader(header + body)))
    return props


@dataclass
class PacketQueue:
    """A queue attached to a port, with its properties."""

    queue: int = 0
    port: int = 0
    properties: list = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the packet queue into the wire format."""
        props = encode_queue_props(self.properties)
        length = _checked_length(_PACKET_QUEUE.size + len(props))
        return _PACKET_QUEUE.pack(int(self.queue), int(self.port), length) + props

    @classmethod
    def read(cls, reader: Reader) -> "PacketQueue":
        """Read a packet queue from a reader."""
        queue, port, length = reader.unpack(_PACKET_QUEUE.format)
        props = read_queue_props(reader.limit(length - _PACKET_QUEUE.size))
        return cls(_as_enum(Queue, queue), _as_enum(PortNo, port), props)

    @classmethod
    def decode(cls, data: bytes) -> "PacketQueue":
        """Decode a packet queue from bytes."""
        return cls.read(Reader(data))


@dataclass
class QueueStatsRequest:
    """Multipart request for statistics of one or more queues."""

    port: int = 0
    queue: int = 0

    def encode(self) -> bytes:
        """Serialize the request into the wire format."""
        return _STATS_REQUEST.pack(int(self.port), int(self.queue))

    @classmethod
    def read(cls, reader: Reader) -> "QueueStatsRequest":
        """Read the request from a reader."""
        port, queue = reader.unpack(_STATS_REQUEST.format)
        return cls(_as_enum(PortNo, port), _as_enum(Queue, queue))

    @classmethod
    def decode(cls, data: bytes) -> "QueueStatsRequest":
        """Decode the request from bytes."""
        return cls.read(Reader(data))


@dataclass
class QueueStats:
    """Statistics of a single queue."""

    port: int = 0
    queue: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    duration_sec: int = 0
    duration_nsec: int = 0

    def encode(self) -> bytes:
        """Serialize the queue statistics into the wire format."""
        return _STATS.pack(
            int(self.port), int(self.queue), self.tx_bytes, self.tx_packets,
            self.tx_errors, self.duration_sec, self.duration_nsec,
        )

    @classmethod
    def read(cls, reader: Reader) -> "QueueStats":
        """Read queue statistics from a reader."""
        port, queue, *rest = reader.unpack(_STATS.format)
        return cls(_as_enum(PortNo, port), _as_enum(Queue, queue), *rest)

    @classmethod
    def decode(cls, data: bytes) -> "QueueStats":
        """Decode queue statistics from bytes."""
        return cls.read(Reader(data))


@dataclass
class QueueGetConfigRequest:
    """Query for the queues configured on a port."""

    port: int = 0

    def encode(self) -> bytes:
        """Serialize the request into the wire format."""
        return _CONFIG_REQUEST.pack(int(self.port))

    @classmethod
    def read(cls, reader: Reader) -> "QueueGetConfigRequest":
        """Read the request from a reader."""
        (port,) = reader.unpack(_CONFIG_REQUEST.format)
        return cls(_as_enum(PortNo, port))

    @classmethod
    def decode(cls, data: bytes) -> "QueueGetConfigRequest":
        """Decode the request from bytes."""
        return cls.read(Reader(data))


@dataclass
class QueueGetConfigReply:
    """Reply listing the queues configured on a port."""

    port: int = 0
    queues: list[PacketQueue] = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the reply into the wire format."""
        body = b"".join(queue.encode() for queue in self.queues)
        return _CONFIG_REQUEST.pack(int(self.port)) + body

    @classmethod
    def read(cls, reader: Reader) -> "QueueGetConfigReply":
        """Read the reply; the queues take all remaining bytes."""
        (port,) = reader.unpack(_CONFIG_REQUEST.format)
        queues = []
        while reader.remaining():
            queues.append(PacketQueue.read(reader))
        return cls(_as_enum(PortNo, port), queues)

    @classmethod
    def decode(cls, data: bytes) -> "QueueGetConfigReply":
        """Decode the reply from bytes."""
        return cls.read(Reader(data))