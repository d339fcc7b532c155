"""Groups: group statistics, bucket counters and group features."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

from ofwire.wire import Reader

__all__ = [
    "GroupCommand",
    "GroupType",
    "Group",
    "GroupCapability",
    "GroupStatsRequest",
    "BucketCounter",
    "GroupStats",
    "GroupFeatures",
]

_STATS_REQUEST = struct.Struct("!I4x")
_BUCKET_COUNTER = struct.Struct("!QQ")
_GROUP_STATS = struct.Struct("!H2xII4xQQII")
_GROUP_FEATURES = struct.Struct("!II4I4I")

# Number of words in the max-groups and actions arrays of group features.
_FEATURES_WORDS = 4


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


def _checked_length(length: int) -> int:
    if length > 0xFFFF:
        raise ValueError(f"message too long: {length} bytes")
    return length


def _words(values, name: str) -> tuple[int, ...]:
    words = tuple(int(v) for v in values)
    if len(words) != _FEATURES_WORDS:
        raise ValueError(
            f"{name} must hold exactly {_FEATURES_WORDS} words, got {len(words)}"
        )
    return words


class GroupCommand(enum.IntEnum):
    """Group modification commands."""

    ADD = 0
    MODIFY = 1
    DELETE = 2


class GroupType(enum.IntEnum):
    """Types of groups."""

    ALL = 0
    SELECT = 1
    INDIRECT = 2
    FAST_FAILOVER = 3


class Group(enum.IntEnum):
    """Reserved group identifiers."""

    MAX = 0xFFFFFF00
    ALL = 0xFFFFFFFC
    ANY = 0xFFFFFFFF


class GroupCapability(enum.IntFlag):
    """Group configuration capability flags."""

    SELECT_WEIGHT = 1 << 0
    SELECT_LIVENESS = 1 << 1
    CHAINING = 1 << 2
    CHAINING_CHECKS = 1 << 3


@dataclass
class GroupStatsRequest:
    """Multipart request for statistics of one or more groups."""

    group: int = 0

    def encode(self) -> bytes:
        """Serialize the request into the wire format."""
        return _STATS_REQUEST.pack(int(self.group))

    @classmethod
    def read(cls, reader: Reader) -> "GroupStatsRequest":
        """Read the request from a reader."""
        (group,) = reader.unpack(_STATS_REQUEST.format)
        return cls(_as_enum(Group, group))

    @classmethod
    def decode(cls, data: bytes) -> "GroupStatsRequest":
        """Decode the request from bytes."""
        return cls.read(Reader(data))


@dataclass
class BucketCounter:
    """Packets and bytes processed by a single bucket."""

    packet_count: int = 0
    byte_count: int = 0

    def encode(self) -> bytes:
        """Serialize the bucket counter into the wire format."""
        return _BUCKET_COUNTER.pack(self.packet_count, self.byte_count)

    @classmethod
    def read(cls, reader: Reader) -> "BucketCounter":
        """Read a bucket counter from a reader."""
        return cls(*reader.unpack(_BUCKET_COUNTER.format))

    @classmethod
    def decode(cls, data: bytes) -> "BucketCounter":
        """Decode a bucket counter from bytes."""
        return cls.read(Reader(data))


@dataclass
class GroupStats:
    """Statistics of a single group, with per-bucket counters."""

    group: int = 0
    ref_count: int = 0
    packet_count: int = 0
    byte_count: int = 0
    duration_sec: int = 0
    duration_nsec: int = 0
    bucket_stats: list[BucketCounter] = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the group statistics into the wire format."""
        counters = b"".join(counter.encode() for counter in self.bucket_stats)
        length = _checked_length(_GROUP_STATS.size + len(counters))
        header = _GROUP_STATS.pack(
            length, int(self.group), self.ref_count, self.packet_count,
            self.byte_count, self.duration_sec, self.duration_nsec,
        )
        return header + counters

    @classmethod
    def read(cls, reader: Reader) -> "GroupStats":
        """Read group statistics from a reader."""
        (length, group, ref_count, packet_count, byte_count,
         duration_sec, duration_nsec) = reader.unpack(_GROUP_STATS.format)
        body = reader.limit(length - _GROUP_STATS.size)
        counters = []
        while body.remaining():
            counters.append(BucketCounter.read(body))
        return cls(
            group=_as_enum(Group, group),
            ref_count=ref_count,
            packet_count=packet_count,
            byte_count=byte_count,
            duration_sec=duration_sec,
            duration_nsec=duration_nsec,
            bucket_stats=counters,
        )

    @classmethod
    def decode(cls, data: bytes) -> "GroupStats":
        """Decode group statistics from bytes."""
        return cls.read(Reader(data))


@dataclass
class GroupFeatures:
    """Capabilities of the groups on a switch."""

    types: int = 0
    capabilities: int = 0
    max_groups: tuple[int, ...] = (0, 0, 0, 0)
    actions: tuple[int, ...] = (0, 0, 0, 0)

    def __post_init__(self) -> None:
        self.max_groups = _words(self.max_groups, "max_groups")
        self.actions = _words(self.actions, "actions")

    def encode(self) -> bytes:
        """Serialize the group features into the wire format."""
        return _GROUP_FEATURES.pack(
            int(self.types), int(self.capabilities),
            *self.max_groups, *self.actions,
        )

    @classmethod
    def read(cls, reader: Reader) -> "GroupFeatures":
        """Read group features from a reader."""
        values = reader.unpack(_GROUP_FEATURES.format)
        return cls(values[0], values[1], values[2:6], values[6:10])

    @classmethod
    def decode(cls, data: bytes) -> "GroupFeatures":
        """Decode group features from bytes."""
        return cls.read(Reader(data))