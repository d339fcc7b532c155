"""Packet-in messages sent by the datapath to the controller."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

from ofwire.match import Match
from ofwire.wire import Reader

__all__ = ["NO_BUFFER", "PacketInReason", "PacketIn"]

# Buffer identifier used when no buffered packet is associated.
NO_BUFFER = 0xFFFFFFFF

_HEADER = struct.Struct("!IHBBQ")
_MATCH_PAD = 2


class PacketInReason(enum.IntEnum):
    """Why a packet was sent to the controller."""

    NO_MATCH = 0
    ACTION = 1
    INVALID_TTL = 2


@dataclass
class PacketIn:
    """A packet forwarded by the datapath to the controller."""

    buffer: int = 0
    length: int = 0
    reason: int = PacketInReason.NO_MATCH
    table: int = 0
    cookie: int = 0
    match: Match = field(default_factory=Match)
    data: bytes = b""

    def encode(self) -> bytes:
        """Serialize the packet-in message into the wire format."""
        header = _HEADER.pack(
            self.buffer, self.length, int(self.reason),
            int(self.table), self.cookie,
        )
        return header + self.match.encode() + bytes(_MATCH_PAD) + bytes(self.data)

    @classmethod
    def read(cls, reader: Reader) -> "PacketIn":
        """Read a packet-in message; the frame takes all remaining bytes."""
        buffer, length, reason, table, cookie = reader.unpack(_HEADER.format)
        match = Match.read(reader)
        reader.skip(_MATCH_PAD)
        try:
            reason = PacketInReason(reason)
        except ValueError:
            pass
        return cls(
            buffer=buffer,
            length=length,
            reason=reason,
            table=table,
            cookie=cookie,
            match=match,
            data=reader.read_all(),
        )

    @classmethod
    def decode(cls, data: bytes) -> "PacketIn":
        """Decode a packet-in message from bytes."""
        return cls.read(Reader(data))