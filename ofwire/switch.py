"""Switch features and switch configuration messages."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

from ofwire.wire import Reader

__all__ = ["Capability", "ConfigFlag", "SwitchFeatures", "SwitchConfig"]

_FEATURES = struct.Struct("!QIBB2xII")
_CONFIG = struct.Struct("!HH")


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


class Capability(enum.IntFlag):
    """Switch capabilities bitmap."""

    FLOW_STATS = 1 << 0
    TABLE_STATS = 1 << 1
    PORT_STATS = 1 << 2
    GROUP_STATS = 1 << 3
    IP_REASM = 1 << 4
    QUEUE_STATS = 1 << 5
    PORT_BLOCKED = 1 << 8


class ConfigFlag(enum.IntEnum):
    """IP fragment handling configured on the switch."""

    FRAG_NORMAL = 0
    FRAG_DROP = 1
    FRAG_REASM = 2
    FRAG_MASK = 3


@dataclass
class SwitchFeatures:
    """Reply to a features request."""

    datapath_id: int = 0
    num_buffers: int = 0
    num_tables: int = 0
    auxiliary_id: int = 0
    capabilities: int = Capability(0)
    reserved: int = 0

    def encode(self) -> bytes:
        """Serialize the switch features into the wire format."""
        return _FEATURES.pack(
            self.datapath_id, self.num_buffers, self.num_tables,
            self.auxiliary_id, int(self.capabilities), self.reserved,
        )

    @classmethod
    def read(cls, reader: Reader) -> "SwitchFeatures":
        """Read switch features from a reader."""
        (datapath_id, num_buffers, num_tables, auxiliary_id,
         capabilities, reserved) = reader.unpack(_FEATURES.format)
        return cls(
            datapath_id=datapath_id,
            num_buffers=num_buffers,
            num_tables=num_tables,
            auxiliary_id=auxiliary_id,
            capabilities=Capability(capabilities),
            reserved=reserved,
        )

    @classmethod
    def decode(cls, data: bytes) -> "SwitchFeatures":
        """Decode switch features from bytes."""
        return cls.read(Reader(data))


@dataclass
class SwitchConfig:
    """Reply to a get-config request."""

    flags: int = ConfigFlag.FRAG_NORMAL
    miss_send_length: int = 0

    def encode(self) -> bytes:
        """Serialize the switch configuration into the wire format."""
        return _CONFIG.pack(int(self.flags), self.miss_send_length)

    @classmethod
    def read(cls, reader: Reader) -> "SwitchConfig":
        """Read a switch configuration from a reader."""
        flags, miss_send_length = reader.unpack(_CONFIG.format)
        return cls(_as_enum(ConfigFlag, flags), miss_send_length)

    @classmethod
    def decode(cls, data: bytes) -> "SwitchConfig":
        """Decode a switch configuration from bytes."""
        return cls.read(Reader(data))