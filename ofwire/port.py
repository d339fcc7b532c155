"""Switch port descriptions, modifications, status and statistics."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

from ofwire.wire import Reader

__all__ = [
    "PortFeature",
    "PortConfig",
    "PortState",
    "PortNo",
    "PortReason",
    "Port",
    "PortMod",
    "PortStatus",
    "PortStatsRequest",
    "PortStats",
    "read_ports",
]

# Length of the port name field on the wire.
PORT_NAME_LEN = 16
# Length of a hardware (MAC) address on the wire.
HW_ADDR_LEN = 6

_PORT = struct.Struct(f"!I4x{HW_ADDR_LEN}s2x{PORT_NAME_LEN}s8I")
_PORT_MOD = struct.Struct(f"!I4x{HW_ADDR_LEN}s2xIII4x")
_PORT_STATUS = struct.Struct("!B7x")
_PORT_STATS_REQUEST = struct.Struct("!I4x")
_PORT_STATS = struct.Struct("!I4x12QII")


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


def _hw_addr(addr: bytes) -> bytes:
    addr = bytes(addr)
    if len(addr) != HW_ADDR_LEN:
        raise ValueError(
            f"hardware address must be {HW_ADDR_LEN} bytes, got {len(addr)}"
        )
    return addr


class PortFeature(enum.IntFlag):
    """Features of a port available in the datapath."""

    RATE_10MB_HD = 1 << 0
    RATE_10MB_FD = 1 << 1
    RATE_100MB_HD = 1 << 2
    RATE_100MB_FD = 1 << 3
    RATE_1GB_HD = 1 << 4
    RATE_1GB_FD = 1 << 5
    RATE_10GB_FD = 1 << 6
    RATE_40GB_FD = 1 << 7
    RATE_100GB_FD = 1 << 8
    RATE_1TB_FD = 1 << 9
    OTHER = 1 << 10
    COPPER = 1 << 11
    FIBER = 1 << 12
    AUTONEG = 1 << 13
    PAUSE = 1 << 14
    PAUSE_ASYM = 1 << 15

    def __str__(self) -> str:
        value = int(self)
        return " ".join(text for mask, text in _PORT_FEATURE_TEXT if value & mask)


_PORT_FEATURE_TEXT = [
    (PortFeature.RATE_10MB_HD, "10 Mbps half-duplex"),
    (PortFeature.RATE_10MB_FD, "10 Mbps full-duplex"),
    (PortFeature.RATE_100MB_HD, "100 Mbps half-duplex"),
    (PortFeature.RATE_100MB_FD, "100 Mbps full-duplex"),
    (PortFeature.RATE_1GB_HD, "1 Gbps half-duplex"),
    (PortFeature.RATE_1GB_FD, "1 Gbps full-duplex"),
    (PortFeature.RATE_10GB_FD, "10 Gbps full-duplex"),
    (PortFeature.RATE_40GB_FD, "40 Gbps full-duplex"),
    (PortFeature.RATE_100GB_FD, "100 Gbps full-duplex"),
    (PortFeature.RATE_1TB_FD, "1 Tbps full-duplex"),
    (PortFeature.OTHER, "other"),
    (PortFeature.COPPER, "copper"),
    (PortFeature.FIBER, "fiber"),
    (PortFeature.AUTONEG, "autoneg"),
    (PortFeature.PAUSE, "pause"),
    (PortFeature.PAUSE_ASYM, "pause asym"),
]


class PortConfig(enum.IntFlag):
    """Administrative configuration flags of a port."""

    DOWN = 1 << 0
    NO_STP = 1 << 1
    NO_RECV = 1 << 2
    NO_RECV_STP = 1 << 3
    NO_FLOOD = 1 << 4
    NO_FWD = 1 << 5
    NO_PACKET_IN = 1 << 6

    def __str__(self) -> str:
        value = int(self)
        words = [] if value & PortConfig.DOWN else ["up"]
        words.extend(text for mask, text in _PORT_CONFIG_TEXT if value & mask)
        return " ".join(words)


_PORT_CONFIG_TEXT = [
    (PortConfig.DOWN, "down"),
    (PortConfig.NO_STP, "no STP"),
    (PortConfig.NO_RECV, "no recv"),
    (PortConfig.NO_RECV_STP, "no recv STP"),
    (PortConfig.NO_FLOOD, "no flood"),
    (PortConfig.NO_FWD, "no fwd"),
    (PortConfig.NO_PACKET_IN, "no packet in"),
]


class PortState(enum.IntFlag):
    """Current state of the physical port."""

    LINK_DOWN = 1 << 0
    BLOCKED = 1 << 1
    LIVE = 1 << 2

    def __str__(self) -> str:
        return _PORT_STATE_TEXT.get(int(self), "link up")


_PORT_STATE_TEXT = {
    int(PortState.LINK_DOWN): "link down",
    int(PortState.BLOCKED): "blocked",
    int(PortState.LIVE): "live",
}


class PortNo(enum.IntEnum):
    """Reserved switch port numbers."""

    MAX = 0xFFFFFF00
    IN_PORT = 0xFFFFFFF8
    TABLE = 0xFFFFFFF9
    NORMAL = 0xFFFFFFFA
    FLOOD = 0xFFFFFFFB
    ALL = 0xFFFFFFFC
    CONTROLLER = 0xFFFFFFFD
    LOCAL = 0xFFFFFFFE
    ANY = 0xFFFFFFFF


class PortReason(enum.IntEnum):
    """Why a port status message was sent."""

    ADD = 0
    DELETE = 1
    MODIFY = 2


@dataclass
class Port:
    """Description of a switch port."""

    port_no: int = 0
    hw_addr: bytes = bytes(HW_ADDR_LEN)
    name: str = ""
    config: int = PortConfig(0)
    state: int = PortState(0)
    curr: int = PortFeature(0)
    advertised: int = PortFeature(0)
    supported: int = PortFeature(0)
    peer: int = PortFeature(0)
    curr_speed: int = 0
    max_speed: int = 0

    def encode(self) -> bytes:
        """Serialize the port description; the name is cut to 16 bytes."""
        return _PORT.pack(
            int(self.port_no), _hw_addr(self.hw_addr), self.name.encode(),
            int(self.config), int(self.state), int(self.curr),
            int(self.advertised), int(self.supported), int(self.peer),
            self.curr_speed, self.max_speed,
        )

    @classmethod
    def read(cls, reader: Reader) -> "Port":
        """Read a port description from a reader."""
        (port_no, hw_addr, name, config, state, curr, advertised,
         supported, peer, curr_speed, max_speed) = reader.unpack(_PORT.format)
        return cls(
            port_no=_as_enum(PortNo, port_no),
            hw_addr=hw_addr,
            name=name.split(b"\0", 1)[0].decode("utf-8", "replace"),
            config=PortConfig(config),
            state=PortState(state),
            curr=PortFeature(curr),
            advertised=PortFeature(advertised),
            supported=PortFeature(supported),
            peer=PortFeature(peer),
            curr_speed=curr_speed,
            max_speed=max_speed,
        )

    @classmethod
    def decode(cls, data: bytes) -> "Port":
        """Decode a port description from bytes."""
        return cls.read(Reader(data))


def read_ports(reader: Reader) -> list[Port]:
    """Read port descriptions until the reader is exhausted."""
    ports = []
    while reader.remaining():
        ports.append(Port.read(reader))
    return ports


@dataclass
class PortMod:
    """Request to modify the behaviour of a port."""

    port_no: int = 0
    hw_addr: bytes = bytes(HW_ADDR_LEN)
    config: int = PortConfig(0)
    mask: int = PortConfig(0)
    advertise: int = PortFeature(0)

    def encode(self) -> bytes:
        """Serialize the port modification into the wire format."""
        return _PORT_MOD.pack(
            int(self.port_no), _hw_addr(self.hw_addr), int(self.config),
            int(self.mask), int(self.advertise),
        )

    @classmethod
    def read(cls, reader: Reader) -> "PortMod":
        """Read a port modification from a reader."""
        port_no, hw_addr, config, mask, advertise = reader.unpack(_PORT_MOD.format)
        return cls(
            port_no=_as_enum(PortNo, port_no),
            hw_addr=hw_addr,
            config=PortConfig(config),
            mask=PortConfig(mask),
            advertise=PortFeature(advertise),
        )

    @classmethod
    def decode(cls, data: bytes) -> "PortMod":
        """Decode a port modification from bytes."""
        return cls.read(Reader(data))


@dataclass
class PortStatus:
    """Notification that a port was added, removed or modified."""

    reason: int = PortReason.ADD
    port: Port = field(default_factory=Port)

    def encode(self) -> bytes:
        """Serialize the port status into the wire format."""
        return _PORT_STATUS.pack(int(self.reason)) + self.port.encode()

    @classmethod
    def read(cls, reader: Reader) -> "PortStatus":
        """Read a port status from a reader."""
        (reason,) = reader.unpack(_PORT_STATUS.format)
        return cls(_as_enum(PortReason, reason), Port.read(reader))

    @classmethod
    def decode(cls, data: bytes) -> "PortStatus":
        """Decode a port status from bytes."""
        return cls.read(Reader(data))


@dataclass
class PortStatsRequest:
    """Multipart request body asking for port statistics."""

    port_no: int = 0

    def encode(self) -> bytes:
        """Serialize the request into the wire format."""
        return _PORT_STATS_REQUEST.pack(int(self.port_no))

    @classmethod
    def read(cls, reader: Reader) -> "PortStatsRequest":
        """Read the request from a reader."""
        (port_no,) = reader.unpack(_PORT_STATS_REQUEST.format)
        return cls(_as_enum(PortNo, port_no))

    @classmethod
    def decode(cls, data: bytes) -> "PortStatsRequest":
        """Decode the request from bytes."""
        return cls.read(Reader(data))


@dataclass
class PortStats:
    """Statistics of a single port."""

    port_no: int = 0
    rx_packets: int = 0
    tx_packets: int = 0
    rx_bytes: int = 0
    tx_bytes: int = 0
    rx_dropped: int = 0
    tx_dropped: int = 0
    rx_errors: int = 0
    tx_errors: int = 0
    rx_frame_err: int = 0
    rx_over_err: int = 0
    rx_crc_err: int = 0
    collisions: int = 0
    duration_sec: int = 0
    duration_nsec: int = 0

    def encode(self) -> bytes:
        """Serialize the port statistics into the wire format."""
        return _PORT_STATS.pack(
            int(self.port_no), self.rx_packets, self.tx_packets,
            self.rx_bytes, self.tx_bytes, self.rx_dropped, self.tx_dropped,
            self.rx_errors, self.tx_errors, self.rx_frame_err,
            self.rx_over_err, self.rx_crc_err, self.collisions,
            self.duration_sec, self.duration_nsec,
        )

    @classmethod
    def read(cls, reader: Reader) -> "PortStats":
        """Read port statistics from a reader."""
        values = reader.unpack(_PORT_STATS.format)
        return cls(_as_enum(PortNo, values[0]), *values[1:])

    @classmethod
    def decode(cls, data: bytes) -> "PortStats":
        """Decode port statistics from bytes."""
        return cls.read(Reader(data))