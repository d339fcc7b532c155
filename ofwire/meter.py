"""Meters: meter bands, meter modification, configuration, features and statistics."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import ClassVar

from ofwire.wire import DecodeError, Reader

__all__ = [
    "MeterCommand",
    "MeterFlag",
    "Meter",
    "MeterBandType",
    "MeterBandDrop",
    "MeterBandDSCPRemark",
    "MeterBandExperimenter",
    "MeterMod",
    "MeterConfigRequest",
    "MeterConfig",
    "MeterFeatures",
    "MeterBandStats",
    "MeterStatsRequest",
    "MeterStats",
    "encode_meter_bands",
    "read_meter_bands",
]

# Length of every meter band defined here, header included.
_METER_BAND_LEN = 16

_BAND_HEADER = struct.Struct("!HH")
_BAND_DROP = struct.Struct("!HHII4x")
_BAND_DSCP_REMARK = struct.Struct("!HHIIB3x")
_BAND_EXPERIMENTER = struct.Struct("!HHIII")
_METER_MOD = struct.Struct("!HHI")
_METER_REQUEST = struct.Struct("!I4x")
_METER_CONFIG = struct.Struct("!HHI")
_METER_FEATURES = struct.Struct("!IIIBB2x")
_BAND_STATS = struct.Struct("!QQ")
_METER_STATS = struct.Struct("!IH6xIQQII")


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


def _checked_length(length: int) -> int:
    if length > 0xFFFF:
        raise ValueError(f"message too long: {length} bytes")
    return length


class MeterCommand(enum.IntEnum):
    """Meter modification commands."""

    ADD = 0
    MODIFY = 1
    DELETE = 2


class MeterFlag(enum.IntFlag):
    """Meter configuration flags."""

    KBIT_PER_SEC = 1 << 0
    PACKET_PER_SEC = 1 << 1
    BURST = 1 << 2
    STATS = 1 << 3


class Meter(enum.IntEnum):
    """Reserved meter identifiers."""

    MAX = 0xFFFF0000
    SLOWPATH = 0xFFFFFFFD
    CONTROLLER = 0xFFFFFFFE
    ALL = 0xFFFFFFFF


class MeterBandType(enum.IntEnum):
    """Types of meter bands."""

    DROP = 1
    DSCP_REMARK = 2
    EXPERIMENTER = 0xFFFF


@dataclass
class MeterBandDrop:
    """Rate limiter that drops packets exceeding the band rate."""

    type: ClassVar[MeterBandType] = MeterBandType.DROP

    rate: int = 0
    burst_size: int = 0

    def encode(self) -> bytes:
        """Serialize the band, header included."""
        return _BAND_DROP.pack(
            int(self.type), _METER_BAND_LEN, self.rate, self.burst_size
        )

    @classmethod
    def read(cls, reader: Reader) -> "MeterBandDrop":
        """Read the band, header included."""
        _, _, rate, burst_size = reader.unpack(_BAND_DROP.format)
        return cls(rate, burst_size)


@dataclass
class MeterBandDSCPRemark:
    """Band that raises the drop precedence of the DSCP field."""

    type: ClassVar[MeterBandType] = MeterBandType.DSCP_REMARK

    rate: int = 0
    burst_size: int = 0
    prec_level: int = 0

    def encode(self) -> bytes:
        """Serialize the band, header included."""
        return _BAND_DSCP_REMARK.pack(
            int(self.type), _METER_BAND_LEN,
            self.rate, self.burst_size, self.prec_level,
        )

    @classmethod
    def read(cls, reader: Reader) -> "MeterBandDSCPRemark":
        """Read the band, header included."""
        _, _, rate, burst_size, prec_level = reader.unpack(
            _BAND_DSCP_REMARK.format
        )
        return cls(rate, burst_size, prec_level)


@dataclass
class MeterBandExperimenter:
    """Experimenter-defined meter band."""

    type: ClassVar[MeterBandType] = MeterBandType.EXPERIMENTER

    rate: int = 0
    burst_size: int = 0
    experimenter: int = 0

    def encode(self) -> bytes:
        """Serialize the band, header included."""
        return _BAND_EXPERIMENTER.pack(
            int(self.type), _METER_BAND_LEN,
            self.rate, self.burst_size, self.experimenter,
        )

    @classmethod
    def read(cls, reader: Reader) -> "MeterBandExperimenter":
        """Read the band, header included."""
        _, _, rate, burst_size, experimenter = reader.unpack(
            _BAND_EXPERIMENTER.format
        )
        return cls(rate, burst_size, experimenter)


_METER_BAND_TYPES = {
    MeterBandType.DROP: MeterBandDrop,
    MeterBandType.DSCP_REMARK: MeterBandDSCPRemark,
    MeterBandType.EXPERIMENTER: MeterBandExperimenter,
}


def encode_meter_bands(bands) -> bytes:
    """Serialize a sequence of meter bands."""
    return b"".join(band.encode() for band in bands)


def read_meter_bands(reader: Reader) -> list:
    """Read meter bands until the reader is exhausted."""
    bands = []
    while reader.remaining():
        header = reader.read(_BAND_HEADER.size)
        band_type, length = _BAND_HEADER.unpack(header)
        band_cls = _METER_BAND_TYPES.get(band_type)
        if band_cls is None:
            raise DecodeError(f"unknown meter band type: {band_type:#x}")
        body = reader.read(max(0, min(length - len(header), reader.remaining())))
        bands.append(band_cls.read(Reader(header + body)))
    return bands


@dataclass
class MeterMod:
    """Message used by the controller to modify a meter."""

    command: int = MeterCommand.ADD
    flags: int = MeterFlag(0)
    meter: int = 0
    bands: list = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the meter modification into the wire format."""
        header = _METER_MOD.pack(int(self.command), int(self.flags), int(self.meter))
        return header + encode_meter_bands(self.bands)

    @classmethod
    def read(cls, reader: Reader) -> "MeterMod":
        """Read a meter modification; bands take all remaining bytes."""
        command, flags, meter = reader.unpack(_METER_MOD.format)
        return cls(
            _as_enum(MeterCommand, command),
            MeterFlag(flags),
            _as_enum(Meter, meter),
            read_meter_bands(reader),
        )

    @classmethod
    def decode(cls, data: bytes) -> "MeterMod":
        """Decode a meter modification from bytes."""
        return cls.read(Reader(data))


@dataclass
class MeterConfigRequest:
    """Multipart request for the configuration of one or all meters."""

    meter: int = 0

    def encode(self) -> bytes:
        """Serialize the request into the wire format."""
        return _METER_REQUEST.pack(int(self.meter))

    @classmethod
    def read(cls, reader: Reader) -> "MeterConfigRequest":
        """Read the request from a reader."""
        (meter,) = reader.unpack(_METER_REQUEST.format)
        return cls(_as_enum(Meter, meter))

    @classmethod
    def decode(cls, data: bytes) -> "MeterConfigRequest":
        """Decode the request from bytes."""
        return cls.read(Reader(data))


@dataclass
class MeterConfig:
    """Configuration of a single meter, returned in a multipart reply."""

    flags: int = MeterFlag(0)
    meter: int = 0
    bands: list = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the meter configuration into the wire format."""
        bands = encode_meter_bands(self.bands)
        length = _checked_length(_METER_CONFIG.size + len(bands))
        return _METER_CONFIG.pack(length, int(self.flags), int(self.meter)) + bands

    @classmethod
    def read(cls, reader: Reader) -> "MeterConfig":
        """Read a meter configuration from a reader."""
        length, flags, meter = reader.unpack(_METER_CONFIG.format)
        bands = read_meter_bands(reader.limit(length - _METER_CONFIG.size))
        return cls(MeterFlag(flags), _as_enum(Meter, meter), bands)

    @classmethod
    def decode(cls, data: bytes) -> "MeterConfig":
        """Decode a meter configuration from bytes."""
        return cls.read(Reader(data))


@dataclass
class MeterFeatures:
    """Features of the metering subsystem."""

    max_meter: int = 0
    band_types: int = 0
    capabilities: int = 0
    max_bands: int = 0
    max_color: int = 0

    def encode(self) -> bytes:
        """Serialize the meter features into the wire format."""
        return _METER_FEATURES.pack(
            self.max_meter, self.band_types, self.capabilities,
            self.max_bands, self.max_color,
        )

    @classmethod
    def read(cls, reader: Reader) -> "MeterFeatures":
        """Read meter features from a reader."""
        return cls(*reader.unpack(_METER_FEATURES.format))

    @classmethod
    def decode(cls, data: bytes) -> "MeterFeatures":
        """Decode meter features from bytes."""
        return cls.read(Reader(data))


@dataclass
class MeterBandStats:
    """Packets and bytes processed by a single band."""

    packet_band_count: int = 0
    byte_band_count: int = 0

    def encode(self) -> bytes:
        """Serialize the band statistics into the wire format."""
        return _BAND_STATS.pack(self.packet_band_count, self.byte_band_count)

    @classmethod
    def read(cls, reader: Reader) -> "MeterBandStats":
        """Read band statistics from a reader."""
        return cls(*reader.unpack(_BAND_STATS.format))

    @classmethod
    def decode(cls, data: bytes) -> "MeterBandStats":
        """Decode band statistics from bytes."""
        return cls.read(Reader(data))


@dataclass
class MeterStatsRequest:
    """Multipart request for the statistics of one or all meters."""

    meter: int = 0

    def encode(self) -> bytes:
        """Serialize the request into the wire format."""
        return _METER_REQUEST.pack(int(self.meter))

    @classmethod
    def read(cls, reader: Reader) -> "MeterStatsRequest":
        """Read the request from a reader."""
        (meter,) = reader.unpack(_METER_REQUEST.format)
        return cls(_as_enum(Meter, meter))

    @classmethod
    def decode(cls, data: bytes) -> "MeterStatsRequest":
        """Decode the request from bytes."""
        return cls.read(Reader(data))


@dataclass
class MeterStats:
    """Statistics of a single meter."""

    meter: int = 0
    flow_count: int = 0
    packet_in_count: int = 0
    byte_in_count: int = 0
    duration_sec: int = 0
    duration_nsec: int = 0
    band_stats: list[MeterBandStats] = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialize the meter statistics into the wire format."""
        stats = b"".join(s.encode() for s in self.band_stats)
        length = _checked_length(_METER_STATS.size + len(stats))
        header = _METER_STATS.pack(
            int(self.meter), length, self.flow_count, self.packet_in_count,
            self.byte_in_count, self.duration_sec, self.duration_nsec,
        )
        return header + stats

    @classmethod
    def read(cls, reader: Reader) -> "MeterStats":
        """Read meter statistics from a reader."""
        (meter, length, flow_count, packet_in_count, byte_in_count,
         duration_sec, duration_nsec) = reader.unpack(_METER_STATS.format)
        body = reader.limit(length - _METER_STATS.size)
        band_stats = []
        while body.remaining():
            band_stats.append(MeterBandStats.read(body))
        return cls(
            meter=_as_enum(Meter, meter),
            flow_count=flow_count,
            packet_in_count=packet_in_count,
            byte_in_count=byte_in_count,
            duration_sec=duration_sec,
            duration_nsec=duration_nsec,
            band_stats=band_stats,
        )

    @classmethod
    def decode(cls, data: bytes) -> "MeterStats":
        """Decode meter statistics from bytes."""
        return cls.read(Reader(data))