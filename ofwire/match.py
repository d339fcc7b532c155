"""OpenFlow extensible match (OXM) fields and match structures."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Optional

from ofwire.wire import Reader, make_pad, pad_len

__all__ = [
    "XMType",
    "XMClass",
    "VlanID",
    "IPv6ExtensionHeader",
    "MatchType",
    "XMValue",
    "XM",
    "Match",
]

# Length of the extensible match header, without value and mask.
_XM_HEADER_LEN = 4


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


class XMType(enum.IntEnum):
    """Match field types of the OpenFlow basic class."""

    IN_PORT = 0
    IN_PHY_PORT = 1
    METADATA = 2
    ETH_DST = 3
    ETH_SRC = 4
    ETH_TYPE = 5
    VLAN_ID = 6
    VLAN_PCP = 7
    IP_DSCP = 8
    IP_ECN = 9
    IP_PROTO = 10
    IPV4_SRC = 11
    IPV4_DST = 12
    TCP_SRC = 13
    TCP_DST = 14
    UDP_SRC = 15
    UDP_DST = 16
    SCTP_SRC = 17
    SCTP_DST = 18
    ICMPV4_TYPE = 19
    ICMPV4_CODE = 20
    ARP_OPCODE = 21
    ARP_SPA = 22
    ARP_TPA = 23
    ARP_SHA = 24
    ARP_THA = 25
    IPV6_SRC = 26
    IPV6_DST = 27
    IPV6_FLABEL = 28
    ICMPV6_TYPE = 29
    ICMPV6_CODE = 30
    IPV6_ND_TARGET = 31
    IPV6_ND_SLL = 32
    IPV6_ND_TLL = 33
    MPLS_LABEL = 34
    MPLS_TC = 35
    MPLS_BOS = 36
    PBB_ISID = 37
    TUNNEL_ID = 38
    IPV6_EXT_HEADER = 39


class XMClass(enum.IntEnum):
    """OXM class identifiers."""

    NICIRA0 = 0x0000
    NICIRA1 = 0x0001
    OPENFLOW_BASIC = 0x8000
    EXPERIMENTER = 0xFFFF


class VlanID(enum.IntEnum):
    """Bit definitions for VLAN ID match values."""

    NONE = 0x0000
    PRESENT = 0x1000


class IPv6ExtensionHeader(enum.IntFlag):
    """Bits of the IPv6 extension header pseudo-field."""

    NO_NEXT = 1 << 0
    ESP = 1 << 1
    AUTH = 1 << 2
    DEST = 1 << 3
    FRAG = 1 << 4
    ROUTER = 1 << 5
    HOP = 1 << 6
    UNREP = 1 << 7
    UNSEQ = 1 << 8


class MatchType(enum.IntEnum):
    """The match structure in use."""

    STANDARD = 0
    XM = 1


class XMValue(bytes):
    """The value or mask of an extensible match."""

    def _uint(self, size: int) -> int:
        if len(self) < size:
            return 0
        return int.from_bytes(self[:size], "big")

    def uint8(self) -> int:
        """Return the leading byte as an unsigned integer (0 if too short)."""
        return self._uint(1)

    def uint16(self) -> int:
        """Return the leading two bytes as a big-endian integer (0 if too short)."""
        return self._uint(2)

    def uint32(self) -> int:
        """Return the leading four bytes as a big-endian integer (0 if too short)."""
        return self._uint(4)


@dataclass
class XM:
    """A single OXM type-length-value match field."""

    xm_class: int = XMClass.NICIRA0
    type: int = XMType.IN_PORT
    value: XMValue = field(default_factory=XMValue)
    mask: XMValue = field(default_factory=XMValue)

    def __post_init__(self) -> None:
        self.value = XMValue(self.value)
        self.mask = XMValue(self.mask)

    def encode(self) -> bytes:
        """Serialize the match field into the wire format."""
        length = len(self.value) + len(self.mask)
        if length > 0xFF:
            raise ValueError(f"match field payload too long: {length} bytes")
        has_mask = 1 if self.mask else 0
        type_field = ((int(self.type) << 1) | has_mask) & 0xFF
        header = struct.pack("!HBB", int(self.xm_class), type_field, length)
        return header + bytes(self.value) + bytes(self.mask)

    @classmethod
    def read(cls, reader: Reader, has_payload: bool = True) -> "XM":
        """Read a match field; without payload, value and mask are zero bytes."""
        xm_class, type_field, length = reader.unpack("HBB")
        has_mask = type_field & 1 == 1
        value = reader.read(length) if has_payload else bytes(length)
        mask = b""
        if has_mask:
            half = length // 2
            mask = value[half:half * 2]
            value = value[:half]
        return cls(
            xm_class=_as_enum(XMClass, xm_class),
            type=_as_enum(XMType, type_field >> 1),
            value=XMValue(value),
            mask=XMValue(mask),
        )

    @classmethod
    def decode(cls, data: bytes) -> "XM":
        """Decode a match field from bytes."""
        return cls.read(Reader(data))


def _read_all_xm(reader: Reader, has_payload: bool) -> list[XM]:
    fields = []
    while reader.remaining() >= _XM_HEADER_LEN:
        fields.append(XM.read(reader, has_payload))
    reader.read_all()
    return fields


@dataclass
class Match:
    """A set of match fields, padded to a multiple of eight bytes."""

    type: int = MatchType.STANDARD
    fields: list[XM] = field(default_factory=list)

    def field(self, xm_type: int) -> Optional[XM]:
        """Return the first match field of the given type, or None."""
        return next((xm for xm in self.fields if xm.type == xm_type), None)

    def encode(self) -> bytes:
        """Serialize the match into the wire format."""
        body = b"".join(xm.encode() for xm in self.fields)
        length = len(body) + 4
        if length > 0xFFFF:
            raise ValueError(f"match too long: {length} bytes")
        return struct.pack("!HH", int(self.type), length) + body + make_pad(length)

    @classmethod
    def read(cls, reader: Reader) -> "Match":
        """Read a match, including its trailing padding."""
        match_type, length = reader.unpack("HH")
        fields = _read_all_xm(reader.limit(length - 4), has_payload=True)
        reader.skip(pad_len(length))
        return cls(type=_as_enum(MatchType, match_type), fields=fields)

    @classmethod
    def decode(cls, data: bytes) -> "Match":
        """Decode a match from bytes."""
        return cls.read(Reader(data))