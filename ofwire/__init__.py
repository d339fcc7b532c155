"""Encoding and decoding of OpenFlow 1.3 switch protocol message bodies."""

__version__ = "0.1.0"

__all__ = [
    "group",
    "handshake",
    "instruction",
    "match",
    "meter",
    "multipart",
    "packet",
    "port",
    "queue",
    "switch",
    "wire",
]