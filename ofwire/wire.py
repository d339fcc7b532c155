"""Low-level helpers for the OpenFlow wire format: padding and a byte reader."""

from __future__ import annotations

import struct

__all__ = ["DecodeError", "Reader", "pad_len", "make_pad"]

_BYTE_ORDER_CHARS = "@=<>!"


class DecodeError(ValueError):
    """Raised when bytes cannot be decoded into a message."""


def pad_len(length: int) -> int:
    """Return the number of bytes needed to align ``length`` to 8 bytes."""
    return (length + 7) // 8 * 8 - length


def make_pad(length: int) -> bytes:
    """Return zero bytes that align ``length`` to an 8-byte boundary."""
    return bytes(pad_len(length))


class Reader:
    """A cursor over an immutable byte string.

    Reads consume bytes from the front. Asking for more bytes than are left
    raises :class:`DecodeError`.
    """

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytes(data)
        self._pos = 0

    def __repr__(self) -> str:
        return f"Reader(remaining={self.remaining()})"

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._pos

    def read(self, size: int) -> bytes:
        """Consume and return exactly ``size`` bytes."""
        if size < 0:
            raise ValueError(f"negative read size: {size}")
        if size > self.remaining():
            raise DecodeError(
                f"unexpected end of data: wanted {size} bytes, "
                f"{self.remaining()} left"
            )
        start = self._pos
        self._pos += size
        return self._data[start:self._pos]

    def skip(self, size: int) -> None:
        """Consume ``size`` bytes and discard them."""
        self.read(size)

    def unpack(self, fmt: str) -> tuple:
        """Consume and unpack a struct format; network byte order by default."""
        if not fmt or fmt[0] not in _BYTE_ORDER_CHARS:
            fmt = "!" + fmt
        layout = struct.Struct(fmt)
        return layout.unpack(self.read(layout.size))

    def limit(self, size: int) -> "Reader":
        """Split off a reader over at most the next ``size`` bytes.

        The bytes handed to the new reader are consumed from this one.
        A negative size gives an empty reader.
        """
        size = max(0, min(size, self.remaining()))
        return Reader(self.read(size))

    def read_all(self) -> bytes:
        """Consume and return every remaining byte."""
        return self.read(self.remaining())