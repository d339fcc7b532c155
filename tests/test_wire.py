import struct

import pytest

from ofwire.wire import DecodeError, Reader, make_pad, pad_len


def test_pad_len_of_match_header_length():
    # A 12-byte match is followed by 4 bytes of padding.
    assert pad_len(12) == 4


@pytest.mark.parametrize("length", range(0, 64))
def test_pad_len_aligns_to_eight(length):
    padding = pad_len(length)
    assert 0 <= padding < 8
    assert (length + padding) % 8 == 0


@pytest.mark.parametrize("length", [0, 8, 16, 64])
def test_pad_len_zero_for_aligned(length):
    assert pad_len(length) == 0


@pytest.mark.parametrize("length", range(0, 20))
def test_make_pad_is_zero_bytes_of_pad_len(length):
    assert make_pad(length) == bytes(pad_len(length))


def test_read_returns_bytes_in_order():
    reader = Reader(b"abcdef")
    assert reader.read(2) == b"ab"
    assert reader.read(3) == b"cde"
    assert reader.remaining() == 1


def test_read_past_end_raises():
    reader = Reader(b"abc")
    with pytest.raises(DecodeError):
        reader.read(4)


def test_read_negative_raises_value_error():
    with pytest.raises(ValueError):
        Reader(b"abc").read(-1)


def test_skip_consumes():
    reader = Reader(b"abcdef")
    reader.skip(4)
    assert reader.read_all() == b"ef"


def test_skip_past_end_raises():
    with pytest.raises(DecodeError):
        Reader(b"ab").skip(3)


def test_unpack_round_trip_network_order():
    data = struct.pack("!HIQB", 513, 70000, 2**40 + 5, 7)
    reader = Reader(data)
    assert reader.unpack("HIQB") == (513, 70000, 2**40 + 5, 7)
    assert reader.remaining() == 0


def test_unpack_respects_explicit_byte_order():
    data = struct.pack("<I", 123456)
    assert Reader(data).unpack("<I") == (123456,)


def test_unpack_short_data_raises():
    with pytest.raises(DecodeError):
        Reader(b"\x00\x01").unpack("I")


def test_limit_splits_and_consumes():
    reader = Reader(b"abcdef")
    sub = reader.limit(4)
    assert sub.read_all() == b"abcd"
    assert reader.read_all() == b"ef"


def test_limit_beyond_end_truncates():
    reader = Reader(b"abc")
    sub = reader.limit(10)
    assert sub.read_all() == b"abc"
    assert reader.remaining() == 0


def test_limit_negative_is_empty():
    reader = Reader(b"abc")
    sub = reader.limit(-4)
    assert sub.remaining() == 0
    assert reader.remaining() == 3


def test_read_all_empties_reader():
    reader = Reader(b"xyz")
    assert reader.read_all() == b"xyz"
    assert reader.read_all() == b""
    assert reader.remaining() == 0