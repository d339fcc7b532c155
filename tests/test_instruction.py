import pytest

from ofwire.instruction import (
    InstructionClearActions,
    InstructionGotoTable,
    InstructionMeter,
    InstructionType,
    InstructionWriteMetadata,
    encode_instructions,
    read_instructions,
)
from ofwire.meter import Meter
from ofwire.wire import DecodeError, Reader

GOTO_TABLE_BYTES = bytes([0x00, 0x01, 0x00, 0x08, 0x0f, 0x00, 0x00, 0x00])


def test_goto_table():
    inst = InstructionGotoTable(table=15)
    assert inst.encode() == GOTO_TABLE_BYTES
    assert InstructionGotoTable.decode(GOTO_TABLE_BYTES) == inst


WRITE_METADATA_BYTES = bytes([
    0x00, 0x02, 0x00, 0x18,
    0x00, 0x00, 0x00, 0x00,
    0x50, 0x91, 0xae, 0xdc, 0x96, 0x97, 0x44, 0x5e,
    0x3e, 0xc8, 0x94, 0xd8, 0x41, 0x07, 0x34, 0x94,
])


def test_write_metadata():
    inst = InstructionWriteMetadata(
        metadata=0x5091AEDC9697445E, metadata_mask=0x3EC894D841073494
    )
    assert inst.encode() == WRITE_METADATA_BYTES
    assert InstructionWriteMetadata.decode(WRITE_METADATA_BYTES) == inst


METER_BYTES = bytes([0x00, 0x06, 0x00, 0x08, 0x6b, 0xb9, 0x7a, 0x25])


def test_meter():
    inst = InstructionMeter(meter=0x6BB97A25)
    assert inst.encode() == METER_BYTES
    assert InstructionMeter.decode(METER_BYTES) == inst


def test_meter_reserved_value():
    inst = InstructionMeter.decode(bytes([0x00, 0x06, 0x00, 0x08, 0xff, 0xff, 0xff, 0xff]))
    assert inst.meter is Meter.ALL


CLEAR_ACTIONS_BYTES = bytes([0x00, 0x05, 0x00, 0x08, 0x00, 0x00, 0x00, 0x00])


def test_clear_actions():
    assert InstructionClearActions().encode() == CLEAR_ACTIONS_BYTES
    reader = Reader(CLEAR_ACTIONS_BYTES + b"\x01")
    assert InstructionClearActions.read(reader) == InstructionClearActions()
    assert reader.remaining() == 1


def test_instructions_round_trip():
    instructions = [
        InstructionGotoTable(3),
        InstructionWriteMetadata(1, 2),
        InstructionClearActions(),
        InstructionMeter(9),
    ]
    data = encode_instructions(instructions)
    assert len(data) == 8 + 24 + 8 + 8
    assert read_instructions(Reader(data)) == instructions


def test_read_instructions_known_bytes():
    data = GOTO_TABLE_BYTES + METER_BYTES
    assert read_instructions(Reader(data)) == [
        InstructionGotoTable(15),
        InstructionMeter(0x6BB97A25),
    ]


def test_unknown_instruction_type():
    with pytest.raises(DecodeError):
        read_instructions(Reader(bytes([0x00, 0x63, 0x00, 0x08, 0, 0, 0, 0])))


def test_unsupported_actions_instruction():
    data = bytes([0x00, int(InstructionType.APPLY_ACTIONS), 0x00, 0x08, 0, 0, 0, 0])
    with pytest.raises(DecodeError):
        read_instructions(Reader(data))


def test_truncated_write_metadata():
    with pytest.raises(DecodeError):
        InstructionWriteMetadata.decode(WRITE_METADATA_BYTES[:-2])