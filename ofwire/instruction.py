"""Flow instructions: goto-table, write-metadata, clear-actions and meter."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar

from ofwire.meter import Meter
from ofwire.wire import DecodeError, Reader

__all__ = [
    "InstructionType",
    "InstructionGotoTable",
    "InstructionWriteMetadata",
    "InstructionClearActions",
    "InstructionMeter",
    "encode_instructions",
    "read_instructions",
]

_HEADER = struct.Struct("!HH")
_GOTO_TABLE = struct.Struct("!HHB3x")
_WRITE_METADATA = struct.Struct("!HH4xQQ")
_CLEAR_ACTIONS = struct.Struct("!HH4x")
_METER = struct.Struct("!HHI")


def _as_enum(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        return value


class InstructionType(enum.IntEnum):
    """Types of flow instructions."""

    GOTO_TABLE = 1
    WRITE_METADATA = 2
    WRITE_ACTIONS = 3
    APPLY_ACTIONS = 4
    CLEAR_ACTIONS = 5
    METER = 6
    EXPERIMENTER = 0xFFFF


@dataclass
class InstructionGotoTable:
    """Sets the next table in the processing pipeline."""

    type: ClassVar[InstructionType] = InstructionType.GOTO_TABLE

    table: int = 0

    def encode(self) -> bytes:
        """Serialize the instruction, header included."""
        return _GOTO_TABLE.pack(int(self.type), _GOTO_TABLE.size, int(self.table))

    @classmethod
    def read(cls, reader: Reader) -> "InstructionGotoTable":
        """Read the instruction, header included."""
        _, _, table = reader.unpack(_GOTO_TABLE.format)
        return cls(table)

    @classmethod
    def decode(cls, data: bytes) -> "InstructionGotoTable":
        """Decode the instruction from bytes."""
        return cls.read(Reader(data))


@dataclass
class InstructionWriteMetadata:
    """Writes masked metadata for use later in the pipeline."""

    type: ClassVar[InstructionType] = InstructionType.WRITE_METADATA

    metadata: int = 0
    metadata_mask: int = 0

    def encode(self) -> bytes:
        """Serialize the instruction, header included."""
        return _WRITE_METADATA.pack(
            int(self.type), _WRITE_METADATA.size, self.metadata, self.metadata_mask
        )

    @classmethod
    def read(cls, reader: Reader) -> "InstructionWriteMetadata":
        """Read the instruction, header included."""
        _, _, metadata, mask = reader.unpack(_WRITE_METADATA.format)
        return cls(metadata, mask)

    @classmethod
    def decode(cls, data: bytes) -> "InstructionWriteMetadata":
        """Decode the instruction from bytes."""
        return cls.read(Reader(data))


@dataclass
class InstructionClearActions:
    """Clears all actions from the datapath action set."""

    type: ClassVar[InstructionType] = InstructionType.CLEAR_ACTIONS

    def encode(self) -> bytes:
        """Serialize the instruction, header included."""
        return _CLEAR_ACTIONS.pack(int(self.type), _CLEAR_ACTIONS.size)

    @classmethod
    def read(cls, reader: Reader) -> "InstructionClearActions":
        """Read the instruction, header included."""
        reader.skip(_CLEAR_ACTIONS.size)
        return cls()

    @classmethod
    def decode(cls, data: bytes) -> "InstructionClearActions":
        """Decode the instruction from bytes."""
        return cls.read(Reader(data))


@dataclass
class InstructionMeter:
    """Applies a meter (rate limiter) to the packet."""

    type: ClassVar[InstructionType] = InstructionType.METER

    meter: int = 0

    def encode(self) -> bytes:
        """Serialize the instruction, header included."""
        return _METER.pack(int(self.type), _METER.size, int(self.meter))

    @classmethod
    def read(cls, reader: Reader) -> "InstructionMeter":
        """Read the instruction, header included."""
        _, _, meter = reader.unpack(_METER.format)
        return cls(_as_enum(Meter, meter))

    @classmethod
    def decode(cls, data: bytes) -> "InstructionMeter":
        """Decode the instruction from bytes."""
        return cls.read(Reader(data))


_INSTRUCTION_TYPES = {
    InstructionType.GOTO_TABLE: InstructionGotoTable,
    InstructionType.WRITE_METADATA: InstructionWriteMetadata,
    InstructionType.CLEAR_ACTIONS: InstructionClearActions,
    InstructionType.METER: InstructionMeter,
}


def encode_instructions(instructions) -> bytes:
    """Serialize a sequence of instructions."""
    return b"".join(inst.encode() for inst in instructions)


def read_instructions(reader: Reader) -> list:
    """Read instructions until the reader is exhausted."""
    instructions = []
    while reader.remaining():
        header = reader.read(_HEADER.size)
        inst_type, length = _HEADER.unpack(header)
        inst_cls = _INSTRUCTION_TYPES.get(inst_type)
        if inst_cls is None:
            name = _as_enum(InstructionType, inst_type)
            raise DecodeError(f"unknown instruction type: {name!s}")
        body = reader.read(max(0, min(length - len(header), reader.remaining())))
        instructions.append(inst_cls.read(Reader(header + body)))
    return instructions