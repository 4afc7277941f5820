"""
Instruction decoding.

A CHIP-8 instruction is one big-endian 16-bit word.  The operand fields
are positional::

    15    12 11     8 7      4 3      0
    +-------+--------+--------+--------+
    | group |   X    |   Y    |   N    |
    +-------+--------+--------+--------+
                     |       NN        |
             |          NNN            |
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Operands:
    """Operand fields of one decoded instruction."""

    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @classmethod
    def from_opcode(cls, opcode: int) -> Operands:
        return cls(
            x=(opcode >> 8) & 0xF,
            y=(opcode >> 4) & 0xF,
            n=opcode & 0xF,
            nn=opcode & 0xFF,
            nnn=opcode & 0xFFF,
        )


def group(opcode: int) -> int:
    """Return the high nibble used for first-level dispatch."""
    return (opcode >> 12) & 0xF


def decode(memory, pc: int) -> tuple[int, Operands]:
    """Fetch the word at *pc* and split it into ``(opcode, operands)``."""
    opcode = memory.read_word(pc)
    return opcode, Operands.from_opcode(opcode)
