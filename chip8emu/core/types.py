"""
Core enumerations and configuration types for the CHIP-8 machine.

The two compatibility switches select between historically divergent
behaviours of the shift (8XY6 / 8XYE) and memory-block (FX55 / FX65)
instructions.  They are chosen once, when a machine is constructed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ShiftMode(IntEnum):
    """Source register for 8XY6 / 8XYE."""

    Legacy = 0  # shift V[Y], write the result to V[Y] and V[X]
    Modern = 1  # shift V[X] in place, Y ignored

    @classmethod
    def parse(cls, name: str) -> ShiftMode:
        return _parse_mode(cls, name)


class MemoryMode(IntEnum):
    """Index register behaviour after FX55 / FX65."""

    Legacy = 0  # I unchanged
    Modern = 1  # I advanced by X + 1

    @classmethod
    def parse(cls, name: str) -> MemoryMode:
        return _parse_mode(cls, name)


def _parse_mode(enum_cls, name):
    for member in enum_cls:
        if member.name.lower() == str(name).strip().lower():
            return member
    valid = ", ".join(m.name.lower() for m in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__} {name!r} (expected one of: {valid})")


@dataclass(frozen=True)
class CompatibilityProfile:
    """Behaviour profile held by a machine for its whole lifetime.

    The default matches the reference interpreter build: shifts read
    V[Y], block loads/stores advance I.
    """

    shift: ShiftMode = ShiftMode.Legacy
    memory: MemoryMode = MemoryMode.Modern

    @classmethod
    def legacy(cls) -> CompatibilityProfile:
        return cls(ShiftMode.Legacy, MemoryMode.Legacy)

    @classmethod
    def modern(cls) -> CompatibilityProfile:
        return cls(ShiftMode.Modern, MemoryMode.Modern)

    @classmethod
    def from_names(cls, shift: str, memory: str) -> CompatibilityProfile:
        """Build a profile from case-insensitive mode names.

        Raises:
            ValueError: If either name is not ``legacy`` or ``modern``.
        """
        return cls(ShiftMode.parse(shift), MemoryMode.parse(memory))

    def describe(self) -> str:
        return f"shift={self.shift.name.lower()}, memory={self.memory.name.lower()}"
