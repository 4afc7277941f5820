"""
Exception hierarchy for the CHIP-8 emulator.

Chip8Error (base)
├── RomLoadError        - program image missing, unreadable or empty
└── InvalidOpcodeError  - fetched word matches no instruction; machine halts
"""

from __future__ import annotations

from typing import Optional


class Chip8Error(Exception):
    """Base exception for all emulator errors."""


class RomLoadError(Chip8Error):
    """The program image could not be loaded.

    Attributes:
        path: Filesystem path that was being read (``None`` for in-memory
            images).
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidOpcodeError(Chip8Error):
    """An opcode matched none of the instruction patterns.

    This is unrecoverable: the machine stays halted at *pc* and further
    steps raise the same error.

    Attributes:
        opcode: The 16-bit instruction word.
        pc: Address it was fetched from.
    """

    def __init__(self, opcode: int, pc: int) -> None:
        super().__init__(f"Unknown opcode: {opcode:04X} at 0x{pc:03X}")
        self.opcode = opcode
        self.pc = pc
