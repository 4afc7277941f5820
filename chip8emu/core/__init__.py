# chip8emu core
"""
The CHIP-8 state engine.

Use :class:`Machine` to load a program and drive it one instruction at a
time.  Nothing in this package depends on pygame.
"""

from chip8emu.core.errors import Chip8Error, InvalidOpcodeError, RomLoadError
from chip8emu.core.machine import Machine
from chip8emu.core.types import CompatibilityProfile, MemoryMode, ShiftMode

__all__ = [
    "Chip8Error",
    "CompatibilityProfile",
    "InvalidOpcodeError",
    "Machine",
    "MemoryMode",
    "RomLoadError",
    "ShiftMode",
]
