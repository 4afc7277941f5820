"""
Machine creation factory.

Builds a ready-to-run :class:`~chip8emu.core.machine.Machine` from a ROM
path and the compatibility mode names accepted on the command line.

Typical usage::

    machine = MachineFactory.create("pong.ch8")
    machine = MachineFactory.create("pong.ch8", shift="modern", memory="legacy")
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from chip8emu.core.logger import DEFAULT_LOGGER, ILogger
from chip8emu.core.machine import Machine
from chip8emu.core.types import CompatibilityProfile, MemoryMode, ShiftMode
from chip8emu.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class MachineFactory:
    """Create a CHIP-8 machine from a ROM file."""

    @staticmethod
    def create(
        rom_path: str,
        shift: Optional[Union[ShiftMode, str]] = None,
        memory: Optional[Union[MemoryMode, str]] = None,
        *,
        core_logger: ILogger = DEFAULT_LOGGER,
    ) -> Machine:
        """Build and return a machine loaded with *rom_path*.

        Parameters
        ----------
        rom_path:
            Path to the program image.
        shift:
            Shift-source mode, as a :class:`ShiftMode` or its name.
            ``None`` keeps the default profile's value.
        memory:
            Memory-block increment mode, as a :class:`MemoryMode` or its
            name.  ``None`` keeps the default profile's value.
        core_logger:
            Logger handed to the machine core.

        Raises
        ------
        RomLoadError
            If the ROM cannot be read.
        ValueError
            If a mode name is not recognised.
        """
        profile = MachineFactory.resolve_profile(shift, memory)
        program = RomBytesService.read(rom_path)
        machine = Machine(program, profile, logger=core_logger)
        logger.info("Created machine for %s (%s)", rom_path, profile.describe())
        return machine

    @staticmethod
    def resolve_profile(
        shift: Optional[Union[ShiftMode, str]] = None,
        memory: Optional[Union[MemoryMode, str]] = None,
    ) -> CompatibilityProfile:
        default = CompatibilityProfile()
        if shift is None:
            shift_mode = default.shift
        elif isinstance(shift, ShiftMode):
            shift_mode = shift
        else:
            shift_mode = ShiftMode.parse(shift)

        if memory is None:
            memory_mode = default.memory
        elif isinstance(memory, MemoryMode):
            memory_mode = memory
        else:
            memory_mode = MemoryMode.parse(memory)

        return CompatibilityProfile(shift_mode, memory_mode)
