"""
Machine -- the complete CHIP-8 state engine.

The machine owns every piece of emulated state:

* **CPU** -- registers V0-VF, I, PC and the call stack.
* **Memory** -- 4 KB with the glyph table and the program image.
* **FrameBuffer** -- the 64x32 monochrome display.
* **InputState** -- the 16-key keypad.
* **Timers** -- delay and sound countdowns.

A host drives it through four operations::

    machine = Machine(rom_bytes, CompatibilityProfile.modern())
    while running:
        machine.set_keys(keys)        # 16 booleans
        machine.step()                # one instruction
        if machine.is_drawing:
            present(machine.display)  # 32 x 64-bit rows
        if time_for_timer_tick:
            machine.tick()

Everything else is exposed read-only.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from chip8emu.core.cpu import Chip8Cpu
from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.core.input_state import InputState
from chip8emu.core.logger import DEFAULT_LOGGER, LEVEL_INFO, LEVEL_WARN, ILogger
from chip8emu.core.memory import Memory
from chip8emu.core.opcodes import Operands
from chip8emu.core.timers import Timers
from chip8emu.core.types import CompatibilityProfile


class Machine:
    """A CHIP-8 machine loaded with one program.

    Parameters
    ----------
    program:
        Raw program image, copied to 0x200 unchanged.  Bytes beyond the
        end of the address space are dropped.
    profile:
        Compatibility profile; fixed for the lifetime of the machine.
    rng:
        Random source for CXNN.  Defaults to a fresh
        :func:`numpy.random.default_rng`.
    logger:
        Core logger (see :mod:`chip8emu.core.logger`).
    """

    def __init__(
        self,
        program: bytes,
        profile: Optional[CompatibilityProfile] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        logger: ILogger = DEFAULT_LOGGER,
    ) -> None:
        self._profile: CompatibilityProfile = profile or CompatibilityProfile()
        self._logger = logger

        self._memory = Memory()
        loaded = self._memory.load_program(bytes(program))
        if loaded < len(program):
            logger.log(
                LEVEL_WARN,
                f"Program is {len(program)} bytes; only the first {loaded} fit in memory",
            )
        self._program_size: int = loaded

        self._frame_buffer = FrameBuffer()
        self._input_state = InputState()
        self._timers = Timers()
        self._cpu = Chip8Cpu(
            self._memory,
            self._frame_buffer,
            self._input_state,
            self._timers,
            self._profile,
            rng if rng is not None else np.random.default_rng(),
            logger,
        )

        logger.log(LEVEL_INFO, f"Loaded {loaded} byte program ({self._profile.describe()})")

    # ------------------------------------------------------------------
    # Host operations
    # ------------------------------------------------------------------

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the held-key vector (16 booleans, index = key)."""
        self._input_state.set_keys(keys)

    def step(self) -> None:
        """Execute exactly one instruction.

        Raises:
            InvalidOpcodeError: The program reached an unknown opcode.
                The machine is halted from then on.
        """
        self._cpu.step()

    def tick(self) -> None:
        """Advance both timers by one count (floored at zero)."""
        self._timers.tick()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def profile(self) -> CompatibilityProfile:
        return self._profile

    @property
    def program_size(self) -> int:
        """Number of program bytes that were loaded."""
        return self._program_size

    @property
    def pc(self) -> int:
        return self._cpu.pc

    @property
    def i(self) -> int:
        return self._cpu.i

    @property
    def v(self) -> Tuple[int, ...]:
        return tuple(self._cpu.v)

    @property
    def stack_depth(self) -> int:
        return self._cpu.stack_depth

    @property
    def opcode(self) -> int:
        """The most recently fetched instruction word."""
        return self._cpu.opcode

    @property
    def operands(self) -> Operands:
        return self._cpu.operands

    @property
    def delay_timer(self) -> int:
        return self._timers.delay

    @property
    def sound_timer(self) -> int:
        return self._timers.sound

    @property
    def sound_active(self) -> bool:
        return self._timers.sound_active

    @property
    def is_drawing(self) -> bool:
        """``True`` exactly when the last step executed DXYN."""
        return self._cpu.is_drawing

    @property
    def halted(self) -> bool:
        return self._cpu.jammed

    @property
    def keys(self) -> Tuple[bool, ...]:
        return self._input_state.keys

    @property
    def memory(self) -> bytes:
        """Copy of the 4 KB address space."""
        return self._memory.snapshot()

    @property
    def display(self) -> Tuple[int, ...]:
        """The 32 display rows, MSB = leftmost pixel."""
        return self._frame_buffer.rows

    @property
    def frame_buffer(self) -> FrameBuffer:
        return self._frame_buffer

    def __repr__(self) -> str:
        return (
            f"Machine(pc=0x{self.pc:03X}, i=0x{self.i:03X}, "
            f"delay={self.delay_timer}, sound={self.sound_timer}, "
            f"halted={self.halted})"
        )
