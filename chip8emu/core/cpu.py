"""
CHIP-8 interpreter core: fetch, decode, dispatch and execute.

One call to :meth:`Chip8Cpu.step` runs exactly one instruction:

1. The word at PC is fetched and split into operand fields.
2. The next PC defaults to PC + 2.
3. The handler selected by the dispatch table runs; skips, jumps, calls,
   returns and the key wait adjust the next PC.
4. PC becomes the next PC masked to 12 bits.

Dispatch is two-level.  The high nibble selects a table slot; slots for
the groups that share a high nibble (0, 5, 8, 9, E, F) hold a pattern
table keyed by ``opcode & mask``, so the keys read like the opcodes they
match (``0x8004`` is 8XY4, ``0xF055`` is FX55).

Flag ordering: wherever an instruction both writes V[X] and sets VF, VF is
written last, so with X = F the flag wins.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple, Union

from chip8emu.core.errors import InvalidOpcodeError
from chip8emu.core.glyphs import glyph_address
from chip8emu.core.logger import DEFAULT_LOGGER, LEVEL_DEBUG, LEVEL_WARN, ILogger
from chip8emu.core.memory import Memory
from chip8emu.core.opcodes import Operands, decode, group
from chip8emu.core.types import CompatibilityProfile, MemoryMode, ShiftMode

Handler = Callable[[Operands], None]
PatternTable = Tuple[Dict[int, Handler], int]


class Chip8Cpu:
    """CHIP-8 register file, call stack and instruction set.

    Parameters
    ----------
    memory:
        The 4 KB address space.
    frame_buffer:
        Display rows written by 00E0 / DXYN.
    input_state:
        Keypad read by EX9E / EXA1 / FX0A.
    timers:
        Delay and sound timers read and written by the FX group.
    profile:
        Compatibility profile consulted by the shift and block-copy
        instructions.
    rng:
        Random source for CXNN; anything with a numpy-style
        ``integers(low, high)`` method.
    logger:
        Core logger for halts and stack diagnostics.
    """

    # The reference interpreter masks its stack pointer to three bits, so
    # only eight return addresses are live; a ninth call overwrites the
    # oldest one.
    STACK_DEPTH: int = 8
    FLAG: int = 0xF

    def __init__(
        self,
        memory: Memory,
        frame_buffer,
        input_state,
        timers,
        profile: CompatibilityProfile,
        rng,
        logger: ILogger = DEFAULT_LOGGER,
    ) -> None:
        self.mem = memory
        self.fb = frame_buffer
        self.keys = input_state
        self.timers = timers
        self.profile = profile
        self.rng = rng
        self.logger = logger

        # Registers
        self.v: List[int] = [0] * 16
        self.i: int = 0
        self.pc: int = Memory.PROGRAM_START
        self.next_pc: int = self.pc + 2

        # Call stack
        self._stack: List[int] = [0] * self.STACK_DEPTH
        self._sp: int = 0
        self._depth: int = 0

        # Transient decode state
        self.opcode: int = 0
        self.operands: Operands = Operands.from_opcode(0)

        self.jammed: bool = False
        self._halt_error: Optional[InvalidOpcodeError] = None

        self._dispatch: List[Union[Handler, PatternTable]] = self._build_dispatch_table()

    # ------------------------------------------------------------------
    # Stack operations
    # ------------------------------------------------------------------

    @property
    def stack_depth(self) -> int:
        """Number of live return addresses (0..8)."""
        return self._depth

    def push(self, address: int) -> None:
        if self._depth == self.STACK_DEPTH:
            self.logger.log(
                LEVEL_WARN,
                f"Call stack wrapped at 0x{self.pc:03X}: overwriting return "
                f"address 0x{self._stack[self._sp]:03X}",
            )
        else:
            self._depth += 1
        self._stack[self._sp] = address
        self._sp = (self._sp + 1) & (self.STACK_DEPTH - 1)

    def pop(self) -> int:
        if self._depth == 0:
            self.logger.log(LEVEL_WARN, f"Return with empty call stack at 0x{self.pc:03X}")
        else:
            self._depth -= 1
        self._sp = (self._sp - 1) & (self.STACK_DEPTH - 1)
        return self._stack[self._sp]

    # ------------------------------------------------------------------
    # Execute
    # ------------------------------------------------------------------

    def step(self) -> None:
        """Fetch, decode and execute one instruction.

        Raises:
            InvalidOpcodeError: If the fetched word is not an instruction.
                No state other than the decode fields is changed and the
                CPU stays jammed at the same PC.
        """
        if self.jammed:
            raise self._halt_error

        opcode, operands = decode(self.mem, self.pc)
        self.opcode = opcode
        self.operands = operands

        handler = self.resolve(opcode)
        if handler is None:
            raise self._jam(opcode)

        self.next_pc = self.pc + 2
        handler(operands)
        self.pc = self.next_pc & Memory.ADDRESS_MASK

    def resolve(self, opcode: int) -> Optional[Handler]:
        """Return the handler for *opcode*, or ``None`` if it is invalid."""
        entry = self._dispatch[group(opcode)]
        if isinstance(entry, tuple):
            table, mask = entry
            return table.get(opcode & mask)
        return entry

    @property
    def is_drawing(self) -> bool:
        """``True`` if the most recently fetched opcode was DXYN."""
        return group(self.opcode) == 0xD

    def _jam(self, opcode: int) -> InvalidOpcodeError:
        regs = " ".join(f"V{n:X}={val:02X}" for n, val in enumerate(self.v))
        self.logger.log(
            LEVEL_WARN,
            f"Unknown opcode {opcode:04X} at 0x{self.pc:03X}  I={self.i:03X} {regs}",
        )
        self.jammed = True
        self._halt_error = InvalidOpcodeError(opcode, self.pc)
        return self._halt_error

    # ------------------------------------------------------------------
    # Flow control
    # ------------------------------------------------------------------

    def i_cls(self, op: Operands) -> None:
        self.fb.clear()

    def i_ret(self, op: Operands) -> None:
        self.next_pc = self.pop()

    def i_jp(self, op: Operands) -> None:
        self.next_pc = op.nnn

    def i_call(self, op: Operands) -> None:
        self.push(self.pc + 2)
        self.next_pc = op.nnn

    def i_jp_v0(self, op: Operands) -> None:
        # Masked by step(), not here.
        self.next_pc = op.nnn + self.v[0]

    def skip_if(self, cond: bool) -> None:
        if cond:
            self.next_pc += 2

    def i_se_byte(self, op: Operands) -> None:
        self.skip_if(self.v[op.x] == op.nn)

    def i_sne_byte(self, op: Operands) -> None:
        self.skip_if(self.v[op.x] != op.nn)

    def i_se_reg(self, op: Operands) -> None:
        self.skip_if(self.v[op.x] == self.v[op.y])

    def i_sne_reg(self, op: Operands) -> None:
        self.skip_if(self.v[op.x] != self.v[op.y])

    # ------------------------------------------------------------------
    # Register loads and arithmetic
    # ------------------------------------------------------------------

    def i_ld_byte(self, op: Operands) -> None:
        self.v[op.x] = op.nn

    def i_add_byte(self, op: Operands) -> None:
        self.v[op.x] = (self.v[op.x] + op.nn) & 0xFF

    def i_ld_reg(self, op: Operands) -> None:
        self.v[op.x] = self.v[op.y]

    def i_or(self, op: Operands) -> None:
        self.v[op.x] |= self.v[op.y]

    def i_and(self, op: Operands) -> None:
        self.v[op.x] &= self.v[op.y]

    def i_xor(self, op: Operands) -> None:
        self.v[op.x] ^= self.v[op.y]

    def i_add_reg(self, op: Operands) -> None:
        total = self.v[op.x] + self.v[op.y]
        self.v[op.x] = total & 0xFF
        self.v[self.FLAG] = 1 if total > 0xFF else 0

    def i_sub(self, op: Operands) -> None:
        vx, vy = self.v[op.x], self.v[op.y]
        self.v[op.x] = (vx - vy) & 0xFF
        self.v[self.FLAG] = 1 if vx >= vy else 0

    def i_subn(self, op: Operands) -> None:
        vx, vy = self.v[op.x], self.v[op.y]
        self.v[op.x] = (vy - vx) & 0xFF
        self.v[self.FLAG] = 1 if vy >= vx else 0

    def _shift_source(self, op: Operands) -> int:
        return op.y if self.profile.shift == ShiftMode.Legacy else op.x

    def i_shr(self, op: Operands) -> None:
        src = self._shift_source(op)
        value = self.v[src]
        result = value >> 1
        self.v[src] = result
        self.v[op.x] = result
        self.v[self.FLAG] = value & 1

    def i_shl(self, op: Operands) -> None:
        src = self._shift_source(op)
        value = self.v[src]
        result = (value << 1) & 0xFF
        self.v[src] = result
        self.v[op.x] = result
        self.v[self.FLAG] = value >> 7

    def i_rnd(self, op: Operands) -> None:
        self.v[op.x] = int(self.rng.integers(0, 256)) & op.nn

    # ------------------------------------------------------------------
    # Index register and memory
    # ------------------------------------------------------------------

    def i_ld_i(self, op: Operands) -> None:
        self.i = op.nnn

    def i_add_i(self, op: Operands) -> None:
        self.i = (self.i + self.v[op.x]) & Memory.ADDRESS_MASK

    def i_ld_glyph(self, op: Operands) -> None:
        self.i = glyph_address(self.v[op.x])

    def i_ld_bcd(self, op: Operands) -> None:
        value = self.v[op.x]
        self.mem[self.i] = value // 100
        self.mem[self.i + 1] = (value // 10) % 10
        self.mem[self.i + 2] = value % 10

    def i_store(self, op: Operands) -> None:
        for r in range(op.x + 1):
            self.mem[self.i + r] = self.v[r]
        self._advance_index(op)

    def i_load(self, op: Operands) -> None:
        for r in range(op.x + 1):
            self.v[r] = self.mem[self.i + r]
        self._advance_index(op)

    def _advance_index(self, op: Operands) -> None:
        if self.profile.memory == MemoryMode.Modern:
            self.i = (self.i + op.x + 1) & Memory.ADDRESS_MASK

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def i_drw(self, op: Operands) -> None:
        x = self.v[op.x] % self.fb.WIDTH
        y = self.v[op.y] % self.fb.HEIGHT
        height = min(op.n, self.fb.HEIGHT - y)

        erased = False
        for row in range(height):
            if self.fb.xor_sprite_row(y + row, x, self.mem[self.i + row]):
                erased = True

        self.v[self.FLAG] = 1 if erased else 0

    # ------------------------------------------------------------------
    # Keypad and timers
    # ------------------------------------------------------------------

    def i_skp(self, op: Operands) -> None:
        self.skip_if(self.keys.is_held(self.v[op.x]))

    def i_sknp(self, op: Operands) -> None:
        self.skip_if(not self.keys.is_held(self.v[op.x]))

    def i_wait_key(self, op: Operands) -> None:
        key = self.keys.first_held()
        if key is None:
            # Re-run this instruction on the next step.
            self.next_pc -= 2
            return
        self.v[op.x] = key
        self.logger.log(LEVEL_DEBUG, f"FX0A latched key {key:X} into V{op.x:X}")

    def i_ld_vx_dt(self, op: Operands) -> None:
        self.v[op.x] = self.timers.delay

    def i_ld_dt(self, op: Operands) -> None:
        self.timers.delay = self.v[op.x]

    def i_ld_st(self, op: Operands) -> None:
        self.timers.sound = self.v[op.x]

    # ------------------------------------------------------------------
    # Dispatch table
    # ------------------------------------------------------------------

    def _build_dispatch_table(self) -> List[Union[Handler, PatternTable]]:
        """Construct the 16-slot first-level dispatch table."""
        low_nibble = 0xF00F
        low_byte = 0xF0FF

        t: List[Union[Handler, PatternTable]] = [
            # 0x0 -- 00E0 CLS, 00EE RET
            ({0x00E0: self.i_cls, 0x00EE: self.i_ret}, 0xFFFF),
            self.i_jp,         # 1NNN
            self.i_call,       # 2NNN
            self.i_se_byte,    # 3XNN
            self.i_sne_byte,   # 4XNN
            ({0x5000: self.i_se_reg}, low_nibble),
            self.i_ld_byte,    # 6XNN
            self.i_add_byte,   # 7XNN
            ({
                0x8000: self.i_ld_reg,
                0x8001: self.i_or,
                0x8002: self.i_and,
                0x8003: self.i_xor,
                0x8004: self.i_add_reg,
                0x8005: self.i_sub,
                0x8006: self.i_shr,
                0x8007: self.i_subn,
                0x800E: self.i_shl,
            }, low_nibble),
            ({0x9000: self.i_sne_reg}, low_nibble),
            self.i_ld_i,       # ANNN
            self.i_jp_v0,      # BNNN
            self.i_rnd,        # CXNN
            self.i_drw,        # DXYN
            ({0xE09E: self.i_skp, 0xE0A1: self.i_sknp}, low_byte),
            ({
                0xF007: self.i_ld_vx_dt,
                0xF00A: self.i_wait_key,
                0xF015: self.i_ld_dt,
                0xF018: self.i_ld_st,
                0xF01E: self.i_add_i,
                0xF029: self.i_ld_glyph,
                0xF033: self.i_ld_bcd,
                0xF055: self.i_store,
                0xF065: self.i_load,
            }, low_byte),
        ]
        return t

    def __repr__(self) -> str:
        return (
            f"Chip8Cpu(pc=0x{self.pc:03X}, i=0x{self.i:03X}, "
            f"opcode={self.opcode:04X}, sp={self._sp}, jammed={self.jammed})"
        )
