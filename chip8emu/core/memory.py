"""
Memory -- the 4 KB CHIP-8 address space.

=============  ===========================================
Range          Contents
=============  ===========================================
0x000-0x04F    Built-in hex glyphs (see :mod:`glyphs`)
0x050-0x1FF    Zero-filled
0x200-0xFFF    Program image, then zero-fill
=============  ===========================================

Every access is masked to 12 bits, so no address computation can reach
outside the array.
"""

from __future__ import annotations

from chip8emu.core.glyphs import GLYPHS


class Memory:
    """Flat 4096-byte address space with 12-bit address wraparound."""

    SIZE: int = 0x1000
    ADDRESS_MASK: int = 0xFFF
    PROGRAM_START: int = 0x200

    def __init__(self) -> None:
        self._ram: bytearray = bytearray(self.SIZE)
        self._ram[0:len(GLYPHS)] = GLYPHS

    def __getitem__(self, address: int) -> int:
        return self._ram[address & self.ADDRESS_MASK]

    def __setitem__(self, address: int, value: int) -> None:
        self._ram[address & self.ADDRESS_MASK] = value & 0xFF

    def __len__(self) -> int:
        return self.SIZE

    @property
    def program_capacity(self) -> int:
        """Number of bytes available to a program image."""
        return self.SIZE - self.PROGRAM_START

    def load_program(self, image: bytes) -> int:
        """Copy *image* into memory at :attr:`PROGRAM_START`.

        Bytes that do not fit before the end of the address space are
        dropped.

        Returns:
            The number of bytes actually copied.
        """
        count = min(len(image), self.program_capacity)
        self._ram[self.PROGRAM_START:self.PROGRAM_START + count] = image[:count]
        return count

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit word; the second byte wraps at 0xFFF."""
        return (self[address] << 8) | self[address + 1]

    def snapshot(self) -> bytes:
        """Return an immutable copy of the whole address space."""
        return bytes(self._ram)

    def __repr__(self) -> str:
        return f"Memory(size={self.SIZE}, program_start=0x{self.PROGRAM_START:03X})"
