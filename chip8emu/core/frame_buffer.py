"""
FrameBuffer -- the monochrome CHIP-8 display.

The display is 64 columns by 32 rows.  Each row is held as a single
64-bit integer; the most significant bit is column 0 (the leftmost
pixel) and the least significant bit is column 63::

    column:   0 1 2 ...                     63
    bit:     63 62 61 ...                    0

Sprites are XORed into a row one byte at a time.  Sprite bits that
fall past column 63 are clipped; nothing wraps to the left edge.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


class FrameBuffer:
    """Holds the 32 display rows and implements sprite blitting."""

    WIDTH: int = 64
    HEIGHT: int = 32
    ROW_MASK: int = (1 << 64) - 1

    def __init__(self) -> None:
        self._rows: list[int] = [0] * self.HEIGHT

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Turn every pixel off."""
        for y in range(self.HEIGHT):
            self._rows[y] = 0

    def xor_sprite_row(self, y: int, x: int, sprite_byte: int) -> bool:
        """XOR an 8-pixel sprite row into display row *y* at column *x*.

        Args:
            y: Display row, 0..31.
            x: Column of the sprite's leftmost bit, 0..63.
            sprite_byte: Eight pixels, MSB leftmost.

        Returns:
            ``True`` if any pixel that was on is now off.
        """
        old = self._rows[y]
        new = old ^ (((sprite_byte & 0xFF) << 56) >> x)
        self._rows[y] = new & self.ROW_MASK
        return (old & ~new) != 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def row(self, y: int) -> int:
        return self._rows[y]

    @property
    def rows(self) -> Tuple[int, ...]:
        """Immutable copy of all 32 rows."""
        return tuple(self._rows)

    def pixel(self, x: int, y: int) -> bool:
        return bool((self._rows[y] >> (self.WIDTH - 1 - x)) & 1)

    def to_array(self) -> np.ndarray:
        """Return the display as a ``(32, 64)`` boolean array, row-major."""
        packed = np.array(self._rows, dtype=">u8").view(np.uint8)
        bits = np.unpackbits(packed.reshape(self.HEIGHT, 8), axis=1)
        return bits.astype(bool)

    def __repr__(self) -> str:
        lit = sum(bin(r).count("1") for r in self._rows)
        return f"FrameBuffer({self.WIDTH}x{self.HEIGHT}, lit={lit})"
