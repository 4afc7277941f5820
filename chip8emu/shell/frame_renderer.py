"""
Frame renderer for the CHIP-8 display.

Converts the machine's 32 bit-packed display rows into an RGB pygame
Surface.  The rows are unpacked into a ``(32, 64)`` boolean array by
:meth:`FrameBuffer.to_array`, then mapped through a two-entry numpy colour
table (background, foreground).
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pygame

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND: int = 0x333333
DEFAULT_FOREGROUND: int = 0xEEEEEE


def parse_color(text: Optional[str], default: int) -> int:
    """Parse a ``RRGGBB`` hex string.

    ``None`` yields *default*; a malformed string yields 0x333333.
    """
    if text is None:
        return default
    try:
        value = int(text.lstrip("#"), 16)
    except ValueError:
        logger.warning("Invalid colour %r, using %06X", text, DEFAULT_BACKGROUND)
        return DEFAULT_BACKGROUND
    return value & 0xFFFFFF


def build_lut(background: int, foreground: int) -> np.ndarray:
    """Return a ``(2, 3)`` uint8 table: row 0 = background, row 1 = foreground."""
    lut = np.zeros((2, 3), dtype=np.uint8)
    for idx, color in enumerate((background, foreground)):
        lut[idx, 0] = (color >> 16) & 0xFF
        lut[idx, 1] = (color >> 8) & 0xFF
        lut[idx, 2] = color & 0xFF
    return lut


class FrameRenderer:
    """Render a machine's display into a :class:`pygame.Surface`.

    Parameters
    ----------
    machine:
        The emulated machine.  Only ``frame_buffer`` is used.
    background / foreground:
        ``0xRRGGBB`` colours for unlit and lit pixels.
    """

    def __init__(
        self,
        machine: object,
        background: int = DEFAULT_BACKGROUND,
        foreground: int = DEFAULT_FOREGROUND,
    ) -> None:
        self._machine = machine
        fb = machine.frame_buffer  # type: ignore[attr-defined]
        self._width: int = fb.WIDTH
        self._height: int = fb.HEIGHT
        self._lut: np.ndarray = build_lut(background, foreground)
        self._surface: pygame.Surface = pygame.Surface((self._width, self._height))

        logger.info(
            "FrameRenderer: %dx%d (bg=%06X, fg=%06X)",
            self._width, self._height, background, foreground,
        )

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def surface(self) -> pygame.Surface:
        """The internal Surface (updated on each :meth:`render` call)."""
        return self._surface

    def to_rgb(self) -> np.ndarray:
        """Return the current frame as a ``(32, 64, 3)`` uint8 array."""
        pixels = self._machine.frame_buffer.to_array()  # type: ignore[attr-defined]
        return self._lut[pixels.astype(np.uint8)]

    def render(self) -> pygame.Surface:
        """Render the current frame and return the reused surface."""
        rgb = self.to_rgb()
        # surfarray expects (W, H, 3).
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        return self._surface
