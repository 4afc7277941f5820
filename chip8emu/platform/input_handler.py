"""
Input handler for the CHIP-8 keypad.
Tracks which keyboard keys are down and maps them onto the 16 CHIP-8 keys.

Keyboard layout
---------------

Space works as a shift layer for the keys that do not fit on the letter
block.

=====  ==============  =====  ==============
CHIP8  Keyboard        CHIP8  Keyboard
=====  ==============  =====  ==============
0      Space + V       8      V
1      E               9      B
2      R               A      Space + C
3      T               B      Space + B
4      D               C      Y
5      F               D      H
6      G               E      N
7      C               F      Space + N
=====  ==============  =====  ==============

Escape (or closing the window) requests quit.
"""

from __future__ import annotations

import logging
from typing import Optional

import pygame

from chip8emu.core.input_state import KEY_COUNT

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CHIP-8 key -> (pygame key, shift layer)
# ---------------------------------------------------------------------------
# ``True`` requires Space held, ``False`` requires Space released and
# ``None`` ignores Space.

_KEY_MAP: dict[int, tuple[int, Optional[bool]]] = {
    0x0: (pygame.K_v, True),
    0x1: (pygame.K_e, None),
    0x2: (pygame.K_r, None),
    0x3: (pygame.K_t, None),
    0x4: (pygame.K_d, None),
    0x5: (pygame.K_f, None),
    0x6: (pygame.K_g, None),
    0x7: (pygame.K_c, False),
    0x8: (pygame.K_v, False),
    0x9: (pygame.K_b, False),
    0xA: (pygame.K_c, True),
    0xB: (pygame.K_b, True),
    0xC: (pygame.K_y, None),
    0xD: (pygame.K_h, None),
    0xE: (pygame.K_n, False),
    0xF: (pygame.K_n, True),
}

_SHIFT_KEY: int = pygame.K_SPACE


class InputHandler:
    """Translates pygame keyboard events into the CHIP-8 key vector.

    Call :meth:`poll` once per loop iteration, then hand
    :meth:`key_states` to ``machine.set_keys``.
    """

    def __init__(self) -> None:
        self._down: set[int] = set()
        self._quit_requested: bool = False
        self._resized: bool = False

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def quit_requested(self) -> bool:
        """``True`` if the user pressed Escape or closed the window."""
        return self._quit_requested

    def poll(self) -> None:
        """Pump the pygame event queue and process all pending events."""
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process a single pygame event."""
        if event.type == pygame.QUIT:
            self._quit_requested = True
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self._quit_requested = True
                return
            self._down.add(event.key)
        elif event.type == pygame.KEYUP:
            self._down.discard(event.key)
        elif event.type in (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED):
            self._resized = True
        elif event.type == pygame.WINDOWFOCUSLOST:
            self.clear_all()

    def take_resized(self) -> bool:
        """Return and clear the "window was resized" flag."""
        resized, self._resized = self._resized, False
        return resized

    def key_states(self) -> list[bool]:
        """Return the 16-entry held-key vector for the current keyboard state."""
        shift = _SHIFT_KEY in self._down
        states = [False] * KEY_COUNT
        for chip8_key, (key, layer) in _KEY_MAP.items():
            if key not in self._down:
                continue
            if layer is None or layer == shift:
                states[chip8_key] = True
        return states

    def clear_all(self) -> None:
        """Forget every held key (e.g. on focus loss)."""
        self._down.clear()
