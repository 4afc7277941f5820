"""
InputState - the 16-key CHIP-8 keypad.

Keys are indexed 0x0-0xF.  The host overwrites the whole vector before
each instruction step; the state means "currently held" and carries no
press/release history.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

KEY_COUNT: int = 16


class InputState:
    """Holds which of the 16 keys are currently held."""

    def __init__(self) -> None:
        self._held: list[bool] = [False] * KEY_COUNT

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the held-key vector.

        Raises:
            ValueError: If *keys* does not have exactly 16 entries.
        """
        if len(keys) != KEY_COUNT:
            raise ValueError(f"expected {KEY_COUNT} key states, got {len(keys)}")
        self._held[:] = [bool(k) for k in keys]

    def is_held(self, key: int) -> bool:
        """Return ``True`` if *key* (taken modulo 16) is held."""
        return self._held[key % KEY_COUNT]

    def first_held(self) -> Optional[int]:
        """Return the lowest held key index, or ``None`` if none is held."""
        for key in range(KEY_COUNT):
            if self._held[key]:
                return key
        return None

    @property
    def keys(self) -> Tuple[bool, ...]:
        return tuple(self._held)
