"""
Delay and sound countdown timers.

Both are 8-bit and count down by one per :meth:`Timers.tick`, stopping at
zero.  How often ``tick`` is called (nominally 60 Hz) is up to the host
and independent of the instruction rate.
"""

from __future__ import annotations


class Timers:
    def __init__(self) -> None:
        self.delay: int = 0
        self.sound: int = 0

    def tick(self) -> None:
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    @property
    def sound_active(self) -> bool:
        """``True`` while the sound timer is nonzero."""
        return self.sound > 0

    def __repr__(self) -> str:
        return f"Timers(delay={self.delay}, sound={self.sound})"
