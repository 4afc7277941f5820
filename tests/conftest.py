"""
Shared pytest configuration and helpers for the chip8emu test suite.

- Forces SDL's dummy video/audio drivers so pygame-backed tests run
  headless.
- Provides ``rom()`` for assembling 16-bit instruction words into a
  program image, and a ``make_machine`` fixture built on it.
"""

import os
import sys

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import pytest

from chip8emu.core.machine import Machine
from chip8emu.core.types import CompatibilityProfile


def rom(*words: int) -> bytes:
    """Assemble big-endian 16-bit words into a program image."""
    out = bytearray()
    for word in words:
        out.append((word >> 8) & 0xFF)
        out.append(word & 0xFF)
    return bytes(out)


def run(machine: Machine, steps: int) -> Machine:
    """Execute *steps* instructions and return the machine."""
    for _ in range(steps):
        machine.step()
    return machine


class FixedRng:
    """numpy-Generator stand-in that always returns the same value."""

    def __init__(self, value: int):
        self.value = value
        self.calls = []

    def integers(self, low, high):
        self.calls.append((low, high))
        return self.value


class RecordingLogger:
    """Core logger that keeps every message."""

    def __init__(self):
        self.level = 99
        self.messages: list[tuple[int, str]] = []

    def log(self, level, message):
        self.messages.append((level, message))


@pytest.fixture
def make_machine():
    """Factory fixture: ``make_machine(*words, profile=..., rng=..., logger=...)``."""

    def _make(*words, profile=None, rng=None, logger=None):
        kwargs = {}
        if rng is not None:
            kwargs["rng"] = rng
        if logger is not None:
            kwargs["logger"] = logger
        return Machine(rom(*words), profile or CompatibilityProfile(), **kwargs)

    return _make
