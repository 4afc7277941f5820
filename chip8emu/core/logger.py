"""
Logging infrastructure for the emulation core.

The core never talks to :mod:`logging` directly; it logs through an
:class:`ILogger` so that a machine is silent unless a logger is injected.

:class:`StdLogger` is what the CLI injects.  It hands core messages
(program load, invalid opcodes, call-stack wraparound) to the
``chip8emu.core`` standard logger, so ``-v`` / ``-vv`` control them along
with the shell and platform loggers.  :class:`ConsoleLogger` prints
directly and is handy when driving a :class:`Machine` from a REPL.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

# Level 1 is reserved for conditions the user should see (halts,
# stack wraparound); 2 and above are progressively chattier.
LEVEL_WARN: int = 1
LEVEL_INFO: int = 2
LEVEL_DEBUG: int = 3


class ILogger(ABC):
    """Logging interface with level-based filtering."""

    @property
    @abstractmethod
    def level(self) -> int: ...

    @level.setter
    @abstractmethod
    def level(self, value: int): ...

    @abstractmethod
    def log(self, level: int, message: str): ...


class NullLogger(ILogger):
    """No-op logger implementation."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._level = 0
        return cls._instance

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int):
        self._level = value

    def log(self, level: int, message: str):
        pass


class ConsoleLogger(ILogger):
    """Logger that prints to console."""

    def __init__(self, level: int = LEVEL_WARN):
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int):
        self._level = value

    def log(self, level: int, message: str):
        if level <= self._level:
            print(f"[CHIP8:{level}] {message}")


_STD_LEVELS: dict[int, int] = {
    LEVEL_WARN: logging.WARNING,
    LEVEL_INFO: logging.INFO,
    LEVEL_DEBUG: logging.DEBUG,
}


class StdLogger(ILogger):
    """Forwards core messages to a :mod:`logging` logger.

    Filtering is left to the standard logging configuration, so the
    CLI's ``-v`` flag governs core output as well.
    """

    def __init__(self, name: str = "chip8emu.core", level: int = LEVEL_DEBUG):
        self._logger = logging.getLogger(name)
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int):
        self._level = value

    def log(self, level: int, message: str):
        if level <= self._level:
            self._logger.log(_STD_LEVELS.get(level, logging.DEBUG), message)


# Default logger instance
DEFAULT_LOGGER: ILogger = NullLogger()
