"""
Program image loading for the CHIP-8 emulator.

CHIP-8 programs are headerless: the file is copied byte for byte into
memory at 0x200.  This service only reads the file and checks that it is
non-empty; truncation of oversized images is done by the core.
"""

from __future__ import annotations

import logging
import os

from chip8emu.core.errors import RomLoadError
from chip8emu.core.memory import Memory

logger = logging.getLogger(__name__)


class RomBytesService:
    """Static utility for loading program images."""

    @staticmethod
    def read(path: str) -> bytes:
        """Read the program image at *path*.

        Returns:
            The raw file contents.

        Raises:
            RomLoadError: If the file is missing, unreadable or empty.
        """
        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise RomLoadError(f"Cannot read ROM {path!r}: {exc.strerror or exc}", path) from exc

        if not data:
            raise RomLoadError(f"ROM {path!r} is empty", path)

        capacity = Memory.SIZE - Memory.PROGRAM_START
        if len(data) > capacity:
            logger.warning(
                "ROM %s is %d bytes; only the first %d will be loaded",
                path, len(data), capacity,
            )
        logger.info("Read %d bytes from %s", len(data), path)
        return data

    @staticmethod
    def title_for(path: str) -> str:
        """Window title for a ROM: base name up to the first dot."""
        name = os.path.basename(path)
        stem = name.split(".", 1)[0]
        return stem or name
