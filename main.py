#!/usr/bin/env python3
"""
chip8emu launcher.

Runs the CLI from a source checkout without installing the package::

    python main.py roms/pong.ch8
"""

from __future__ import annotations

import os
import sys

# ---------------------------------------------------------------------------
# Ensure the project root is on sys.path so that ``chip8emu`` can be imported
# regardless of how the script is invoked.
# ---------------------------------------------------------------------------
_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from chip8emu.main import main


if __name__ == "__main__":
    sys.exit(main())
