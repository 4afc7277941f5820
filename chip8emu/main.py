"""
chip8emu -- CHIP-8 interpreter.

Command-line entry point.  Parses arguments, creates the machine from a
ROM file, and launches the pygame window.

Usage examples::

    # Run a ROM with the default compatibility profile
    chip8emu roms/pong.ch8

    # Programs written for later interpreters
    chip8emu roms/game.ch8 --shift modern --memory legacy

    # Custom colours and speed
    chip8emu roms/game.ch8 --bg 000000 --fg 33FF66 --rate 1000
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from chip8emu.core.errors import InvalidOpcodeError, RomLoadError
from chip8emu.core.logger import StdLogger
from chip8emu.shell.frame_renderer import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, parse_color
from chip8emu.shell.services.machine_factory import MachineFactory
from chip8emu.shell.services.rom_bytes_service import RomBytesService

_MODE_NAMES = ["legacy", "modern"]


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chip8emu",
        description="CHIP-8 interpreter.  Load a ROM file and run it in a pygame window.",
    )

    parser.add_argument("rom", help="Path to the CHIP-8 program image")

    # Compatibility profile
    parser.add_argument(
        "--shift",
        choices=_MODE_NAMES,
        default=None,
        help="8XY6/8XYE source: legacy shifts VY into VX, modern shifts VX in place.  Default: legacy.",
    )
    parser.add_argument(
        "--memory",
        choices=_MODE_NAMES,
        default=None,
        help="FX55/FX65: legacy leaves I unchanged, modern advances I.  Default: modern.",
    )

    # Timing
    parser.add_argument(
        "--rate", "-r",
        type=int,
        default=600,
        help="Instructions executed per second.  Default: 600.",
    )
    parser.add_argument(
        "--steps-per-tick",
        type=int,
        default=10,
        help="Instructions between timer decrements.  Default: 10 (60 Hz at the default rate).",
    )

    # Display
    parser.add_argument(
        "--scale", "-s",
        type=int,
        default=16,
        help="Display scale factor (1-32).  Default: 16.",
    )
    parser.add_argument(
        "--bg",
        default=None,
        metavar="RRGGBB",
        help=f"Background colour.  Default: {DEFAULT_BACKGROUND:06X}.",
    )
    parser.add_argument(
        "--fg",
        default=None,
        metavar="RRGGBB",
        help=f"Foreground colour.  Default: {DEFAULT_FOREGROUND:06X}.",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def configure_logging(verbosity: int) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    logger = logging.getLogger("chip8emu.main")

    try:
        machine = MachineFactory.create(
            args.rom,
            shift=args.shift,
            memory=args.memory,
            core_logger=StdLogger(),
        )
    except (RomLoadError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Imported here so that argument and ROM errors are reported without
    # initialising pygame.
    from chip8emu.platform.window import Window

    logger.info("Starting emulation ...")
    try:
        window = Window(
            machine,
            title=RomBytesService.title_for(args.rom),
            scale=args.scale,
            step_rate=args.rate,
            steps_per_tick=args.steps_per_tick,
            background=parse_color(args.bg, DEFAULT_BACKGROUND),
            foreground=parse_color(args.fg, DEFAULT_FOREGROUND),
        )
        window.run()
    except KeyboardInterrupt:
        pass
    except InvalidOpcodeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("Exited cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
