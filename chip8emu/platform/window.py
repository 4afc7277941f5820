"""
Main application window.
Uses pygame to create a display and drive the emulation main loop.

Typical usage::

    from chip8emu.platform.window import Window

    machine = MachineFactory.create("pong.ch8")
    window = Window(machine, title="pong", scale=16)
    window.run()
"""

from __future__ import annotations

import logging

import pygame

from chip8emu.platform.input_handler import InputHandler
from chip8emu.shell.frame_renderer import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, FrameRenderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_MIN_SCALE: int = 1
_MAX_SCALE: int = 32

DEFAULT_STEP_RATE: int = 600
DEFAULT_STEPS_PER_TICK: int = 10

_SOUND_SUFFIX: str = " [beep]"


class Window:
    """Pygame window that owns the emulation main loop.

    Parameters
    ----------
    machine:
        A :class:`~chip8emu.core.machine.Machine`.
    title:
        Window caption.
    scale:
        Integer scale factor applied to the 64x32 display.
    step_rate:
        Instruction steps per second.
    steps_per_tick:
        Instruction steps between timer advances.
    background / foreground:
        ``0xRRGGBB`` pixel colours.
    """

    def __init__(
        self,
        machine,
        title: str = "CHIP-8",
        scale: int = 16,
        *,
        step_rate: int = DEFAULT_STEP_RATE,
        steps_per_tick: int = DEFAULT_STEPS_PER_TICK,
        background: int = DEFAULT_BACKGROUND,
        foreground: int = DEFAULT_FOREGROUND,
    ) -> None:
        self._machine = machine
        self._title: str = title
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._step_rate: int = max(1, step_rate)
        self._steps_per_tick: int = max(1, steps_per_tick)
        self._running: bool = False
        self._steps_since_tick: int = 0
        self._sound_shown: bool = False

        if not pygame.get_init():
            pygame.init()

        self._frame_renderer = FrameRenderer(machine, background, foreground)
        size = (self._frame_renderer.width * self._scale, self._frame_renderer.height * self._scale)
        self._screen: pygame.Surface = pygame.display.set_mode(size, pygame.RESIZABLE)
        pygame.display.set_caption(self._title)

        self._clock: pygame.time.Clock = pygame.time.Clock()
        self._input = InputHandler()

        logger.info(
            "Window: %dx%d (scale=%d, %d steps/s, timers every %d steps)",
            size[0], size[1], self._scale, self._step_rate, self._steps_per_tick,
        )

    @property
    def running(self) -> bool:
        return self._running

    @property
    def scale(self) -> int:
        return self._scale

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Enter the main loop; returns when the user quits.

        Raises:
            InvalidOpcodeError: Propagated from the machine when the
                program reaches an unknown instruction.
        """
        self._running = True
        self._present()
        logger.info("Entering main loop")
        try:
            while self._running:
                self._tick()
        finally:
            self._shutdown()

    def _tick(self) -> None:
        """Execute one iteration: input, one step, timers, video."""
        self._input.poll()
        if self._input.quit_requested:
            self._running = False
            return

        self._steps_since_tick += 1
        if self._steps_since_tick >= self._steps_per_tick:
            self._machine.tick()
            self._steps_since_tick = 0

        self._machine.set_keys(self._input.key_states())
        self._machine.step()

        if self._machine.is_drawing or self._input.take_resized():
            self._present()

        self._update_sound_cue()
        self._clock.tick(self._step_rate)

    def _present(self) -> None:
        surface = self._frame_renderer.render()
        current_size = self._screen.get_size()
        if surface.get_size() != current_size:
            surface = pygame.transform.scale(surface, current_size)
        self._screen.blit(surface, (0, 0))
        pygame.display.flip()

    def _update_sound_cue(self) -> None:
        active = self._machine.sound_active
        if active != self._sound_shown:
            self._sound_shown = active
            caption = self._title + (_SOUND_SUFFIX if active else "")
            pygame.display.set_caption(caption)

    def _shutdown(self) -> None:
        logger.info("Shutting down")
        pygame.quit()
