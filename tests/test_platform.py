"""
Platform and CLI Tests
======================

- Keyboard event translation, including the Space layer
- Quit, resize and focus-loss handling
- Main loop cadence: timers, redraws and the sound caption
- Command-line parsing and error exit codes
"""

import pygame
import pytest

from chip8emu.core.input_state import KEY_COUNT
from chip8emu.core.machine import Machine
from chip8emu.main import build_parser, main
from chip8emu.platform.input_handler import _KEY_MAP, InputHandler
from chip8emu.platform.window import Window

from conftest import rom


def key_event(kind, key):
    return pygame.event.Event(kind, key=key)


def press(handler, *keys):
    for key in keys:
        handler.handle_event(key_event(pygame.KEYDOWN, key))


def held(handler):
    return [k for k, down in enumerate(handler.key_states()) if down]


# =============================================================================
# InputHandler
# =============================================================================

class TestInputHandler:

    def test_every_key_mapped(self):
        assert sorted(_KEY_MAP) == list(range(KEY_COUNT))

    def test_no_keys(self):
        assert held(InputHandler()) == []

    def test_plain_key(self):
        handler = InputHandler()
        press(handler, pygame.K_e)
        assert held(handler) == [0x1]

    def test_key_release(self):
        handler = InputHandler()
        press(handler, pygame.K_e)
        handler.handle_event(key_event(pygame.KEYUP, pygame.K_e))
        assert held(handler) == []

    def test_space_layer(self):
        """V is key 8 alone and key 0 with Space held."""
        handler = InputHandler()
        press(handler, pygame.K_v)
        assert held(handler) == [0x8]
        press(handler, pygame.K_SPACE)
        assert held(handler) == [0x0]

    def test_layer_independent_keys(self):
        handler = InputHandler()
        press(handler, pygame.K_SPACE, pygame.K_d, pygame.K_n)
        assert held(handler) == [0x4, 0xF]

    def test_escape_requests_quit(self):
        handler = InputHandler()
        press(handler, pygame.K_ESCAPE)
        assert handler.quit_requested
        assert held(handler) == []

    def test_window_close_requests_quit(self):
        handler = InputHandler()
        handler.handle_event(pygame.event.Event(pygame.QUIT))
        assert handler.quit_requested

    def test_resize_flag_taken_once(self):
        handler = InputHandler()
        handler.handle_event(pygame.event.Event(pygame.VIDEORESIZE, size=(100, 50), w=100, h=50))
        assert handler.take_resized()
        assert not handler.take_resized()

    def test_focus_loss_releases_keys(self):
        handler = InputHandler()
        press(handler, pygame.K_e, pygame.K_r)
        handler.handle_event(pygame.event.Event(pygame.WINDOWFOCUSLOST))
        assert held(handler) == []


# =============================================================================
# Command line
# =============================================================================

class TestCommandLine:

    def test_defaults(self):
        args = build_parser().parse_args(["game.ch8"])
        assert args.rom == "game.ch8"
        assert args.shift is None
        assert args.memory is None
        assert args.rate == 600
        assert args.steps_per_tick == 10
        assert args.scale == 16
        assert args.bg is None and args.fg is None
        assert args.verbose == 0

    def test_options(self):
        args = build_parser().parse_args(
            ["game.ch8", "--shift", "modern", "--memory", "legacy", "-r", "1000", "--bg", "000000", "-vv"]
        )
        assert args.shift == "modern"
        assert args.memory == "legacy"
        assert args.rate == 1000
        assert args.bg == "000000"
        assert args.verbose == 2

    def test_invalid_mode_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["game.ch8", "--shift", "weird"])

    def test_missing_rom_exits_with_error(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.ch8")]) == 1
        assert capsys.readouterr().err.startswith("Error: Cannot read ROM")

    def test_empty_rom_exits_with_error(self, tmp_path, capsys):
        empty = tmp_path / "empty.ch8"
        empty.write_bytes(b"")
        assert main([str(empty)]) == 1
        assert "is empty" in capsys.readouterr().err


# =============================================================================
# Window main loop
# =============================================================================

class TestWindow:
    """One ``_tick()`` is one loop iteration: input, timers, step, video."""

    @pytest.fixture(autouse=True)
    def _pygame(self):
        yield
        pygame.quit()

    def make_window(self, *words, **kwargs):
        window = Window(Machine(rom(*words)), **kwargs)
        pygame.event.clear()
        return window

    def count_presents(self, window):
        calls = []
        present = window._present

        def counting():
            calls.append(window._machine.pc)
            present()

        window._present = counting
        return calls

    def test_scale_clamped(self):
        assert self.make_window(0x1200, scale=100).scale == 32
        assert self.make_window(0x1200, scale=0).scale == 1

    def test_timers_advance_every_n_steps(self):
        window = self.make_window(0x6A05, 0xFA15, 0x1204, steps_per_tick=3)
        machine = window._machine
        for _ in range(2):
            window._tick()
        assert machine.delay_timer == 5
        window._tick()
        assert machine.delay_timer == 4
        for _ in range(3):
            window._tick()
        assert machine.delay_timer == 3
        assert machine.pc == 0x204

    def test_redraw_only_after_draw_or_resize(self):
        window = self.make_window(0xA206, 0xD011, 0x1204, 0x8000)
        presents = self.count_presents(window)
        window._tick()
        assert presents == []
        window._tick()
        assert len(presents) == 1
        window._tick()
        assert len(presents) == 1
        pygame.event.post(pygame.event.Event(pygame.VIDEORESIZE, size=(640, 320), w=640, h=320))
        window._tick()
        assert len(presents) == 2
        window._tick()
        assert len(presents) == 2

    def test_sound_caption(self):
        window = self.make_window(0x6A02, 0xFA18, 0x1204, title="beeper", steps_per_tick=1)
        window._tick()
        assert pygame.display.get_caption()[0] == "beeper"
        window._tick()
        assert pygame.display.get_caption()[0] == "beeper [beep]"
        window._tick()
        assert pygame.display.get_caption()[0] == "beeper [beep]"
        window._tick()
        assert window._machine.sound_timer == 0
        assert pygame.display.get_caption()[0] == "beeper"

    def test_run_until_quit(self):
        window = self.make_window(0x1200)
        assert not window.running
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        window.run()
        assert not window.running
        assert not pygame.get_init()
