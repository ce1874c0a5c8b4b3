from __future__ import annotations

import io
import logging
import tempfile
import unittest
from contextlib import contextmanager
from pathlib import Path
from unittest import mock

from ccd.controller import InteractiveController, Phase
from ccd.frequency import FrequencyStore
from ccd.runtime import app as app_mod
from ccd.runtime.loop import LoopIO, run_main_loop
from ccd.session import SearchSession
from ccd.theme import PLAIN_THEME

from test_session import FakeSource


class _FakeTerminal:
    def __init__(self, sizes: list[tuple[int, int]] | None = None) -> None:
        self.tty_fd = 99
        self.sizes = sizes or [(80, 24)]
        self.raw_entered = 0
        self.raw_exited = 0

    @contextmanager
    def raw_mode(self):
        self.raw_entered += 1
        try:
            yield
        finally:
            self.raw_exited += 1

    def size(self) -> tuple[int, int]:
        if len(self.sizes) > 1:
            return self.sizes.pop(0)
        return self.sizes[0]


class _ScriptedKeys:
    def __init__(self, keys: list[str]) -> None:
        self.keys = list(keys)
        self.fds: list[int] = []

    def __call__(self, fd: int, timeout_ms: int | None = None) -> str:
        self.fds.append(fd)
        if not self.keys:
            raise AssertionError("loop asked for more keys than scripted")
        return self.keys.pop(0)


class RuntimeLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.store = FrequencyStore(Path(tmp.name) / "freq")
        self.source = FakeSource({"t": ["/t"], "tm": ["/tmp", "/tmpfs"]})

    def make_controller(self) -> InteractiveController:
        return InteractiveController(SearchSession(self.source, self.store, is_dir=lambda path: True))

    def test_loop_runs_until_confirm_and_renders_changes(self) -> None:
        controller = self.make_controller()
        terminal = _FakeTerminal()
        frames = []
        keys = _ScriptedKeys(["t", "m", "", "DOWN", "ENTER_CR"])

        outcome = run_main_loop(
            controller,
            terminal,
            PLAIN_THEME,
            LoopIO(read_key=keys, render_frame=lambda ctx, fd: frames.append((ctx, fd))),
        )

        self.assertEqual(outcome.phase, Phase.CONFIRMED)
        self.assertEqual(outcome.path, "/tmpfs")
        self.assertEqual(self.store.get("/tmpfs"), 1)
        self.assertEqual((terminal.raw_entered, terminal.raw_exited), (1, 1))
        self.assertEqual(set(keys.fds), {99})
        # initial frame, after "t", after "m", after DOWN; the timeout redraws nothing
        self.assertEqual(len(frames), 4)
        self.assertEqual(frames[0][0].pattern, "")
        self.assertEqual(frames[2][0].pattern, "tm")
        self.assertEqual(frames[3][0].selected, 1)
        self.assertIs(frames[0][0].theme, PLAIN_THEME)
        self.assertEqual({fd for _ctx, fd in frames}, {99})

    def test_resize_forces_redraw(self) -> None:
        controller = self.make_controller()
        terminal = _FakeTerminal(sizes=[(80, 24), (100, 30)])
        frames = []

        run_main_loop(
            controller,
            terminal,
            PLAIN_THEME,
            LoopIO(read_key=_ScriptedKeys(["", "ESC"]), render_frame=lambda ctx, fd: frames.append(ctx)),
        )

        self.assertEqual([(ctx.width, ctx.height) for ctx in frames], [(80, 24), (100, 30)])
        self.assertEqual(controller.phase, Phase.CANCELLED)

    def test_terminal_restored_when_loop_raises(self) -> None:
        controller = self.make_controller()
        terminal = _FakeTerminal()

        def boom(_ctx, _fd):
            raise RuntimeError("render failed")

        with self.assertRaises(RuntimeError):
            run_main_loop(controller, terminal, PLAIN_THEME, LoopIO(read_key=_ScriptedKeys([]), render_frame=boom))
        self.assertEqual((terminal.raw_entered, terminal.raw_exited), (1, 1))


class RunInteractiveTests(unittest.TestCase):
    def test_initial_pattern_prefills_session_and_tty_is_closed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = FrequencyStore(Path(tmp) / "freq")
            source = FakeSource({"tm": ["/tmp"]})
            seen = {}

            def fake_loop(controller, terminal, theme):
                seen["pattern"] = controller.session.pattern
                seen["results"] = [r.path for r in controller.session.results]
                controller.cancel()
                return controller.outcome

            with mock.patch.object(app_mod, "open_tty", return_value=42), mock.patch.object(
                app_mod, "TerminalController"
            ) as terminal_cls, mock.patch.object(app_mod, "run_main_loop", side_effect=fake_loop), mock.patch.object(
                app_mod.os, "close"
            ) as close_mock:
                controller = app_mod.run_interactive(store, source, PLAIN_THEME, initial_pattern="tm")

        terminal_cls.assert_called_once_with(42)
        close_mock.assert_called_once_with(42)
        self.assertEqual(seen, {"pattern": "tm", "results": ["/tmp"]})
        self.assertEqual(controller.phase, Phase.CANCELLED)


class HeldLogOutputTests(unittest.TestCase):
    def setUp(self) -> None:
        self.stream = io.StringIO()
        package_logger = logging.getLogger("ccd")
        handlers, level, propagate = package_logger.handlers[:], package_logger.level, package_logger.propagate

        def restore() -> None:
            package_logger.handlers = handlers
            package_logger.setLevel(level)
            package_logger.propagate = propagate

        self.addCleanup(restore)
        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.handlers = [handler]
        package_logger.setLevel(logging.DEBUG)
        package_logger.propagate = False

    def test_verbose_logs_stay_off_screen_until_picker_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = FrequencyStore(Path(tmp) / "freq")
            source = FakeSource({"t": ["/t"]})
            controller = InteractiveController(SearchSession(source, store, is_dir=lambda path: True))
            written_while_drawing = []

            def render(_ctx, _fd) -> None:
                written_while_drawing.append(self.stream.getvalue())

            with app_mod.hold_log_output():
                run_main_loop(
                    controller,
                    _FakeTerminal(),
                    PLAIN_THEME,
                    LoopIO(read_key=_ScriptedKeys(["t", "TAB", "TAB", "ENTER_CR"]), render_frame=render),
                )
                self.assertEqual(self.stream.getvalue(), "")

            self.assertEqual(set(written_while_drawing), {""})
            self.assertEqual(controller.outcome.path, "/t")
            output = self.stream.getvalue()
            self.assertIn("view mode -> frequent\nview mode -> search\n", output)
            self.assertIn("saved 1 records to", output)

    def test_handler_levels_still_apply_when_records_are_replayed(self) -> None:
        logging.getLogger("ccd").handlers[0].setLevel(logging.WARNING)
        with app_mod.hold_log_output():
            logging.getLogger("ccd.session").debug("hidden detail")
            logging.getLogger("ccd.output").warning("usage count not saved")
        self.assertEqual(self.stream.getvalue(), "usage count not saved\n")
        self.assertEqual(len(logging.getLogger("ccd").handlers), 1)


if __name__ == "__main__":
    unittest.main()
