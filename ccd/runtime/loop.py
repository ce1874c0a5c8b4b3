"""Main interactive event loop for the picker.

Each iteration redraws when something changed, then blocks for one key.
Index queries run inline inside key handling; the loop has no threads or
timers beyond the read timeout used to notice terminal resizes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..controller import InteractiveController, Outcome
from ..input import read_key
from ..render import RenderContext, list_rows, render_frame, scroll_list_start
from ..theme import DEFAULT_THEME, PickerTheme
from .terminal import TerminalController

RESIZE_POLL_MS = 250


@dataclass(frozen=True)
class LoopIO:
    """Injected key reader and frame writer, swappable in tests."""

    read_key: Callable[..., str] = read_key
    render_frame: Callable[[RenderContext, int], None] = render_frame


def run_main_loop(
    controller: InteractiveController,
    terminal: TerminalController,
    theme: PickerTheme = DEFAULT_THEME,
    io: LoopIO | None = None,
) -> Outcome | None:
    """Run the picker until the controller reaches a terminal state."""
    io = io if io is not None else LoopIO()
    session = controller.session
    tty_fd = terminal.tty_fd
    list_start = 0
    last_size: tuple[int, int] | None = None

    with terminal.raw_mode():
        while not controller.finished:
            size = terminal.size()
            columns, lines = size
            rows = list_rows(lines)
            new_start = scroll_list_start(session.selected, list_start, rows, len(session.results))
            if size != last_size or new_start != list_start:
                controller.dirty = True
            list_start = new_start
            last_size = size

            if controller.dirty:
                io.render_frame(
                    RenderContext(
                        mode=session.mode,
                        pattern=session.pattern,
                        results=session.results,
                        selected=session.selected,
                        list_start=list_start,
                        width=columns,
                        height=lines,
                        files_filtered=session.files_filtered,
                        message=session.message,
                        theme=theme,
                    ),
                    tty_fd,
                )
                controller.dirty = False

            key = io.read_key(tty_fd, timeout_ms=RESIZE_POLL_MS)
            controller.handle_key(key)

    return controller.outcome
