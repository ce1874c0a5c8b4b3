"""Terminal control for the picker session.

The picker reads keys from and draws onto ``/dev/tty`` rather than
stdin/stdout, so the enclosing shell can capture stdout for the chosen path
while the user still sees the full-screen interface.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

from ..errors import FatalStartupError

TTY_PATH = "/dev/tty"


def open_tty(path: str = TTY_PATH) -> int:
    """Open the controlling terminal for reading and writing."""
    try:
        return os.open(path, os.O_RDWR | os.O_NOCTTY)
    except OSError as exc:
        raise FatalStartupError(f"cannot open terminal {path}: {exc}") from exc


class TerminalController:
    """Manage raw-mode and alternate-screen transitions on one tty fd."""

    def __init__(self, tty_fd: int) -> None:
        self.tty_fd = tty_fd
        try:
            self._saved_tty_state = termios.tcgetattr(tty_fd)
        except termios.error as exc:
            raise FatalStartupError(f"not a terminal: {exc}") from exc

    def enable_tui_mode(self) -> None:
        """Enter raw mode and switch to the alternate screen."""
        tty.setraw(self.tty_fd, termios.TCSAFLUSH)
        os.write(self.tty_fd, b"\x1b[?1049h\x1b[H\x1b[2J")

    def disable_tui_mode(self) -> None:
        """Restore the main screen buffer, cursor, and saved tty attributes."""
        os.write(self.tty_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.tty_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def size(self) -> tuple[int, int]:
        """Return ``(columns, lines)`` of the tty, with a sane fallback."""
        try:
            size = os.get_terminal_size(self.tty_fd)
        except OSError:
            fallback = shutil.get_terminal_size((80, 24))
            return fallback.columns, fallback.lines
        return size.columns, size.lines

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
