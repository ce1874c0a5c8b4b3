"""Keystroke-driven state machine for the interactive picker.

The controller maps key tokens from ``ccd.input.read_key`` onto session
operations and tracks the terminal outcome. It never touches the terminal
itself, so every transition can be driven from tests with plain strings.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from .errors import StoreWriteFailure
from .input import KeyBinding, KeyMap
from .session import SearchSession, ViewMode

logger = logging.getLogger(__name__)

QUIT_KEY_FREQUENT = "q"


class Phase(enum.Enum):
    SEARCH = "search"
    FREQUENT = "frequent"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a picker session."""

    phase: Phase
    path: str | None = None

    @property
    def confirmed(self) -> bool:
        return self.phase is Phase.CONFIRMED


class InteractiveController:
    """Drive a ``SearchSession`` from key tokens until confirm or cancel."""

    def __init__(self, session: SearchSession) -> None:
        self.session = session
        self.outcome: Outcome | None = None
        self.store_error: StoreWriteFailure | None = None
        self.dirty = True
        self._keys = KeyMap(
            KeyBinding(("UP",), lambda: self.session.move(-1)),
            KeyBinding(("DOWN",), lambda: self.session.move(1)),
            KeyBinding(("PAGE_UP",), lambda: self.session.page(-1)),
            KeyBinding(("PAGE_DOWN",), lambda: self.session.page(1)),
            KeyBinding(("HOME",), self.session.first),
            KeyBinding(("END",), self.session.last),
            KeyBinding(("TAB", "BACKTAB"), self.toggle_mode),
            KeyBinding(("BACKSPACE",), self.session.backspace),
            KeyBinding(("CTRL_U",), self.clear_pattern),
            KeyBinding(("ENTER_CR", "ENTER_LF"), self.confirm),
            KeyBinding(("ESC", "CTRL_C"), self.cancel),
            KeyBinding(("SHIFT_DELETE", "CTRL_R"), self.reset_selected),
        )

    @property
    def phase(self) -> Phase:
        if self.outcome is not None:
            return self.outcome.phase
        return Phase.FREQUENT if self.session.mode is ViewMode.FREQUENT else Phase.SEARCH

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    def handle_key(self, key: str) -> bool:
        """Apply one key token; return ``True`` once the session has ended."""
        if self.outcome is not None:
            return True
        if not key:
            return False
        if self._keys.dispatch(key):
            self.dirty = True
        elif len(key) == 1 and key.isprintable():
            self.type_character(key)
            self.dirty = True
        return self.outcome is not None

    def type_character(self, ch: str) -> None:
        if self.session.mode is ViewMode.FREQUENT:
            if ch == QUIT_KEY_FREQUENT:
                self.cancel()
            return
        self.session.append(ch)

    def clear_pattern(self) -> None:
        if self.session.mode is ViewMode.SEARCH:
            self.session.set_pattern("")

    def toggle_mode(self) -> None:
        mode = self.session.toggle_mode()
        logger.debug("view mode -> %s", mode.value)

    def confirm(self) -> None:
        """Count the selected path and end the session with it.

        A store write failure does not undo the selection; it is kept on
        ``store_error`` for the caller to report once the screen is restored.
        """
        path = self.session.selected_path
        if path is None:
            return
        try:
            self.session.store.increment(path)
        except StoreWriteFailure as exc:
            logger.debug("increment of %s not saved: %s", path, exc)
            self.store_error = exc
        self.outcome = Outcome(Phase.CONFIRMED, path)

    def cancel(self) -> None:
        self.outcome = Outcome(Phase.CANCELLED)

    def reset_selected(self) -> None:
        """Drop the selected path's usage count and refresh the list.

        When the path leaves the list (Frequent mode), the selection stays at
        the same row so the next entry becomes selected.
        """
        path = self.session.selected_path
        if path is None:
            return
        index = self.session.selected
        error: StoreWriteFailure | None = None
        try:
            self.session.store.reset(path)
        except StoreWriteFailure as exc:
            error = exc
        self.session.recompute()
        results = self.session.results
        if results and all(result.path != path for result in results):
            self.session.selected = min(index, len(results) - 1)
        if error is not None:
            self.session.message = str(error)
        else:
            self.session.message = f"reset {path}"
