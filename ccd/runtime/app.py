"""Interactive picker bootstrap: tty, session, controller, loop."""

from __future__ import annotations

import contextlib
import logging
import logging.handlers
import os
from collections.abc import Iterator

from ..candidates import CandidateSource
from ..controller import InteractiveController
from ..frequency import FrequencyStore
from ..session import SearchSession
from ..theme import PickerTheme
from .loop import run_main_loop
from .terminal import TerminalController, open_tty

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "ccd"
HELD_RECORDS_CAPACITY = 10_000


@contextlib.contextmanager
def hold_log_output(logger_name: str = PACKAGE_LOGGER) -> Iterator[None]:
    """Keep package log records off the terminal while the picker draws on it.

    Records are collected in a ``MemoryHandler`` with no target, then handed
    back to the restored handlers once the block exits, so they reach stderr
    only after the normal screen is back.
    """
    package_logger = logging.getLogger(logger_name)
    saved_handlers = package_logger.handlers[:]
    saved_propagate = package_logger.propagate
    held = logging.handlers.MemoryHandler(HELD_RECORDS_CAPACITY, flushLevel=logging.CRITICAL + 1)
    package_logger.handlers = [held]
    package_logger.propagate = False
    try:
        yield
    finally:
        package_logger.handlers = saved_handlers
        package_logger.propagate = saved_propagate
        records = held.buffer[:]
        held.buffer.clear()
        held.close()
        for record in records:
            package_logger.handle(record)


def run_interactive(
    store: FrequencyStore,
    source: CandidateSource,
    theme: PickerTheme,
    case_sensitive: bool = False,
    initial_pattern: str = "",
) -> InteractiveController:
    """Run one full-screen picker session on the controlling terminal.

    Returns the finished controller; its ``outcome`` and ``store_error`` are
    reported by the caller once the normal screen is back.
    """
    session = SearchSession(source, store, case_sensitive=case_sensitive)
    controller = InteractiveController(session)
    tty_fd = open_tty()
    try:
        terminal = TerminalController(tty_fd)
        with hold_log_output():
            if initial_pattern:
                session.set_pattern(initial_pattern)
            run_main_loop(controller, terminal, theme)
    finally:
        os.close(tty_fd)
    logger.debug("picker finished: %s", controller.phase.value)
    return controller
