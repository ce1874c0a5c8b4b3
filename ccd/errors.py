"""Error types raised by the picker engine.

Each error carries the process exit code that ``cli.main`` reports for it.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_NO_SELECTION = 1
EXIT_USAGE = 2
EXIT_BACKEND = 3
EXIT_STORE = 4
EXIT_FATAL = 5


class CcdError(Exception):
    """Base class for all picker errors."""

    exit_code = EXIT_FATAL


class BackendUnavailable(CcdError):
    """The external path index tool is missing or failed."""

    exit_code = EXIT_BACKEND


class NoMatches(CcdError):
    """A query finished normally but produced no directories."""

    exit_code = EXIT_NO_SELECTION

    def __init__(self, pattern: str) -> None:
        super().__init__(f"No directories found matching '{pattern}'")
        self.pattern = pattern


class StoreWriteFailure(CcdError):
    """The frequency store could not be written back to disk."""

    exit_code = EXIT_STORE


class InvalidArgument(CcdError):
    exit_code = EXIT_USAGE


class FatalStartupError(CcdError):
    """Unrecoverable setup failure (no home directory, no terminal)."""

    exit_code = EXIT_FATAL
