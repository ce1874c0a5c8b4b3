"""Directory candidates from the system ``locate`` index.

The index is maintained elsewhere (``updatedb``); this module only queries it,
caps the raw result set, and keeps the entries that are directories.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from .errors import BackendUnavailable
from .paths import is_directory

logger = logging.getLogger(__name__)

LOCATE_COMMAND = "locate"
LOCATE_LIMIT = 100


@dataclass(frozen=True)
class QueryResult:
    """Directories returned for one pattern, in index order."""

    directories: tuple[str, ...]
    files_filtered: int = 0


class CandidateSource:
    """Query wrapper around a ``locate``-compatible command."""

    def __init__(
        self,
        command: str = LOCATE_COMMAND,
        limit: int = LOCATE_LIMIT,
        is_dir: Callable[[str], bool] = is_directory,
    ) -> None:
        self.command = command
        self.limit = limit
        self._is_dir = is_dir

    def _argv(self, pattern: str, case_sensitive: bool) -> list[str]:
        argv = [self.command, "--limit", str(self.limit)]
        if not case_sensitive:
            argv.append("--ignore-case")
        argv.extend(["--", pattern])
        return argv

    def search(self, pattern: str, case_sensitive: bool = False) -> QueryResult:
        """Run the index query and split its output into directories and files.

        ``locate`` exits 1 when nothing matched, possibly after printing a
        warning such as a stale-database notice; that is an empty result. Any
        other nonzero status, death by signal, or a missing executable raises
        ``BackendUnavailable``.
        """
        if not pattern:
            return QueryResult(())
        if shutil.which(self.command) is None:
            raise BackendUnavailable(f"{self.command} is not installed.")

        argv = self._argv(pattern, case_sensitive)
        logger.debug("running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise BackendUnavailable(f"failed to run {self.command}: {exc}") from exc

        stderr_text = (proc.stderr or "").strip()
        if proc.returncode == 1:
            if stderr_text:
                logger.debug("%s: %s", self.command, stderr_text)
            return QueryResult(())
        if proc.returncode != 0:
            if proc.returncode < 0:
                detail = f"killed by signal {-proc.returncode}"
            else:
                detail = stderr_text or f"exit status {proc.returncode}"
            raise BackendUnavailable(f"{self.command} failed: {detail}")
        if stderr_text:
            logger.debug("%s: %s", self.command, stderr_text)

        directories: list[str] = []
        seen: set[str] = set()
        files_filtered = 0
        for raw in proc.stdout.splitlines()[: self.limit]:
            path = raw.rstrip("\r")
            if not path:
                continue
            if not self._is_dir(path):
                files_filtered += 1
                continue
            if path in seen:
                continue
            seen.add(path)
            directories.append(path)
        logger.debug(
            "%s returned %d directories, %d other entries",
            self.command,
            len(directories),
            files_filtered,
        )
        return QueryResult(tuple(directories), files_filtered)

    def query(self, pattern: str, case_sensitive: bool = False) -> list[str]:
        """Return matching directory paths, at most ``limit`` of them."""
        return list(self.search(pattern, case_sensitive).directories)
