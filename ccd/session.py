"""Query text, view mode, and the current ranked result list.

The session owns no terminal state. It recomputes results synchronously on
every pattern change and keeps the selection on the same path when it can.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from .candidates import CandidateSource, QueryResult
from .errors import BackendUnavailable
from .frequency import FrequencyStore
from .paths import is_directory
from .ranking import RankedResult, rank, rank_frequent

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


class ViewMode(enum.Enum):
    SEARCH = "search"
    FREQUENT = "frequent"


def collect_candidates(
    source: CandidateSource,
    store: FrequencyStore,
    pattern: str,
    case_sensitive: bool = False,
    is_dir: Callable[[str], bool] = is_directory,
) -> QueryResult:
    """Return index matches plus stored directories whose path contains ``pattern``.

    Stored paths fill gaps left by a stale index. They are appended after the
    index results, skipping ones already present and ones that are gone.
    """
    result = source.search(pattern, case_sensitive)
    directories = list(result.directories)
    seen = set(directories)
    for path in store.matching(pattern, case_sensitive):
        if path in seen or not is_dir(path):
            continue
        seen.add(path)
        directories.append(path)
    return QueryResult(tuple(directories), result.files_filtered)


class SearchSession:
    """Pattern text plus the result list shown for the active view mode."""

    def __init__(
        self,
        source: CandidateSource,
        store: FrequencyStore,
        case_sensitive: bool = False,
        is_dir: Callable[[str], bool] = is_directory,
    ) -> None:
        self.source = source
        self.store = store
        self.case_sensitive = case_sensitive
        self._is_dir = is_dir
        self.mode = ViewMode.SEARCH
        self.pattern = ""
        self.results: list[RankedResult] = []
        self.selected = 0
        self.files_filtered = 0
        self.message = ""

    @property
    def selected_result(self) -> RankedResult | None:
        if not self.results:
            return None
        return self.results[self.selected]

    @property
    def selected_path(self) -> str | None:
        result = self.selected_result
        return result.path if result is not None else None

    def recompute(self) -> None:
        """Rebuild ``results`` for the current mode and pattern.

        The selection stays on the previously selected path when that path is
        still listed, otherwise it returns to the top.
        """
        previous = self.selected_path
        self.message = ""
        if self.mode is ViewMode.FREQUENT:
            self.results = rank_frequent(self.store, self._is_dir)
            self.files_filtered = 0
        else:
            self.results, self.files_filtered = self._search_results()
        self.selected = 0
        if previous is not None:
            for idx, result in enumerate(self.results):
                if result.path == previous:
                    self.selected = idx
                    break

    def _search_results(self) -> tuple[list[RankedResult], int]:
        if not self.pattern:
            return [], 0
        try:
            found = collect_candidates(
                self.source,
                self.store,
                self.pattern,
                self.case_sensitive,
                self._is_dir,
            )
        except BackendUnavailable as exc:
            logger.debug("search for %r failed: %s", self.pattern, exc)
            self.message = str(exc)
            return [], 0
        return rank(found.directories, self.store), found.files_filtered

    def set_pattern(self, pattern: str) -> None:
        if pattern == self.pattern:
            return
        self.pattern = pattern
        self.recompute()

    def append(self, text: str) -> None:
        self.set_pattern(self.pattern + text)

    def backspace(self) -> None:
        if self.pattern:
            self.set_pattern(self.pattern[:-1])

    def toggle_mode(self) -> ViewMode:
        """Switch between Search and Frequent, keeping the typed pattern."""
        self.mode = ViewMode.FREQUENT if self.mode is ViewMode.SEARCH else ViewMode.SEARCH
        self.recompute()
        return self.mode

    def move(self, delta: int) -> None:
        if not self.results:
            return
        self.selected = max(0, min(len(self.results) - 1, self.selected + delta))

    def page(self, direction: int) -> None:
        self.move(direction * PAGE_SIZE)

    def first(self) -> None:
        if self.results:
            self.selected = 0

    def last(self) -> None:
        if self.results:
            self.selected = len(self.results) - 1
