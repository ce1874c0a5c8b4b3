"""Process-boundary protocol consumed by the ``ccd`` shell function.

stdout carries exactly one absolute path on success and nothing otherwise.
Diagnostics go through ``logging`` to stderr. The exit status tells the
wrapper whether to ``cd``: 0 for a path, 1 for no selection, higher for errors.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TextIO

from .candidates import CandidateSource
from .controller import Outcome
from .errors import EXIT_NO_SELECTION, EXIT_OK, NoMatches, StoreWriteFailure
from .frequency import FrequencyStore
from .ranking import RankedResult, rank
from .paths import is_directory
from .session import collect_candidates

logger = logging.getLogger(__name__)


def emit_path(path: str, stream: TextIO | None = None) -> None:
    """Write ``path`` and a newline to the primary channel."""
    out = stream if stream is not None else sys.stdout
    out.write(f"{path}\n")
    out.flush()


def finish_interactive(
    outcome: Outcome | None,
    store_error: StoreWriteFailure | None = None,
    stream: TextIO | None = None,
) -> int:
    """Emit the result of a picker session and return the exit status."""
    if store_error is not None:
        logger.warning("usage count not saved: %s", store_error)
    if outcome is None or not outcome.confirmed or outcome.path is None:
        return EXIT_NO_SELECTION
    emit_path(outcome.path, stream)
    return EXIT_OK


def pick_top(
    pattern: str,
    source: CandidateSource,
    store: FrequencyStore,
    case_sensitive: bool = False,
    is_dir: Callable[[str], bool] = is_directory,
) -> tuple[RankedResult, int, int]:
    """Return ``(top_result, directories_found, files_filtered)`` for ``pattern``.

    Raises ``NoMatches`` when nothing qualifies. The store is only read.
    """
    found = collect_candidates(source, store, pattern, case_sensitive, is_dir)
    ranked = rank(found.directories, store)
    if not ranked:
        raise NoMatches(pattern)
    return ranked[0], len(ranked), found.files_filtered


def run_direct(
    pattern: str,
    source: CandidateSource,
    store: FrequencyStore,
    case_sensitive: bool = False,
    stream: TextIO | None = None,
    is_dir: Callable[[str], bool] = is_directory,
) -> int:
    """Print the best match for ``pattern`` without rewarding it.

    A single best-effort hit is not evidence of deliberate reuse, so direct
    mode never increments the store.
    """
    logger.info("Searching for directories matching: %s", pattern)
    top, found, files_filtered = pick_top(pattern, source, store, case_sensitive, is_dir)
    emit_path(top.path, stream)

    used = f" (used {top.count} times)" if top.count > 0 else ""
    files_note = f"; {files_filtered} matching files not shown" if files_filtered else ""
    logger.info(
        "Found %d directories in first %d results%s, selected: %s%s",
        found,
        source.limit,
        files_note,
        top.path,
        used,
    )
    return EXIT_OK
