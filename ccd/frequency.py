"""Persistent per-directory usage counters.

The store is a plain text file, one ``<count>\\t<path>`` record per line,
preceded by a ``# ccd-frequency v1`` header. Files written before the header
existed load the same way. Every mutation is flushed immediately with a
write-to-temp-then-rename so readers never see a half-written file.

Two processes updating the store at the same time can still lose one
update (last writer wins); there is no cross-process lock.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from collections.abc import Iterator
from pathlib import Path

from .errors import FatalStartupError, StoreWriteFailure
from .paths import normalize_path

logger = logging.getLogger(__name__)

FREQUENCY_FILE_NAME = ".ccd_frequency"
FORMAT_HEADER = "# ccd-frequency v1"


def default_store_path() -> Path:
    """Return ``~/.ccd_frequency``, failing hard when home is unknown."""
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as exc:
        raise FatalStartupError("cannot determine home directory") from exc
    return home / FREQUENCY_FILE_NAME


def parse_record(line: str) -> tuple[str, int] | None:
    """Parse one store line into ``(path, count)``.

    Returns ``None`` for blank lines, comments, and malformed records.
    """
    text = line.rstrip("\r\n")
    if not text.strip() or text.startswith("#"):
        return None
    count_text, sep, path = text.partition("\t")
    if not sep or not path:
        return None
    try:
        count = int(count_text.strip())
    except ValueError:
        return None
    if count < 0:
        return None
    return path, count


def format_record(path: str, count: int) -> str:
    return f"{count}\t{path}\n"


class FrequencyStore:
    """Path to usage-count mapping owned by one process invocation."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else default_store_path()
        self._counts: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._counts)

    def load(self) -> FrequencyStore:
        """Replace in-memory counts with the file contents.

        Unreadable or malformed lines are skipped; a missing file is an empty
        store. Records that normalize to the same path are summed.
        """
        self._counts = {}
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return self
        except OSError as exc:
            logger.warning("cannot read %s: %s", self.path, exc)
            return self

        skipped = 0
        for lineno, line in enumerate(text.split("\n"), start=1):
            record = parse_record(line)
            if record is None:
                if line.strip() and not line.startswith("#"):
                    skipped += 1
                    logger.debug("%s:%d: skipping malformed record %r", self.path, lineno, line)
                continue
            raw_path, count = record
            try:
                key = normalize_path(raw_path)
            except ValueError:
                skipped += 1
                continue
            self._counts[key] = self._counts.get(key, 0) + count
        if skipped:
            logger.debug("%s: skipped %d malformed records", self.path, skipped)
        return self

    def get(self, path: str) -> int:
        return self._counts.get(normalize_path(path), 0)

    def entries(self) -> Iterator[tuple[str, int]]:
        yield from self._counts.items()

    def matching(self, pattern: str, case_sensitive: bool = False) -> list[str]:
        """Return stored paths containing ``pattern`` as a substring."""
        if not pattern:
            return []
        if case_sensitive:
            return [path for path in self._counts if pattern in path]
        folded = pattern.casefold()
        return [path for path in self._counts if folded in path.casefold()]

    def increment(self, path: str) -> int:
        """Add one use of ``path``, persist, and return the new count."""
        key = normalize_path(path)
        self._counts[key] = self._counts.get(key, 0) + 1
        self.save()
        return self._counts[key]

    def reset(self, path: str) -> None:
        """Forget ``path`` entirely so its count reads back as 0."""
        key = normalize_path(path)
        if self._counts.pop(key, None) is None:
            return
        self.save()

    def serialize(self) -> str:
        lines = [FORMAT_HEADER + "\n"]
        for path, count in sorted(self._counts.items(), key=lambda item: (-item[1], item[0])):
            if "\n" in path or "\r" in path:
                logger.warning("not persisting path with line break: %r", path)
                continue
            lines.append(format_record(path, count))
        return "".join(lines)

    def save(self) -> None:
        """Atomically rewrite the store file.

        Data goes to a temp file beside the target, which is then renamed over
        it. A symlinked store is written through to the file it points at, and
        an existing file keeps its permission bits. Raises
        ``StoreWriteFailure`` when either step fails.
        """
        payload = self.serialize()
        try:
            target = self.path.resolve()
        except (OSError, RuntimeError) as exc:
            raise StoreWriteFailure(f"cannot write {self.path}: {exc}") from exc
        directory = target.parent
        try:
            mode = stat.S_IMODE(target.stat().st_mode)
        except OSError:
            mode = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f"{target.name}.", suffix=".tmp")
        except OSError as exc:
            raise StoreWriteFailure(f"cannot write {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                if mode is not None:
                    os.fchmod(handle.fileno(), mode)
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, target)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise StoreWriteFailure(f"cannot write {self.path}: {exc}") from exc
        logger.debug("saved %d records to %s", len(self._counts), self.path)

