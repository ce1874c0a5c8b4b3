"""Path-key normalization shared by the store, ranker and CLI."""

from __future__ import annotations

import os


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Return the canonical key form of ``path``.

    ``~`` is expanded, relative paths are anchored at the current directory,
    ``.``/``..`` segments and repeated separators collapse, and any trailing
    separator is dropped (``/`` stays ``/``). Symlinks are left unresolved so
    the path the user picked is the path that gets counted.
    """
    text = os.fspath(path)
    if not text:
        raise ValueError("empty path")
    return os.path.abspath(os.path.expanduser(text))


def is_directory(path: str) -> bool:
    return os.path.isdir(path)
