"""ANSI-aware width measurement and clipping.

Escape sequences pass through untouched and do not count toward width; East
Asian wide characters take two cells and combining marks none.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "…"


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def display_width(text: str) -> int:
    """Return the number of terminal cells ``text`` occupies."""
    return sum(char_display_width(ch) for ch in ANSI_ESCAPE_RE.sub("", text))


def _segments(text: str) -> Iterator[tuple[bool, str]]:
    """Split ``text`` into ``(is_escape, chunk)`` pieces, in order."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        if match.start() > pos:
            yield False, text[pos : match.start()]
        yield True, match.group(0)
        pos = match.end()
    if pos < len(text):
        yield False, text[pos:]


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escapes before the cut are kept, so the visible prefix keeps its styling.
    A wide character that would straddle the limit is dropped whole.
    """
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for is_escape, chunk in _segments(text):
        if is_escape:
            out.append(chunk)
            continue
        for ch in chunk:
            width = char_display_width(ch)
            if col + width > max_cols:
                return "".join(out)
            out.append(ch)
            col += width
    return "".join(out)


def elide_left(text: str, max_cols: int) -> str:
    """Shorten plain ``text`` from the left, keeping the tail of a long path."""
    if display_width(text) <= max_cols:
        return text
    if max_cols <= 1:
        return ELLIPSIS if max_cols == 1 else ""
    budget = max_cols - 1
    start = len(text)
    while start > 0 and char_display_width(text[start - 1]) <= budget:
        start -= 1
        budget -= char_display_width(text[start])
    return ELLIPSIS + text[start:]


def pad_to_width(text: str, width: int) -> str:
    """Right-pad a styled line with spaces up to ``width`` cells."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))
