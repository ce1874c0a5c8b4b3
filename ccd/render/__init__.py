"""Full-screen frame composition for the picker.

``build_frame_lines`` is a pure function of ``RenderContext`` so layout can be
tested without a terminal; ``render_frame`` writes the result to a tty fd.

Layout, top to bottom: a three-row query box, the results box filling the
remaining height, and a single status/help row.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..ranking import RankedResult
from ..session import ViewMode
from ..theme import DEFAULT_THEME, PickerTheme
from .ansi import clip_ansi_line, display_width, elide_left, pad_to_width

QUERY_BOX_ROWS = 3
STATUS_ROWS = 1
SELECTION_MARKER = ">> "

SEARCH_PLACEHOLDER = "Start typing or press [Tab] to see frequent choices"
FREQUENT_PLACEHOLDER = "Press [Tab] to search across all directories"
HELP_KEYS: tuple[tuple[str, str], ...] = (
    ("↑/↓", "Navigate"),
    ("PgUp/PgDn", "Page"),
    ("Home/End", "First/Last"),
    ("Tab", "Search/Frequent"),
    ("Shift+Del", "Reset Count"),
    ("Enter", "Select"),
    ("Esc", "Quit"),
)


@dataclass(frozen=True)
class RenderContext:
    """Everything one frame needs, copied out of session state."""

    mode: ViewMode
    pattern: str
    results: list[RankedResult]
    selected: int
    list_start: int
    width: int
    height: int
    files_filtered: int = 0
    message: str = ""
    theme: PickerTheme = DEFAULT_THEME


def list_rows(height: int) -> int:
    """Return how many result rows fit inside a terminal ``height`` rows tall."""
    return max(1, height - QUERY_BOX_ROWS - STATUS_ROWS - 2)


def scroll_list_start(selected: int, list_start: int, rows: int, total: int) -> int:
    """Return a list offset that keeps ``selected`` visible."""
    if selected < list_start:
        list_start = selected
    elif selected >= list_start + rows:
        list_start = selected - rows + 1
    return max(0, min(list_start, max(0, total - rows)))


def query_box_title(mode: ViewMode) -> str:
    return "Search All Directories" if mode is ViewMode.SEARCH else "Search Frequently Used"


def results_box_title(mode: ViewMode, found: int, files_filtered: int) -> str:
    if mode is ViewMode.FREQUENT:
        return f"Frequent Directories ({found} found)" if found else "Frequent Directories (none)"
    if files_filtered > 0:
        return f"Search Results ({found} found; {files_filtered} matching files not shown)"
    return f"Search Results ({found} found)"


def _box_top(title: str, width: int, theme: PickerTheme) -> str:
    inner = max(0, width - 2)
    label = clip_ansi_line(f" {title} ", max(0, inner - 1))
    fill = "─" * max(0, inner - 1 - display_width(label))
    return f"{theme.border}┌─{theme.reset}{theme.title}{label}{theme.reset}{theme.border}{fill}┐{theme.reset}"


def _box_bottom(width: int, theme: PickerTheme) -> str:
    return f"{theme.border}└{'─' * max(0, width - 2)}┘{theme.reset}"


def _box_row(content: str, width: int, theme: PickerTheme) -> str:
    inner = max(0, width - 2)
    return f"{theme.border}│{theme.reset}{pad_to_width(content, inner)}{theme.reset}{theme.border}│{theme.reset}"


def _result_row(result: RankedResult, is_selected: bool, inner: int, theme: PickerTheme) -> str:
    badge = f" [{result.count}]" if result.count > 0 else ""
    marker = SELECTION_MARKER if is_selected else " " * len(SELECTION_MARKER)
    path_cols = max(1, inner - len(marker) - len(badge))
    path_text = elide_left(result.path, path_cols)
    if is_selected:
        plain = pad_to_width(f"{marker}{path_text}{badge}", inner)
        return f"{theme.selected}{plain}{theme.reset}"
    styled_badge = f"{theme.count_badge}{badge}{theme.reset}" if badge else ""
    return f"{marker}{path_text}{styled_badge}"


def help_line(theme: PickerTheme) -> str:
    parts = [f"{theme.help_key}{key}{theme.reset}{theme.help_dim}: {action}{theme.reset}" for key, action in HELP_KEYS]
    return f"{theme.help_dim} | {theme.reset}".join(parts)


def build_frame_lines(context: RenderContext) -> list[str]:
    """Compose exactly ``context.height`` styled rows for one frame."""
    theme = context.theme
    width = max(4, context.width)
    inner = width - 2
    lines: list[str] = [_box_top(query_box_title(context.mode), width, theme)]

    if context.pattern:
        query = f" {theme.query}{context.pattern}{theme.reset}"
    else:
        placeholder = SEARCH_PLACEHOLDER if context.mode is ViewMode.SEARCH else FREQUENT_PLACEHOLDER
        query = f" {theme.placeholder}{placeholder}{theme.reset}"
    lines.append(_box_row(query, width, theme))
    lines.append(_box_bottom(width, theme))

    rows = list_rows(context.height)
    lines.append(_box_top(results_box_title(context.mode, len(context.results), context.files_filtered), width, theme))
    visible = context.results[context.list_start : context.list_start + rows]
    for offset in range(rows):
        if offset < len(visible):
            idx = context.list_start + offset
            content = _result_row(visible[offset], idx == context.selected, inner, theme)
        elif offset == 0 and not context.results and context.mode is ViewMode.FREQUENT:
            content = f"{theme.empty_hint}No frequently used directories found{theme.reset}"
        else:
            content = ""
        lines.append(_box_row(content, width, theme))
    lines.append(_box_bottom(width, theme))

    if context.message:
        lines.append(clip_ansi_line(f"{theme.status}{context.message}{theme.reset}", width) + theme.reset)
    else:
        lines.append(clip_ansi_line(help_line(theme), width) + theme.reset)
    return lines[: max(1, context.height)]


def query_cursor_position(context: RenderContext) -> tuple[int, int]:
    """Return the 1-based ``(row, col)`` just after the typed pattern."""
    col = 3 + display_width(context.pattern)
    return 2, min(max(1, context.width - 1), col)


def render_frame(context: RenderContext, fd: int) -> None:
    """Draw one frame to ``fd`` and park the cursor in the query box."""
    out: list[str] = ["\033[?25l\033[H"]
    out.append("\033[K\r\n".join(build_frame_lines(context)))
    out.append("\033[K\033[J")
    row, col = query_cursor_position(context)
    out.append(f"\033[{row};{col}H\033[?25h")
    os.write(fd, "".join(out).encode("utf-8", errors="replace"))
