"""Color palettes for the picker screen.

A palette names ANSI styles by the part of the screen they paint, so the
renderer never hard-codes colors. ``--no-color`` swaps in ``PLAIN_THEME``,
which keeps only reverse video to mark the selected row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickerTheme:
    name: str
    reset: str
    border: str
    title: str
    query: str
    placeholder: str
    selected: str
    count_badge: str
    empty_hint: str
    status: str
    help_key: str
    help_dim: str


DEFAULT_THEME = PickerTheme(
    name="default",
    reset="\033[0m",
    border="\033[38;5;245m",
    title="\033[38;5;250m",
    query="\033[33m",
    placeholder="\033[2;38;5;244m",
    selected="\033[1;30;102m",
    count_badge="\033[1;36m",
    empty_hint="\033[3;38;5;244m",
    status="\033[38;5;214m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
)

OCEAN_THEME = PickerTheme(
    name="ocean",
    reset="\033[0m",
    border="\033[38;5;31m",
    title="\033[1;38;5;45m",
    query="\033[1;38;5;153m",
    placeholder="\033[2;38;5;110m",
    selected="\033[1;38;5;16;48;5;45m",
    count_badge="\033[38;5;117m",
    empty_hint="\033[3;38;5;110m",
    status="\033[38;5;215m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
)

PLAIN_THEME = PickerTheme(
    name="plain",
    reset="",
    border="",
    title="",
    query="",
    placeholder="",
    selected="\033[7m",
    count_badge="",
    empty_hint="",
    status="",
    help_key="",
    help_dim="",
)

_NAMED_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME)}


def theme_names() -> tuple[str, ...]:
    """Names accepted by ``--theme`` and the ``theme`` config key."""
    return tuple(sorted(_NAMED_THEMES))


def resolve_theme(name: str | None, *, no_color: bool = False) -> PickerTheme:
    """Pick the palette for one picker session.

    ``no_color`` wins over any name. An unknown name, usually a typo in the
    config file, falls back to the default palette with a warning.
    """
    if no_color:
        return PLAIN_THEME
    if not name:
        return DEFAULT_THEME
    theme = _NAMED_THEMES.get(name.strip().lower())
    if theme is None:
        logger.warning("unknown theme %r, using %s", name, DEFAULT_THEME.name)
        return DEFAULT_THEME
    return theme
