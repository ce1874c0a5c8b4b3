"""Persistent JSON user preferences.

Holds the picker theme, the index command name, and the default case
sensitivity. The file is only read; a missing or malformed config falls back
to built-in defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..candidates import LOCATE_COMMAND

logger = logging.getLogger(__name__)

APP_NAME = "ccd-pick"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class PickerConfig:
    theme: str | None = None
    locate_command: str = LOCATE_COMMAND
    case_sensitive: bool = False


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_picker_config() -> PickerConfig:
    """Return validated preferences; wrong-typed values keep their defaults."""
    data = load_config()

    theme = data.get("theme")
    if not isinstance(theme, str) or not theme.strip():
        theme = None
    else:
        theme = theme.strip()

    command = data.get("locate_command")
    if not isinstance(command, str) or not command.strip():
        command = LOCATE_COMMAND
    else:
        command = command.strip()

    case_sensitive = data.get("case_sensitive")
    if not isinstance(case_sensitive, bool):
        case_sensitive = False

    return PickerConfig(theme=theme, locate_command=command, case_sensitive=case_sensitive)
