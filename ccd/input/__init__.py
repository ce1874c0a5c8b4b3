"""Input layer: raw key decoding and the picker key map."""

from .keymap import KeyBinding, KeyMap
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "read_key",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBinding",
    "KeyMap",
]
