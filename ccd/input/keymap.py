"""Key-token to picker-action lookup."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

Action = Callable[[], object]


@dataclass(frozen=True)
class KeyBinding:
    """One picker action and every key token that triggers it."""

    keys: tuple[str, ...]
    action: Action


class KeyMap:
    """Token lookup for picker actions. A later binding replaces an earlier one."""

    def __init__(self, *bindings: KeyBinding) -> None:
        self._actions: dict[str, Action] = {}
        for binding in bindings:
            self.bind(binding)

    def bind(self, binding: KeyBinding) -> None:
        for key in binding.keys:
            self._actions[key] = binding.action

    def dispatch(self, key: str) -> bool:
        """Run the action bound to ``key``; return whether one was bound."""
        action = self._actions.get(key)
        if action is None:
            return False
        action()
        return True
