"""Terminal runtime for the interactive picker."""

from .app import run_interactive

__all__ = ["run_interactive"]
