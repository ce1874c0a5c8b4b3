"""Public package surface for ccd-pick.

Exports ``main`` for programmatic CLI invocation.
The picker engine lives in the submodules under ``ccd``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
