"""Module entrypoint for ``python -m ccd``.

Argument parsing and dispatch happen in ``ccd.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
