"""Command-line front door for ccd-pick.

Parses CLI options, loads the frequency store and user config, then runs
direct lookup, the interactive picker, or one of the bookkeeping actions.
``CcdError`` subclasses are turned into exit codes here and nowhere else.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from .candidates import CandidateSource
from .errors import (
    EXIT_OK,
    EXIT_USAGE,
    CcdError,
    FatalStartupError,
    InvalidArgument,
    NoMatches,
)
from .frequency import FrequencyStore
from .output import finish_interactive, run_direct
from .runtime import run_interactive
from .runtime.config import load_picker_config
from .shell import PROGRAM_NAME, SUPPORTED_SHELLS, shell_init_snippet
from .theme import resolve_theme, theme_names

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "ccd"

EPILOG = """\
examples:
  ccd-pick -i          open the interactive picker
  ccd-pick proj        print the best directory matching 'proj'
  ccd-pick -b          bookmark the current directory
  eval "$(ccd-pick --init bash)"   define the ccd shell function

interactive keys:
  type to search, Up/Down/PgUp/PgDn/Home/End to move, Tab toggles the
  frequent view, Shift+Del resets a count, Enter selects, Esc quits
"""

_log_handler: logging.Handler | None = None


def configure_logging(level: int) -> None:
    """Send package log records to the current stderr as bare messages."""
    global _log_handler
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _log_handler is not None:
        package_logger.removeHandler(_log_handler)
    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(_log_handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Jump to directories found in the locate database, ranked by how often you pick them.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("pattern", nargs="*", help="Text to search for in directory paths.")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("-i", "--interactive", action="store_true", help="Open the full-screen picker.")
    action.add_argument("-b", "--bookmark", action="store_true", help="Count one use of the current directory.")
    action.add_argument("--increment", metavar="PATH", help="Count one use of PATH.")
    action.add_argument(
        "--init",
        nargs="?",
        const="bash",
        choices=SUPPORTED_SHELLS,
        metavar="SHELL",
        help=f"Print the shell function for SHELL ({', '.join(SUPPORTED_SHELLS)}; default bash).",
    )
    parser.add_argument(
        "-s",
        "--case-sensitive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Match the pattern case-sensitively; --no-case-sensitive overrides the config.",
    )
    parser.add_argument(
        "--theme",
        choices=theme_names(),
        default=None,
        help="Picker color theme.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors in the picker.")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug diagnostics on stderr.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors on stderr.")
    return parser


def _bookmark(store: FrequencyStore) -> int:
    try:
        cwd = os.getcwd()
    except OSError as exc:
        raise FatalStartupError(f"cannot determine current directory: {exc}") from exc
    count = store.increment(cwd)
    logger.info("Bookmarked: %s (used %d times)", cwd, count)
    return EXIT_OK


def _dispatch(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    pattern = " ".join(args.pattern)

    if args.init is not None:
        if pattern:
            parser.error("--init takes no pattern")
        sys.stdout.write(shell_init_snippet(args.init))
        return EXIT_OK

    if (args.bookmark or args.increment is not None) and pattern:
        parser.error("--bookmark/--increment take no pattern")

    if not pattern and not (args.interactive or args.bookmark or args.increment is not None):
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    store = FrequencyStore().load()

    if args.bookmark:
        return _bookmark(store)
    if args.increment is not None:
        if not args.increment:
            raise InvalidArgument("--increment needs a non-empty PATH")
        count = store.increment(args.increment)
        logger.debug("incremented %s to %d", args.increment, count)
        return EXIT_OK

    config = load_picker_config()
    case_sensitive = args.case_sensitive if args.case_sensitive is not None else config.case_sensitive
    source = CandidateSource(command=config.locate_command)

    if args.interactive:
        theme = resolve_theme(args.theme or config.theme, no_color=args.no_color)
        controller = run_interactive(store, source, theme, case_sensitive, initial_pattern=pattern)
        return finish_interactive(controller.outcome, controller.store_error)

    return run_direct(pattern, source, store, case_sensitive)


def main(argv: list[str] | None = None) -> int:
    """Parse ``argv`` (default ``sys.argv[1:]``), run, and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging(logging.INFO)

    try:
        return _dispatch(parser, args)
    except NoMatches as exc:
        logger.warning("%s", exc)
        return exc.exit_code
    except CcdError as exc:
        logger.error("Error: %s", exc)
        return exc.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
