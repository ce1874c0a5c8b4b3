"""Shell-integration snippet printed by ``ccd-pick --init``.

The engine cannot change the parent shell's directory, so users source a
small ``ccd`` function that captures stdout and runs ``cd`` only on exit
status 0 with an existing directory. The picker draws on ``/dev/tty``, so a
plain command substitution does not interfere with the interface.
"""

from __future__ import annotations

SUPPORTED_SHELLS = ("bash", "zsh")
PROGRAM_NAME = "ccd-pick"

_POSIX_FUNCTION = """\
{name}() {{
    local output exit_code
    case "$1" in
        -h|--help|-b|--bookmark|--init|--increment)
            command {program} "$@"
            return
            ;;
    esac
    if [ "$#" -eq 0 ]; then
        output=$(command {program} --interactive)
    else
        output=$(command {program} "$@")
    fi
    exit_code=$?
    if [ "$exit_code" -eq 0 ] && [ -n "$output" ] && [ -d "$output" ]; then
        cd -- "$output" || return
        echo "Changed to: $output"
    elif [ "$exit_code" -eq 1 ] && {{ [ "$#" -eq 0 ] || [ "$1" = "-i" ] || [ "$1" = "--interactive" ]; }}; then
        echo "Selection cancelled"
        return 1
    else
        return "$exit_code"
    fi
}}
"""


def shell_init_snippet(shell: str = "bash", name: str = "ccd", program: str = PROGRAM_NAME) -> str:
    """Return the wrapper function source for ``shell``.

    bash and zsh share the same POSIX-style function body.
    """
    if shell not in SUPPORTED_SHELLS:
        raise ValueError(f"unsupported shell: {shell}")
    return f"# {name}: jump to directories via {program} ({shell})\n" + _POSIX_FUNCTION.format(
        name=name,
        program=program,
    )
