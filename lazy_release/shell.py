"""Shell utilities.

Provides the command runner every external program (git, build tools, the
editor) is spawned through, plus output formatting helpers.
"""

from __future__ import annotations

import shlex
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from .errors import ToolInvocationError


class CommandRunner:
    """Runs external commands, blocking until they complete.

    Every call names the directory it runs in; nothing here changes the
    process working directory.
    """

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose = verbose

    def run(
        self, args: Sequence[str], cwd: Path, *, capture: bool = True
    ) -> subprocess.CompletedProcess[str]:
        """Run a command and return its result without checking the exit code.

        Args:
            args: Program and arguments (e.g., ["git", "status"]).
            cwd: Directory to run the command in.
            capture: If True (default), capture stdout/stderr as text. Set to
                     False for interactive programs such as an editor, which
                     need the terminal.

        Raises:
            ToolInvocationError: If the program could not be spawned.
        """
        if self.verbose:
            print(f"  $ {shlex.join(args)}")
        try:
            return subprocess.run(
                list(args), cwd=cwd, capture_output=capture, text=True, check=False
            )
        except OSError as exc:
            raise ToolInvocationError(args, reason=str(exc)) from exc


def check_result(
    result: subprocess.CompletedProcess[str],
) -> subprocess.CompletedProcess[str]:
    """Raise ToolInvocationError if a command exited non-zero."""
    if result.returncode != 0:
        raise ToolInvocationError(
            result.args,
            result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
    return result


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the steps of the release pipeline in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"ERROR: {msg}", file=sys.stderr)
