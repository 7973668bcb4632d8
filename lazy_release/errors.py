"""Exception types raised by lazy-release.

Library code raises these; only the CLI turns them into messages and exit
codes. Every ReleaseError aborts the pipeline at the step that raised it.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum


class ReleaseError(Exception):
    """Base class for all fatal release errors."""


class ConfigError(ReleaseError):
    """A required setting is missing, empty or invalid."""


class LocateError(ReleaseError):
    """The project manifest could not be found."""


class ParseError(ReleaseError):
    """A version string, manifest or config file could not be parsed."""


class VersionMismatchError(ParseError):
    """The manifest on disk no longer declares the version we loaded from it."""


class FileAccessError(ReleaseError):
    """Reading or writing a file failed."""


class RepositoryState(str, Enum):
    """Verdict of a repository state check."""

    CLEAN = "clean"
    DIRTY_WORKING_TREE = "dirty-working-tree"
    STAGED_UNCOMMITTED = "staged-uncommitted"
    DIVERGED = "diverged"


_STATE_MESSAGES = {
    RepositoryState.DIRTY_WORKING_TREE: (
        "Can't release with a dirty git working directory! "
        "Commit or stash your changes first."
    ),
    RepositoryState.STAGED_UNCOMMITTED: (
        "Can't release with a non-empty git staging area! "
        "Commit or reset the staged changes first."
    ),
    RepositoryState.DIVERGED: (
        "Local branch and its upstream have diverged! "
        "Pull and merge (or rebase) the remote changes first."
    ),
}


class RepositoryStateError(ReleaseError):
    """The git repository is not in a releasable state."""

    def __init__(self, state: RepositoryState) -> None:
        self.state = state
        super().__init__(_STATE_MESSAGES.get(state, f"Unexpected git state: {state.value}"))


class ToolInvocationError(ReleaseError):
    """An external program could not be spawned or exited with an error."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        reason: str | None = None,
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

        cmd_str = " ".join(self.command)
        if reason is not None:
            msg = f"Couldn't run '{cmd_str}': {reason}"
        else:
            msg = f"'{cmd_str}' failed (exit {returncode})"
        if stdout.strip():
            msg += f"\nstdout: {stdout.strip()}"
        if stderr.strip():
            msg += f"\nstderr: {stderr.strip()}"
        super().__init__(msg)


class InfoDisplayed(Exception):
    """Not an error: help or version text was shown instead of releasing."""

    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        super().__init__("information displayed")
