"""Git operations used by the release pipeline.

Wraps the handful of git commands lazy-release needs: repository state
checks that gate a release, and the commit/tag/push actions that record it.
"""

from __future__ import annotations

from pathlib import Path

from .errors import RepositoryState, RepositoryStateError, ToolInvocationError
from .shell import CommandRunner, check_result


class Git:
    """Git commands run against the repository at root."""

    def __init__(self, runner: CommandRunner, root: Path) -> None:
        self.runner = runner
        self.root = root

    def _git(self, *args: str) -> str:
        """Run a git command, raise on non-zero exit, return stripped stdout."""
        result = check_result(self.runner.run(["git", *args], self.root))
        return result.stdout.strip()

    def _diff_status(self, *args: str) -> bool:
        """Run a quiet git diff command and report whether it found changes.

        git exits 1 for "differences found" and 0 for none; anything else
        is a failure of the command itself.
        """
        result = self.runner.run(["git", *args], self.root)
        if result.returncode == 1:
            return True
        check_result(result)
        return False

    def has_dirty_working_dir(self) -> bool:
        """If tracked files have modifications that aren't staged."""
        return self._diff_status("diff-files", "--quiet")

    def has_staged_changes(self) -> bool:
        """If the staging area holds changes that aren't committed."""
        return self._diff_status("diff-index", "--quiet", "--cached", "HEAD", "--")

    def has_diverged(self) -> bool:
        """If the upstream branch has commits that aren't part of HEAD.

        Remote-tracking refs are fetched first. HEAD may be ahead of its
        upstream; it only fails when the upstream tip isn't an ancestor of
        HEAD, i.e. when merge-base(HEAD, upstream) != upstream.
        """
        local = self._git("rev-parse", "HEAD")
        self._git("fetch", "--quiet")
        remote = self._git("rev-parse", "@{upstream}")
        base = self._git("merge-base", local, remote)
        return base != remote

    def state(self) -> RepositoryState:
        """Classify the repository, stopping at the first failing check."""
        if self.has_dirty_working_dir():
            return RepositoryState.DIRTY_WORKING_TREE
        if self.has_staged_changes():
            return RepositoryState.STAGED_UNCOMMITTED
        if self.has_diverged():
            return RepositoryState.DIVERGED
        return RepositoryState.CLEAN

    def check_state(self) -> None:
        """Raise RepositoryStateError unless the repository is clean."""
        state = self.state()
        if state is not RepositoryState.CLEAN:
            raise RepositoryStateError(state)

    def has_tag(self, name: str) -> bool:
        """If a tag with exactly this name exists."""
        args = ["git", "rev-parse", "--quiet", "--verify", f"refs/tags/{name}"]
        result = self.runner.run(args, self.root)
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise ToolInvocationError(
            args, result.returncode, stdout=result.stdout, stderr=result.stderr
        )

    def log(self, to: str, since: str | None = None) -> str:
        """Commit log from `to` back to (excluding) `since`, or all of it."""
        rev = f"{since}..{to}" if since else to
        return self._git("log", "--decorate=short", rev)

    def add_update(self) -> None:
        """Stage modifications of already tracked files."""
        self._git("add", "--update")

    def commit(self, message: str) -> None:
        self._git("commit", "-m", message)

    def tag(self, name: str) -> None:
        self._git("tag", name)

    def push(self) -> None:
        self._git("push")

    def push_tags(self) -> None:
        self._git("push", "--tags")
