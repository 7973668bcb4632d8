"""Test doubles and git helpers shared by the test modules."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest

from lazy_release.shell import CommandRunner

Reply = tuple[int, str, str]

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

MANIFEST = """\
# Demo project
[project]
name    =   "demo"
version = "0.3.1"
description = "A demo"   # trailing comment
dependencies = [
    "requests>=2.0",
]

[tool.other]
version = "0.3.1"
"""


class FakeRunner(CommandRunner):
    """Records every command and answers with scripted results.

    Replies are registered per command prefix and consumed in order; the
    last reply for a prefix keeps repeating. The longest matching prefix
    wins. Unscripted commands succeed with empty output.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, ...]] = []
        self.cwds: list[Path] = []
        self.replies: dict[tuple[str, ...], list[Reply]] = {}

    def script(
        self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = ""
    ) -> None:
        self.replies.setdefault(prefix, []).append((returncode, stdout, stderr))

    def run(
        self, args: Sequence[str], cwd: Path, *, capture: bool = True
    ) -> subprocess.CompletedProcess[str]:
        cmd = tuple(args)
        self.calls.append(cmd)
        self.cwds.append(cwd)

        reply: Reply = (0, "", "")
        for prefix in sorted(self.replies, key=len, reverse=True):
            if cmd[: len(prefix)] == prefix:
                queue = self.replies[prefix]
                reply = queue.pop(0) if len(queue) > 1 else queue[0]
                break

        returncode, stdout, stderr = reply
        return subprocess.CompletedProcess(list(cmd), returncode, stdout, stderr)

    def index(self, *cmd: str) -> int:
        """Position of the first call equal to cmd."""
        return self.calls.index(cmd)


def git(cwd: Path, *args: str) -> str:
    """Run git in a test repository and return stripped stdout."""
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def make_clone(tmp_path: Path, files: dict[str, str] | None = None) -> Path:
    """Create a bare remote and a clone with one pushed commit.

    Returns the clone's working directory; the remote is tmp_path/remote.git.
    """
    remote = tmp_path / "remote.git"
    git(tmp_path, "init", "--bare", str(remote))
    work = tmp_path / "work"
    git(tmp_path, "clone", str(remote), str(work))

    for name, content in (files or {"README": "hello\n"}).items():
        (work / name).write_text(content)
        git(work, "add", name)
    git(work, "commit", "-m", "initial")
    git(work, "push", "-u", "origin", "HEAD")
    return work
