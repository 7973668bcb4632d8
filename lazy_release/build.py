"""Build tool commands: run tests, build the release, publish the package.

The commands are configurable; by default they use uv.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from .shell import CommandRunner, check_result


class BuildTool:
    """Runs the project's test, build and publish commands from root."""

    def __init__(
        self,
        runner: CommandRunner,
        root: Path,
        *,
        test_command: str,
        build_command: str,
        publish_command: str,
    ) -> None:
        self.runner = runner
        self.root = root
        self.test_command = test_command
        self.build_command = build_command
        self.publish_command = publish_command

    def _run(self, command: str) -> None:
        check_result(self.runner.run(shlex.split(command), self.root))

    def test(self) -> None:
        self._run(self.test_command)

    def build_release(self) -> None:
        self._run(self.build_command)

    def publish(self) -> None:
        self._run(self.publish_command)
