"""Release pipeline: locate → check → test → bump → build → changelog → commit → push → publish.

This module orchestrates a lazy-release run:
1. Locate the project (pyproject.toml) from the start directory
2. Check that the git repository is clean and not diverged from upstream
3. Run the test suite
4. Increment the version and write it into pyproject.toml
5. Build the release
6. Prepend the new version to the changelog and open it in the editor
7. Commit and tag the release
8. Push commits and tags
9. Publish the package

Any failing step aborts the run immediately. Completed steps are not rolled
back: a failed push leaves the release commit and tag in place.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import semver

from .build import BuildTool
from .config import Config
from .errors import FileAccessError
from .git import Git
from .models import Project
from .project import find_project
from .shell import CommandRunner, check_result, step
from .toml import write_version
from .versions import increment


def locate_project(config: Config) -> Project:
    """Find the project to release, starting at config.start_dir."""
    step("Locating project")
    project = find_project(config.start_dir)
    print(f"  {project.name} {project.version} ({project.root_dir})")
    if project.changelog:
        print(f"  changelog: {project.changelog.name}")
    return project


def check_repository(git: Git) -> None:
    """Fail unless the working tree and index are clean and HEAD has all upstream commits."""
    step("Checking git state")
    git.check_state()
    print("  Clean")


def run_tests(tools: BuildTool) -> None:
    step("Testing")
    tools.test()


def bump_version(project: Project, new_version: semver.Version) -> None:
    """Write new_version into the manifest."""
    step("Bumping version")
    old_version = project.version
    write_version(project, new_version)
    if old_version == new_version:
        print(f"  {old_version} (unchanged)")
    else:
        print(f"  {old_version} → {new_version}")


def build_release(tools: BuildTool) -> None:
    step("Building release")
    tools.build_release()


def update_changelog(
    git: Git,
    runner: CommandRunner,
    editor: list[str],
    changelog: Path,
    previous_tag: str,
    new_version: semver.Version,
) -> None:
    """Add new_version at the top of the changelog and open it for editing.

    The editor gets the changelog and a temporary file holding the commits
    since previous_tag (or the whole history if that tag doesn't exist) as
    arguments, and the pipeline waits until it exits.
    """
    step("Updating changelog")

    # Existing bytes are kept as-is, line endings and encoding included.
    try:
        contents = changelog.read_bytes()
        changelog.write_bytes(f"{new_version}\n\n".encode() + contents)
    except OSError as exc:
        raise FileAccessError(f"Couldn't update '{changelog}': {exc}") from exc

    since = previous_tag if git.has_tag(previous_tag) else None
    print(f"  Commits since {since or '<first commit>'}")
    log = git.log("HEAD", since)

    fd, log_path = tempfile.mkstemp(prefix="lazy-release-", suffix=".log")
    try:
        with os.fdopen(fd, "w") as fh:
            fh.write(log)
        result = runner.run(
            [*editor, str(changelog), log_path], changelog.parent, capture=False
        )
        check_result(result)
    finally:
        os.unlink(log_path)


def commit_and_tag(git: Git, config: Config, project: Project) -> None:
    """Commit all changes to tracked files and tag the commit.

    Skipped when nothing changed (e.g., "current" release without a
    changelog).
    """
    step("Committing release")
    if not git.has_dirty_working_dir():
        print("  No changes to commit")
        return

    message = config.render_commit_message(project)
    tag = config.render_tag_name(project)
    git.add_update()
    git.commit(message)
    git.tag(tag)
    print(f"  Committed: {message}")
    print(f"  Tagged: {tag}")


def push_changes(git: Git) -> None:
    step("Pushing commits and tags")
    git.push()
    git.push_tags()


def publish_package(tools: BuildTool) -> None:
    step("Publishing package")
    tools.publish()


def run_release(config: Config, runner: CommandRunner | None = None) -> Project:
    """Execute the full release pipeline.

    Args:
        config: Resolved settings for this run.
        runner: Command runner for all external programs. Defaults to one
                that spawns real processes.

    Returns:
        The released project, carrying its new version.
    """
    runner = runner or CommandRunner(verbose=config.verbose)

    project = locate_project(config)
    # Every external command runs from the project root.
    git = Git(runner, project.root_dir)
    tools = BuildTool(
        runner,
        project.root_dir,
        test_command=config.test_command,
        build_command=config.build_command,
        publish_command=config.publish_command,
    )

    check_repository(git)
    run_tests(tools)

    previous_tag = config.render_tag_name(project)
    new_version = increment(project.version, config.version_kind)
    bump_version(project, new_version)

    build_release(tools)

    if project.changelog:
        update_changelog(
            git,
            runner,
            config.editor_command(),
            project.changelog,
            previous_tag,
            new_version,
        )

    commit_and_tag(git, config, project)

    if config.push:
        push_changes(git)

    if config.publish:
        publish_package(tools)

    print(f"\n{'=' * 60}\nReleased {project.name} {project.version}\n{'=' * 60}")
    return project
