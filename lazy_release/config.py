"""Configuration for lazy-release.

Settings are resolved from layers, most specific first:

1. Command line flags
2. .lazy-release.toml in the current working directory
3. .lazy-release.toml in the user's home directory
4. Built-in defaults

Each config file layer is optional and every key in it is optional; the
first layer that sets a key wins. Example file:

    publish = false
    commit_message = "release <PROJ_NAME> <NEW_VERSION>"
    tag_name = "<PROJ_NAME>/v<NEW_VERSION>"
    editor = "code --wait"
"""

from __future__ import annotations

import os
import re
import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigError, ParseError
from .models import Project
from .toml import load_toml
from .versions import VersionKind

CONFIG_FILE_NAME = ".lazy-release.toml"

PROJ_NAME = "<PROJ_NAME>"
NEW_VERSION = "<NEW_VERSION>"

DEFAULT_COMMIT_MESSAGE = f"{PROJ_NAME} {NEW_VERSION}"
DEFAULT_TAG_NAME = f"v{NEW_VERSION}"
DEFAULT_EDITOR = "vim -o"
DEFAULT_TEST_COMMAND = "uv run pytest"
DEFAULT_BUILD_COMMAND = "uv build"
DEFAULT_PUBLISH_COMMAND = "uv publish"

_PLACEHOLDER_RE = re.compile(f"{re.escape(PROJ_NAME)}|{re.escape(NEW_VERSION)}")


class ConfigLayer(BaseModel):
    """A partial set of settings from one source. Unset fields are None."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    publish: bool | None = None
    push: bool | None = None
    commit_message: str | None = None
    tag_name: str | None = None
    editor: str | None = None
    test_command: str | None = None
    build_command: str | None = None
    publish_command: str | None = None


class CliOverrides(BaseModel):
    """Settings given on the command line.

    Attributes:
        version_kind: Which part of the version to increment.
        start_dir: Where to start searching for pyproject.toml.
        no_publish: Skip publishing the package.
        no_push: Skip pushing commits and tags.
        verbose: Echo every external command before running it.
    """

    version_kind: VersionKind
    start_dir: Path | None = None
    no_publish: bool = False
    no_push: bool = False
    verbose: bool = False

    def to_layer(self) -> ConfigLayer:
        # Flags only ever switch things off; an absent flag doesn't override.
        return ConfigLayer(
            publish=False if self.no_publish else None,
            push=False if self.no_push else None,
        )


class Config(BaseModel):
    """Resolved settings for one release run."""

    model_config = ConfigDict(frozen=True)

    version_kind: VersionKind
    start_dir: Path
    publish: bool = True
    push: bool = True
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    tag_name: str = DEFAULT_TAG_NAME
    editor: str = DEFAULT_EDITOR
    test_command: str = DEFAULT_TEST_COMMAND
    build_command: str = DEFAULT_BUILD_COMMAND
    publish_command: str = DEFAULT_PUBLISH_COMMAND
    verbose: bool = False

    def render_commit_message(self, project: Project) -> str:
        return render(self.commit_message, project)

    def render_tag_name(self, project: Project) -> str:
        return render(self.tag_name, project)

    def editor_command(self) -> list[str]:
        """The editor command line split into program and arguments."""
        return shlex.split(self.editor)


def render(template: str, project: Project) -> str:
    """Substitute <PROJ_NAME> and <NEW_VERSION> in template.

    Both placeholders are replaced in a single pass, so a project name
    that happens to contain "<NEW_VERSION>" is not substituted again.

    Example:
        render("<PROJ_NAME>-<NEW_VERSION>", foo@1.2.3) → "foo-1.2.3"
    """
    values = {PROJ_NAME: project.name, NEW_VERSION: str(project.version)}
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(0)], template)


def load_config_layer(path: Path) -> ConfigLayer:
    """Load a config file; a missing file is an empty layer.

    Raises:
        ParseError: If the file isn't valid TOML or a key has the wrong type.
    """
    if not path.is_file():
        return ConfigLayer()
    doc = load_toml(path)
    try:
        return ConfigLayer.model_validate(doc.unwrap())
    except ValidationError as exc:
        raise ParseError(f"Invalid config file '{path}': {exc}") from exc


def merge_layers(layers: Sequence[ConfigLayer]) -> ConfigLayer:
    """Combine layers, earlier layers taking precedence over later ones."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.model_dump(exclude_none=True).items():
            merged.setdefault(key, value)
    return ConfigLayer(**merged)


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value


def resolve_config(
    overrides: CliOverrides,
    *,
    cwd: Path | None = None,
    home_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build the Config for a run from all layers.

    Args:
        overrides: Parsed command line flags.
        cwd: Working directory (default: process working directory).
        home_dir: Home directory (default: the user's home).
        environ: Environment for $EDITOR (default: os.environ).

    Raises:
        ConfigError: If the start directory doesn't exist or a required
            setting is empty.
        ParseError: If a config file is malformed.
    """
    cwd = cwd or Path.cwd()
    home_dir = home_dir or Path.home()
    environ = os.environ if environ is None else environ

    merged = merge_layers(
        [
            overrides.to_layer(),
            load_config_layer(cwd / CONFIG_FILE_NAME),
            load_config_layer(home_dir / CONFIG_FILE_NAME),
        ]
    )

    start_dir = cwd / overrides.start_dir if overrides.start_dir else cwd
    if not start_dir.is_dir():
        raise ConfigError(
            f"Invalid directory given to '--start-dir': '{overrides.start_dir}'!"
        )

    config = Config(
        version_kind=overrides.version_kind,
        start_dir=start_dir,
        publish=_pick(merged.publish, True),
        push=_pick(merged.push, True),
        commit_message=_pick(merged.commit_message, DEFAULT_COMMIT_MESSAGE),
        tag_name=_pick(merged.tag_name, DEFAULT_TAG_NAME),
        editor=_pick(merged.editor, environ.get("EDITOR") or DEFAULT_EDITOR),
        test_command=_pick(merged.test_command, DEFAULT_TEST_COMMAND),
        build_command=_pick(merged.build_command, DEFAULT_BUILD_COMMAND),
        publish_command=_pick(merged.publish_command, DEFAULT_PUBLISH_COMMAND),
        verbose=overrides.verbose,
    )

    for key in (
        "commit_message",
        "tag_name",
        "editor",
        "test_command",
        "build_command",
        "publish_command",
    ):
        if not getattr(config, key).strip():
            raise ConfigError(f"Invalid empty '{key}' setting!")

    return config
