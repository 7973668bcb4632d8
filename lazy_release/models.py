"""Data models for lazy-release.

These Pydantic models represent the project being released.
"""

from __future__ import annotations

from pathlib import Path

import semver
from pydantic import BaseModel, ConfigDict


class Project(BaseModel):
    """Identity of the project being released.

    Attributes:
        name: Canonical project name from [project].name.
        version: Current version from [project].version. The only field that
                 changes during a release, updated by write_version().
        root_dir: Directory containing the manifest; every external command
                  runs here.
        manifest: Path to the pyproject.toml.
        changelog: Path to an optional changelog file in root_dir.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    version: semver.Version
    root_dir: Path
    manifest: Path
    changelog: Path | None = None
