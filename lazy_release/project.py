"""Project discovery.

Finds the project root by walking up from a start directory until a
directory containing pyproject.toml is found, then reads the project's
identity from it.
"""

from __future__ import annotations

from pathlib import Path

from .errors import FileAccessError, LocateError
from .models import Project
from .toml import get_project_name, get_project_version, load_toml

MANIFEST_NAME = "pyproject.toml"
CHANGELOG_STEM = "changelog"


def _files_in(directory: Path) -> list[Path]:
    """List the regular files directly inside directory, sorted by name."""
    try:
        return sorted(p for p in directory.iterdir() if p.is_file())
    except OSError as exc:
        raise FileAccessError(f"Couldn't read directory '{directory}': {exc}") from exc


def find_manifest_dir(start_dir: Path) -> Path:
    """Find the nearest directory at or above start_dir holding the manifest.

    Only the immediate files of each directory are checked; subdirectories
    are never searched.

    Raises:
        LocateError: If the filesystem root is reached without a match.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        if any(f.name == MANIFEST_NAME for f in _files_in(directory)):
            return directory
    raise LocateError(
        f"Couldn't find '{MANIFEST_NAME}' starting at directory '{start_dir}'!"
    )


def find_changelog(directory: Path) -> Path | None:
    """Find an optional changelog file directly inside directory.

    Any file whose name without extension is "changelog" in any case
    matches (CHANGELOG.md, Changelog.rst, changelog). If several match,
    the first in name order wins.
    """
    for path in _files_in(directory):
        if path.stem.casefold() == CHANGELOG_STEM:
            return path
    return None


def find_project(start_dir: Path) -> Project:
    """Locate the project containing start_dir and read its name and version."""
    root = find_manifest_dir(start_dir)
    manifest = root / MANIFEST_NAME
    doc = load_toml(manifest)

    return Project(
        name=get_project_name(doc, manifest),
        version=get_project_version(doc, manifest),
        root_dir=root,
        manifest=manifest,
        changelog=find_changelog(root),
    )
