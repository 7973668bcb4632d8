"""TOML reading and writing utilities.

Uses tomlkit to preserve formatting and comments when modifying
pyproject.toml, so a version bump is the only change in the release diff.
"""

from __future__ import annotations

from pathlib import Path

import semver
import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import String

from .errors import FileAccessError, ParseError, VersionMismatchError
from .models import Project
from .versions import parse_version


def load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML file.

    The file is decoded without newline translation so that saving the
    document reproduces the original line endings.

    Raises:
        FileAccessError: If the file can't be read.
        ParseError: If the content is not valid TOML.
    """
    try:
        content = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"Couldn't read '{path}': {exc}") from exc
    try:
        return tomlkit.parse(content)
    except TOMLKitError as exc:
        raise ParseError(f"Couldn't parse toml file '{path}': {exc}") from exc


def save_toml(path: Path, doc: tomlkit.TOMLDocument) -> None:
    """Save a TOMLDocument back to disk, preserving original formatting."""
    try:
        path.write_bytes(tomlkit.dumps(doc).encode("utf-8"))
    except OSError as exc:
        raise FileAccessError(f"Couldn't write '{path}': {exc}") from exc


def _project_table(doc: tomlkit.TOMLDocument, path: Path) -> dict:
    table = doc.get("project", {})
    if not isinstance(table, dict):
        raise ParseError(f"'[project]' in '{path}' is not a table")
    return table


def get_project_name(doc: tomlkit.TOMLDocument, path: Path) -> str:
    """Extract [project].name exactly as written in the manifest."""
    name = _project_table(doc, path).get("name")
    if not isinstance(name, str) or not name:
        raise ParseError(f"Couldn't get '[project].name' string from '{path}'")
    return str(name)


def get_project_version(doc: tomlkit.TOMLDocument, path: Path) -> semver.Version:
    """Extract and parse [project].version.

    A dynamic version (declared via [project].dynamic) can't be released
    by rewriting the manifest and is reported as missing.
    """
    version = _project_table(doc, path).get("version")
    if not isinstance(version, str):
        raise ParseError(f"Couldn't get '[project].version' string from '{path}'")
    return parse_version(str(version))


def write_version(project: Project, new_version: semver.Version) -> None:
    """Write new_version into the project's manifest.

    Only the [project].version value changes; comments, key order and
    every other field are written back as they were. The quoting style of
    the old value is kept. Writing the version the project already has is
    a no-op and leaves the file untouched.

    Raises:
        VersionMismatchError: If the manifest no longer declares the
            version loaded into project.
        FileAccessError: If the manifest can't be read or written.
    """
    if str(new_version) == str(project.version):
        return

    doc = load_toml(project.manifest)
    table = doc.get("project")
    current = table.get("version") if isinstance(table, dict) else None
    if not isinstance(current, str) or str(current) != str(project.version):
        raise VersionMismatchError(
            f"Couldn't find version '{project.version}' in '{project.manifest}'"
            f" (found: {current!r}). Was the file changed during the release?"
        )

    literal = isinstance(current, String) and current.as_string().startswith("'")
    table["version"] = tomlkit.string(str(new_version), literal=literal)
    save_toml(project.manifest, doc)
    project.version = new_version
