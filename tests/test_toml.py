"""Tests for lazy_release.toml."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from helpers import MANIFEST
from lazy_release.errors import FileAccessError, ParseError, VersionMismatchError
from lazy_release.models import Project
from lazy_release.toml import (
    get_project_name,
    get_project_version,
    load_toml,
    save_toml,
    write_version,
)
from lazy_release.versions import parse_version


def _project(root: Path, version: str = "0.3.1") -> Project:
    return Project(
        name="demo",
        version=parse_version(version),
        root_dir=root,
        manifest=root / "pyproject.toml",
    )


class TestLoadSaveToml:
    def test_round_trip_is_byte_identical(self, project_dir: Path) -> None:
        manifest = project_dir / "pyproject.toml"
        save_toml(manifest, load_toml(manifest))
        assert manifest.read_text() == MANIFEST

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileAccessError, match="Couldn't read"):
            load_toml(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[project\nname = ")
        with pytest.raises(ParseError, match="Couldn't parse toml file"):
            load_toml(path)


class TestGetProjectName:
    def test_returns_name(self, project_dir: Path) -> None:
        doc = load_toml(project_dir / "pyproject.toml")
        assert get_project_name(doc, project_dir) == "demo"

    def test_name_is_kept_verbatim(self) -> None:
        doc = tomlkit.parse('[project]\nname = "My_Package"')
        assert get_project_name(doc, Path("pyproject.toml")) == "My_Package"

    def test_project_not_a_table(self) -> None:
        doc = tomlkit.parse('project = "x"')
        with pytest.raises(ParseError, match="is not a table"):
            get_project_name(doc, Path("pyproject.toml"))

    def test_missing_name(self) -> None:
        doc = tomlkit.parse('[project]\nversion = "1.0.0"')
        with pytest.raises(ParseError, match=r"\[project\]\.name"):
            get_project_name(doc, Path("pyproject.toml"))


class TestGetProjectVersion:
    def test_returns_version(self, project_dir: Path) -> None:
        doc = load_toml(project_dir / "pyproject.toml")
        assert str(get_project_version(doc, project_dir)) == "0.3.1"

    def test_missing_version(self) -> None:
        doc = tomlkit.parse('[project]\nname = "x"\ndynamic = ["version"]')
        with pytest.raises(ParseError, match=r"\[project\]\.version"):
            get_project_version(doc, Path("pyproject.toml"))

    def test_project_not_a_table(self) -> None:
        doc = tomlkit.parse('project = ["x"]')
        with pytest.raises(ParseError, match="is not a table"):
            get_project_version(doc, Path("pyproject.toml"))

    def test_invalid_version(self) -> None:
        doc = tomlkit.parse('[project]\nname = "x"\nversion = "1.0"')
        with pytest.raises(ParseError, match="Invalid version"):
            get_project_version(doc, Path("pyproject.toml"))


class TestWriteVersion:
    def test_only_project_version_changes(self, project_dir: Path) -> None:
        project = _project(project_dir)

        write_version(project, parse_version("0.4.0"))

        content = (project_dir / "pyproject.toml").read_text()
        # [tool.other].version keeps the old value
        assert content == MANIFEST.replace('version = "0.3.1"', 'version = "0.4.0"', 1)
        assert str(project.version) == "0.4.0"

    def test_same_version_is_noop(self, project_dir: Path) -> None:
        manifest = project_dir / "pyproject.toml"
        before = manifest.read_bytes()
        mtime = manifest.stat().st_mtime_ns
        project = _project(project_dir)

        write_version(project, parse_version("0.3.1"))

        assert manifest.read_bytes() == before
        assert manifest.stat().st_mtime_ns == mtime

    def test_noop_does_not_read_file(self, tmp_path: Path) -> None:
        project = _project(tmp_path)  # no pyproject.toml on disk
        write_version(project, parse_version("0.3.1"))

    def test_keeps_literal_quotes(self, tmp_path: Path) -> None:
        manifest = tmp_path / "pyproject.toml"
        manifest.write_text("[project]\nname = 'demo'\nversion = '1.0.0'\n")
        project = _project(tmp_path, "1.0.0")

        write_version(project, parse_version("1.1.0"))

        assert manifest.read_text() == "[project]\nname = 'demo'\nversion = '1.1.0'\n"

    def test_keeps_prerelease_metadata(self, project_dir: Path) -> None:
        project = _project(project_dir)
        write_version(project, parse_version("1.0.0-rc.1+b7"))
        doc = load_toml(project_dir / "pyproject.toml")
        assert doc["project"]["version"] == "1.0.0-rc.1+b7"

    def test_mismatch_with_disk_is_fatal(self, project_dir: Path) -> None:
        project = _project(project_dir, "9.9.9")
        before = (project_dir / "pyproject.toml").read_text()

        with pytest.raises(VersionMismatchError, match="Couldn't find version '9.9.9'"):
            write_version(project, parse_version("10.0.0"))

        assert (project_dir / "pyproject.toml").read_text() == before
        assert str(project.version) == "9.9.9"

    def test_missing_manifest(self, tmp_path: Path) -> None:
        project = _project(tmp_path)
        with pytest.raises(FileAccessError):
            write_version(project, parse_version("0.4.0"))
