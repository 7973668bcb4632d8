"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from helpers import MANIFEST, FakeRunner


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a project directory with a pyproject.toml at version 0.3.1."""
    root = tmp_path / "demo"
    root.mkdir()
    (root / "pyproject.toml").write_text(MANIFEST)
    return root


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's configuration."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
