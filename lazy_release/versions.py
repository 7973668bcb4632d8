"""Version parsing and incrementing.

Versions are strict semver values (MAJOR.MINOR.PATCH[-prerelease][+build])
backed by semver.Version, which is immutable and totally ordered.
"""

from __future__ import annotations

from enum import Enum

import semver

from .errors import ParseError


class VersionKind(str, Enum):
    """Which part of the version a release increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    CURRENT = "current"


def parse_version(version_str: str) -> semver.Version:
    """Parse a strict semver string.

    Unlike a lenient parse, "1.2" or "v1.2.3" are rejected.

    Raises:
        ParseError: If the string is not a valid semantic version.
    """
    try:
        return semver.Version.parse(version_str)
    except (ValueError, TypeError) as exc:
        raise ParseError(f"Invalid version '{version_str}': {exc}") from exc


def increment(version: semver.Version, kind: VersionKind) -> semver.Version:
    """Return a new version with the selected part incremented.

    Examples:
        increment(1.2.3, MAJOR) → 2.0.0
        increment(1.2.3, MINOR) → 1.3.0
        increment(1.2.3, PATCH) → 1.2.4
        increment(1.2.3-rc.1, CURRENT) → 1.2.3-rc.1
    """
    if kind is VersionKind.MAJOR:
        return version.bump_major()
    if kind is VersionKind.MINOR:
        return version.bump_minor()
    if kind is VersionKind.PATCH:
        return version.bump_patch()
    return version
