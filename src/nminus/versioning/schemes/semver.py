"""Semantic versioning schemes backed by semantic_version.

``semver`` accepts strict SemVer 2.0 strings only. ``semver-coerced`` also
accepts partial or prefixed versions such as ``v1.2`` and coerces them to a
full ``major.minor.patch`` before comparing.
"""

import re
from typing import Any, Callable, Optional

import semantic_version

from .base import cmp

_COERCIBLE = re.compile(r"^[vV=]?\s*\d")

Parser = Callable[[Any], Optional[semantic_version.Version]]


def parse_strict(version: Any) -> Optional[semantic_version.Version]:
    """Parse a SemVer 2.0 string, None when invalid."""
    if not isinstance(version, str) or not version:
        return None
    try:
        return semantic_version.Version(version)
    except ValueError:
        return None


def parse_coerced(version: Any) -> Optional[semantic_version.Version]:
    """Parse loosely, padding missing components; None when nothing numeric leads."""
    if not isinstance(version, str) or not _COERCIBLE.match(version):
        return None
    cleaned = version.strip().lstrip("vV=").strip()
    try:
        return semantic_version.Version.coerce(cleaned)
    except ValueError:
        return None


class SemverScheme:
    """Semantic versioning with a pluggable parser."""

    def __init__(self, scheme_id: str, parser: Parser):
        self.id = scheme_id
        self._parse = parser

    def _require(self, version: str) -> semantic_version.Version:
        parsed = self._parse(version)
        if parsed is None:
            raise ValueError(f"Invalid {self.id} version: {version!r}")
        return parsed

    def is_valid(self, version: Any) -> bool:
        return self._parse(version) is not None

    def is_version(self, version: Any) -> bool:
        return self.is_valid(version)

    def is_stable(self, version: str) -> bool:
        parsed = self._parse(version)
        return parsed is not None and not parsed.prerelease

    def sort_versions(self, a: str, b: str) -> int:
        return cmp(self._require(a), self._require(b))

    def get_major(self, version: str) -> int:
        return self._require(version).major

    def get_minor(self, version: str) -> int:
        return self._require(version).minor

    def get_patch(self, version: str) -> int:
        return self._require(version).patch


semver = SemverScheme("semver", parse_strict)
semver_coerced = SemverScheme("semver-coerced", parse_coerced)
