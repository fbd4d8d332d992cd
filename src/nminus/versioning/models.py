"""Data models for offset-based version resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from ..errors import NMinusOneError


class OffsetLevel(Enum):
    """Semantic level an offset is applied at."""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        return tuple(level.value for level in cls)


class FallbackReason(Enum):
    """Why a resolution kept the caller's current value."""
    INVALID_CONSTRAINTS = "invalid_constraints"
    FETCH_FAILED = "fetch_failed"
    NO_VERSIONS = "no_versions"
    OUT_OF_BOUNDS = "out_of_bounds"


@dataclass(frozen=True)
class Release:
    """A single release as reported by a registry. The version may be malformed."""
    version: Any
    release_timestamp: Optional[str] = None


@dataclass(frozen=True)
class ReleaseResult:
    """Immutable snapshot of a package's releases."""
    releases: Tuple[Release, ...] = ()
    homepage: Optional[str] = None
    source_url: Optional[str] = None

    @classmethod
    def from_versions(cls, versions, **kwargs) -> "ReleaseResult":
        """Build a result from bare version strings."""
        return cls(releases=tuple(Release(version=v) for v in versions), **kwargs)


@dataclass(frozen=True)
class Constraints:
    """Offset constraints as configured for a package.

    ``offset_level`` is kept raw so the validator can report bad values.
    """
    allowed_versions: Optional[str] = None
    offset: Optional[Any] = None
    offset_level: Optional[Any] = None
    ignore_prerelease: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Constraints":
        """Build from the camelCase configuration surface."""
        if not data:
            return cls()
        return cls(
            allowed_versions=data.get("allowedVersions"),
            offset=data.get("offset"),
            offset_level=data.get("offsetLevel"),
            ignore_prerelease=data.get("ignorePrerelease") is not False,
        )


@dataclass
class Group:
    """Versions sharing a major, major.minor or major.minor.patch prefix."""
    key: str
    major: int
    minor: Optional[int] = None
    patch: Optional[int] = None
    members: List[str] = field(default_factory=list)

    @property
    def latest(self) -> str:
        return self.members[-1]


@dataclass
class ResolutionRequest:
    """Resolution input for one dependency."""
    current_value: str
    current_version: Optional[str] = None
    datasource: Optional[str] = None
    package_name: Optional[str] = None
    versioning: Optional[str] = None
    constraints: Optional[Constraints] = None
    range_strategy: str = "auto"


@dataclass(frozen=True)
class ResolutionOutcome:
    """Either a selected version or a typed fallback."""
    version: Optional[str] = None
    reason: Optional[FallbackReason] = None
    error: Optional[NMinusOneError] = None

    @classmethod
    def selected(cls, version: str) -> "ResolutionOutcome":
        return cls(version=version)

    @classmethod
    def fallback(cls, reason: FallbackReason, error: Optional[NMinusOneError] = None) -> "ResolutionOutcome":
        return cls(reason=reason, error=error)

    @property
    def is_fallback(self) -> bool:
        return self.version is None

    def value_or(self, current_value: str) -> str:
        """The selected version, or ``current_value`` for a fallback."""
        return current_value if self.version is None else self.version
