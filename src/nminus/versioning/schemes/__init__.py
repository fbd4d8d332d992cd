"""Versioning scheme registry keyed by scheme id."""

from typing import Dict, List, Optional

from ...constants import Constants
from ...errors import UnknownVersioningError
from .base import VersioningScheme
from .docker import docker
from .loose import loose
from .pep440 import pep440
from .semver import semver, semver_coerced


class SchemeRegistry:
    """Registry for versioning schemes."""

    def __init__(self):
        """Initialize the registry with the bundled schemes."""
        self._schemes: Dict[str, VersioningScheme] = {
            s.id: s for s in (semver, semver_coerced, pep440, loose, docker)
        }

    def get(self, scheme_id: Optional[str] = None) -> VersioningScheme:
        """Get a scheme by id, the default scheme when id is empty.

        Raises:
            UnknownVersioningError: If no scheme is registered under the id.
        """
        key = scheme_id or Constants.DEFAULT_VERSIONING
        try:
            return self._schemes[key]
        except KeyError:
            raise UnknownVersioningError(key) from None

    def register(self, scheme_id: str, scheme: VersioningScheme) -> None:
        """Register or replace a scheme.

        Args:
            scheme_id: The id callers select the scheme with.
            scheme: Object implementing the VersioningScheme operations.
        """
        self._schemes[scheme_id] = scheme

    def ids(self) -> List[str]:
        """Registered scheme ids."""
        return list(self._schemes)


# Global registry instance
scheme_registry = SchemeRegistry()


def get(scheme_id: Optional[str] = None) -> VersioningScheme:
    """Look up a scheme in the global registry."""
    return scheme_registry.get(scheme_id)


def get_versioning_list() -> List[str]:
    """Ids of every registered scheme."""
    return scheme_registry.ids()


__all__ = [
    "SchemeRegistry",
    "VersioningScheme",
    "get",
    "get_versioning_list",
    "scheme_registry",
]
