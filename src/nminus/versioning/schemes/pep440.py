"""PEP 440 versioning backed by packaging."""

from typing import Any, Optional

from packaging import version as pkg_version

from .base import cmp, component


class Pep440Scheme:
    """Python package versions (``1.0``, ``2.1.0rc1``, ``1!2.0.post3``)."""

    id = "pep440"

    def _parse(self, version: Any) -> Optional[pkg_version.Version]:
        if not isinstance(version, str) or not version.strip():
            return None
        try:
            return pkg_version.Version(version)
        except pkg_version.InvalidVersion:
            return None

    def _require(self, version: str) -> pkg_version.Version:
        parsed = self._parse(version)
        if parsed is None:
            raise ValueError(f"Invalid pep440 version: {version!r}")
        return parsed

    def is_valid(self, version: Any) -> bool:
        return self._parse(version) is not None

    def is_version(self, version: Any) -> bool:
        return self.is_valid(version)

    def is_stable(self, version: str) -> bool:
        parsed = self._parse(version)
        # dev releases count as pre-releases here
        return parsed is not None and not parsed.is_prerelease

    def sort_versions(self, a: str, b: str) -> int:
        return cmp(self._require(a), self._require(b))

    def get_major(self, version: str) -> int:
        return component(self._require(version).release, 0)

    def get_minor(self, version: str) -> int:
        return component(self._require(version).release, 1)

    def get_patch(self, version: str) -> int:
        return component(self._require(version).release, 2)


pep440 = Pep440Scheme()
