"""Numeric-prefix versioning: a dotted release tuple plus an optional suffix.

Used directly as the ``loose`` scheme and, with a stricter pattern and a
different notion of pre-release, as the ``docker`` scheme.
"""

import re
from typing import Any, Callable, Optional, Pattern, Tuple

from .base import cmp, compare_numeric, component

Parsed = Tuple[Tuple[int, ...], str]

LOOSE_PATTERN = re.compile(r"^[vV]?(?P<release>\d+(?:\.\d+)*)(?P<suffix>.*)$")


class NumericScheme:
    """Versions ordered by their numeric release tuple, then by suffix.

    Within the same release, pre-release suffixes sort before stable ones and
    suffixes of equal stability sort lexically.
    """

    def __init__(self, scheme_id: str, pattern: Pattern[str], is_prerelease: Callable[[str], bool]):
        self.id = scheme_id
        self._pattern = pattern
        self._is_prerelease = is_prerelease

    def _parse(self, version: Any) -> Optional[Parsed]:
        if not isinstance(version, str):
            return None
        m = self._pattern.match(version.strip())
        if not m:
            return None
        release = tuple(int(p) for p in m.group("release").split("."))
        return release, m.group("suffix") or ""

    def _require(self, version: str) -> Parsed:
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
        return parsed is not None and not self._is_prerelease(parsed[1])

    def sort_versions(self, a: str, b: str) -> int:
        release_a, suffix_a = self._require(a)
        release_b, suffix_b = self._require(b)
        result = compare_numeric(release_a, release_b)
        if result:
            return result
        stable_a = not self._is_prerelease(suffix_a)
        stable_b = not self._is_prerelease(suffix_b)
        if stable_a != stable_b:
            return 1 if stable_a else -1
        return cmp(suffix_a, suffix_b)

    def get_major(self, version: str) -> int:
        return component(self._require(version)[0], 0)

    def get_minor(self, version: str) -> int:
        return component(self._require(version)[0], 1)

    def get_patch(self, version: str) -> int:
        return component(self._require(version)[0], 2)


loose = NumericScheme("loose", LOOSE_PATTERN, lambda suffix: bool(suffix))
