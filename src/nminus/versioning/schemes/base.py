"""Versioning scheme capability consumed by the resolver."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class VersioningScheme(Protocol):
    """Operations the resolution pipeline needs from a versioning scheme.

    Implementations are stateless and must not raise from ``is_valid``,
    ``is_version`` or ``is_stable`` for arbitrary input. ``get_major``,
    ``get_minor`` and ``get_patch`` raise ``ValueError`` for invalid versions.
    """

    id: str

    def is_valid(self, version: Any) -> bool: ...

    def is_version(self, version: Any) -> bool: ...

    def is_stable(self, version: str) -> bool: ...

    def sort_versions(self, a: str, b: str) -> int: ...

    def get_major(self, version: str) -> int: ...

    def get_minor(self, version: str) -> int: ...

    def get_patch(self, version: str) -> int: ...


def cmp(a: Any, b: Any) -> int:
    """Three-way comparison for orderable values."""
    return (a > b) - (a < b)


def compare_numeric(a: Sequence[int], b: Sequence[int]) -> int:
    """Compare release tuples, padding the shorter one with zeros."""
    width = max(len(a), len(b))
    return cmp(tuple(a) + (0,) * (width - len(a)), tuple(b) + (0,) * (width - len(b)))


def component(parts: Sequence[int], index: int) -> int:
    """Component at ``index`` of a release tuple, 0 when absent."""
    return parts[index] if len(parts) > index else 0
