"""Filtering, ordering, grouping and offset selection of release versions.

Everything here is pure and synchronous. Selectors never raise for data
problems; they return ``(version, error)`` where exactly one side is set.
"""

from __future__ import annotations

import functools
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..errors import OffsetOutOfBoundsError
from .models import Group, OffsetLevel, Release
from .schemes.base import VersioningScheme


Selection = Tuple[Optional[str], Optional[OffsetOutOfBoundsError]]


def _valid(scheme: VersioningScheme, version: object) -> bool:
    try:
        return bool(scheme.is_valid(version))
    except Exception:  # pylint: disable=broad-exception-caught
        # A scheme that chokes on input has rejected it
        return False


def _stable(scheme: VersioningScheme, version: str) -> bool:
    try:
        return bool(scheme.is_stable(version))
    except Exception:  # pylint: disable=broad-exception-caught
        return False


def filter_versions(
    releases: Iterable[Release],
    scheme: VersioningScheme,
    ignore_prerelease: bool = True,
) -> List[str]:
    """Version strings that are non-empty, valid and (by default) stable."""
    versions = []
    for release in releases:
        version = getattr(release, "version", None)
        if not isinstance(version, str) or not version:
            continue
        if not _valid(scheme, version):
            continue
        if ignore_prerelease and not _stable(scheme, version):
            continue
        versions.append(version)
    return versions


def sort_versions(versions: Iterable[str], scheme: VersioningScheme) -> List[str]:
    """Ascending order under the scheme comparator; latest last."""
    return sorted(versions, key=functools.cmp_to_key(scheme.sort_versions))


def dedupe_versions(sorted_versions: Sequence[str], scheme: VersioningScheme) -> List[str]:
    """Drop versions comparing equal to their predecessor.

    Keeps the first textual form of each logical version, so ``1.0`` and
    ``1.0.0`` count once when offsets are applied.
    """
    result: List[str] = []
    for version in sorted_versions:
        if result and scheme.sort_versions(result[-1], version) == 0:
            continue
        result.append(version)
    return result


def group_versions(
    sorted_versions: Sequence[str],
    scheme: VersioningScheme,
    level: OffsetLevel,
) -> List[Group]:
    """Partition versions by level and order the groups by their latest member.

    Members keep the ascending order of ``sorted_versions``.
    """
    groups: Dict[str, Group] = {}
    for version in sorted_versions:
        try:
            major = scheme.get_major(version)
            minor = scheme.get_minor(version) if level is not OffsetLevel.MAJOR else None
            patch = scheme.get_patch(version) if level is OffsetLevel.PATCH else None
        except ValueError:
            continue

        if level is OffsetLevel.MAJOR:
            key = f"{major}"
        elif level is OffsetLevel.MINOR:
            key = f"{major}.{minor}"
        else:
            key = f"{major}.{minor}.{patch}"

        group = groups.get(key)
        if group is None:
            group = groups[key] = Group(key=key, major=major, minor=minor, patch=patch)
        group.members.append(version)

    return sorted(
        groups.values(),
        key=functools.cmp_to_key(lambda a, b: scheme.sort_versions(a.latest, b.latest)),
    )


def filter_sibling_groups(
    groups: Sequence[Group],
    level: OffsetLevel,
    current_major: Optional[int] = None,
    current_minor: Optional[int] = None,
) -> List[Group]:
    """Restrict minor groups to the current major, patch groups to the current major.minor."""
    if level is OffsetLevel.MINOR:
        return [g for g in groups if g.major == current_major]
    if level is OffsetLevel.PATCH:
        return [g for g in groups if g.major == current_major and g.minor == current_minor]
    return list(groups)


def _target_index(count: int, offset: int) -> Optional[int]:
    index = count - 1 + offset
    if index < 0 or index >= count:
        return None
    return index


def select_flat(sorted_versions: Sequence[str], offset: int) -> Selection:
    """Pick ``len - 1 + offset`` from the ascending list."""
    index = _target_index(len(sorted_versions), offset)
    if index is None:
        return None, OffsetOutOfBoundsError(offset, len(sorted_versions))
    return sorted_versions[index], None


def select_from_groups(groups: Sequence[Group], offset: int, level: OffsetLevel) -> Selection:
    """Pick the group at ``len - 1 + offset`` and return its latest member."""
    index = _target_index(len(groups), offset)
    if index is None:
        return None, OffsetOutOfBoundsError(offset, len(groups), level.value)
    return groups[index].latest, None
