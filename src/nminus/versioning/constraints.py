"""Validation of offset constraints before any registry access."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..common.logging_utils import extra_context
from ..errors import InvalidOffsetError, InvalidOffsetLevelError, NMinusOneError
from .models import Constraints, OffsetLevel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConstraintCheck:
    """Validation result.

    On success ``offset`` is an int (0 when unset) and ``offset_level`` is the
    parsed level, or None when unset or ignored.
    """
    offset: int = 0
    offset_level: Optional[OffsetLevel] = None
    ignore_prerelease: bool = True
    allowed_versions: Optional[str] = None
    error: Optional[NMinusOneError] = None
    level_ignored: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_int(value: Any) -> Optional[int]:
    """Integer value of ``value``, accepting integral floats such as -1.0."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def validate_constraints(
    constraints: Union[Constraints, Mapping[str, Any], None],
) -> ConstraintCheck:
    """Check offset/offsetLevel well-formedness; first violation wins.

    1. A positive (or non-integer) offset is an InvalidOffsetError.
    2. An offsetLevel outside major/minor/patch is an InvalidOffsetLevelError.
    3. An offsetLevel without a non-zero offset is dropped, not rejected.
    """
    if constraints is None or isinstance(constraints, Mapping):
        constraints = Constraints.from_mapping(constraints)

    offset = constraints.offset
    raw_level = constraints.offset_level

    if offset is not None:
        as_int = _as_int(offset)
        if as_int is None or as_int > 0:
            return ConstraintCheck(error=InvalidOffsetError(offset))
        offset = as_int

    level: Optional[OffsetLevel] = None
    if raw_level is not None:
        try:
            level = OffsetLevel(raw_level)
        except ValueError:
            return ConstraintCheck(error=InvalidOffsetLevelError(raw_level))

    offset = offset or 0
    level_ignored = False
    if level is not None and offset == 0:
        logger.debug(
            "offsetLevel %s ignored without a non-zero offset",
            level.value,
            extra=extra_context(event="constraints", component="validator", outcome="level_ignored"),
        )
        level = None
        level_ignored = True

    return ConstraintCheck(
        offset=offset,
        offset_level=level,
        ignore_prerelease=constraints.ignore_prerelease,
        allowed_versions=constraints.allowed_versions,
        level_ignored=level_ignored,
    )
