"""Offset-based version resolution."""

from .cache import TTLCache, release_cache
from .constraints import ConstraintCheck, validate_constraints
from .fetcher import ReleaseFetcher
from .models import (
    Constraints,
    FallbackReason,
    OffsetLevel,
    Release,
    ReleaseResult,
    ResolutionOutcome,
    ResolutionRequest,
)
from .resolver import Resolver, get_new_value

__all__ = [
    "ConstraintCheck",
    "Constraints",
    "FallbackReason",
    "OffsetLevel",
    "Release",
    "ReleaseFetcher",
    "ReleaseResult",
    "ResolutionOutcome",
    "ResolutionRequest",
    "Resolver",
    "TTLCache",
    "get_new_value",
    "release_cache",
    "validate_constraints",
]
