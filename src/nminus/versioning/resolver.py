"""Offset resolution: pick a version a given distance behind the latest.

The resolver runs validate, fetch, filter, sort, group (when an offset level
is set) and select. Any step may end the run with a fallback, in which case
the caller's current value is returned unchanged. Only an unknown versioning
scheme id raises.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..common.logging_utils import extra_context
from ..errors import (
    OffsetOutOfBoundsError,
    RegistryFetchError,
    VersionListEmptyError,
)
from . import schemes as schemes_mod
from .constraints import validate_constraints
from .fetcher import ReleaseFetcher
from .models import (
    Constraints,
    FallbackReason,
    OffsetLevel,
    ResolutionOutcome,
    ResolutionRequest,
)
from .schemes.base import VersioningScheme
from .selection import (
    dedupe_versions,
    filter_sibling_groups,
    filter_versions,
    group_versions,
    select_flat,
    select_from_groups,
    sort_versions,
)

logger = logging.getLogger(__name__)


class Resolver:
    """Compose validation, retrieval and selection into one operation."""

    def __init__(
        self,
        fetcher: Optional[ReleaseFetcher] = None,
        schemes: Optional[schemes_mod.SchemeRegistry] = None,
    ):
        self.fetcher = fetcher or ReleaseFetcher()
        self.schemes = schemes or schemes_mod.scheme_registry

    async def get_new_value(self, request: ResolutionRequest) -> str:
        """Resolved version, or ``request.current_value`` when none applies."""
        outcome = await self.resolve(request)
        return outcome.value_or(request.current_value)

    async def resolve(self, request: ResolutionRequest) -> ResolutionOutcome:
        """Run the pipeline and describe how it ended.

        Raises:
            UnknownVersioningError: if ``request.versioning`` is not registered.
        """
        scheme = self.schemes.get(request.versioning)
        log_ctx = {
            "datasource": request.datasource,
            "package_name": request.package_name,
            "versioning": scheme.id,
        }

        check = validate_constraints(request.constraints)
        if not check.ok:
            logger.warning(
                "Invalid offset constraints for %s, keeping %s: %s",
                request.package_name or "package",
                request.current_value,
                check.error,
                extra=extra_context(event="resolve", component="resolver", outcome="invalid_constraints", **log_ctx),
            )
            return ResolutionOutcome.fallback(FallbackReason.INVALID_CONSTRAINTS, check.error)

        try:
            result = await self.fetcher.fetch(request.datasource, request.package_name, scheme.id)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            error = RegistryFetchError(exc, request.datasource, request.package_name)
            logger.debug(
                "Failed to fetch package releases, returning current value: %s",
                error,
                extra=extra_context(event="resolve", component="resolver", outcome="fetch_failed", **log_ctx),
            )
            return ResolutionOutcome.fallback(FallbackReason.FETCH_FAILED, error)

        releases = result.releases if result is not None else ()
        versions = filter_versions(releases or (), scheme, check.ignore_prerelease)
        versions = dedupe_versions(sort_versions(versions, scheme), scheme)
        if not versions:
            error = VersionListEmptyError(request.package_name, request.datasource)
            logger.debug(
                "%s, returning current value",
                error,
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    outcome="no_versions",
                    release_count=len(releases or ()),
                    **log_ctx,
                ),
            )
            return ResolutionOutcome.fallback(FallbackReason.NO_VERSIONS, error)

        if check.offset_level is not None and check.offset != 0:
            selected, error = self._select_grouped(request, scheme, versions, check.offset, check.offset_level)
        else:
            selected, error = select_flat(versions, check.offset)

        if selected is None:
            logger.debug(
                "%s Returning current value",
                error,
                extra=extra_context(event="resolve", component="resolver", outcome="out_of_bounds", **log_ctx),
            )
            return ResolutionOutcome.fallback(FallbackReason.OUT_OF_BOUNDS, error)

        logger.debug(
            "Selected %s (offset %d)",
            selected,
            check.offset,
            extra=extra_context(event="resolve", component="resolver", outcome="selected", **log_ctx),
        )
        return ResolutionOutcome.selected(selected)

    def _select_grouped(self, request, scheme: VersioningScheme, versions, offset: int, level: OffsetLevel):
        groups = group_versions(versions, scheme, level)
        if level is OffsetLevel.MAJOR:
            return select_from_groups(groups, offset, level)

        current = request.current_version or request.current_value
        try:
            current_major = scheme.get_major(current)
            current_minor = scheme.get_minor(current)
        except (TypeError, ValueError):
            # Siblings of an unparseable current version are unknown
            return None, OffsetOutOfBoundsError(offset, 0, level.value)

        siblings = filter_sibling_groups(groups, level, current_major, current_minor)
        return select_from_groups(siblings, offset, level)


_default_resolver: Optional[Resolver] = None


def default_resolver() -> Resolver:
    """Shared resolver backed by the process-wide release cache."""
    global _default_resolver  # pylint: disable=global-statement
    if _default_resolver is None:
        _default_resolver = Resolver()
    return _default_resolver


async def get_new_value(
    current_value: str,
    *,
    current_version: Optional[str] = None,
    datasource: Optional[str] = None,
    package_name: Optional[str] = None,
    versioning: Optional[str] = None,
    constraints: Optional[Constraints] = None,
    range_strategy: str = "auto",
    resolver: Optional[Resolver] = None,
) -> str:
    """Resolve with keyword arguments; see ``Resolver.get_new_value``."""
    request = ResolutionRequest(
        current_value=current_value,
        current_version=current_version,
        datasource=datasource,
        package_name=package_name,
        versioning=versioning,
        constraints=constraints,
        range_strategy=range_strategy,
    )
    return await (resolver or default_resolver()).get_new_value(request)
