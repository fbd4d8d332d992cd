"""Release retrieval with a TTL cache in front of a retried registry lookup."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ..common.logging_utils import extra_context, is_debug_enabled
from ..common.retry import RetryPolicy, is_retryable_error, retry_with_backoff
from .cache import TTLCache, release_cache, release_cache_key
from .models import ReleaseResult

logger = logging.getLogger(__name__)

ReleaseLookup = Callable[[Optional[str], Optional[str], str], Awaitable[Optional[ReleaseResult]]]


async def _default_lookup(
    datasource: Optional[str], package_name: Optional[str], scheme_id: str
) -> Optional[ReleaseResult]:
    from ..datasource import get_pkg_releases  # pylint: disable=import-outside-toplevel
    return await get_pkg_releases(datasource, package_name, scheme_id)


class ReleaseFetcher:
    """Fetch a package's releases, consulting the cache first.

    On a miss the lookup runs under the retry policy; a successful, non-None
    answer is cached under ``(datasource, package_name, scheme_id)``.
    """

    def __init__(
        self,
        lookup: Optional[ReleaseLookup] = None,
        cache: Optional[TTLCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        is_retryable: Callable[[BaseException], bool] = is_retryable_error,
    ):
        self.lookup = lookup or _default_lookup
        self.cache = cache if cache is not None else release_cache
        self.retry_policy = retry_policy
        self._sleep = sleep
        self._is_retryable = is_retryable

    async def fetch(
        self,
        datasource: Optional[str],
        package_name: Optional[str],
        scheme_id: str,
    ) -> Optional[ReleaseResult]:
        """Return the release set, or None when the registry knows no such package.

        Raises:
            Exception: the lookup's last error once retries are exhausted, or
                its first non-retryable error.
        """
        if not package_name:
            # No package identity: uncached direct lookup
            return await self._lookup_with_retry(datasource, package_name, scheme_id)

        key = release_cache_key(datasource, package_name, scheme_id)
        cached = self.cache.get(key)
        if cached is not None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Release cache hit",
                    extra=extra_context(
                        event="cache_hit", component="fetcher", datasource=datasource, package_name=package_name
                    ),
                )
            return cached

        result = await self._lookup_with_retry(datasource, package_name, scheme_id)
        if result is not None:
            self.cache.set(key, result)
        return result

    async def _lookup_with_retry(
        self, datasource: Optional[str], package_name: Optional[str], scheme_id: str
    ) -> Optional[ReleaseResult]:
        return await retry_with_backoff(
            lambda: self.lookup(datasource, package_name, scheme_id),
            self.retry_policy,
            is_retryable=self._is_retryable,
            sleep=self._sleep,
            context={"datasource": datasource, "package_name": package_name},
        )
