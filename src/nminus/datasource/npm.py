"""NPM registry client: release list from the package document."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Optional

import aiohttp

from ..common.http_client import get_json
from ..common.logging_utils import extra_context
from ..constants import Constants
from ..versioning.models import Release, ReleaseResult

logger = logging.getLogger(__name__)


async def fetch_releases(
    package_name: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    url: str = Constants.REGISTRY_URL_NPM,
) -> Optional[ReleaseResult]:
    """Fetch releases from the npm package document.

    Args:
        package_name: Package name, scoped names included (``@scope/name``).
        session: Optional shared aiohttp session.
        url: Registry base URL.

    Returns:
        ReleaseResult, or None when the package does not exist.
    """
    # Scoped packages keep the leading "@" but encode the slash
    package_url = url + urllib.parse.quote(package_name, safe="@")
    status_code, _, data = await get_json(package_url, session=session)
    if status_code == 404:
        return None
    if not isinstance(data, dict):
        logger.debug(
            "npm returned no package document",
            extra=extra_context(event="parse", component="npm", outcome="empty", package_name=package_name),
        )
        return ReleaseResult()

    times = data.get("time") or {}
    releases = tuple(
        Release(version=v, release_timestamp=times.get(v) if isinstance(times, dict) else None)
        for v in (data.get("versions") or {})
    )
    repository = data.get("repository")
    source_url = repository.get("url") if isinstance(repository, dict) else repository
    return ReleaseResult(releases=releases, homepage=data.get("homepage"), source_url=source_url)
