"""NuGet V3 client: release list from the registration index."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import aiohttp

from ..common.http_client import get_json
from ..common.logging_utils import extra_context
from ..constants import Constants
from ..versioning.models import Release, ReleaseResult

logger = logging.getLogger(__name__)

REGISTRATION_TYPE = "RegistrationsBaseUrl/3.6.0"


async def _registration_base(session: Optional[aiohttp.ClientSession], index_url: str) -> Optional[str]:
    status_code, _, index_data = await get_json(index_url, session=session)
    if status_code != 200 or not isinstance(index_data, dict):
        return None
    for resource in index_data.get("resources", []):
        if resource.get("@type") == REGISTRATION_TYPE:
            return resource.get("@id")
    return None


def _releases_from_items(items: List[Dict[str, Any]]) -> List[Release]:
    releases = []
    for page_item in items:
        catalog_entry = page_item.get("catalogEntry") or {}
        version = catalog_entry.get("version")
        if not version:
            continue
        # Unlisted packages carry listed=false
        if catalog_entry.get("listed") is False:
            continue
        releases.append(Release(version=version, release_timestamp=catalog_entry.get("published")))
    return releases


async def fetch_releases(
    package_name: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    url: str = Constants.REGISTRY_URL_NUGET_V3,
) -> Optional[ReleaseResult]:
    """Fetch releases through the V3 service index.

    Registration pages that are not inlined in the index are fetched
    individually.

    Returns:
        ReleaseResult, or None when the package or the registration resource
        is unknown.
    """
    registration_base = await _registration_base(session, url)
    if not registration_base:
        logger.debug(
            "NuGet service index has no registration resource",
            extra=extra_context(event="parse", component="nuget", outcome="no_registration"),
        )
        return None

    encoded_id = urllib.parse.quote(package_name.lower(), safe="")
    status_code, _, reg_data = await get_json(f"{registration_base}{encoded_id}/index.json", session=session)
    if status_code == 404 or not isinstance(reg_data, dict):
        return None

    releases: List[Release] = []
    for page in reg_data.get("items", []):
        items = page.get("items")
        if items is None and page.get("@id"):
            _, _, page_data = await get_json(page["@id"], session=session)
            items = (page_data or {}).get("items", [])
        releases.extend(_releases_from_items(items or []))

    return ReleaseResult(releases=tuple(releases))
