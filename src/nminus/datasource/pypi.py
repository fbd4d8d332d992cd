"""PyPI registry client: release list from the JSON API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import aiohttp

from ..common.http_client import get_json
from ..common.logging_utils import extra_context
from ..constants import Constants
from ..versioning.models import Release, ReleaseResult

logger = logging.getLogger(__name__)


def normalize_name(package_name: str) -> str:
    """PyPI names are case-insensitive and treat ``_`` like ``-``."""
    return package_name.strip().lower().replace("_", "-")


def _upload_time(files: List[Dict[str, Any]]) -> Optional[str]:
    for f in files:
        if isinstance(f, dict) and f.get("upload_time_iso_8601"):
            return f["upload_time_iso_8601"]
    return None


def _all_yanked(files: List[Dict[str, Any]]) -> bool:
    return bool(files) and all(isinstance(f, dict) and f.get("yanked") for f in files)


async def fetch_releases(
    package_name: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    url: str = Constants.REGISTRY_URL_PYPI,
) -> Optional[ReleaseResult]:
    """Fetch releases from ``/pypi/<name>/json``.

    Releases whose every file is yanked are left out.

    Returns:
        ReleaseResult, or None when the project does not exist.
    """
    name = normalize_name(package_name)
    status_code, _, data = await get_json(f"{url}{name}/json", session=session)
    if status_code == 404:
        return None
    if not isinstance(data, dict):
        logger.debug(
            "PyPI returned no project document",
            extra=extra_context(event="parse", component="pypi", outcome="empty", package_name=name),
        )
        return ReleaseResult()

    releases = []
    for version, files in (data.get("releases") or {}).items():
        files = files if isinstance(files, list) else []
        if _all_yanked(files):
            continue
        releases.append(Release(version=version, release_timestamp=_upload_time(files)))

    info = data.get("info") or {}
    project_urls = info.get("project_urls") or {}
    return ReleaseResult(
        releases=tuple(releases),
        homepage=info.get("home_page") or project_urls.get("Homepage"),
        source_url=project_urls.get("Source") or project_urls.get("Repository"),
    )
