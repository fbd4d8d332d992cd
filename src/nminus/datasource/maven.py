"""Maven Central client: release list from maven-metadata.xml."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Optional

import aiohttp

from ..common.http_client import robust_get
from ..common.logging_utils import extra_context
from ..constants import Constants
from ..versioning.models import Release, ReleaseResult

logger = logging.getLogger(__name__)


def metadata_url(identifier: str, base_url: str = Constants.REGISTRY_URL_MAVEN) -> Optional[str]:
    """maven-metadata.xml URL for ``groupId:artifactId``, None if malformed."""
    try:
        group_id, artifact_id = identifier.split(":", 1)
    except ValueError:
        return None
    if not group_id or not artifact_id:
        return None
    return f"{base_url}{group_id.replace('.', '/')}/{artifact_id}/maven-metadata.xml"


async def fetch_releases(
    package_name: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    url: str = Constants.REGISTRY_URL_MAVEN,
) -> Optional[ReleaseResult]:
    """Fetch releases for ``groupId:artifactId``.

    Returns:
        ReleaseResult (empty when the metadata cannot be parsed), or None when
        the coordinate is malformed or unknown.
    """
    target = metadata_url(package_name, url)
    if target is None:
        logger.debug(
            "Invalid Maven coordinate",
            extra=extra_context(event="parse", component="maven", outcome="bad_coordinate", package_name=package_name),
        )
        return None

    status_code, _, text = await robust_get(target, headers={"Accept": "application/xml"}, session=session)
    if status_code == 404:
        return None
    if not text:
        return ReleaseResult()

    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        logger.debug(
            "Unparseable maven-metadata.xml",
            extra=extra_context(event="parse", component="maven", outcome="xml_error", package_name=package_name),
        )
        return ReleaseResult()

    versions = []
    versioning = root.find("versioning")
    if versioning is not None:
        versions_elem = versioning.find("versions")
        if versions_elem is not None:
            for version_elem in versions_elem.findall("version"):
                if version_elem.text and version_elem.text.strip():
                    versions.append(version_elem.text.strip())

    return ReleaseResult(releases=tuple(Release(version=v) for v in versions))
