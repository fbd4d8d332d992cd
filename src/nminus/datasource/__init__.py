"""Registry clients and the lookup that dispatches to them by datasource id."""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, Optional

from ..constants import Datasources
from ..errors import UnknownDatasourceError
from ..versioning.models import ReleaseResult
from . import maven, npm, nuget, pypi

DatasourceClient = Callable[[str], Awaitable[Optional[ReleaseResult]]]

_CLIENTS: Dict[str, DatasourceClient] = {
    Datasources.NPM.value: npm.fetch_releases,
    Datasources.PYPI.value: pypi.fetch_releases,
    Datasources.MAVEN.value: maven.fetch_releases,
    Datasources.NUGET.value: nuget.fetch_releases,
}


def register_datasource(datasource: str, client: DatasourceClient) -> None:
    """Register or replace the client used for a datasource id."""
    _CLIENTS[datasource] = client


def get_datasource_list():
    """Ids with a registered client."""
    return list(_CLIENTS)


async def get_pkg_releases(
    datasource: Optional[str], package_name: Optional[str], scheme_id: str = ""
) -> Optional[ReleaseResult]:
    """Fetch releases for a package from its datasource.

    ``scheme_id`` is accepted for the lookup signature but does not change
    what the registry is asked for.

    Raises:
        UnknownDatasourceError: if no client handles ``datasource``.
    """
    del scheme_id
    if not package_name:
        return None
    client = _CLIENTS.get(datasource or "")
    if client is None:
        raise UnknownDatasourceError(datasource)
    return await client(package_name)


__all__ = ["get_pkg_releases", "register_datasource", "get_datasource_list"]
