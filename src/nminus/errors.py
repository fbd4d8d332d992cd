"""Error types for offset-based version resolution.

Resolution errors are carried inside outcomes and logged; the resolver never
raises them to its caller. ``UnknownVersioningError`` and ``RegistryHTTPError``
are the exceptions that travel as real exceptions.
"""

from __future__ import annotations

from typing import Optional


class NMinusOneError(Exception):
    """Base class for offset resolution errors."""


class InvalidOffsetError(NMinusOneError):
    """Offset is positive or not an integer."""

    def __init__(self, offset: object, message: Optional[str] = None):
        super().__init__(
            message
            or f"Invalid offset value: {offset!r}. Offset must be 0 or a negative integer."
        )
        self.offset = offset


class InvalidOffsetLevelError(NMinusOneError):
    """offsetLevel is not one of major, minor, patch."""

    def __init__(self, offset_level: object, message: Optional[str] = None):
        super().__init__(
            message
            or f'Invalid offsetLevel value: "{offset_level}". Must be one of: major, minor, patch.'
        )
        self.offset_level = offset_level


class VersionListEmptyError(NMinusOneError):
    """No releases were returned, or none survived filtering."""

    def __init__(
        self,
        package_name: Optional[str] = None,
        datasource: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = "No versions available"
            if package_name:
                message += f' for package "{package_name}"'
            if datasource:
                message += f' from datasource "{datasource}"'
        super().__init__(message)
        self.package_name = package_name
        self.datasource = datasource


class OffsetOutOfBoundsError(NMinusOneError):
    """Computed index falls outside the candidate list."""

    def __init__(
        self,
        offset: int,
        available_versions: int,
        offset_level: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = (
                f"Offset {offset} is out of bounds. Only {available_versions} versions available"
            )
            if offset_level:
                message += f" at {offset_level} level"
            message += "."
        super().__init__(message)
        self.offset = offset
        self.available_versions = available_versions
        self.offset_level = offset_level


class RegistryFetchError(NMinusOneError):
    """Release lookup failed after all retry attempts."""

    def __init__(
        self,
        original_error: BaseException,
        datasource: Optional[str] = None,
        package_name: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = "Failed to fetch registry data"
            if package_name:
                message += f' for package "{package_name}"'
            if datasource:
                message += f' from datasource "{datasource}"'
            message += f": {original_error}"
        super().__init__(message)
        self.original_error = original_error
        self.datasource = datasource
        self.package_name = package_name


class UnknownVersioningError(ValueError):
    """Raised when a versioning scheme id is not registered."""

    def __init__(self, scheme_id: str):
        super().__init__(f"Unknown versioning scheme: {scheme_id}")
        self.scheme_id = scheme_id


class UnknownDatasourceError(ValueError):
    """Raised when no registry client is registered for a datasource id."""

    def __init__(self, datasource: Optional[str]):
        super().__init__(f"Unsupported datasource: {datasource}")
        self.datasource = datasource


class RegistryHTTPError(Exception):
    """Registry answered with an error status."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"HTTP {status_code} from {url}")
        self.status_code = status_code
        self.url = url
