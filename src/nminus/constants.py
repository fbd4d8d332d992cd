"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1


class Datasources(Enum):
    """Registries the bundled clients can query.

    Args:
        Enum (string): Datasource identifiers.
    """

    NPM = "npm"
    PYPI = "pypi"
    MAVEN = "maven"
    NUGET = "nuget"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    REGISTRY_URL_PYPI = "https://pypi.org/pypi/"
    REGISTRY_URL_MAVEN = "https://repo1.maven.org/maven2/"
    REGISTRY_URL_NUGET_V3 = "https://api.nuget.org/v3/index.json"
    SUPPORTED_DATASOURCES = [
        Datasources.NPM.value,
        Datasources.PYPI.value,
        Datasources.MAVEN.value,
        Datasources.NUGET.value,
    ]
    DEFAULT_VERSIONING = "semver-coerced"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    USER_AGENT = "nminus/0.1"

    # Release cache
    RELEASE_CACHE_TTL_SEC = 900
    RELEASE_CACHE_MAX_ENTRIES = 10000

    # Registry retry policy (seconds)
    RETRY_MAX_ATTEMPTS = 3
    RETRY_INITIAL_DELAY_SEC = 1.0
    RETRY_MAX_DELAY_SEC = 30.0
    RETRY_BACKOFF_MULTIPLIER = 2.0

    # Network error codes that should trigger a retry
    RETRYABLE_ERROR_CODES = frozenset({
        "ECONNRESET",
        "ETIMEDOUT",
        "ENOTFOUND",
        "ECONNREFUSED",
        "EHOSTUNREACH",
        "ENETUNREACH",
        "EADDRINUSE",
        "ECONNABORTED",
        "EPIPE",
    })
    # HTTP status codes that should trigger a retry
    RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})
