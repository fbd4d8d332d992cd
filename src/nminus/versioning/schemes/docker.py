"""Docker image tag versioning.

Tags look like ``1.25``, ``1.25.3`` or ``1.25.3-alpine``. A suffix usually
names a compatibility variant and does not make a tag unstable, unless it
looks like a pre-release marker (``-rc1``, ``-beta``, ...).
"""

import re

from .loose import NumericScheme

DOCKER_PATTERN = re.compile(r"^[vV]?(?P<release>\d+(?:\.\d+)*)(?P<suffix>-[A-Za-z0-9][A-Za-z0-9._-]*)?$")
_PRERELEASE_SUFFIX = re.compile(r"^-(alpha|beta|rc|pre|preview|dev|snapshot|nightly|canary)", re.IGNORECASE)


def _is_prerelease(suffix: str) -> bool:
    return bool(_PRERELEASE_SUFFIX.match(suffix))


docker = NumericScheme("docker", DOCKER_PATTERN, _is_prerelease)
