"""Configuration file loading, validation and packageRules matching.

A config file (YAML or JSON) may carry cache/retry tunables and a list of
``packageRules`` whose ``constraints`` apply to matching packages. The file is
validated against a Draft-7 JSON Schema before anything is applied.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft7Validator

from .constants import Constants
from .versioning.models import Constraints, OffsetLevel

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file is unreadable or fails validation."""


_STRING_OR_LIST = {"oneOf": [{"type": "string"}, {"type": "array", "items": {"type": "string"}}]}

CONSTRAINTS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "allowedVersions": {"type": "string"},
        "offset": {"type": "integer", "maximum": 0},
        "offsetLevel": {"enum": list(OffsetLevel.values())},
        "ignorePrerelease": {"type": "boolean"},
    },
    # offsetLevel requires a non-zero offset
    "dependencies": {
        "offsetLevel": {
            "required": ["offset"],
            "properties": {"offset": {"not": {"const": 0}}},
        }
    },
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "cache": {
            "type": "object",
            "additionalProperties": False,
            "properties": {"ttl": {"type": "number", "minimum": 0}},
        },
        "retry": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "maxAttempts": {"type": "integer", "minimum": 1},
                "initialDelay": {"type": "number", "minimum": 0},
                "maxDelay": {"type": "number", "minimum": 0},
                "backoffMultiplier": {"type": "number", "minimum": 1},
            },
        },
        "packageRules": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "matchPackageNames": _STRING_OR_LIST,
                    "matchPackagePatterns": _STRING_OR_LIST,
                    "matchDatasources": {"type": "array", "items": {"type": "string"}},
                    "constraints": CONSTRAINTS_SCHEMA,
                },
            },
        },
    },
}


def validate_config(data: Any) -> None:
    """Validate a parsed config; raise ConfigError on the first problem."""
    validator = Draft7Validator(CONFIG_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join(str(p) for p in first.path)
        raise ConfigError(f"Invalid config at '{path}': {first.message}")


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Read and validate a YAML or JSON config file.

    Returns an empty dict when ``path`` is empty.

    Raises:
        ConfigError: if the file is missing, unparseable or invalid.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config {path}: {exc}") from exc

    data = data or {}
    validate_config(data)
    logger.debug("Loaded config from %s", path)
    return data


def apply_config_overrides(cfg: Dict[str, Any]) -> None:
    """Apply file settings, then environment overrides, to Constants."""
    cache_cfg = cfg.get("cache") or {}
    if "ttl" in cache_cfg:
        Constants.RELEASE_CACHE_TTL_SEC = cache_cfg["ttl"]

    retry_cfg = cfg.get("retry") or {}
    if "maxAttempts" in retry_cfg:
        Constants.RETRY_MAX_ATTEMPTS = retry_cfg["maxAttempts"]
    if "initialDelay" in retry_cfg:
        Constants.RETRY_INITIAL_DELAY_SEC = retry_cfg["initialDelay"]
    if "maxDelay" in retry_cfg:
        Constants.RETRY_MAX_DELAY_SEC = retry_cfg["maxDelay"]
    if "backoffMultiplier" in retry_cfg:
        Constants.RETRY_BACKOFF_MULTIPLIER = retry_cfg["backoffMultiplier"]

    env_ttl = os.environ.get("NMINUS_CACHE_TTL")
    if env_ttl:
        try:
            Constants.RELEASE_CACHE_TTL_SEC = float(env_ttl)
        except ValueError:
            logger.warning("Ignoring non-numeric NMINUS_CACHE_TTL=%r", env_ttl)
    env_attempts = os.environ.get("NMINUS_RETRY_MAX_ATTEMPTS")
    if env_attempts:
        try:
            Constants.RETRY_MAX_ATTEMPTS = max(1, int(env_attempts))
        except ValueError:
            logger.warning("Ignoring non-integer NMINUS_RETRY_MAX_ATTEMPTS=%r", env_attempts)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def rule_matches(rule: Dict[str, Any], datasource: Optional[str], package_name: Optional[str]) -> bool:
    """True when every match criterion present in the rule accepts the package."""
    datasources = _as_list(rule.get("matchDatasources"))
    if datasources and datasource not in datasources:
        return False

    names = _as_list(rule.get("matchPackageNames"))
    patterns = _as_list(rule.get("matchPackagePatterns"))
    if not names and not patterns:
        return True
    if package_name is None:
        return False
    if package_name in names:
        return True
    for pattern in patterns:
        try:
            if re.search(pattern, package_name):
                return True
        except re.error:
            logger.warning("Ignoring invalid matchPackagePatterns entry %r", pattern)
    return False


def constraints_for(
    cfg: Dict[str, Any], datasource: Optional[str], package_name: Optional[str]
) -> Constraints:
    """Merge constraints of every matching rule; later rules win per key."""
    merged: Dict[str, Any] = {}
    for rule in cfg.get("packageRules") or []:
        if rule_matches(rule, datasource, package_name):
            merged.update(rule.get("constraints") or {})
    return Constraints.from_mapping(merged)
