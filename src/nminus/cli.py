"""Command line entry point: resolve one package and print the version."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import sys
from typing import Any, Optional

from .args import parse_args
from .common.logging_utils import configure_logging, extra_context, is_debug_enabled
from .common.retry import RetryPolicy
from .config import ConfigError, apply_config_overrides, constraints_for, load_config
from .constants import Constants, ExitCodes
from .errors import UnknownVersioningError
from .versioning.cache import TTLCache
from .versioning.fetcher import ReleaseFetcher
from .versioning.models import Constraints, ResolutionRequest
from .versioning.resolver import Resolver

logger = logging.getLogger(__name__)


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def build_constraints(args: Any, cfg: dict) -> Constraints:
    """packageRules constraints with explicit CLI flags layered on top."""
    constraints = constraints_for(cfg, args.DATASOURCE, args.PACKAGE)
    overrides = {}
    if args.OFFSET is not None:
        overrides["offset"] = args.OFFSET
    if args.OFFSET_LEVEL is not None:
        overrides["offset_level"] = args.OFFSET_LEVEL
    if args.INCLUDE_PRERELEASE:
        overrides["ignore_prerelease"] = False
    return dataclasses.replace(constraints, **overrides)


def main(argv: Optional[list] = None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    try:
        cfg = load_config(args.CONFIG)
    except ConfigError as exc:
        logger.error("%s", exc)
        return ExitCodes.FILE_ERROR.value
    apply_config_overrides(cfg)

    request = ResolutionRequest(
        current_value=args.CURRENT_VALUE,
        current_version=args.CURRENT_VERSION,
        datasource=args.DATASOURCE,
        package_name=args.PACKAGE,
        versioning=args.VERSIONING,
        constraints=build_constraints(args, cfg),
    )
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main", datasource=args.DATASOURCE),
        )

    fetcher = ReleaseFetcher(
        cache=TTLCache(default_ttl=Constants.RELEASE_CACHE_TTL_SEC),
        retry_policy=RetryPolicy.from_constants(),
    )
    try:
        version = asyncio.run(Resolver(fetcher=fetcher).get_new_value(request))
    except UnknownVersioningError as exc:
        logger.error("%s", exc)
        return ExitCodes.FILE_ERROR.value

    print(version)
    return ExitCodes.SUCCESS.value


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
