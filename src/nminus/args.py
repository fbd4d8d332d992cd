"""Argument parsing functionality for nminus."""

import argparse

from .constants import Constants
from .versioning.models import OffsetLevel


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="nminus",
        description=(
            "nminus - resolve a dependency version a fixed offset behind the latest release"
        ),
        add_help=True,
    )

    parser.add_argument("-t", "--type",
                        dest="DATASOURCE",
                        help="Registry to query, i.e: npm, pypi, maven, nuget",
                        action="store", type=str.lower,
                        choices=Constants.SUPPORTED_DATASOURCES,
                        required=True)
    parser.add_argument("-p", "--package",
                        dest="PACKAGE",
                        help="Package name (groupId:artifactId for maven).",
                        action="store", type=str,
                        required=True)
    parser.add_argument("--current-value",
                        dest="CURRENT_VALUE",
                        help="Version currently in use; printed unchanged when nothing better resolves.",
                        action="store", type=str,
                        required=True)
    parser.add_argument("--current-version",
                        dest="CURRENT_VERSION",
                        help="Concrete installed version when --current-value is a range.",
                        action="store", type=str)
    parser.add_argument("--versioning",
                        dest="VERSIONING",
                        help=f"Versioning scheme id (default: {Constants.DEFAULT_VERSIONING})",
                        action="store", type=str)

    parser.add_argument("--offset",
                        dest="OFFSET",
                        help="How many releases behind the latest to pick (0 or negative).",
                        action="store", type=int)
    parser.add_argument("--offset-level",
                        dest="OFFSET_LEVEL",
                        help="Apply the offset at major, minor or patch granularity.",
                        action="store", type=str.lower,
                        choices=list(OffsetLevel.values()))
    parser.add_argument("--include-prerelease",
                        dest="INCLUDE_PRERELEASE",
                        help="Consider pre-release versions.",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
