"""Tests for argument parsing and the command line entry point."""

from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from nminus.args import parse_args
from nminus.cli import build_constraints, main
from nminus.constants import Constants, ExitCodes
from nminus.versioning.models import ReleaseResult

RELEASES = ReleaseResult.from_versions(["1.0.0", "1.1.0", "2.0.0", "2.1.0", "3.0.0-beta.1"])


@pytest.fixture(autouse=True)
def restore_constants(monkeypatch):
    for name in ("RELEASE_CACHE_TTL_SEC", "RETRY_MAX_ATTEMPTS", "RETRY_INITIAL_DELAY_SEC"):
        monkeypatch.setattr(Constants, name, getattr(Constants, name))
    monkeypatch.delenv("NMINUS_CACHE_TTL", raising=False)
    monkeypatch.delenv("NMINUS_RETRY_MAX_ATTEMPTS", raising=False)


class TestParseArgs:
    def test_required_and_defaults(self):
        args = parse_args(["-t", "NPM", "-p", "react", "--current-value", "^18.0.0"])
        assert args.DATASOURCE == "npm"
        assert args.PACKAGE == "react"
        assert args.CURRENT_VALUE == "^18.0.0"
        assert args.OFFSET is None
        assert args.OFFSET_LEVEL is None
        assert args.INCLUDE_PRERELEASE is False
        assert args.LOG_LEVEL == "WARNING"

    def test_offset_flags(self):
        args = parse_args([
            "-t", "pypi", "-p", "django", "--current-value", "4.2",
            "--offset", "-1", "--offset-level", "MAJOR", "--include-prerelease", "--loglevel", "debug",
        ])
        assert args.OFFSET == -1
        assert args.OFFSET_LEVEL == "major"
        assert args.INCLUDE_PRERELEASE is True
        assert args.LOG_LEVEL == "DEBUG"

    def test_unsupported_datasource(self):
        with pytest.raises(SystemExit):
            parse_args(["-t", "cargo", "-p", "serde", "--current-value", "1"])


class TestBuildConstraints:
    def test_flags_override_package_rules(self):
        cfg = {"packageRules": [{"constraints": {"offset": -3, "offsetLevel": "minor"}}]}
        args = parse_args(["-t", "npm", "-p", "react", "--current-value", "1", "--offset", "-1"])
        constraints = build_constraints(args, cfg)
        assert constraints.offset == -1
        assert constraints.offset_level == "minor"
        assert constraints.ignore_prerelease is True


class TestMain:
    @patch("nminus.datasource.get_pkg_releases", new_callable=AsyncMock)
    def test_prints_latest(self, mock_lookup, capsys):
        mock_lookup.return_value = RELEASES
        code = main(["-t", "npm", "-p", "cli-latest", "--current-value", "1.0.0", "--versioning", "semver"])
        assert code == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.strip() == "2.1.0"

    @patch("nminus.datasource.get_pkg_releases", new_callable=AsyncMock)
    def test_prints_major_offset(self, mock_lookup, capsys):
        mock_lookup.return_value = RELEASES
        code = main([
            "-t", "npm", "-p", "cli-major", "--current-value", "2.1.0", "--versioning", "semver",
            "--offset", "-1", "--offset-level", "major",
        ])
        assert code == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.strip() == "1.1.0"

    @patch("nminus.datasource.get_pkg_releases", new_callable=AsyncMock)
    def test_fetch_failure_prints_current_value(self, mock_lookup, capsys):
        mock_lookup.side_effect = ValueError("malformed registry document")
        code = main(["-t", "npm", "-p", "cli-broken", "--current-value", "^1.0.0"])
        assert code == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.strip() == "^1.0.0"

    @patch("nminus.datasource.get_pkg_releases", new_callable=AsyncMock)
    def test_config_rule_applies(self, mock_lookup, capsys, tmp_path):
        mock_lookup.return_value = RELEASES
        path = tmp_path / "nminus.yml"
        path.write_text(
            "packageRules:\n  - matchPackageNames: [cli-config]\n    constraints:\n      offset: -2\n",
            encoding="utf-8",
        )
        code = main([
            "-t", "npm", "-p", "cli-config", "--current-value", "1.0.0", "--versioning", "semver", "-c", str(path),
        ])
        assert code == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.strip() == "1.1.0"

    def test_missing_config_file(self, tmp_path, capsys):
        code = main(["-t", "npm", "-p", "x", "--current-value", "1", "-c", str(tmp_path / "missing.yml")])
        assert code == ExitCodes.FILE_ERROR.value
        assert capsys.readouterr().out == ""

    @patch("nminus.datasource.get_pkg_releases", new_callable=AsyncMock)
    def test_unknown_versioning(self, mock_lookup):
        mock_lookup.return_value = RELEASES
        code = main(["-t", "npm", "-p", "x", "--current-value", "1", "--versioning", "calver-ish"])
        assert code == ExitCodes.FILE_ERROR.value
        mock_lookup.assert_not_called()

    @patch("nminus.datasource.get_pkg_releases", new_callable=AsyncMock)
    def test_environment_retry_budget_beats_config_file(self, mock_lookup, capsys, tmp_path, monkeypatch):
        mock_lookup.side_effect = aiohttp.ClientConnectionError("registry unreachable")
        monkeypatch.setenv("NMINUS_RETRY_MAX_ATTEMPTS", "1")
        path = tmp_path / "nminus.yml"
        path.write_text("retry:\n  maxAttempts: 5\n  initialDelay: 0\n", encoding="utf-8")
        code = main(["-t", "npm", "-p", "cli-env-retry", "--current-value", "1.0.0", "-c", str(path)])
        assert code == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.strip() == "1.0.0"
        assert mock_lookup.call_count == 1
