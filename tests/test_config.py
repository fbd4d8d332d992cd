"""Tests for config loading, validation and packageRules matching."""

import json

import pytest

from nminus.config import (
    ConfigError,
    apply_config_overrides,
    constraints_for,
    load_config,
    rule_matches,
    validate_config,
)
from nminus.common.retry import RetryPolicy
from nminus.constants import Constants
from nminus.versioning.constraints import validate_constraints

TUNABLES = (
    "RELEASE_CACHE_TTL_SEC",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_INITIAL_DELAY_SEC",
    "RETRY_MAX_DELAY_SEC",
    "RETRY_BACKOFF_MULTIPLIER",
)


@pytest.fixture
def restore_constants(monkeypatch):
    """Let monkeypatch restore every tunable the test may overwrite."""
    for name in TUNABLES:
        monkeypatch.setattr(Constants, name, getattr(Constants, name))
    monkeypatch.delenv("NMINUS_CACHE_TTL", raising=False)
    monkeypatch.delenv("NMINUS_RETRY_MAX_ATTEMPTS", raising=False)
    return monkeypatch


YAML_CONFIG = """
cache:
  ttl: 60
retry:
  maxAttempts: 5
packageRules:
  - matchDatasources: [npm]
    matchPackageNames: [react]
    constraints:
      offset: -1
      offsetLevel: major
"""


class TestLoadConfig:
    def test_empty_path(self):
        assert load_config(None) == {}

    def test_yaml(self, tmp_path):
        path = tmp_path / "nminus.yml"
        path.write_text(YAML_CONFIG, encoding="utf-8")
        cfg = load_config(str(path))
        assert cfg["cache"]["ttl"] == 60
        assert cfg["packageRules"][0]["constraints"]["offsetLevel"] == "major"

    def test_json(self, tmp_path):
        path = tmp_path / "nminus.json"
        path.write_text(json.dumps({"retry": {"initialDelay": 0.5}}), encoding="utf-8")
        assert load_config(str(path)) == {"retry": {"initialDelay": 0.5}}

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "nope.yml"))

    def test_unparseable_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("packageRules: [\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to load"):
            load_config(str(path))


class TestValidateConfig:
    def test_positive_offset_rejected(self):
        with pytest.raises(ConfigError, match="packageRules/0/constraints/offset"):
            validate_config({"packageRules": [{"constraints": {"offset": 2}}]})

    def test_unknown_constraint_key_rejected(self):
        with pytest.raises(ConfigError):
            validate_config({"packageRules": [{"constraints": {"offsett": -1}}]})

    def test_unknown_level_rejected(self):
        with pytest.raises(ConfigError):
            validate_config({"packageRules": [{"constraints": {"offset": -1, "offsetLevel": "build"}}]})

    @pytest.mark.parametrize("constraints", [{"offsetLevel": "minor"}, {"offset": 0, "offsetLevel": "minor"}])
    def test_level_requires_nonzero_offset(self, constraints):
        with pytest.raises(ConfigError):
            validate_config({"packageRules": [{"constraints": constraints}]})

    def test_retry_attempts_minimum(self):
        with pytest.raises(ConfigError, match="retry/maxAttempts"):
            validate_config({"retry": {"maxAttempts": 0}})

    def test_valid_config(self):
        validate_config({
            "cache": {"ttl": 0},
            "packageRules": [{"matchPackagePatterns": "^@types/", "constraints": {"offset": 0}}],
        })


class TestRuleMatching:
    def test_rule_without_criteria_matches_everything(self):
        assert rule_matches({}, "npm", "anything")

    def test_datasource_and_name(self):
        rule = {"matchDatasources": ["pypi"], "matchPackageNames": ["django"]}
        assert rule_matches(rule, "pypi", "django")
        assert not rule_matches(rule, "npm", "django")
        assert not rule_matches(rule, "pypi", "flask")

    def test_patterns(self):
        rule = {"matchPackagePatterns": ["^@angular/"]}
        assert rule_matches(rule, "npm", "@angular/core")
        assert not rule_matches(rule, "npm", "react")
        assert not rule_matches(rule, "npm", None)

    def test_invalid_pattern_does_not_match(self):
        assert not rule_matches({"matchPackagePatterns": ["(["]}, "npm", "react")


class TestConstraintsFor:
    CFG = {
        "packageRules": [
            {"constraints": {"offset": -1, "ignorePrerelease": False}},
            {"matchPackageNames": "react", "constraints": {"offset": -2, "offsetLevel": "major"}},
            {"matchPackageNames": "vue", "constraints": {"offset": -3}},
        ]
    }

    def test_later_rules_win_per_key(self):
        constraints = constraints_for(self.CFG, "npm", "react")
        assert constraints.offset == -2
        assert constraints.offset_level == "major"
        assert constraints.ignore_prerelease is False

    def test_only_catch_all_rule(self):
        constraints = constraints_for(self.CFG, "npm", "lodash")
        assert constraints.offset == -1
        assert constraints.offset_level is None

    def test_no_rules(self):
        constraints = constraints_for({}, "npm", "lodash")
        assert constraints.offset is None
        assert constraints.ignore_prerelease is True


class TestOverrides:
    def test_file_values_applied(self, restore_constants):
        apply_config_overrides({"cache": {"ttl": 60}, "retry": {"maxAttempts": 5, "maxDelay": 10}})
        assert Constants.RELEASE_CACHE_TTL_SEC == 60
        assert Constants.RETRY_MAX_ATTEMPTS == 5
        assert Constants.RETRY_MAX_DELAY_SEC == 10

    def test_environment_wins_over_file(self, restore_constants):
        restore_constants.setenv("NMINUS_CACHE_TTL", "30")
        restore_constants.setenv("NMINUS_RETRY_MAX_ATTEMPTS", "0")
        apply_config_overrides({"cache": {"ttl": 60}})
        assert Constants.RELEASE_CACHE_TTL_SEC == 30.0
        assert Constants.RETRY_MAX_ATTEMPTS == 1

    def test_bad_environment_value_ignored(self, restore_constants, caplog):
        restore_constants.setenv("NMINUS_RETRY_MAX_ATTEMPTS", "many")
        apply_config_overrides({})
        assert Constants.RETRY_MAX_ATTEMPTS == 3
        assert "NMINUS_RETRY_MAX_ATTEMPTS" in caplog.text

    def test_retry_policy_reflects_overrides(self, restore_constants):
        restore_constants.setenv("NMINUS_RETRY_MAX_ATTEMPTS", "1")
        apply_config_overrides({"retry": {"maxAttempts": 5, "initialDelay": 0.25}})
        policy = RetryPolicy.from_constants()
        assert policy.max_attempts == 1
        assert policy.initial_delay == 0.25
        assert policy.max_delay == 30.0
        assert policy.backoff_multiplier == 2.0


class TestConfigToValidator:
    def test_float_offset_from_json_file_is_applied(self, tmp_path):
        path = tmp_path / "nminus.json"
        path.write_text(
            json.dumps({"packageRules": [{"matchPackageNames": ["react"], "constraints": {"offset": -1.0}}]}),
            encoding="utf-8",
        )
        cfg = load_config(str(path))
        check = validate_constraints(constraints_for(cfg, "npm", "react"))
        assert check.ok
        assert check.offset == -1
