"""
Tests for configuration loading: odhlint.yml parsing, validation and
upward file search.
"""

import textwrap
from pathlib import Path

import pytest

from odhlint.core.config.loader import (
    CONFIG_FILE,
    ConfigError,
    LintConfig,
    find_config_file,
    load_config,
)


@pytest.fixture
def valid_config_yml(tmp_path: Path) -> Path:
    path = tmp_path / CONFIG_FILE
    path.write_text(textwrap.dedent("""\
        checks: components
        exclude:
          - components.kueue.configmap-managed
        output: json
        workers: 8
        timeout: 10
        target_version: 3.0.0
        kubectl:
          context: prod-cluster
    """))
    return path


class TestLintConfig:
    def test_defaults(self):
        config = LintConfig()
        assert config.checks == "*"
        assert config.exclude == []
        assert config.output == "table"
        assert config.workers == 4
        assert config.target_version is None
        assert config.kubectl.context is None

    def test_numeric_target_version(self):
        assert LintConfig.model_validate({"target_version": 3.0}).target_version == "3.0"

    @pytest.mark.parametrize("data", [
        {"target_version": "three"},
        {"workers": 0},
        {"workers": 65},
        {"timeout": 0},
        {"output": "xml"},
        {"checks": "  "},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ValueError):
            LintConfig.model_validate(data)

    def test_checks_stripped(self):
        assert LintConfig(checks=" workloads ").checks == "workloads"


class TestLoadConfig:
    def test_load_valid_config(self, valid_config_yml: Path):
        config = load_config(valid_config_yml)
        assert config.checks == "components"
        assert config.exclude == ["components.kueue.configmap-managed"]
        assert config.output == "json"
        assert config.workers == 8
        assert config.target_version == "3.0.0"
        assert config.kubectl.context == "prod-cluster"

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("")
        assert load_config(path) == LintConfig()

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("checks: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_value_raises(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("workers: -1\n")
        with pytest.raises(ConfigError, match="Invalid lint configuration"):
            load_config(path)

    def test_auto_search_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == LintConfig()

    def test_auto_search_finds_parent(self, valid_config_yml: Path, monkeypatch: pytest.MonkeyPatch):
        sub = valid_config_yml.parent / "a" / "b"
        sub.mkdir(parents=True)
        monkeypatch.chdir(sub)
        assert load_config().workers == 8


class TestFindConfigFile:
    def test_find_in_current_dir(self, valid_config_yml: Path):
        assert find_config_file(valid_config_yml.parent) == valid_config_yml.resolve()

    def test_not_found_returns_none(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None
