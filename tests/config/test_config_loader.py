"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: defaults < global < workspace < env < kwargs
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from gutterwatch.config.loader import _deep_merge, _load_yaml, load_config
from gutterwatch.core.errors import ConfigError, ErrorCode


def _write_workspace_config(root: Path, text: str) -> None:
    config_dir = root / ".gutterwatch"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yaml").write_text(text)


@pytest.fixture(autouse=True)
def _no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point the global config somewhere empty and clear GUTTERWATCH__ env vars."""
    for key in list(os.environ):
        if key.startswith("GUTTERWATCH__"):
            monkeypatch.delenv(key)
    with patch("gutterwatch.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("status_bar:\n  warn_line_threshold: 75\n")

        assert _load_yaml(yaml_file) == {"status_bar": {"warn_line_threshold": 75}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_on_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("coverage: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_on_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_dicts_merge(self) -> None:
        base = {"coverage": {"coverage_base_dir": "**", "coverage_file_names": ["lcov.info"]}}
        override = {"coverage": {"coverage_base_dir": "build"}}

        assert _deep_merge(base, override) == {
            "coverage": {"coverage_base_dir": "build", "coverage_file_names": ["lcov.info"]}
        }

    def test_does_not_mutate_inputs(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.status_bar.warn_line_threshold == 60
        assert config.status_bar.warn_branch_threshold == 40
        assert "lcov.info" in config.coverage.coverage_file_names
        assert config.coverage.coverage_base_dir == "**"
        assert config.watcher.debounce_ms == 300

    def test_workspace_yaml_applies(self, tmp_path: Path) -> None:
        _write_workspace_config(tmp_path, "coverage:\n  coverage_base_dir: build\n")

        config = load_config(tmp_path)

        assert config.coverage.coverage_base_dir == "build"

    def test_workspace_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("watcher:\n  debounce_ms: 100\n  step_ms: 20\n")
        _write_workspace_config(tmp_path, "watcher:\n  debounce_ms: 500\n")

        with patch("gutterwatch.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.watcher.debounce_ms == 500
        assert config.watcher.step_ms == 20

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_workspace_config(tmp_path, "status_bar:\n  warn_line_threshold: 70\n")
        monkeypatch.setenv("GUTTERWATCH__STATUS_BAR__WARN_LINE_THRESHOLD", "80")

        config = load_config(tmp_path)

        assert config.status_bar.warn_line_threshold == 80

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GUTTERWATCH__STATUS_BAR__WARN_LINE_THRESHOLD", "80")

        config = load_config(tmp_path, status_bar={"warn_line_threshold": 90})

        assert config.status_bar.warn_line_threshold == 90

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        _write_workspace_config(tmp_path, "status_bar:\n  warn_line_threshold: 150\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "warn_line_threshold" in exc_info.value.details["field"]
