"""Tests for configuration model validation."""

import pytest
from pydantic import ValidationError

from gutterwatch.config.models import (
    CoverageConfig,
    GutterWatchConfig,
    LogOutputConfig,
    StatusBarConfig,
)


class TestCoverageConfig:
    def test_default_report_names(self) -> None:
        config = CoverageConfig()
        assert config.coverage_file_names[0] == "lcov.info"
        assert "cov.xml" in config.coverage_file_names
        assert config.manual_coverage_file_paths == []

    def test_report_names_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError, match="At least one coverage file name"):
            CoverageConfig(coverage_file_names=[])

    @pytest.mark.parametrize("value", [[], ["/remote", "/local"]])
    def test_remote_path_resolve_accepts_empty_or_pair(self, value: list[str]) -> None:
        assert CoverageConfig(remote_path_resolve=value).remote_path_resolve == value

    def test_remote_path_resolve_rejects_single_entry(self) -> None:
        with pytest.raises(ValidationError, match="remote, local"):
            CoverageConfig(remote_path_resolve=["/remote"])

    def test_ignored_dirs_do_not_hide_report_dirs(self) -> None:
        ignored = CoverageConfig().ignored_dirs
        for report_dir in ("coverage", "build", "target", "out"):
            assert report_dir not in ignored


class TestStatusBarConfig:
    def test_defaults(self) -> None:
        config = StatusBarConfig()
        assert config.show_status_bar_toggler is True
        assert (config.warn_line_threshold, config.warn_branch_threshold) == (60, 40)

    @pytest.mark.parametrize("value", [-1, 101])
    def test_threshold_out_of_range(self, value: int) -> None:
        with pytest.raises(ValidationError, match="Threshold must be 0-100"):
            StatusBarConfig(warn_line_threshold=value)


class TestLogOutputConfig:
    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="logs/gw.log")

    def test_console_destinations(self) -> None:
        assert LogOutputConfig(destination="stdout").destination == "stdout"


def test_root_config_has_every_section() -> None:
    config = GutterWatchConfig()
    assert config.render.show_partial_coverage is True
    assert config.watcher.step_ms == 50
    assert config.logging.level == "WARNING"
