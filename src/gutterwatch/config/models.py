"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (GUTTERWATCH__SECTION__KEY)
3. Workspace YAML (.gutterwatch/config.yaml)
4. Global YAML (~/.config/gutterwatch/config.yaml)
5. Built-in defaults (this file)

Examples:
    GUTTERWATCH__LOGGING__LEVEL=DEBUG
    GUTTERWATCH__COVERAGE__COVERAGE_BASE_DIR=build
    GUTTERWATCH__STATUS_BAR__WARN_LINE_THRESHOLD=75
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        GUTTERWATCH__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO logs each refresh cycle, DEBUG every step.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """Where coverage reports live and how their paths are read.

    Env vars:
        GUTTERWATCH__COVERAGE__COVERAGE_BASE_DIR: Glob prefix searched below each workspace folder
    """

    coverage_file_names: list[str] = Field(
        default_factory=lambda: [
            "lcov.info",
            "cov.xml",
            "coverage.xml",
            "jacoco.xml",
            "coverage.cobertura.xml",
            "clover.xml",
        ],
        description="Report file names searched for under coverage_base_dir.",
    )
    manual_coverage_file_paths: list[str] = Field(
        default_factory=list,
        description="Explicit report paths. When set, no search is performed.",
    )
    coverage_base_dir: str = Field(
        default="**",
        description="Glob (relative to each workspace folder) that report files live under.",
    )
    remote_path_resolve: list[str] = Field(
        default_factory=list,
        description="[remote_prefix, local_prefix]: rewrites report paths produced elsewhere "
        "(CI, containers) to local paths.",
    )
    ignored_dirs: list[str] = Field(
        default_factory=lambda: [
            ".git",
            ".hg",
            ".svn",
            "node_modules",
            ".venv",
            "venv",
            "__pycache__",
            ".tox",
            ".nox",
            ".mypy_cache",
            ".pytest_cache",
        ],
        description="Directory names never descended into while searching for reports.",
    )

    @field_validator("coverage_file_names")
    @classmethod
    def validate_file_names(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one coverage file name is required")
        return v

    @field_validator("remote_path_resolve")
    @classmethod
    def validate_remote_path_resolve(cls, v: list[str]) -> list[str]:
        if v and len(v) != 2:
            raise ValueError(f"Expected [remote, local] pair, got {len(v)} entries")
        return v


class StatusBarConfig(BaseModel):
    """Status indicator configuration.

    Env vars:
        GUTTERWATCH__STATUS_BAR__SHOW_STATUS_BAR_TOGGLER: Show the indicator
        GUTTERWATCH__STATUS_BAR__WARN_LINE_THRESHOLD: Warn below this total line %
        GUTTERWATCH__STATUS_BAR__WARN_BRANCH_THRESHOLD: Warn below this total branch %
    """

    show_status_bar_toggler: bool = True
    warn_line_threshold: int = Field(
        default=60,
        description="Workspace line coverage below this turns the indicator to warning.",
    )
    warn_branch_threshold: int = Field(
        default=40,
        description="Workspace branch coverage below this turns the indicator to warning.",
    )

    @field_validator("warn_line_threshold", "warn_branch_threshold")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if not (0 <= v <= 100):
            raise ValueError(f"Threshold must be 0-100, got {v}")
        return v


class RenderConfig(BaseModel):
    """Which decorations the renderer produces."""

    show_line_coverage: bool = Field(default=True, description="Highlight the whole line.")
    show_gutter_coverage: bool = Field(default=True, description="Draw an icon in the gutter.")
    show_partial_coverage: bool = Field(
        default=True,
        description="Mark lines with partially taken branches separately from covered lines.",
    )


class WatcherConfig(BaseModel):
    """Filesystem watcher configuration.

    Env vars:
        GUTTERWATCH__WATCHER__DEBOUNCE_MS: Batch window for report file changes
    """

    debounce_ms: int = Field(
        default=300,
        description="Changes within this window are delivered as one batch. "
        "Reports are usually written in several chunks.",
    )
    step_ms: int = Field(
        default=50,
        description="How often the watcher checks for pending changes.",
    )


class GutterWatchConfig(BaseModel):
    """Root configuration for gutterwatch."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    status_bar: StatusBarConfig = Field(default_factory=StatusBarConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
