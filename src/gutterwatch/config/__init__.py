"""Config module exports."""

from gutterwatch.config.loader import load_config
from gutterwatch.config.models import (
    CoverageConfig,
    GutterWatchConfig,
    LoggingConfig,
    RenderConfig,
    StatusBarConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "CoverageConfig",
    "GutterWatchConfig",
    "LoggingConfig",
    "RenderConfig",
    "StatusBarConfig",
    "WatcherConfig",
]
