"""Filesystem watching for coverage reports."""

from gutterwatch.watcher.coverage_watcher import (
    ChangeCallback,
    ChangeKind,
    CoverageFileWatcher,
    ReportChange,
    watch_coverage_files,
    watch_roots,
)

__all__ = [
    "ChangeCallback",
    "ChangeKind",
    "CoverageFileWatcher",
    "ReportChange",
    "watch_coverage_files",
    "watch_roots",
]
