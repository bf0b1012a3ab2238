"""Tests for the report file watcher.

Tests cover:
- watch_roots() selection
- CoverageFileWatcher filtering and batching of watchfiles events
- start/stop lifecycle
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from watchfiles import Change

from gutterwatch.config.models import CoverageConfig, WatcherConfig
from gutterwatch.watcher.coverage_watcher import (
    ChangeKind,
    CoverageFileWatcher,
    ReportChange,
    watch_coverage_files,
    watch_roots,
)


class TestWatchRoots:
    def test_workspace_folders(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing"
        assert watch_roots(CoverageConfig(), [tmp_path, missing, tmp_path]) == [tmp_path]

    def test_manual_paths_watch_their_parents(self, tmp_path: Path) -> None:
        (tmp_path / "out").mkdir()
        config = CoverageConfig(manual_coverage_file_paths=["out/lcov.info", "out/cov.xml"])

        assert watch_roots(config, [tmp_path]) == [tmp_path / "out"]


class TestCoverageFileWatcher:
    @pytest.fixture
    def watcher(self, tmp_path: Path) -> CoverageFileWatcher:
        pattern = "{" + tmp_path.as_posix() + "}/**/{lcov.info,cov.xml}"
        return CoverageFileWatcher(roots=[tmp_path], pattern=pattern, on_change=MagicMock())

    def test_accepts_only_reports(self, watcher: CoverageFileWatcher, tmp_path: Path) -> None:
        assert watcher.accepts(Change.modified, str(tmp_path / "coverage" / "lcov.info"))
        assert not watcher.accepts(Change.modified, str(tmp_path / "src" / "app.py"))

    def test_to_changes_filters_dedupes_and_sorts(
        self, watcher: CoverageFileWatcher, tmp_path: Path
    ) -> None:
        lcov = tmp_path / "b" / "lcov.info"
        cov = tmp_path / "a" / "cov.xml"
        raw = {
            (Change.added, str(cov)),
            (Change.modified, str(lcov)),
            (Change.modified, str(tmp_path / "src" / "app.py")),
        }

        changes = watcher.to_changes(raw)

        assert changes == [
            ReportChange(path=cov, kind=ChangeKind.CREATED),
            ReportChange(path=lcov, kind=ChangeKind.MODIFIED),
        ]

    def test_to_changes_empty_when_nothing_matches(
        self, watcher: CoverageFileWatcher, tmp_path: Path
    ) -> None:
        assert watcher.to_changes({(Change.deleted, str(tmp_path / "x.py"))}) == []

    @pytest.mark.asyncio
    async def test_start_and_stop(self, watcher: CoverageFileWatcher) -> None:
        await watcher.start()
        assert watcher.is_running

        watcher.stop()
        watcher.stop()
        await asyncio.sleep(0)

        assert not watcher.is_running

    @pytest.mark.asyncio
    async def test_start_without_roots_is_noop(self) -> None:
        watcher = CoverageFileWatcher(roots=[], pattern="**/lcov.info", on_change=MagicMock())
        await watcher.start()
        assert not watcher.is_running


class TestWatchCoverageFiles:
    @pytest.mark.asyncio
    async def test_delivers_report_changes(self, tmp_path: Path) -> None:
        """Writing a report delivers one batch; source edits are ignored."""
        # Given
        received: asyncio.Queue[list[ReportChange]] = asyncio.Queue()
        subscription = await watch_coverage_files(
            CoverageConfig(),
            WatcherConfig(debounce_ms=50, step_ms=10),
            [tmp_path],
            received.put_nowait,
        )
        await asyncio.sleep(0.2)

        try:
            # When
            (tmp_path / "app.py").write_text("x = 1\n")
            (tmp_path / "lcov.info").write_text("SF:app.py\nDA:1,1\n")
            batch = await asyncio.wait_for(received.get(), timeout=5.0)

            # Then
            assert [c.path.name for c in batch] == ["lcov.info"]
        finally:
            subscription.dispose()
