"""Tests for report discovery and reading."""

from pathlib import Path

import pytest

from gutterwatch.config.models import CoverageConfig
from gutterwatch.core.errors import DiscoveryError, ReadError
from gutterwatch.files.loader import FilesLoader


class TestFindCoverageFiles:
    @pytest.mark.asyncio
    async def test_finds_reports_at_any_depth(self, workspace: Path) -> None:
        (workspace / "build" / "reports").mkdir(parents=True)
        (workspace / "build" / "reports" / "cov.xml").write_text("<coverage/>")

        found = await FilesLoader(CoverageConfig(), [workspace]).find_coverage_files()

        assert found == {
            workspace / "coverage" / "lcov.info",
            workspace / "build" / "reports" / "cov.xml",
        }

    @pytest.mark.asyncio
    async def test_ignored_dirs_are_pruned(self, workspace: Path) -> None:
        (workspace / "node_modules" / "pkg").mkdir(parents=True)
        (workspace / "node_modules" / "pkg" / "lcov.info").write_text("SF:x\n")

        found = await FilesLoader(CoverageConfig(), [workspace]).find_coverage_files()

        assert found == {workspace / "coverage" / "lcov.info"}

    @pytest.mark.asyncio
    async def test_base_dir_limits_search(self, workspace: Path) -> None:
        (workspace / "build").mkdir()
        (workspace / "build" / "lcov.info").write_text("SF:x\n")
        config = CoverageConfig(coverage_base_dir="build")

        found = await FilesLoader(config, [workspace]).find_coverage_files()

        assert found == {workspace / "build" / "lcov.info"}

    @pytest.mark.asyncio
    async def test_no_reports(self, tmp_path: Path) -> None:
        assert await FilesLoader(CoverageConfig(), [tmp_path]).find_coverage_files() == set()

    @pytest.mark.asyncio
    async def test_manual_paths_replace_search(self, workspace: Path) -> None:
        config = CoverageConfig(manual_coverage_file_paths=["custom/report.info", "/abs/x.xml"])

        found = await FilesLoader(config, [workspace]).find_coverage_files()

        assert found == {workspace / "custom" / "report.info", Path("/abs/x.xml")}

    @pytest.mark.asyncio
    async def test_missing_folder_raises(self, tmp_path: Path) -> None:
        loader = FilesLoader(CoverageConfig(), [tmp_path / "gone"])
        with pytest.raises(DiscoveryError):
            await loader.find_coverage_files()


class TestLoadDataFiles:
    @pytest.mark.asyncio
    async def test_reads_contents(self, workspace: Path, lcov_report: str) -> None:
        report = workspace / "coverage" / "lcov.info"

        data = await FilesLoader(CoverageConfig(), [workspace]).load_data_files({report})

        assert data == {report: lcov_report}

    @pytest.mark.asyncio
    async def test_deleted_file_skipped(self, workspace: Path) -> None:
        report = workspace / "coverage" / "lcov.info"
        gone = workspace / "coverage" / "gone.info"

        data = await FilesLoader(CoverageConfig(), [workspace]).load_data_files({report, gone})

        assert list(data) == [report]

    @pytest.mark.asyncio
    async def test_undecodable_file_raises(self, tmp_path: Path) -> None:
        report = tmp_path / "lcov.info"
        report.write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(ReadError):
            await FilesLoader(CoverageConfig(), [tmp_path]).load_data_files([report])
