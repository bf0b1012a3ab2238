"""Tests for CoverageParser: many reports in, one merged mapping out."""

from pathlib import Path

import pytest

from gutterwatch.coverage.parser import CoverageParser


class TestParseAll:
    def test_malformed_report_is_skipped(self, lcov_report: str) -> None:
        """A broken report next to a valid one yields the valid sections only."""
        data_files = {
            Path("/ws/coverage/lcov.info"): lcov_report,
            Path("/ws/broken/cov.xml"): "<coverage line-rate='1'><packages>",
        }

        sections = CoverageParser().parse_all(data_files)

        assert set(sections) == {"src/app.py", "src/util.py"}

    def test_unknown_format_is_skipped(self) -> None:
        assert CoverageParser().parse_all({Path("notes.txt"): "just text"}) == {}

    def test_lcov_and_cobertura_merge(self, cobertura_report: str) -> None:
        lcov = "SF:/work/src/app.py\nDA:1,1\nDA:3,0\nend_of_record\n"

        sections = CoverageParser().parse_all(
            {Path("lcov.info"): lcov, Path("coverage.xml"): cobertura_report}
        )

        assert list(sections) == ["/work/src/app.py"]
        assert sections["/work/src/app.py"].details == {1: 1, 3: 5, 4: 1}

    def test_remote_paths_rewritten(self) -> None:
        parser = CoverageParser(["/ci/build", "/ws"])
        sections = parser.parse_all({Path("lcov.info"): "SF:/ci/build/a.py\nDA:1,1\n"})
        assert list(sections) == ["/ws/a.py"]
        assert sections["/ws/a.py"].path == "/ws/a.py"

    def test_keys_normalized_and_collisions_merged(self) -> None:
        text = "SF:./a.py\nDA:1,1\nend_of_record\nSF:a.py\nDA:2,1\nend_of_record\n"

        sections = CoverageParser().parse_all({Path("lcov.info"): text})

        assert sections["a.py"].details == {1: 1, 2: 1}


class TestFilesToSections:
    @pytest.mark.asyncio
    async def test_runs_off_loop(self, lcov_report: str) -> None:
        sections = await CoverageParser().files_to_sections({Path("lcov.info"): lcov_report})
        assert "src/app.py" in sections

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        assert await CoverageParser().files_to_sections({}) == {}
