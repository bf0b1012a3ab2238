"""Tests for status percentages."""

import pytest

from gutterwatch.core.errors import AggregationError
from gutterwatch.coverage.models import BranchCoverage, HitCount, Section
from gutterwatch.coverage.stats import (
    NO_COVERAGE,
    CoverageFigures,
    compute_figures,
    file_branch_percent,
    file_line_percent,
    percent,
    round_half_up,
    total_percentages,
)


def _section(path: str, details: dict[int, int], branches: list[int] | None = None) -> Section:
    section = Section(path=path, details=details)
    if branches is not None:
        section.branch_details = [
            BranchCoverage(line=1, block_id=0, branch_id=i, hits=h) for i, h in enumerate(branches)
        ]
    return section


class TestRounding:
    @pytest.mark.parametrize(
        ("value", "expected"), [(0.5, 1), (1.5, 2), (2.5, 3), (66.4, 66), (66.6, 67)]
    )
    def test_half_rounds_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected

    def test_percent(self) -> None:
        assert percent(1, 8) == 13  # 12.5
        assert percent(0, 0) is None
        assert percent(3, 3) == 100


class TestFilePercentages:
    def test_line_percent(self) -> None:
        assert file_line_percent(_section("a.py", {1: 1, 2: 0, 3: 4})) == 67

    def test_no_lines_is_none(self) -> None:
        assert file_line_percent(_section("a.py", {})) is None

    def test_missing_branch_data_is_zero(self) -> None:
        assert file_branch_percent(_section("a.py", {1: 1})) == 0

    def test_empty_branch_list_is_zero(self) -> None:
        assert file_branch_percent(_section("a.py", {1: 1}, branches=[])) == 0

    def test_branch_percent(self) -> None:
        assert file_branch_percent(_section("a.py", {1: 1}, branches=[1, 0, 0, 2])) == 50


class TestTotals:
    def test_totals_across_sections(self) -> None:
        sections = [
            _section("a.py", {1: 1, 2: 0}, branches=[1, 0]),
            _section("b.py", {1: 1, 2: 1}),
        ]
        assert total_percentages(sections) == (75, 50)

    def test_nothing_found_is_zero(self) -> None:
        assert total_percentages([]) == (0, 0)
        assert total_percentages([_section("a.py", {})]) == (0, 0)


class TestComputeFigures:
    def test_no_matches(self) -> None:
        assert compute_figures([], [_section("a.py", {1: 1})]) is NO_COVERAGE

    def test_no_instrumented_lines(self) -> None:
        empty = _section("a.py", {})
        assert compute_figures([empty], [empty]) is NO_COVERAGE

    def test_full_figures(self) -> None:
        a = _section("a.py", {1: 1, 2: 0}, branches=[1, 1])
        b = _section("b.py", {1: 0, 2: 0}, branches=[0, 0])

        figures = compute_figures([a], [a, b])

        assert figures == CoverageFigures(line=50, total_line=25, branch=100, total_branch=50)
        assert figures.has_coverage

    def test_several_matches_are_merged(self) -> None:
        first = _section("a.py", {1: 1, 2: 0})
        second = _section("/ws/a.py", {1: 0, 2: 1})

        figures = compute_figures([first, second], [first, second])

        assert figures.line == 100

    def test_impossible_counts_raise(self) -> None:
        with pytest.raises(AggregationError):
            compute_figures([_OvercountedSection(path="a.py", details={1: 1})], [])


class _OvercountedSection(Section):
    """Claims more hit lines than it found."""

    __slots__ = ()

    @property
    def lines(self) -> HitCount:
        return HitCount(hit=5, found=2)
