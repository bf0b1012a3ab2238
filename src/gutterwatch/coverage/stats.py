"""Percentage figures for the status indicator.

All percentages are ``int | None``. ``None`` means "no data" and must stay
distinct from a real 0%: a file with no instrumented lines has no line
coverage, while a workspace with no instrumented lines reads 0%.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from gutterwatch.core.errors import AggregationError
from gutterwatch.coverage.merge import merge_sections
from gutterwatch.coverage.models import HitCount, Section


@dataclass(frozen=True, slots=True)
class CoverageFigures:
    """Per-file and workspace-wide percentages for one active editor."""

    line: int | None = None
    total_line: int | None = None
    branch: int | None = None
    total_branch: int | None = None

    @property
    def has_coverage(self) -> bool:
        return self.line is not None


NO_COVERAGE = CoverageFigures()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return math.floor(value + 0.5)


def percent(hit: int, found: int) -> int | None:
    """100 * hit / found rounded, or None when nothing was found."""
    if found == 0:
        return None
    return round_half_up(100 * hit / found)


def file_line_percent(section: Section) -> int | None:
    counts = _checked(section, section.lines)
    return percent(counts.hit, counts.found)


def file_branch_percent(section: Section) -> int:
    """Missing branch data reads as 0%, not as unknown."""
    counts = section.branches
    if counts is None:
        return 0
    counts = _checked(section, counts)
    return round_half_up(100 * counts.hit / (counts.found or 1))


def total_percentages(sections: Iterable[Section]) -> tuple[int, int]:
    """Workspace (line %, branch %); 0 when nothing was found."""
    lines_hit = lines_found = branches_hit = branches_found = 0
    for section in sections:
        lines = _checked(section, section.lines)
        lines_hit += lines.hit
        lines_found += lines.found
        branches = section.branches
        if branches is not None:
            branches = _checked(section, branches)
            branches_hit += branches.hit
            branches_found += branches.found

    total_line = percent(lines_hit, lines_found)
    total_branch = percent(branches_hit, branches_found)
    return (total_line or 0, total_branch or 0)


def compute_figures(matches: Sequence[Section], sections: Iterable[Section]) -> CoverageFigures:
    """Figures for an editor whose lookup returned ``matches``.

    Several matches (the same file in reports from separate runs) are merged
    with max-hit semantics before computing the per-file numbers.

    Raises:
        AggregationError: For sections with impossible counts. Callers at the
            presentation boundary turn this into NO_COVERAGE.
    """
    if not matches:
        return NO_COVERAGE

    section = merge_sections(matches)
    line = file_line_percent(section)
    if line is None:
        return NO_COVERAGE

    total_line, total_branch = total_percentages(sections)
    return CoverageFigures(
        line=line,
        total_line=total_line,
        branch=file_branch_percent(section),
        total_branch=total_branch,
    )


def _checked(section: Section, counts: HitCount) -> HitCount:
    if counts.hit < 0 or counts.found < 0 or counts.hit > counts.found:
        raise AggregationError.malformed_section(
            section.path, f"hit={counts.hit} found={counts.found}"
        )
    return counts
