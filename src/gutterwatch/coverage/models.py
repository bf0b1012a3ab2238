"""Per-file coverage model.

Every report format converts to ``Section``: one record per source file with
per-line hit counts and, when the report carries them, branch records.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class HitCount:
    """Hit/found pair for lines or branches."""

    hit: int
    found: int


@dataclass(frozen=True, slots=True)
class BranchCoverage:
    """A single branch point (if/else arm, switch case) at a line."""

    line: int
    block_id: int
    branch_id: int
    hits: int


@dataclass(slots=True)
class Section:
    """Coverage data for a single source file.

    Lines are stored as a dict mapping line number → hit count, 1-based.
    ``branches`` is None when the report recorded no branch data at all,
    which is different from a file with zero branches.
    """

    path: str
    details: dict[int, int] = field(default_factory=dict)  # line_number → hit_count
    branch_details: list[BranchCoverage] | None = None

    @property
    def lines(self) -> HitCount:
        found = len(self.details)
        hit = sum(1 for hits in self.details.values() if hits > 0)
        return HitCount(hit=hit, found=found)

    @property
    def branches(self) -> HitCount | None:
        if self.branch_details is None:
            return None
        hit = sum(1 for b in self.branch_details if b.hits > 0)
        return HitCount(hit=hit, found=len(self.branch_details))

    def add_branch(self, branch: BranchCoverage) -> None:
        if self.branch_details is None:
            self.branch_details = []
        self.branch_details.append(branch)

    @property
    def uncovered_lines(self) -> list[int]:
        """Sorted list of line numbers with zero hits."""
        return sorted(line for line, hits in self.details.items() if hits == 0)

    @property
    def partial_lines(self) -> list[int]:
        """Lines where some branches were taken and others were not."""
        if not self.branch_details:
            return []
        taken: dict[int, set[bool]] = {}
        for b in self.branch_details:
            taken.setdefault(b.line, set()).add(b.hits > 0)
        return sorted(line for line, states in taken.items() if len(states) == 2)


Cache = Mapping[str, Section]
"""Read-only snapshot: normalized path → Section."""

EMPTY_CACHE: Cache = MappingProxyType({})


def freeze(sections: dict[str, Section]) -> Cache:
    """Wrap a freshly built mapping as a read-only cache snapshot."""
    return MappingProxyType(dict(sections))
