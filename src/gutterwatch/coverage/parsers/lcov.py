"""LCOV format parser.

LCOV is a plain text format with records like:
- SF:<source file path>
- DA:<line>,<hit count>
- BRDA:<line>,<block>,<branch>,<taken>
- LF/LH, BRF/BRH: totals (recomputed from DA/BRDA, not trusted)
- end_of_record

Used by: pytest-cov, c8/nyc, cargo-llvm-cov, gcov/lcov, dart test
"""

from gutterwatch.core.errors import CoverageParseError
from gutterwatch.coverage.merge import merge_sections
from gutterwatch.coverage.models import BranchCoverage, Section


class LcovParser:
    """Parser for LCOV tracefiles."""

    @property
    def format_id(self) -> str:
        return "lcov"

    def can_parse(self, content: str) -> bool:
        """Look for SF: on the first non-comment line."""
        for line in content.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            return stripped.startswith(("SF:", "TN:"))
        return False

    def parse(self, content: str, *, source: str = "<memory>") -> dict[str, Section]:
        """Parse LCOV text into Sections."""
        sections: dict[str, Section] = {}
        current: Section | None = None
        saw_record = False

        for lineno, raw in enumerate(content.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue

            if line.startswith("SF:"):
                current = Section(path=line[3:])
                saw_record = True

            elif line.startswith("DA:"):
                if current is None:
                    raise CoverageParseError.invalid(source, f"line {lineno}: DA before SF")
                parts = line[3:].split(",")
                if len(parts) < 2:
                    raise CoverageParseError.invalid(source, f"line {lineno}: malformed DA")
                try:
                    line_num = int(parts[0])
                    # '-' is used by some tools for 0
                    hits = 0 if parts[1] == "-" else int(parts[1])
                except ValueError as e:
                    raise CoverageParseError.invalid(source, f"line {lineno}: {e}") from e
                current.details[line_num] = max(current.details.get(line_num, 0), hits)

            elif line.startswith("BRDA:"):
                if current is None:
                    raise CoverageParseError.invalid(source, f"line {lineno}: BRDA before SF")
                parts = line[5:].split(",")
                if len(parts) < 4:
                    raise CoverageParseError.invalid(source, f"line {lineno}: malformed BRDA")
                try:
                    # '-' means the block was never executed
                    hits = 0 if parts[3] == "-" else int(parts[3])
                    current.add_branch(
                        BranchCoverage(
                            line=int(parts[0]),
                            block_id=int(parts[1]),
                            branch_id=int(parts[2]),
                            hits=hits,
                        )
                    )
                except ValueError as e:
                    raise CoverageParseError.invalid(source, f"line {lineno}: {e}") from e

            elif line == "end_of_record":
                if current is not None:
                    _store(sections, current)
                current = None

        # Tolerate a missing trailing end_of_record
        if current is not None:
            _store(sections, current)

        if not saw_record:
            raise CoverageParseError.invalid(source, "no SF records found")

        return sections


def _store(sections: dict[str, Section], section: Section) -> None:
    existing = sections.get(section.path)
    if existing is None:
        sections[section.path] = section
        return
    # Same file twice in one tracefile (e.g. lcov -a output of several tests)
    sections[section.path] = merge_sections([existing, section])
