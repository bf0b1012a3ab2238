"""Coverage data: models, parsing, merging, lookup and percentages.

Usage:
    from gutterwatch.coverage import CoverageParser, SectionFinder, compute_figures

    sections = await CoverageParser().files_to_sections({path: text})
    matches = SectionFinder([workspace]).find_sections_for_editor(editor, sections)
    figures = compute_figures(matches, sections.values())

Supported formats:
    - lcov: pytest-cov, c8/nyc, cargo-llvm-cov, gcov
    - cobertura: coverage.py, coverlet
    - jacoco: Java (Maven/Gradle)
    - clover: PHPUnit, kover
"""

from gutterwatch.coverage.finder import SectionFinder
from gutterwatch.coverage.merge import merge_section_maps, merge_sections
from gutterwatch.coverage.models import (
    EMPTY_CACHE,
    BranchCoverage,
    Cache,
    HitCount,
    Section,
    freeze,
)
from gutterwatch.coverage.parser import CoverageParser
from gutterwatch.coverage.parsers import PARSER_REGISTRY, detect_parser, parse_report
from gutterwatch.coverage.stats import NO_COVERAGE, CoverageFigures, compute_figures

__all__ = [
    # Models
    "EMPTY_CACHE",
    "BranchCoverage",
    "Cache",
    "HitCount",
    "Section",
    "freeze",
    # Parsing
    "CoverageParser",
    "PARSER_REGISTRY",
    "detect_parser",
    "parse_report",
    # Merge
    "merge_section_maps",
    "merge_sections",
    # Lookup and figures
    "NO_COVERAGE",
    "CoverageFigures",
    "SectionFinder",
    "compute_figures",
]
