"""Report parser registry and content-based detection."""

from collections.abc import Sequence

from gutterwatch.core.errors import CoverageParseError
from gutterwatch.coverage.models import Section

from .base import ReportParser
from .clover import CloverParser
from .cobertura import CoberturaParser
from .jacoco import JacocoParser
from .lcov import LcovParser

# Order matters: more specific formats first, generic ones last
PARSER_REGISTRY: Sequence[ReportParser] = (
    JacocoParser(),  # <report> with packages/sessioninfo
    CloverParser(),  # <coverage clover="..."> / <project>
    CoberturaParser(),  # <coverage line-rate="..."> (last XML fallback)
    LcovParser(),  # SF: text records
)

PARSER_BY_FORMAT: dict[str, ReportParser] = {p.format_id: p for p in PARSER_REGISTRY}

__all__ = [
    "PARSER_REGISTRY",
    "PARSER_BY_FORMAT",
    "detect_parser",
    "parse_report",
    "ReportParser",
    "CloverParser",
    "CoberturaParser",
    "JacocoParser",
    "LcovParser",
]


def detect_parser(content: str) -> ReportParser | None:
    """Return the first parser in registry order that claims the content."""
    for parser in PARSER_REGISTRY:
        if parser.can_parse(content):
            return parser
    return None


def parse_report(
    content: str,
    *,
    source: str = "<memory>",
    format_id: str | None = None,
) -> dict[str, Section]:
    """Parse one report's text, auto-detecting the format unless given.

    Raises:
        CoverageParseError: If the format is unknown or the content is invalid.
    """
    if format_id:
        parser = PARSER_BY_FORMAT.get(format_id)
        if not parser:
            valid = ", ".join(sorted(PARSER_BY_FORMAT))
            raise CoverageParseError.invalid(
                source, f"unknown coverage format {format_id!r}. Valid formats: {valid}"
            )
    else:
        parser = detect_parser(content)
        if not parser:
            raise CoverageParseError.unknown_format(source)

    return parser.parse(content, source=source)
