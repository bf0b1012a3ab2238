"""Coverage parser protocol."""

from typing import Protocol

from gutterwatch.coverage.models import Section


class ReportParser(Protocol):
    """Protocol for coverage format parsers.

    Each parser handles one report format and converts raw report text into
    Sections keyed by the file path exactly as the report spells it.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'lcov', 'cobertura')."""
        ...

    def can_parse(self, content: str) -> bool:
        """Content sniff: does this text look like this parser's format?"""
        ...

    def parse(self, content: str, *, source: str = "<memory>") -> dict[str, Section]:
        """Parse report text.

        Args:
            content: Raw report text.
            source: Report file name, used in error messages only.

        Raises:
            CoverageParseError: If the content is not valid for this format.
        """
        ...
