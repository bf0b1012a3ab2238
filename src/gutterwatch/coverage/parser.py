"""Raw report contents → merged Sections.

One bad report must never cost the others: each file is parsed on its own,
failures are logged and the file is left out of the result.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from gutterwatch.core.errors import CoverageParseError
from gutterwatch.coverage.merge import merge_section_maps, merge_sections
from gutterwatch.coverage.models import Section
from gutterwatch.coverage.parsers import parse_report
from gutterwatch.coverage.paths import normalize_path

logger = structlog.get_logger()


class CoverageParser:
    """Parses and merges report contents keyed by report path."""

    def __init__(self, remote_path_resolve: Sequence[str] = ()) -> None:
        self._remote_path_resolve = tuple(remote_path_resolve)

    async def files_to_sections(self, data_files: Mapping[Path, str]) -> dict[str, Section]:
        """Parse every report and merge the results into one mapping.

        Parsing runs in a worker thread; XML reports of large projects take
        long enough to stall the event loop otherwise.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.parse_all, data_files)

    def parse_all(self, data_files: Mapping[Path, str]) -> dict[str, Section]:
        parsed: list[dict[str, Section]] = []
        for report_path, content in data_files.items():
            try:
                sections = parse_report(content, source=str(report_path))
            except CoverageParseError as e:
                logger.warning(
                    "coverage_file_skipped",
                    file=str(report_path),
                    error=e.error_name,
                    reason=e.message,
                )
                continue
            parsed.append(self._normalize_keys(sections))
            logger.debug("coverage_file_parsed", file=str(report_path), sections=len(sections))

        return merge_section_maps(parsed)

    def _normalize_keys(self, sections: Mapping[str, Section]) -> dict[str, Section]:
        normalized: dict[str, Section] = {}
        for path, section in sections.items():
            key = normalize_path(path, self._remote_path_resolve)
            section.path = key
            if key in normalized:
                normalized[key] = merge_sections([normalized[key], section])
            else:
                normalized[key] = section
        return normalized
