"""Locate the cached Sections that describe an editor's document."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from gutterwatch.coverage.models import Cache, Section
from gutterwatch.coverage.paths import normalize_path, relative_to_any
from gutterwatch.editor.window import TextEditor

logger = structlog.get_logger()


class SectionFinder:
    """Matches editor documents against cache keys.

    Reports spell paths in many ways (absolute, relative to the project,
    relative to a source root, or absolute on a CI machine), so matching is
    tried from strictest to loosest:

    1. exact absolute path
    2. path relative to a workspace folder
    3. suffix matches in either direction on path-segment boundaries
    """

    def __init__(self, workspace_folders: Sequence[Path] = ()) -> None:
        self._workspace_folders = [Path(f) for f in workspace_folders]

    def find_sections_for_editor(self, editor: TextEditor, cache: Cache) -> list[Section]:
        """Return matching Sections, strictest match first. May be empty."""
        absolute = normalize_path(editor.path.as_posix())
        relative = relative_to_any(editor.path, self._workspace_folders)

        exact: list[Section] = []
        workspace_relative: list[Section] = []
        suffix: list[Section] = []

        for key, section in cache.items():
            if key == absolute:
                exact.append(section)
            elif relative is not None and key == relative:
                workspace_relative.append(section)
            elif _is_segment_suffix(absolute, key) or (
                relative is not None and _is_segment_suffix(key, relative)
            ):
                suffix.append(section)

        matches = exact + workspace_relative + suffix
        logger.debug("sections_found", path=absolute, matches=len(matches))
        return matches


def _is_segment_suffix(longer: str, shorter: str) -> bool:
    """True when ``shorter`` is a trailing run of whole path segments of ``longer``."""
    shorter = shorter.lstrip("/")
    if not shorter or len(shorter) >= len(longer):
        return False
    return longer.endswith("/" + shorter)
