"""Turns cached Sections into per-editor line decorations."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from gutterwatch.config.models import RenderConfig
from gutterwatch.core.errors import RenderError
from gutterwatch.coverage.finder import SectionFinder
from gutterwatch.coverage.merge import merge_sections
from gutterwatch.coverage.models import Cache, Section
from gutterwatch.editor.window import (
    EMPTY_DECORATIONS,
    Decorations,
    DecorationStyle,
    TextEditor,
)

logger = structlog.get_logger()


class Renderer:
    """Applies coverage decorations to editors.

    Rendering is idempotent: every call replaces each editor's decorations
    wholesale, so an empty cache clears them.
    """

    def __init__(self, config: RenderConfig, section_finder: SectionFinder) -> None:
        self._config = config
        self._section_finder = section_finder

    def render_coverage(self, cache: Cache, visible_editors: Iterable[TextEditor]) -> None:
        """Decorate every visible editor from ``cache``.

        Raises:
            RenderError: If an editor rejects its decorations.
        """
        rendered = 0
        for editor in visible_editors:
            decorations = EMPTY_DECORATIONS
            if cache:
                matches = self._section_finder.find_sections_for_editor(editor, cache)
                if matches:
                    decorations = self.decorations_for(merge_sections(matches))
            try:
                editor.set_decorations(decorations)
            except Exception as e:
                raise RenderError.editor_failed(str(editor.path), str(e)) from e
            if not decorations.is_empty:
                rendered += 1
        logger.debug("coverage_rendered", editors_with_coverage=rendered)

    def decorations_for(self, section: Section) -> Decorations:
        styles = self._styles()
        if not styles:
            return EMPTY_DECORATIONS

        partial = set(section.partial_lines) if self._config.show_partial_coverage else set()
        full: set[int] = set()
        none: set[int] = set()
        for line, hits in section.details.items():
            if line in partial:
                continue
            if hits > 0:
                full.add(line)
            else:
                none.add(line)

        # A partial line that was never executed is simply uncovered
        for line in list(partial):
            if section.details.get(line, 1) == 0:
                partial.discard(line)
                none.add(line)

        return Decorations(
            full=frozenset(full),
            partial=frozenset(partial),
            none=frozenset(none),
            styles=styles,
        )

    def _styles(self) -> frozenset[DecorationStyle]:
        styles: set[DecorationStyle] = set()
        if self._config.show_line_coverage:
            styles.add(DecorationStyle.LINE)
        if self._config.show_gutter_coverage:
            styles.add(DecorationStyle.GUTTER)
        return frozenset(styles)
