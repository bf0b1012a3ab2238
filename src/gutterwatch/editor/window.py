"""Editor host model.

A minimal stand-in for an editor window: a set of visible text editors, one
of which may be active, and a notification when the active editor changes.
Decorations are plain line sets; drawing them is the host's business.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import structlog

from gutterwatch.core.disposable import Subscription

logger = structlog.get_logger()


class DecorationKind(Enum):
    """How a line is marked."""

    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


class DecorationStyle(Enum):
    """How a marked line is drawn."""

    LINE = "line"  # whole-line background
    GUTTER = "gutter"  # icon in the gutter


@dataclass(frozen=True, slots=True)
class Decorations:
    """Line sets per decoration kind for one editor, and the styles to draw them in."""

    full: frozenset[int] = frozenset()
    partial: frozenset[int] = frozenset()
    none: frozenset[int] = frozenset()
    styles: frozenset[DecorationStyle] = frozenset()

    def lines(self, kind: DecorationKind) -> frozenset[int]:
        return getattr(self, kind.value)  # type: ignore[no-any-return]

    @property
    def is_empty(self) -> bool:
        return not (self.full or self.partial or self.none)


EMPTY_DECORATIONS = Decorations()


@dataclass(eq=False)
class TextEditor:
    """An open editor showing one document."""

    path: Path
    decorations: Decorations = field(default=EMPTY_DECORATIONS)

    def set_decorations(self, decorations: Decorations) -> None:
        self.decorations = decorations


ActiveEditorListener = Callable[["TextEditor | None"], None]


class EditorWindow:
    """Visible editors plus the active one, with focus-change notifications."""

    def __init__(self, workspace_folders: list[Path] | None = None) -> None:
        self.workspace_folders: list[Path] = list(workspace_folders or [])
        self._editors: list[TextEditor] = []
        self._active: TextEditor | None = None
        self._listeners: list[ActiveEditorListener] = []

    @property
    def visible_editors(self) -> list[TextEditor]:
        return list(self._editors)

    @property
    def active_editor(self) -> TextEditor | None:
        return self._active

    def open(self, path: Path, *, focus: bool = True) -> TextEditor:
        """Open (or reveal) an editor for ``path``."""
        editor = self._find(path)
        if editor is None:
            editor = TextEditor(path=path)
            self._editors.append(editor)
        if focus:
            self._set_active(editor)
        return editor

    def focus(self, path: Path) -> TextEditor:
        editor = self._find(path)
        if editor is None:
            raise KeyError(f"No open editor for {path}")
        self._set_active(editor)
        return editor

    def close(self, path: Path) -> None:
        editor = self._find(path)
        if editor is None:
            return
        self._editors.remove(editor)
        if editor is self._active:
            self._set_active(self._editors[-1] if self._editors else None)

    def on_did_change_active_editor(self, listener: ActiveEditorListener) -> Subscription:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(_remove)

    def _find(self, path: Path) -> TextEditor | None:
        for editor in self._editors:
            if editor.path == path:
                return editor
        return None

    def _set_active(self, editor: TextEditor | None) -> None:
        if editor is self._active:
            return
        self._active = editor
        logger.debug("active_editor_changed", path=str(editor.path) if editor else None)
        for listener in list(self._listeners):
            listener(editor)
