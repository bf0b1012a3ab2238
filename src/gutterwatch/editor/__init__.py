"""Editor host model exports."""

from gutterwatch.editor.window import (
    EMPTY_DECORATIONS,
    DecorationKind,
    Decorations,
    DecorationStyle,
    EditorWindow,
    TextEditor,
)

__all__ = [
    "EMPTY_DECORATIONS",
    "DecorationKind",
    "Decorations",
    "DecorationStyle",
    "EditorWindow",
    "TextEditor",
]
