"""CLI utilities."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import click

from gutterwatch.config.loader import load_config
from gutterwatch.config.models import GutterWatchConfig
from gutterwatch.core.errors import ConfigError
from gutterwatch.core.logging import configure_logging
from gutterwatch.editor.window import EditorWindow


def load_workspace_config(root: Path) -> GutterWatchConfig:
    """Load config for ``root``, turning config errors into click errors."""
    try:
        return load_config(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def apply_logging_config(config: GutterWatchConfig) -> None:
    """Reconfigure logging from the workspace ``logging`` section.

    The group-level ``--verbose`` flag forces DEBUG on every output.
    """
    ctx = click.get_current_context(silent=True)
    verbose = bool(ctx and (ctx.find_root().obj or {}).get("verbose"))
    configure_logging(config=config.logging, force_level="DEBUG" if verbose else None)


def open_window(root: Path, files: Iterable[Path]) -> EditorWindow:
    """A window on ``root`` with ``files`` open; the last one is active.

    Relative file paths are taken from the workspace root.
    """
    window = EditorWindow([root])
    for file in files:
        path = file if file.is_absolute() else root / file
        window.open(path.resolve())
    return window
