"""gutterwatch watch command - follow coverage reports until interrupted."""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

import click
from rich.console import Console

from gutterwatch.cli.utils import apply_logging_config, load_workspace_config, open_window
from gutterwatch.extension import Extension
from gutterwatch.status.toggler import WATCH_COMMAND, StatusBarItem


async def _run(extension: Extension) -> None:
    try:
        await extension.execute_command(WATCH_COMMAND)
        await asyncio.Event().wait()
    finally:
        extension.dispose()


@click.command()
@click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--file",
    "files",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Source file to open; repeatable, the last one is active",
)
def watch_command(path: Path, files: tuple[Path, ...]) -> None:
    """Watch coverage reports and print the status line on every change.

    PATH is the workspace root (default: current directory). Stop with Ctrl-C.
    """
    root = path.resolve()
    config = load_workspace_config(root)
    apply_logging_config(config)
    window = open_window(root, files)
    console = Console()

    def _print_status(item: StatusBarItem) -> None:
        console.print(item.text, markup=False, highlight=False)

    extension = Extension(config, window, item=StatusBarItem(on_render=_print_status))
    console.print(f"[bold]Watching[/bold] {root} [dim](Ctrl-C to stop)[/dim]")
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run(extension))
