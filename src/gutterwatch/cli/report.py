"""gutterwatch report command - one refresh, then print coverage."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from gutterwatch.cli.utils import apply_logging_config, load_workspace_config, open_window
from gutterwatch.coverage.models import Cache
from gutterwatch.coverage.paths import relative_to_any
from gutterwatch.coverage.stats import file_line_percent, percent, total_percentages
from gutterwatch.service.coverage_service import CoverageService
from gutterwatch.status.toggler import StatusBarToggler


def coverage_rows(cache: Cache, roots: list[Path]) -> list[dict[str, Any]]:
    """One row per cached source file, sorted by displayed path."""
    rows = []
    for key, section in cache.items():
        lines = section.lines
        branches = section.branches
        rows.append(
            {
                "path": relative_to_any(Path(key), roots) or key,
                "lines_hit": lines.hit,
                "lines_found": lines.found,
                "line_percent": file_line_percent(section),
                "branch_percent": (
                    percent(branches.hit, branches.found) if branches is not None else None
                ),
            }
        )
    return sorted(rows, key=lambda r: r["path"])


def _fmt_percent(value: int | None) -> str:
    return "-" if value is None else f"{value}%"


def _make_table(rows: list[dict[str, Any]], totals: tuple[int, int]) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("File", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Line %", justify="right")
    table.add_column("Branch %", justify="right")
    for row in rows:
        table.add_row(
            row["path"],
            f"{row['lines_hit']}/{row['lines_found']}",
            _fmt_percent(row["line_percent"]),
            _fmt_percent(row["branch_percent"]),
        )
    table.add_section()
    table.add_row("[bold]Total[/bold]", "", f"{totals[0]}%", f"{totals[1]}%")
    return table


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
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def report_command(path: Path, files: tuple[Path, ...], as_json: bool) -> None:
    """Load coverage reports once and print per-file coverage.

    PATH is the workspace root (default: current directory).
    """
    root = path.resolve()
    config = load_workspace_config(root)
    apply_logging_config(config)
    window = open_window(root, files)
    status_bar = StatusBarToggler(config.status_bar)
    service = CoverageService(config, window, status_bar)
    status_bar.toggle(True)

    if not asyncio.run(service.refresh()):
        raise click.ClickException("Coverage refresh failed (run with -v for details)")

    rows = coverage_rows(service.cache, [root])
    totals = total_percentages(service.cache.values())
    if as_json:
        figures = service.current_figures()
        click.echo(
            json.dumps(
                {
                    "status": status_bar.status_text,
                    "state": service.state.value,
                    "active": {
                        "line": figures.line,
                        "total_line": figures.total_line,
                        "branch": figures.branch,
                        "total_branch": figures.total_branch,
                    },
                    "total": {"line": totals[0], "branch": totals[1]},
                    "files": rows,
                },
                indent=2,
            )
        )
        return

    console = Console()
    if not rows:
        console.print("[yellow]No coverage found[/yellow] in", str(root))
        return
    console.print(_make_table(rows, totals))
    console.print()
    console.print("Status:", status_bar.status_text, markup=False, highlight=False)
