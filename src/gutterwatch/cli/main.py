"""gutterwatch CLI."""

import click

from gutterwatch import __version__
from gutterwatch.cli.report import report_command
from gutterwatch.cli.watch import watch_command
from gutterwatch.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="gutterwatch")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """gutterwatch - live coverage gutters for a workspace."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(report_command, name="report")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
