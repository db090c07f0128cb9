from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from wrsr_mt.cli.output import console, get_settings, reporting_errors
from wrsr_mt.core.sources import validate_tree


def validate(
    ctx: typer.Context,
    directory: Annotated[Path, typer.Argument(help="Building source, or a directory tree of them.")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the batch summary as JSON.")] = False,
) -> None:
    """Validate every building source under a directory."""
    with reporting_errors():
        _valid, summary = validate_tree(directory, get_settings(ctx))

    if as_json:
        typer.echo(summary.model_dump_json(indent=2))
    else:
        for report in summary.reports:
            style = "green" if report.ok else "red"
            console.print(f"[{style}]{escape(report.render())}[/{style}]")
        for building, message in summary.failures.items():
            console.print(f"[red]{escape(building)}: {escape(message)}[/red]")
        console.print(f"{summary.ok_count} OK, {summary.error_count} with errors")

    if not summary.ok:
        raise typer.Exit(1)
