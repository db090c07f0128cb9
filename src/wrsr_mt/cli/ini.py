from __future__ import annotations

import enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from wrsr_mt import fileio
from wrsr_mt.cli.output import console, get_settings, render_table, reporting_errors
from wrsr_mt.ini import DIALECTS, parse

ini_app = typer.Typer(help="Inspect configuration files.")


class DialectName(str, enum.Enum):
    building = "building"
    render = "render"
    material = "material"


@ini_app.command("parse")
def parse_file(
    ctx: typer.Context,
    dialect: Annotated[DialectName, typer.Argument(help="Directive table to parse with.")],
    file: Annotated[Path, typer.Argument(help="Configuration file to parse.")],
    all_chunks: Annotated[bool, typer.Option("--all", help="Also list pass-through text.")] = False,
) -> None:
    """Parse a file and list its directives and parse errors."""
    settings = get_settings(ctx)
    with reporting_errors():
        source = fileio.read_text(file, settings.ini_encoding)

    rows = []
    failures = 0
    for chunk in parse(DIALECTS[dialect.value], source):
        if chunk.token is not None:
            rows.append((chunk.span.start, "token", str(chunk.token)))
        elif chunk.failure is not None:
            failures += 1
            rows.append((chunk.span.start, "error", str(chunk.failure)))
        elif all_chunks and chunk.text.strip():
            rows.append((chunk.span.start, "text", chunk.text.strip()))
    render_table(["offset", "kind", "content"], rows)

    if failures:
        console.print(f"[red]{failures} directive(s) could not be parsed in {escape(str(file))}[/red]")
        raise typer.Exit(1)
