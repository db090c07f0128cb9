"""Console output, logging setup and error reporting shared by the commands."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from wrsr_mt.errors import IniParseError, ModToolError, ValidationError
from wrsr_mt.settings import Settings

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    log = logging.getLogger("wrsr_mt")
    log.handlers.clear()
    log.addHandler(RichHandler(console=err_console, show_path=False))
    log.setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_settings(ctx: typer.Context) -> Settings:
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return Settings.from_env()


def render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]], title: str | None = None) -> None:
    table = Table(title=title, show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(escape(str(v)) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn a tool error into a red message and exit status 1."""
    try:
        yield
    except ModToolError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        if isinstance(e, (IniParseError, ValidationError)):
            console.print(escape(e.details()))
        raise typer.Exit(1) from e
