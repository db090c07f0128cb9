from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from wrsr_mt.cli.output import console, get_settings, reporting_errors
from wrsr_mt.core.modify import ModifyResult, mirror_building, scale_building

building_app = typer.Typer(help="Transform whole building sources.")

SourceArg = Annotated[Path, typer.Argument(help="Building source directory.")]
OutArg = Annotated[Path, typer.Argument(help="Output directory for the new building source.")]


def _report(result: ModifyResult) -> None:
    for path in result.written:
        console.print(f"[green]Wrote[/green] {path}")
    console.print(f"{result.changed_tokens} building.ini token(s) changed")


@building_app.command("scale")
def scale(
    ctx: typer.Context,
    src: SourceArg,
    out: OutArg,
    factor: Annotated[float, typer.Argument(help="Uniform scale factor.")],
) -> None:
    """Scale building.ini geometry and every model variant."""
    if factor <= 0:
        console.print("[red]Scale factor must be positive.[/red]")
        raise typer.Exit(1)
    with reporting_errors():
        result = scale_building(src, out, factor, get_settings(ctx))
    _report(result)


@building_app.command("mirror")
def mirror(ctx: typer.Context, src: SourceArg, out: OutArg) -> None:
    """Mirror building.ini geometry and every model variant along Z."""
    with reporting_errors():
        result = mirror_building(src, out, get_settings(ctx))
    _report(result)
