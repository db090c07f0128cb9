from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from wrsr_mt.cli.output import console, get_settings, render_table, reporting_errors
from wrsr_mt.core.install import install as install_all


def install(
    ctx: typer.Context,
    directory: Annotated[Path, typer.Argument(help="Directory tree of building sources.")],
    dest: Annotated[Path, typer.Argument(help="Target mods directory.")],
) -> None:
    """Validate all building sources, then install each as a numbered mod folder."""
    with reporting_errors():
        installed = install_all(directory, dest, get_settings(ctx))
    render_table(["id", "source"], [(b.mod_id, b.source) for b in installed])
    console.print(f"[green]Installed[/green] {len(installed)} building(s) into {dest}")
