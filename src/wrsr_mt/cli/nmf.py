from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer

from wrsr_mt import fileio
from wrsr_mt.cli.output import console, render_table, reporting_errors
from wrsr_mt.nmf import (
    Mesh,
    ModelPatch,
    apply_patch,
    compute_usage,
    decode,
    encode,
    mirror_z,
    optimize,
    patch_mesh,
    scale,
    to_obj,
)

nmf_app = typer.Typer(help="Inspect and transform NMF models.")
logger = logging.getLogger(__name__)

InputArg = Annotated[Path, typer.Argument(help="Source NMF file.")]
OutputArg = Annotated[Path, typer.Argument(help="Destination file.")]


def _load(path: Path) -> Mesh:
    mesh, rest = decode(fileio.read_bytes(path))
    if rest:
        logger.warning("%s: %d trailing bytes after the last object", path, len(rest))
    return mesh


def _rewrite(src: Path, out: Path, fn: Callable[[Mesh], Mesh]) -> None:
    with reporting_errors():
        mesh = fn(_load(src))
        fileio.write_bytes(out, encode(mesh))
    console.print(f"[green]Wrote[/green] {out} ({mesh.summary()['objects']} objects)")


@nmf_app.command("show")
def show(
    file: InputArg,
    patch: Annotated[Path | None, typer.Option(help="Model patch deciding which objects are live.")] = None,
) -> None:
    """List objects and submaterials, flagging submaterials no live object uses."""
    with reporting_errors():
        mesh = _load(file)
        live = apply_patch(mesh, ModelPatch.load(patch) if patch is not None else None)

    live_ids = {id(o) for o in live}
    render_table(
        ["#", "object", "submaterial", "faces", "live"],
        [
            (
                i,
                o.name,
                mesh.submaterials[o.submaterial] if o.submaterial is not None else "-",
                o.face_count,
                "yes" if id(o) in live_ids else "no",
            )
            for i, o in enumerate(mesh.objects)
        ],
        title="Objects",
    )
    usage = compute_usage(mesh, live)
    render_table(
        ["#", "submaterial", "used"],
        [(i, name, "yes" if usage[i] else "[unused]") for i, name in enumerate(mesh.submaterials)],
        title="Submaterials",
    )


@nmf_app.command("scale")
def scale_cmd(
    file: InputArg,
    out: OutputArg,
    factor: Annotated[float, typer.Argument(help="Uniform scale factor.")],
) -> None:
    """Scale positions and bounding boxes uniformly."""
    if factor <= 0:
        console.print("[red]Scale factor must be positive.[/red]")
        raise typer.Exit(1)
    _rewrite(file, out, lambda m: scale(m, factor))


@nmf_app.command("mirror")
def mirror_cmd(file: InputArg, out: OutputArg) -> None:
    """Mirror along Z, keeping faces front-facing."""
    _rewrite(file, out, mirror_z)


@nmf_app.command("optimize")
def optimize_cmd(file: InputArg, out: OutputArg) -> None:
    """Drop duplicate vertices, normals and UVs."""
    _rewrite(file, out, optimize)


@nmf_app.command("patch")
def patch_cmd(
    file: InputArg,
    patch: Annotated[Path, typer.Argument(help="Model patch file.")],
    out: OutputArg,
) -> None:
    """Write a model holding only the objects the patch leaves live."""
    with reporting_errors():
        model_patch = ModelPatch.load(patch)
    _rewrite(file, out, lambda m: patch_mesh(m, model_patch))


@nmf_app.command("obj")
def obj_cmd(file: InputArg, out: OutputArg) -> None:
    """Export to Wavefront OBJ."""
    with reporting_errors():
        fileio.write_text(out, to_obj(_load(file)))
    console.print(f"[green]Wrote[/green] {out}")
