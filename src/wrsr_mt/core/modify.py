"""Whole-building geometry edits: building.ini, every model variant and the manifest together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from wrsr_mt import fileio
from wrsr_mt.core import paths
from wrsr_mt.core.building import PATCH_FILES, BuildingSource, load_building_source
from wrsr_mt.core.stock import StockCache
from wrsr_mt.errors import ModToolError
from wrsr_mt.ini import BUILDING, RENDER, IniFile, Token, mirror_token, scale_token
from wrsr_mt.ini import renderconfig as rc
from wrsr_mt.nmf import Mesh, decode, encode, mirror_z, scale
from wrsr_mt.settings import Settings

logger = logging.getLogger(__name__)

MeshFn = Callable[[Mesh], Mesh]
TokenFn = Callable[[Token], Token | None]


@dataclass
class ModifyResult:
    out_dir: Path
    written: list[Path] = field(default_factory=list)
    changed_tokens: int = 0


def _model_names(source: BuildingSource) -> dict[Path, str]:
    """Output file name for each distinct model path; a path shared by variants is written once."""
    names: dict[Path, str] = {}
    taken: set[str] = set()
    for variant in source.models:
        if variant.path in names:
            continue
        name = variant.path.name
        if name in taken:
            name = f"{variant.keyword.lower()}_{name}"
        taken.add(name)
        names[variant.path] = name
    return names


def _rewrite_manifest(
    manifest: IniFile, source: BuildingSource, out_dir: Path, models: dict[Path, str], settings: Settings
) -> None:
    for i, entry in enumerate(manifest.entries):
        token = entry.token
        keyword = token.keyword
        if keyword in rc.MODEL_KEYWORDS:
            variant = source.variant(keyword)
            if variant is None:
                continue
            manifest.replace(i, token.replace(models[variant.path], *token.values[1:]))
        elif keyword in rc.MATERIAL_KEYWORDS:
            target = paths.resolve_prefixed(token.args[0], source.manifest_root, settings)
            manifest.replace(i, token.replace(paths.express_path(target, out_dir, settings), *token.values[1:]))


def modify_building(
    src: Path,
    out_dir: Path,
    settings: Settings,
    mesh_fn: MeshFn,
    token_fn: TokenFn,
    stock: StockCache | None = None,
) -> ModifyResult:
    """Apply ``mesh_fn`` to every model and ``token_fn`` to every building.ini token, writing into ``out_dir``.

    ``out_dir`` becomes a self-contained building source: the transformed
    building.ini and models, the model patches, and a ``renderconfig.source``
    whose model paths point at the new models and whose material paths point
    back at the untouched originals.
    """
    if out_dir.resolve() == src.resolve():
        raise ModToolError(f"Output directory must differ from the source directory: {out_dir}")
    source = load_building_source(src, settings, stock)
    result = ModifyResult(out_dir)

    building = IniFile.load(BUILDING, source.building_ini, settings.ini_encoding)
    result.changed_tokens = building.modify(token_fn)

    model_names = _model_names(source)
    outputs: dict[Path, bytes] = {}
    for model_path, name in model_names.items():
        mesh, rest = decode(fileio.read_bytes(model_path))
        if rest:
            logger.warning("%s: dropping %d trailing bytes", model_path, len(rest))
        outputs[out_dir / name] = encode(mesh_fn(mesh))

    manifest = IniFile.parse(RENDER, source.manifest.source)
    _rewrite_manifest(manifest, source, out_dir, model_names, settings)

    out_dir.mkdir(parents=True, exist_ok=True)
    building.write(out_dir / paths.BUILDING_INI, settings.ini_encoding)
    result.written.append(out_dir / paths.BUILDING_INI)
    for path, data in outputs.items():
        fileio.write_bytes(path, data)
        result.written.append(path)
    for variant in source.models:
        if variant.patch_path is not None:
            dest = out_dir / PATCH_FILES[variant.keyword]
            fileio.write_bytes(dest, fileio.read_bytes(variant.patch_path))
            result.written.append(dest)
    manifest.write(out_dir / paths.RENDERCONFIG_SOURCE, settings.ini_encoding)
    result.written.append(out_dir / paths.RENDERCONFIG_SOURCE)

    logger.info(
        "Wrote %d file(s) to %s (%d building.ini token(s) changed)", len(result.written), out_dir, result.changed_tokens
    )
    return result


def scale_building(
    src: Path, out_dir: Path, factor: float, settings: Settings, stock: StockCache | None = None
) -> ModifyResult:
    return modify_building(
        src,
        out_dir,
        settings,
        mesh_fn=lambda m: scale(m, factor),
        token_fn=lambda t: scale_token(t, factor),
        stock=stock,
    )


def mirror_building(src: Path, out_dir: Path, settings: Settings, stock: StockCache | None = None) -> ModifyResult:
    return modify_building(src, out_dir, settings, mesh_fn=mirror_z, token_fn=mirror_token, stock=stock)
