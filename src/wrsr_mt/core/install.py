"""Install validated building sources as numbered workshop folders."""

from __future__ import annotations

import hashlib
import itertools
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from wrsr_mt import fileio
from wrsr_mt.core import paths
from wrsr_mt.core.building import BuildingSource
from wrsr_mt.core.sources import failure_reports, validate_tree
from wrsr_mt.core.stock import StockCache
from wrsr_mt.errors import FileIOError, InstallError, ValidationError
from wrsr_mt.ini import MATERIAL, RENDER, IniFile
from wrsr_mt.ini import material as mtl
from wrsr_mt.ini import renderconfig as rc
from wrsr_mt.nmf import decode, encode, patch_mesh
from wrsr_mt.settings import Settings

logger = logging.getLogger(__name__)

# mod folders are 7 digits and cannot start with zero
MOD_IDS_START = 1_000_000
MOD_IDS_END = 9_999_999

MARKER_FILE = "wrsr-mt.installed"
LOG_FILE = "wrsr-mt-install.log"
STAGING_DIR = ".wrsr-mt-staging"

MODEL_FILES = {
    rc.MODEL: "model.nmf",
    rc.MODEL_LOD: "model_lod1.nmf",
    rc.MODEL_LOD2: "model_lod2.nmf",
    rc.MODEL_EMISSIVE: "model_e.nmf",
}
MATERIAL_FILES = {rc.MATERIAL: "material.mtl", rc.MATERIAL_EMISSIVE: "material_e.mtl"}


@dataclass(frozen=True)
class InstalledBuilding:
    mod_id: int
    source: Path
    target: Path


def _allocate_ids(dest: Path, count: int) -> list[int]:
    ids: list[int] = []
    candidate = MOD_IDS_START
    while len(ids) < count:
        if candidate > MOD_IDS_END:
            raise InstallError(f"No free mod ids left in {dest}")
        if not (dest / str(candidate)).exists():
            ids.append(candidate)
        candidate += 1
    return ids


def _place_texture(texture: Path, directory: Path, placed: dict[str, str]) -> str:
    """Copy ``texture`` into ``directory`` and return the file name it got there.

    ``placed`` maps names already written to ``directory`` to a digest of their
    content. A name holding different content is never overwritten.
    """
    data = fileio.read_bytes(texture)
    digest = hashlib.sha256(data).hexdigest()
    fallbacks = (f"{texture.stem}_{n}{texture.suffix}" for n in itertools.count(2))
    names = itertools.chain([texture.name, f"{texture.parent.name}_{texture.name}"], fallbacks)
    name = next(n for n in names if placed.get(n) in (None, digest))
    if name not in placed:
        fileio.write_bytes(directory / name, data)
        placed[name] = digest
        if name != texture.name:
            logger.debug("Texture %s installed as %s", texture, name)
    return name


def _install_material(src: Path, dst: Path, settings: Settings, placed: dict[str, str]) -> None:
    """Copy a material and its material-relative textures, flattening texture paths next to it."""
    material = IniFile.load(MATERIAL, src, settings.ini_encoding)
    for i, token in enumerate(material.tokens()):
        if not (mtl.is_texture(token) and mtl.is_material_relative(token)):
            continue
        texture = mtl.texture_path(token, src, settings.path_stock)
        name = _place_texture(texture, dst.parent, placed)
        material.replace(i, token.replace(token.values[0], name))
    material.write(dst, settings.ini_encoding)


def _stage_building(source: BuildingSource, target: Path, settings: Settings) -> None:
    target.mkdir(parents=True)
    fileio.write_bytes(target / paths.BUILDING_INI, fileio.read_bytes(source.building_ini))

    for variant in source.models:
        mesh, _rest = decode(fileio.read_bytes(variant.path))
        fileio.write_bytes(target / MODEL_FILES[variant.keyword], encode(patch_mesh(mesh, variant.load_patch())))
    placed: dict[str, str] = {}
    for ref in source.materials:
        keyword = rc.MATERIAL_EMISSIVE if ref.emissive else rc.MATERIAL
        _install_material(ref.path, target / MATERIAL_FILES[keyword], settings, placed)
    for skin in source.skins:
        skin_dir = target / paths.SKINS_DIR / skin.name
        skin_placed: dict[str, str] = {}
        _install_material(skin.material, skin_dir / paths.SKIN_MATERIAL, settings, skin_placed)
        if skin.material_emissive is not None:
            _install_material(skin.material_emissive, skin_dir / paths.SKIN_MATERIAL_EMISSIVE, settings, skin_placed)

    manifest = IniFile.parse(RENDER, source.manifest.source)
    local = {**MODEL_FILES, **MATERIAL_FILES}
    for i, token in enumerate(manifest.tokens()):
        if token.keyword in local:
            manifest.replace(i, token.replace(local[token.keyword], *token.values[1:]))
    manifest.write(target / paths.RENDERCONFIG_INI, settings.ini_encoding)


def install(src: Path, dest: Path, settings: Settings, stock: StockCache | None = None) -> list[InstalledBuilding]:
    """Validate every source under ``src`` and install all of them into ``dest``.

    Nothing is written unless every source validates. Buildings are assembled
    in a staging directory and renamed into place; the install log and the
    marker that blocks a second installation are written last.
    """
    marker = dest / MARKER_FILE
    if marker.exists():
        raise InstallError(f"{dest} already holds an installation ({MARKER_FILE}); remove it to reinstall")

    sources, summary = validate_tree(src, settings, stock)
    if not summary.ok:
        raise ValidationError(failure_reports(summary))
    if not sources:
        raise InstallError(f"No building sources found in {src}")

    staging = dest / STAGING_DIR
    try:
        if staging.exists():
            shutil.rmtree(staging)
        staging.mkdir(parents=True)
    except OSError as e:
        raise FileIOError(staging, e) from e

    installed = []
    for mod_id, source in zip(_allocate_ids(dest, len(sources)), sources, strict=True):
        logger.info("Staging %s as %d", source.root, mod_id)
        _stage_building(source, staging / str(mod_id), settings)
        installed.append(InstalledBuilding(mod_id, source.root, dest / str(mod_id)))

    try:
        for building in installed:
            os.replace(staging / str(building.mod_id), building.target)
        staging.rmdir()
    except OSError as e:
        raise FileIOError(dest, e) from e

    log = "".join(f"{b.mod_id}\t{b.source}\n" for b in installed)
    fileio.write_text(dest / LOG_FILE, log)
    fileio.write_text(marker, f"{len(installed)}\n")
    logger.info("Installed %d building(s) into %s", len(installed), dest)
    return installed
