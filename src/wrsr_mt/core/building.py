"""Building sources: one directory holding ``building.ini`` plus a render manifest."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from wrsr_mt.core import paths
from wrsr_mt.core.stock import StockCache
from wrsr_mt.errors import FileIOError, MissingFieldError, ReferenceResolutionError
from wrsr_mt.fileio import read_text
from wrsr_mt.ini import RENDER, IniFile
from wrsr_mt.ini import renderconfig as rc
from wrsr_mt.nmf import ModelPatch
from wrsr_mt.settings import Settings

logger = logging.getLogger(__name__)

PATCH_FILES = {
    rc.MODEL: "model.patch",
    rc.MODEL_LOD: "model_lod1.patch",
    rc.MODEL_LOD2: "model_lod2.patch",
    rc.MODEL_EMISSIVE: "model_e.patch",
}

LABELS = {
    rc.MODEL: "model",
    rc.MODEL_LOD: "model LOD1",
    rc.MODEL_LOD2: "model LOD2",
    rc.MODEL_EMISSIVE: "emissive model",
    rc.MATERIAL: "material",
    rc.MATERIAL_EMISSIVE: "emissive material",
}


@dataclass(frozen=True)
class ModelVariant:
    keyword: str
    path: Path
    patch_path: Path | None = None

    @property
    def label(self) -> str:
        return LABELS[self.keyword]

    def load_patch(self) -> ModelPatch | None:
        return ModelPatch.load(self.patch_path) if self.patch_path is not None else None


@dataclass(frozen=True)
class MaterialRef:
    label: str
    path: Path
    emissive: bool = False


@dataclass(frozen=True)
class Skin:
    name: str
    material: Path
    material_emissive: Path | None = None

    def materials(self) -> list[MaterialRef]:
        refs = [MaterialRef(f"skin '{self.name}' material", self.material)]
        if self.material_emissive is not None:
            refs.append(MaterialRef(f"skin '{self.name}' emissive material", self.material_emissive, emissive=True))
        return refs


@dataclass
class BuildingSource:
    root: Path
    building_ini: Path
    manifest: IniFile
    manifest_label: str
    manifest_root: Path
    models: list[ModelVariant]
    materials: list[MaterialRef]
    skins: list[Skin] = field(default_factory=list)
    manifest_path: Path | None = None
    stock_key: str | None = None

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def model(self) -> ModelVariant:
        return self.models[0]

    def variant(self, keyword: str) -> ModelVariant | None:
        for m in self.models:
            if m.keyword == keyword:
                return m
        return None

    @property
    def material(self) -> MaterialRef:
        return self.materials[0]

    @property
    def material_emissive(self) -> MaterialRef | None:
        return self.materials[1] if len(self.materials) > 1 else None

    def all_materials(self) -> list[MaterialRef]:
        refs = list(self.materials)
        for skin in self.skins:
            refs.extend(skin.materials())
        return refs


def _manifest_path(manifest: IniFile, keyword: str, root: Path, settings: Settings) -> Path | None:
    token = manifest.first(keyword)
    if token is None:
        return None
    return paths.resolve_prefixed(token.args[0], root, settings)


def _find_skins(directory: Path) -> list[Skin]:
    skins_dir = directory / paths.SKINS_DIR
    if not skins_dir.is_dir():
        return []
    skins = []
    for sub in sorted(p for p in skins_dir.iterdir() if p.is_dir()):
        material = sub / paths.SKIN_MATERIAL
        if not material.exists():
            logger.debug("Skipping %s: no %s", sub, paths.SKIN_MATERIAL)
            continue
        emissive = sub / paths.SKIN_MATERIAL_EMISSIVE
        skins.append(Skin(sub.name, material, emissive if emissive.exists() else None))
    return skins


def _read_reference(
    ref_path: Path, settings: Settings, stock: StockCache | None
) -> tuple[IniFile, str, Path, Path | None, str | None]:
    try:
        ref = paths.ManifestRef.parse(read_text(ref_path), ref_path, settings)
    except FileIOError as e:
        raise ReferenceResolutionError(f"Cannot read manifest reference: {e}") from e

    if ref.stock_key is not None:
        cache = stock if stock is not None else StockCache.from_settings(settings)
        try:
            manifest = cache.manifest(ref.stock_key)
        except FileIOError as e:
            raise ReferenceResolutionError(f"Cannot read stock building table: {e}") from e
        return manifest.copy(), f"~{ref.stock_key}", settings.path_stock, None, ref.stock_key

    assert ref.manifest is not None
    try:
        manifest = IniFile.load(RENDER, ref.manifest, settings.ini_encoding)
    except FileIOError as e:
        raise ReferenceResolutionError(f"Cannot read referenced manifest: {e}") from e
    return manifest, str(ref.manifest), ref.manifest.parent, ref.manifest, None


def load_building_source(directory: Path, settings: Settings, stock: StockCache | None = None) -> BuildingSource:
    """Resolve every asset path of the building source in ``directory``.

    Raises :class:`ReferenceResolutionError` when the manifest selection or
    reference is unusable and :class:`MissingFieldError` when the manifest lacks
    ``$MODEL`` or ``$MATERIAL``. Files are not required to exist here;
    validation reports missing ones.
    """
    render_src = directory / paths.RENDERCONFIG_SOURCE
    render_ref = directory / paths.RENDERCONFIG_REF
    has_src, has_ref = render_src.exists(), render_ref.exists()
    if not has_src and not has_ref:
        raise ReferenceResolutionError(
            f"{directory}: neither {paths.RENDERCONFIG_SOURCE} nor {paths.RENDERCONFIG_REF} found"
        )
    if has_src and has_ref:
        raise ReferenceResolutionError(
            f"{directory}: both {paths.RENDERCONFIG_SOURCE} and {paths.RENDERCONFIG_REF} found"
        )

    stock_key: str | None = None
    if has_src:
        manifest = IniFile.load(RENDER, render_src, settings.ini_encoding)
        label, root, manifest_path = str(render_src), directory, render_src
    else:
        manifest, label, root, manifest_path, stock_key = _read_reference(render_ref, settings, stock)

    models: list[ModelVariant] = []
    for keyword in rc.MODEL_KEYWORDS:
        path = _manifest_path(manifest, keyword, root, settings)
        if path is None:
            if keyword == rc.MODEL:
                raise MissingFieldError(keyword, label)
            continue
        patch = directory / PATCH_FILES[keyword]
        models.append(ModelVariant(keyword, path, patch if patch.exists() else None))

    materials: list[MaterialRef] = []
    for keyword in rc.MATERIAL_KEYWORDS:
        path = _manifest_path(manifest, keyword, root, settings)
        if path is None:
            if keyword == rc.MATERIAL:
                raise MissingFieldError(keyword, label)
            continue
        materials.append(MaterialRef(LABELS[keyword], path, emissive=keyword == rc.MATERIAL_EMISSIVE))

    source = BuildingSource(
        root=directory,
        building_ini=directory / paths.BUILDING_INI,
        manifest=manifest,
        manifest_label=label,
        manifest_root=root,
        models=models,
        materials=materials,
        skins=_find_skins(directory),
        manifest_path=manifest_path,
        stock_key=stock_key,
    )
    logger.debug("Loaded building source %s (%d models, %d skins)", directory, len(models), len(source.skins))
    return source
