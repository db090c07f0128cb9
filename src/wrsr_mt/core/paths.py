"""Path conventions of building sources and render manifests."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from wrsr_mt.errors import ReferenceResolutionError
from wrsr_mt.settings import Settings

BUILDING_INI = "building.ini"
RENDERCONFIG_INI = "renderconfig.ini"
RENDERCONFIG_SOURCE = "renderconfig.source"
RENDERCONFIG_REF = "renderconfig.ref"
SKINS_DIR = "skins"
SKIN_MATERIAL = "material.mtl"
SKIN_MATERIAL_EMISSIVE = "material_e.mtl"

STOCK_PREFIX = "~"
WORKSHOP_PREFIX = "#"

# workshop reference, stock key, or a directory relative to the ref file
_REF_RX = re.compile(r"^(?:#(\d{10}/\S+)|~(\S+)|([^\r\n]+))")


def _normalize(tail: str) -> str:
    return tail.replace("\\", "/")


def resolve_prefixed(tail: str, local_root: Path, settings: Settings) -> Path:
    """``~x`` resolves under the stock root, ``#x`` under the workshop root, anything else under ``local_root``."""
    if not tail:
        raise ReferenceResolutionError("empty path in render manifest")
    if tail.startswith(STOCK_PREFIX):
        return settings.path_stock / _normalize(tail[1:])
    if tail.startswith(WORKSHOP_PREFIX):
        return settings.path_workshop / _normalize(tail[1:])
    return local_root / _normalize(tail)


def express_path(target: Path, local_root: Path, settings: Settings) -> str:
    """Inverse of :func:`resolve_prefixed`: the shortest manifest spelling of ``target`` seen from ``local_root``."""
    for prefix, root in ((STOCK_PREFIX, settings.path_stock), (WORKSHOP_PREFIX, settings.path_workshop)):
        try:
            return prefix + target.relative_to(root).as_posix()
        except ValueError:
            continue
    return Path(os.path.relpath(target, local_root)).as_posix()


@dataclass(frozen=True)
class ManifestRef:
    """Parsed contents of a ``renderconfig.ref`` file."""

    stock_key: str | None = None
    manifest: Path | None = None

    @classmethod
    def parse(cls, text: str, ref_path: Path, settings: Settings) -> ManifestRef:
        m = _REF_RX.match(text.strip())
        if m is None:
            raise ReferenceResolutionError(f"Cannot parse manifest reference in {ref_path}")
        workshop, stock, relative = m.groups()
        if stock is not None:
            return cls(stock_key=stock)
        if workshop is not None:
            return cls(manifest=settings.path_workshop / workshop / RENDERCONFIG_INI)
        return cls(manifest=ref_path.parent / _normalize(relative.strip()) / RENDERCONFIG_INI)
