"""Cross-validation between a building's configuration files and its models.

Every check collects into one :class:`ValidationReport`; nothing here stops at
the first problem. Patch errors are the exception: a patch that cannot be
applied makes the model's live object set undefined, so it propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from wrsr_mt.core.building import BuildingSource, ModelVariant
from wrsr_mt.errors import FileIOError, IniParseError, NmfFormatError
from wrsr_mt.fileio import read_bytes
from wrsr_mt.ini import BUILDING, MATERIAL, IniFile, NodeMatch
from wrsr_mt.ini import material as mtl
from wrsr_mt.ini import renderconfig as rc
from wrsr_mt.models import ValidationReport, Violation
from wrsr_mt.nmf import Mesh, NmfObject, apply_patch, decode, used_submaterials
from wrsr_mt.settings import Settings

logger = logging.getLogger(__name__)

RULE_MISSING_FILE = "missing-file"
RULE_PARSE = "parse"
RULE_MODEL = "model"
RULE_MATERIAL = "material-completeness"
RULE_NODE = "node-reference"
RULE_TEXTURE = "texture"


def check_material_completeness(material: IniFile, used: Iterable[str], label: str) -> list[Violation]:
    """Every used submaterial needs a ``$SUBMATERIAL`` of the same name in ``material``."""
    declared = mtl.submaterial_names(material.tokens())
    return [
        Violation(
            file=label,
            rule=RULE_MATERIAL,
            message=f"NMF uses submaterial '{name}', but the MTL file has no corresponding token",
        )
        for name in used
        if name not in declared
    ]


def _node_matches(name: str, objects: Sequence[NmfObject], mode: NodeMatch) -> bool:
    if mode is NodeMatch.PREFIX:
        return any(o.name.startswith(name) for o in objects)
    return any(o.name == name for o in objects)


def check_node_references(
    building: IniFile, objects: Sequence[NmfObject], label: str = "building.ini"
) -> list[Violation]:
    """Node-referencing directives must name an existing model object.

    Exact directives need an object of exactly that name; keyword directives
    need one whose name starts with it. Violations quote the directive as it
    was written in the source.
    """
    violations = []
    for entry in building.entries:
        mode = entry.token.directive.node_ref
        if mode is None:
            continue
        if not _node_matches(entry.token.args[0], objects, mode):
            violations.append(
                Violation(
                    file=label,
                    rule=RULE_NODE,
                    message=f"invalid token '{entry.text.strip()}', matching node was not found in the model nmf",
                )
            )
    return violations


def _parse_failures(err: IniParseError, label: str) -> list[Violation]:
    return [Violation(file=label, rule=RULE_PARSE, message=f"{f.message} in [{f.chunk}]") for f in err.failures]


@dataclass
class LoadedModel:
    variant: ModelVariant
    mesh: Mesh
    live: list[NmfObject]

    @property
    def used(self) -> list[str]:
        return used_submaterials(self.mesh, self.live)


def _load_model(variant: ModelVariant, report: ValidationReport) -> LoadedModel | None:
    try:
        data = read_bytes(variant.path)
        mesh, rest = decode(data)
    except FileIOError as e:
        report.add(variant.label, RULE_MISSING_FILE, str(e))
        return None
    except NmfFormatError as e:
        report.add(variant.label, RULE_MODEL, f"Cannot load model nmf {variant.path}: {e}")
        return None
    if rest:
        report.add(variant.label, RULE_MODEL, f"{variant.path} has {len(rest)} unread trailing bytes")
    return LoadedModel(variant, mesh, apply_patch(mesh, variant.load_patch()))


def _load_ini(path: Path, label: str, report: ValidationReport, settings: Settings, material: bool) -> IniFile | None:
    try:
        return IniFile.load(MATERIAL if material else BUILDING, path, settings.ini_encoding)
    except FileIOError as e:
        report.add(label, RULE_MISSING_FILE, str(e))
    except IniParseError as e:
        report.violations.extend(_parse_failures(e, label))
    return None


def _check_textures(material: IniFile, material_path: Path, label: str, settings: Settings) -> list[Violation]:
    missing = []
    seen: set[Path] = set()
    for token in material:
        if not mtl.is_texture(token):
            continue
        path = mtl.texture_path(token, material_path, settings.path_stock)
        if path in seen:
            continue
        seen.add(path)
        if not path.exists():
            missing.append(Violation(file=label, rule=RULE_TEXTURE, message=f"texture does not exist: {path}"))
    return missing


def validate_building(source: BuildingSource, settings: Settings) -> ValidationReport:
    report = ValidationReport(building=str(source.root))

    models = [m for m in (_load_model(v, report) for v in source.models) if m is not None]
    by_keyword = {m.variant.keyword: m for m in models}
    primary = by_keyword.get(rc.MODEL)

    building = _load_ini(source.building_ini, "building.ini", report, settings, material=False)
    if building is not None and primary is not None:
        report.violations.extend(check_node_references(building, primary.live))

    # the main material covers the regular models, the emissive material the emissive one
    used_main = sorted({name for m in models if m.variant.keyword != rc.MODEL_EMISSIVE for name in m.used})
    emissive_model = by_keyword.get(rc.MODEL_EMISSIVE)
    used_emissive = emissive_model.used if emissive_model is not None else used_main

    for ref in source.all_materials():
        material = _load_ini(ref.path, ref.label, report, settings, material=True)
        if material is None:
            continue
        report.violations.extend(_check_textures(material, ref.path, ref.label, settings))
        if not models:
            continue
        used = used_emissive if ref.emissive else used_main
        report.violations.extend(check_material_completeness(material, used, ref.label))

    if report.ok:
        logger.debug("%s: OK", source.root)
    else:
        logger.debug("%s: %d violation(s)", source.root, len(report.violations))
    return report
