"""Tests for cross-validation of building sources."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from wrsr_mt.core.building import load_building_source
from wrsr_mt.core.validate import (
    RULE_MATERIAL,
    RULE_MISSING_FILE,
    RULE_NODE,
    RULE_TEXTURE,
    check_material_completeness,
    check_node_references,
    validate_building,
)
from wrsr_mt.errors import PatchError
from wrsr_mt.ini import BUILDING, MATERIAL, IniFile
from wrsr_mt.nmf import Mesh
from wrsr_mt.settings import Settings

WALL_ONLY_MATERIAL = "$SUBMATERIAL wall\r\n$TEXTURE_MTL 0 wall.dds\r\n"


def test_complete_building_is_valid(house: Path, settings: Settings) -> None:
    report = validate_building(load_building_source(house, settings), settings)
    assert report.ok, report.render()
    assert report.render().endswith(": OK")


def test_node_references_exact_and_prefix(make_mesh: Callable[..., Mesh]) -> None:
    building = IniFile.parse(
        BUILDING,
        "$STORAGE_LIVING_AUTO node_A\r\n"
        "$COST_WORK_BUILDING_KEYWORD wall_\r\n"
        "$COST_WORK_BUILDING_NODE roof\r\n"
        "$COST_WORK_BUILDING_KEYWORD chimney\r\n",
    )
    violations = check_node_references(building, make_mesh().objects)

    assert [v.rule for v in violations] == [RULE_NODE, RULE_NODE]
    assert violations[0].render() == (
        "Error in building.ini: invalid token '$COST_WORK_BUILDING_NODE roof', "
        "matching node was not found in the model nmf"
    )
    assert "chimney" in violations[1].message


def test_material_completeness_names_the_missing_submaterial() -> None:
    material = IniFile.parse(MATERIAL, WALL_ONLY_MATERIAL)
    violations = check_material_completeness(material, ["wall", "roof"], "material")

    assert len(violations) == 1
    assert violations[0].rule == RULE_MATERIAL
    assert violations[0].render() == (
        "Error in material: NMF uses submaterial 'roof', but the MTL file has no corresponding token"
    )


def test_missing_submaterial_is_reported(tmp_path: Path, make_house: Callable[..., Path], settings: Settings) -> None:
    directory = make_house(tmp_path / "house", material=WALL_ONLY_MATERIAL)
    report = validate_building(load_building_source(directory, settings), settings)

    assert [v.rule for v in report.violations] == [RULE_MATERIAL]
    assert "'roof'" in report.violations[0].message


def test_patch_can_make_a_submaterial_unnecessary(
    tmp_path: Path, make_house: Callable[..., Path], settings: Settings
) -> None:
    directory = make_house(tmp_path / "house", material=WALL_ONLY_MATERIAL, patch="REMOVE\r\nroof_1\r\n")
    report = validate_building(load_building_source(directory, settings), settings)
    assert report.ok, report.render()


def test_patch_removing_a_referenced_node_breaks_the_reference(
    tmp_path: Path, make_house: Callable[..., Path], settings: Settings
) -> None:
    directory = make_house(tmp_path / "house", patch="KEEP\r\nwall_1\r\nroof_1\r\n")
    report = validate_building(load_building_source(directory, settings), settings)

    assert [v.rule for v in report.violations] == [RULE_NODE]
    assert "node_A" in report.violations[0].message


def test_unappliable_patch_propagates(tmp_path: Path, make_house: Callable[..., Path], settings: Settings) -> None:
    directory = make_house(tmp_path / "house", patch="KEEP\r\nghost\r\n")
    with pytest.raises(PatchError):
        validate_building(load_building_source(directory, settings), settings)


def test_missing_texture_and_model_are_collected(house: Path, settings: Settings) -> None:
    (house / "roof.dds").unlink()
    (house / "model.nmf").unlink()
    report = validate_building(load_building_source(house, settings), settings)

    rules = sorted(v.rule for v in report.violations)
    assert rules == sorted([RULE_MISSING_FILE, RULE_TEXTURE])
    assert report.render().splitlines()[0].endswith("2 error(s)")


def test_broken_building_ini_is_reported_per_directive(
    tmp_path: Path, make_house: Callable[..., Path], settings: Settings
) -> None:
    directory = make_house(tmp_path / "house", building_ini="$NAME one\r\n$WORKERS_NEEDED\r\n")
    report = validate_building(load_building_source(directory, settings), settings)

    assert len(report.violations) == 2
    assert all(v.file == "building.ini" for v in report.violations)


def test_skin_materials_are_checked(house: Path, settings: Settings) -> None:
    skin = house / "skins" / "red"
    skin.mkdir(parents=True)
    (skin / "material.mtl").write_text(WALL_ONLY_MATERIAL, newline="")
    (skin / "wall.dds").write_bytes(b"DDS")

    report = validate_building(load_building_source(house, settings), settings)

    assert [v.file for v in report.violations] == ["skin 'red' material"]
