"""Shared fixtures and helpers for tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import numpy as np
import pytest

from wrsr_mt.nmf import Mesh, NmfObject, encode
from wrsr_mt.settings import Settings

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def make_object(name: str, submaterial: int | None = None, offset: float = 0.0) -> NmfObject:
    """A two-triangle object; normals 0 and 1 are duplicates."""
    positions = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=np.float32) + np.float32(offset)
    normals = np.array([[0, 0, 1], [0, 0, 1], [1, 0, 0]], dtype=np.float32)
    uvs = np.array([[0, 0], [1, 0], [0, 1]], dtype=np.float32)
    faces = np.array(
        [
            [[0, 0, 0], [1, 1, 1], [2, 2, 2]],
            [[0, 2, 0], [2, 0, 2], [3, 1, 1]],
        ],
        dtype=np.uint32,
    )
    obj = NmfObject(name=name, submaterial=submaterial, positions=positions, normals=normals, uvs=uvs, faces=faces)
    obj.update_bbox()
    return obj


@pytest.fixture
def make_mesh() -> Callable[..., Mesh]:
    def _make(
        objects: Sequence[tuple[str, int | None]] = (("node_A", 0), ("wall_1", 0), ("roof_1", 1)),
        submaterials: Sequence[str] = ("wall", "roof"),
    ) -> Mesh:
        return Mesh(
            submaterials=list(submaterials),
            objects=[make_object(name, sub, offset=float(i)) for i, (name, sub) in enumerate(objects)],
        )

    return _make


# ---------------------------------------------------------------------------
# Building sources on disk
# ---------------------------------------------------------------------------

HOUSE_BUILDING_INI = (
    "$NAME 1\r\n"
    "$TYPE_LIVING\r\n"
    "-- station in front of the door\r\n"
    "$VEHICLE_STATION\r\n"
    "1.0 0.0 2.5\r\n"
    "3.0 0.0 2.5\r\n"
    "$STORAGE_LIVING_AUTO node_A\r\n"
    "$COST_WORK_BUILDING_KEYWORD wall_\r\n"
    "$RESOURCE_VISUALIZATION 0 1 2\r\n"
    "END\r\n"
)

HOUSE_MATERIAL = "$SUBMATERIAL wall\r\n$TEXTURE_MTL 0 wall.dds\r\n$SUBMATERIAL roof\r\n$TEXTURE_MTL 0 roof.dds\r\n"

HOUSE_MANIFEST = "$MODEL model.nmf\r\n$MATERIAL material.mtl\r\n"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(path_stock=tmp_path / "stock", path_workshop=tmp_path / "workshop")


@pytest.fixture
def make_house(make_mesh: Callable[..., Mesh]) -> Callable[..., Path]:
    """Write a complete building source directory and return it."""

    def _make(
        directory: Path,
        building_ini: str = HOUSE_BUILDING_INI,
        material: str = HOUSE_MATERIAL,
        manifest: str | None = HOUSE_MANIFEST,
        mesh: Mesh | None = None,
        patch: str | None = None,
    ) -> Path:
        directory.mkdir(parents=True)
        (directory / "building.ini").write_bytes(building_ini.encode())
        if manifest is not None:
            (directory / "renderconfig.source").write_bytes(manifest.encode())
        (directory / "model.nmf").write_bytes(encode(mesh if mesh is not None else make_mesh()))
        (directory / "material.mtl").write_bytes(material.encode())
        (directory / "wall.dds").write_bytes(b"DDS wall")
        (directory / "roof.dds").write_bytes(b"DDS roof")
        if patch is not None:
            (directory / "model.patch").write_bytes(patch.encode())
        return directory

    return _make


@pytest.fixture
def house(tmp_path: Path, make_house: Callable[..., Path]) -> Path:
    return make_house(tmp_path / "src" / "house")
