"""In-memory model: ordered objects and submaterial names."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

import numpy as np


def _empty(width: int) -> np.ndarray:
    return np.zeros((0, width), dtype=np.float32)


@dataclass
class NmfObject:
    """One named part of a model.

    Face corners index the position, normal and UV tables independently:
    ``faces`` has shape ``(m, 3, 3)`` where the last axis is ``(pos, nrm, uv)``.
    """

    name: str
    submaterial: int | None = None
    bbox: np.ndarray = field(default_factory=lambda: np.zeros((2, 3), dtype=np.float32))
    positions: np.ndarray = field(default_factory=lambda: _empty(3))
    normals: np.ndarray = field(default_factory=lambda: _empty(3))
    uvs: np.ndarray = field(default_factory=lambda: _empty(2))
    faces: np.ndarray = field(default_factory=lambda: np.zeros((0, 3, 3), dtype=np.uint32))

    @property
    def face_count(self) -> int:
        return int(self.faces.shape[0])

    def triangles(self) -> np.ndarray:
        """Per-face corner positions, shape ``(m, 3, 3)``."""
        return self.positions[self.faces[:, :, 0]]

    def update_bbox(self) -> None:
        if len(self.positions):
            self.bbox = np.stack([self.positions.min(axis=0), self.positions.max(axis=0)]).astype(np.float32)


@dataclass
class Mesh:
    submaterials: list[str] = field(default_factory=list)
    objects: list[NmfObject] = field(default_factory=list)
    version: int = 1

    def object_names(self) -> list[str]:
        return [o.name for o in self.objects]

    def find(self, name: str) -> NmfObject | None:
        for obj in self.objects:
            if obj.name == name:
                return obj
        return None

    def copy(self) -> Mesh:
        return copy.deepcopy(self)

    def summary(self) -> dict[str, int]:
        return {
            "objects": len(self.objects),
            "submaterials": len(self.submaterials),
            "positions": sum(len(o.positions) for o in self.objects),
            "normals": sum(len(o.normals) for o in self.objects),
            "uvs": sum(len(o.uvs) for o in self.objects),
            "faces": sum(o.face_count for o in self.objects),
        }
