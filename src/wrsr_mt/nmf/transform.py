"""In-place geometry transforms. Each returns the mesh it was given so calls chain."""

from __future__ import annotations

import numpy as np

from wrsr_mt.nmf.mesh import Mesh


def scale(mesh: Mesh, factor: float) -> Mesh:
    """Multiply positions and bounding boxes by ``factor``; normals and UVs are left untouched."""
    for obj in mesh.objects:
        obj.positions = (obj.positions.astype(np.float64) * factor).astype(np.float32)
        bbox = obj.bbox.astype(np.float64) * factor
        obj.bbox = np.stack([bbox.min(axis=0), bbox.max(axis=0)]).astype(np.float32)
    return mesh


def mirror_z(mesh: Mesh) -> Mesh:
    """Mirror across the XY plane.

    Negating one axis turns the handedness around, so the face winding is
    reversed to keep the triangles facing outwards.
    """
    for obj in mesh.objects:
        obj.positions = obj.positions.copy()
        obj.positions[:, 2] = -obj.positions[:, 2]
        obj.normals = obj.normals.copy()
        obj.normals[:, 2] = -obj.normals[:, 2]
        obj.faces = np.ascontiguousarray(obj.faces[:, ::-1, :])
        bbox = obj.bbox.copy()
        bbox[0, 2], bbox[1, 2] = -obj.bbox[1, 2], -obj.bbox[0, 2]
        obj.bbox = bbox
    return mesh


def _dedup(rows: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Unique rows in first-occurrence order and the old -> new index map."""
    if len(rows) == 0:
        return rows, np.zeros(0, dtype=np.uint32)
    _, first, inverse = np.unique(rows, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)
    order = np.argsort(first)
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    return rows[first[order]], rank[inverse].astype(np.uint32)


def optimize(mesh: Mesh) -> Mesh:
    """Collapse identical position, normal and UV records per object and re-index the faces."""
    for obj in mesh.objects:
        faces = obj.faces.copy()
        obj.positions, remap = _dedup(obj.positions)
        if faces.size:
            faces[:, :, 0] = remap[faces[:, :, 0]]
        obj.normals, remap = _dedup(obj.normals)
        if faces.size:
            faces[:, :, 1] = remap[faces[:, :, 1]]
        obj.uvs, remap = _dedup(obj.uvs)
        if faces.size:
            faces[:, :, 2] = remap[faces[:, :, 2]]
        obj.faces = faces
    return mesh
