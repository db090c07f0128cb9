"""Wavefront OBJ export."""

from __future__ import annotations

from wrsr_mt.nmf.mesh import Mesh
from wrsr_mt.nmf.transform import optimize


def to_obj(mesh: Mesh) -> str:
    """Render ``mesh`` as OBJ text; the input mesh is left untouched.

    Records are de-duplicated first, so each unique v/vt/vn line is written once
    and faces reference them with global 1-based ``v/vt/vn`` triples.
    """
    work = optimize(mesh.copy())
    lines = [f"# objects: {len(work.objects)} submaterials: {len(work.submaterials)}"]
    base_v = base_vt = base_vn = 1
    for obj in work.objects:
        lines.append(f"o {obj.name}")
        if obj.submaterial is not None:
            lines.append(f"usemtl {work.submaterials[obj.submaterial]}")
        lines.extend(f"v {x:.6f} {y:.6f} {z:.6f}" for x, y, z in obj.positions)
        lines.extend(f"vt {u:.6f} {v:.6f}" for u, v in obj.uvs)
        lines.extend(f"vn {x:.6f} {y:.6f} {z:.6f}" for x, y, z in obj.normals)
        for face in obj.faces:
            corners = (f"{int(p) + base_v}/{int(t) + base_vt}/{int(n) + base_vn}" for p, n, t in face)
            lines.append("f " + " ".join(corners))
        base_v += len(obj.positions)
        base_vt += len(obj.uvs)
        base_vn += len(obj.normals)
    return "\n".join(lines) + "\n"
