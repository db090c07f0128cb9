"""Model patches: named Keep/Remove filters deciding which objects are live."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass
from pathlib import Path

from wrsr_mt import fileio
from wrsr_mt.errors import ObjectNotFoundError, PatchError, RemoveCountMismatchError
from wrsr_mt.nmf.mesh import Mesh, NmfObject


class PatchKind(enum.Enum):
    KEEP = "KEEP"
    REMOVE = "REMOVE"


@dataclass(frozen=True)
class ModelPatch:
    kind: PatchKind
    names: tuple[str, ...]

    @classmethod
    def keep(cls, *names: str) -> ModelPatch:
        return cls(PatchKind.KEEP, names)

    @classmethod
    def remove(cls, *names: str) -> ModelPatch:
        return cls(PatchKind.REMOVE, names)

    @classmethod
    def parse(cls, text: str) -> ModelPatch:
        """Parse a patch file: a ``KEEP`` or ``REMOVE`` header line, then one object name per line."""
        lines = [line.strip() for line in text.splitlines()]
        lines = [line for line in lines if line]
        if not lines:
            raise PatchError("ModelPatch error: empty patch")
        header, *names = lines
        try:
            kind = PatchKind(header)
        except ValueError:
            raise PatchError(f"ModelPatch error: unknown patch type '{header}'") from None
        return cls(kind, tuple(names))

    @classmethod
    def load(cls, path: Path) -> ModelPatch:
        try:
            return cls.parse(fileio.read_text(path))
        except PatchError as e:
            raise PatchError(f"{e} ({path})") from e


def apply_patch(mesh: Mesh, patch: ModelPatch | None) -> list[NmfObject]:
    """Objects that stay live under ``patch``, in mesh order."""
    if patch is None:
        return list(mesh.objects)

    if patch.kind is PatchKind.KEEP:
        live: list[NmfObject] = []
        for name in patch.names:
            obj = mesh.find(name)
            if obj is None:
                raise ObjectNotFoundError(name)
            live.append(obj)
        keep = {id(o) for o in live}
        return [o for o in mesh.objects if id(o) in keep]

    removed = set(patch.names)
    live = [o for o in mesh.objects if o.name not in removed]
    removed_count = len(mesh.objects) - len(live)
    if removed_count != len(patch.names):
        raise RemoveCountMismatchError(len(patch.names), removed_count)
    return live


def compute_usage(mesh: Mesh, live: list[NmfObject]) -> dict[int, bool]:
    """``{submaterial index: used by at least one live object}`` for every submaterial."""
    used = {o.submaterial for o in live if o.submaterial is not None}
    return {i: i in used for i in range(len(mesh.submaterials))}


def used_submaterials(mesh: Mesh, live: list[NmfObject]) -> list[str]:
    return [mesh.submaterials[i] for i, used in compute_usage(mesh, live).items() if used]


def patch_mesh(mesh: Mesh, patch: ModelPatch | None) -> Mesh:
    """Copy of ``mesh`` holding only the live objects; the submaterial table is kept whole."""
    live = {id(o) for o in apply_patch(mesh, patch)}
    objects = [copy.deepcopy(o) for o in mesh.objects if id(o) in live]
    return Mesh(submaterials=list(mesh.submaterials), objects=objects, version=mesh.version)
