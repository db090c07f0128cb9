from wrsr_mt.nmf.codec import decode, encode
from wrsr_mt.nmf.mesh import Mesh, NmfObject
from wrsr_mt.nmf.obj import to_obj
from wrsr_mt.nmf.patch import ModelPatch, PatchKind, apply_patch, compute_usage, patch_mesh, used_submaterials
from wrsr_mt.nmf.transform import mirror_z, optimize, scale

__all__ = [
    "Mesh",
    "ModelPatch",
    "NmfObject",
    "PatchKind",
    "apply_patch",
    "compute_usage",
    "decode",
    "encode",
    "mirror_z",
    "optimize",
    "patch_mesh",
    "scale",
    "to_obj",
    "used_submaterials",
]
