"""Binary NMF model codec.

Little-endian layout::

    header      4s magic ``NMF\\0``, u32 version, u32 submaterial count, u32 object count
    submaterial 64-byte NUL-padded name, repeated
    object      64-byte NUL-padded name
                i32 submaterial index (-1: none)
                6 x f32 bounding box (min xyz, max xyz)
                u32 position, normal, uv and face counts
                f32 positions (n x 3), normals (n x 3), uvs (n x 2)
                u32 faces (m x 3 corners x (pos, nrm, uv))
"""

from __future__ import annotations

import struct

import numpy as np

from wrsr_mt.errors import NmfFormatError
from wrsr_mt.nmf.mesh import Mesh, NmfObject

MAGIC = b"NMF\x00"
NAME_SIZE = 64

_HEADER = struct.Struct("<4sIII")
_OBJECT = struct.Struct("<i6fIIII")


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    def take(self, size: int, what: str) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            left = len(self.data) - self.offset
            raise NmfFormatError(f"truncated {what}: need {size} bytes, {left} left", self.offset)
        chunk = self.data[self.offset : end]
        self.offset = end
        return chunk

    def unpack(self, st: struct.Struct, what: str) -> tuple:
        return st.unpack(self.take(st.size, what))

    def name(self, what: str) -> str:
        raw = self.take(NAME_SIZE, what)
        return raw.split(b"\x00", 1)[0].decode("utf-8", "surrogateescape")

    def array(self, dtype: type, count: int, width: int, what: str) -> np.ndarray:
        if count == 0:
            return np.zeros((0, width), dtype=dtype)
        itemsize = np.dtype(dtype).itemsize
        raw = self.take(count * width * itemsize, what)
        le = np.dtype(dtype).newbyteorder("<")
        return np.frombuffer(raw, dtype=le, count=count * width).reshape((-1, width)).astype(dtype)


def _encode_name(name: str) -> bytes:
    raw = name.encode("utf-8", "surrogateescape")
    if len(raw) >= NAME_SIZE:
        raise NmfFormatError(f"name '{name}' does not fit into {NAME_SIZE - 1} bytes")
    return raw.ljust(NAME_SIZE, b"\x00")


def _decode_object(r: _Reader, submaterial_count: int) -> NmfObject:
    start = r.offset
    name = r.name("object name")
    sub, *rest = r.unpack(_OBJECT, f"object '{name}' header")
    bbox = np.array(rest[:6], dtype=np.float32).reshape(2, 3)
    n_pos, n_nrm, n_uv, n_faces = rest[6:]

    if sub < -1 or sub >= submaterial_count:
        raise NmfFormatError(f"object '{name}' references submaterial {sub} of {submaterial_count}", start)

    positions = r.array(np.float32, n_pos, 3, f"object '{name}' positions")
    normals = r.array(np.float32, n_nrm, 3, f"object '{name}' normals")
    uvs = r.array(np.float32, n_uv, 2, f"object '{name}' uvs")
    faces = r.array(np.uint32, n_faces, 9, f"object '{name}' faces").reshape((-1, 3, 3))

    for axis, (limit, label) in enumerate(((n_pos, "position"), (n_nrm, "normal"), (n_uv, "uv"))):
        if n_faces and int(faces[:, :, axis].max()) >= limit:
            raise NmfFormatError(f"object '{name}' has a face {label} index out of range ({limit})", start)

    return NmfObject(
        name=name,
        submaterial=None if sub == -1 else sub,
        bbox=bbox,
        positions=positions,
        normals=normals,
        uvs=uvs,
        faces=faces,
    )


def decode(data: bytes) -> tuple[Mesh, bytes]:
    """Decode one model from the start of ``data``; returns the mesh and any unread trailing bytes."""
    r = _Reader(data)
    magic, version, n_sub, n_obj = r.unpack(_HEADER, "header")
    if magic != MAGIC:
        raise NmfFormatError(f"bad magic {magic!r}", 0)
    submaterials = [r.name("submaterial name") for _ in range(n_sub)]
    objects = [_decode_object(r, n_sub) for _ in range(n_obj)]
    return Mesh(submaterials=submaterials, objects=objects, version=version), data[r.offset :]


def encode(mesh: Mesh) -> bytes:
    out = bytearray()
    out += _HEADER.pack(MAGIC, mesh.version, len(mesh.submaterials), len(mesh.objects))
    for name in mesh.submaterials:
        out += _encode_name(name)
    for obj in mesh.objects:
        sub = -1 if obj.submaterial is None else obj.submaterial
        if sub >= len(mesh.submaterials):
            raise NmfFormatError(f"object '{obj.name}' references submaterial {sub} of {len(mesh.submaterials)}")
        out += _encode_name(obj.name)
        out += _OBJECT.pack(
            sub,
            *(float(v) for v in np.asarray(obj.bbox, dtype=np.float32).reshape(6)),
            len(obj.positions),
            len(obj.normals),
            len(obj.uvs),
            obj.face_count,
        )
        out += np.ascontiguousarray(obj.positions, dtype="<f4").tobytes(order="C")
        out += np.ascontiguousarray(obj.normals, dtype="<f4").tobytes(order="C")
        out += np.ascontiguousarray(obj.uvs, dtype="<f4").tobytes(order="C")
        out += np.ascontiguousarray(obj.faces, dtype="<u4").tobytes(order="C")
    return bytes(out)
