"""Tests for the binary NMF codec."""

from __future__ import annotations

import struct
from collections.abc import Callable

import numpy as np
import pytest

from wrsr_mt.errors import NmfFormatError
from wrsr_mt.nmf import Mesh, decode, encode
from wrsr_mt.nmf.codec import MAGIC, NAME_SIZE


def test_decode_restores_what_encode_wrote(make_mesh: Callable[..., Mesh]) -> None:
    mesh = make_mesh()
    data = encode(mesh)
    decoded, rest = decode(data)

    assert rest == b""
    assert decoded.submaterials == ["wall", "roof"]
    assert decoded.object_names() == ["node_A", "wall_1", "roof_1"]
    for got, want in zip(decoded.objects, mesh.objects):
        assert got.submaterial == want.submaterial
        np.testing.assert_array_equal(got.bbox, want.bbox)
        np.testing.assert_array_equal(got.positions, want.positions)
        np.testing.assert_array_equal(got.normals, want.normals)
        np.testing.assert_array_equal(got.uvs, want.uvs)
        np.testing.assert_array_equal(got.faces, want.faces)
    assert encode(decoded) == data


def test_header_layout(make_mesh: Callable[..., Mesh]) -> None:
    data = encode(make_mesh())
    magic, version, n_sub, n_obj = struct.unpack_from("<4sIII", data)
    assert (magic, version, n_sub, n_obj) == (MAGIC, 1, 2, 3)
    assert data[16 : 16 + NAME_SIZE].rstrip(b"\x00") == b"wall"


def test_object_without_submaterial(make_mesh: Callable[..., Mesh]) -> None:
    decoded, _ = decode(encode(make_mesh([("helper", None)])))
    assert decoded.objects[0].submaterial is None


def test_trailing_bytes_are_returned(make_mesh: Callable[..., Mesh]) -> None:
    _, rest = decode(encode(make_mesh()) + b"tail")
    assert rest == b"tail"


def test_truncated_data_is_rejected(make_mesh: Callable[..., Mesh]) -> None:
    data = encode(make_mesh())
    with pytest.raises(NmfFormatError, match="truncated"):
        decode(data[:-1])


def test_bad_magic_is_rejected(make_mesh: Callable[..., Mesh]) -> None:
    data = encode(make_mesh())
    with pytest.raises(NmfFormatError, match="bad magic"):
        decode(b"XXXX" + data[4:])


def test_face_index_out_of_range_is_rejected(make_mesh: Callable[..., Mesh]) -> None:
    mesh = make_mesh([("node_A", 0)])
    mesh.objects[0].faces[0, 0, 0] = 99
    with pytest.raises(NmfFormatError, match="position index out of range"):
        decode(encode(mesh))


def test_submaterial_index_out_of_range_is_rejected(make_mesh: Callable[..., Mesh]) -> None:
    data = bytearray(encode(make_mesh([("node_A", 0)], submaterials=["wall"])))
    # object header follows the 16-byte header, one submaterial name and the object name
    struct.pack_into("<i", data, 16 + 2 * NAME_SIZE, 5)
    with pytest.raises(NmfFormatError, match="submaterial 5"):
        decode(bytes(data))


def test_overlong_name_cannot_be_encoded(make_mesh: Callable[..., Mesh]) -> None:
    with pytest.raises(NmfFormatError, match="does not fit"):
        encode(make_mesh([("x" * NAME_SIZE, 0)]))
