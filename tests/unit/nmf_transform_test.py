"""Tests for scale, mirror, optimize and OBJ export."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from wrsr_mt.nmf import Mesh, mirror_z, optimize, scale, to_obj


def test_scale_composes_and_leaves_normals_untouched(make_mesh: Callable[..., Mesh]) -> None:
    original = make_mesh()
    mesh = scale(scale(original.copy(), 2.0), 0.25)
    direct = scale(original.copy(), 0.5)

    for got, want, orig in zip(mesh.objects, direct.objects, original.objects):
        np.testing.assert_allclose(got.positions, want.positions, rtol=1e-6)
        np.testing.assert_allclose(got.bbox, want.bbox, rtol=1e-6)
        np.testing.assert_array_equal(got.normals, orig.normals)
        np.testing.assert_array_equal(got.uvs, orig.uvs)
        np.testing.assert_array_equal(got.faces, orig.faces)


def test_negative_scale_keeps_bbox_ordered(make_mesh: Callable[..., Mesh]) -> None:
    mesh = scale(make_mesh([("node_A", 0)]), -1.0)
    bbox = mesh.objects[0].bbox
    assert (bbox[0] <= bbox[1]).all()


def test_mirror_twice_is_identity(make_mesh: Callable[..., Mesh]) -> None:
    original = make_mesh()
    mesh = mirror_z(mirror_z(original.copy()))
    for got, want in zip(mesh.objects, original.objects):
        np.testing.assert_array_equal(got.positions, want.positions)
        np.testing.assert_array_equal(got.normals, want.normals)
        np.testing.assert_array_equal(got.faces, want.faces)
        np.testing.assert_array_equal(got.bbox, want.bbox)


def test_mirror_flips_z_and_winding(make_mesh: Callable[..., Mesh]) -> None:
    original = make_mesh([("node_A", 0)])
    mesh = mirror_z(original.copy())
    got, want = mesh.objects[0], original.objects[0]

    np.testing.assert_array_equal(got.positions[:, 2], -want.positions[:, 2])
    np.testing.assert_array_equal(got.positions[:, :2], want.positions[:, :2])
    np.testing.assert_array_equal(got.faces, want.faces[:, ::-1, :])
    assert got.bbox[0, 2] == -want.bbox[1, 2]
    assert got.bbox[1, 2] == -want.bbox[0, 2]

    # the geometric face normal must follow the mirrored vertex normals
    tri = got.triangles()[0]
    face_normal = np.cross(tri[1] - tri[0], tri[2] - tri[0])
    orig_tri = want.triangles()[0]
    orig_normal = np.cross(orig_tri[1] - orig_tri[0], orig_tri[2] - orig_tri[0])
    np.testing.assert_allclose(face_normal, orig_normal * np.array([1, 1, -1]))


def test_optimize_collapses_duplicates_without_changing_triangles(make_mesh: Callable[..., Mesh]) -> None:
    original = make_mesh([("node_A", 0)])
    mesh = optimize(original.copy())
    got, want = mesh.objects[0], original.objects[0]

    assert len(got.normals) == 2
    assert len(got.positions) <= len(want.positions)
    assert len(got.uvs) <= len(want.uvs)
    np.testing.assert_array_equal(got.triangles(), want.triangles())
    np.testing.assert_array_equal(got.normals[got.faces[:, :, 1]], want.normals[want.faces[:, :, 1]])
    np.testing.assert_array_equal(got.uvs[got.faces[:, :, 2]], want.uvs[want.faces[:, :, 2]])


def test_optimize_is_idempotent(make_mesh: Callable[..., Mesh]) -> None:
    once = optimize(make_mesh())
    twice = optimize(once.copy())
    for a, b in zip(once.objects, twice.objects):
        np.testing.assert_array_equal(a.normals, b.normals)
        np.testing.assert_array_equal(a.faces, b.faces)


def test_obj_export(make_mesh: Callable[..., Mesh]) -> None:
    mesh = make_mesh([("node_A", 0), ("roof_1", 1)])
    lines = to_obj(mesh).splitlines()

    assert "o node_A" in lines
    assert "usemtl roof" in lines
    assert "v 0.000000 0.000000 0.000000" in lines
    assert sum(1 for line in lines if line.startswith("vn ")) == 4
    faces = [line for line in lines if line.startswith("f ")]
    assert faces[0] == "f 1/1/1 2/2/1 3/3/2"
    # second object: four positions, three uvs and two normals precede it
    assert faces[2] == "f 5/4/3 6/5/3 7/6/4"
    # export works on a copy
    assert len(mesh.objects[0].normals) == 3
