"""Tests for the trimesh surface adapter."""
import numpy as np
import pytest
import trimesh

from dropcutter.geometry_primitives import Triangle
from dropcutter.surface import load_surface, triangles_from_mesh


class TestTrianglesFromMesh:

    def test_one_triangle_per_face(self, box_mesh):
        triangles = triangles_from_mesh(box_mesh)
        assert len(triangles) == len(box_mesh.faces) == 12
        assert all(isinstance(t, Triangle) for t in triangles)

    def test_vertices_and_normals_match_mesh(self, box_mesh):
        triangles = triangles_from_mesh(box_mesh)
        for t, face, normal in zip(triangles, box_mesh.faces, box_mesh.face_normals):
            for p, vi in zip(t.p, face):
                np.testing.assert_allclose(p.as_array(), box_mesh.vertices[vi])
            np.testing.assert_allclose(t.n.as_array(), normal)

    def test_top_faces_point_up(self, box_mesh):
        top = [t for t in triangles_from_mesh(box_mesh) if t.z_range() == (100.0, 100.0)]
        assert len(top) == 2
        assert all(t.n.z == pytest.approx(1.0) for t in top)

    def test_empty_mesh(self):
        mesh = trimesh.Trimesh(vertices=np.zeros((0, 3)), faces=np.zeros((0, 3), dtype=int))
        assert triangles_from_mesh(mesh) == []


class TestLoadSurface:

    def test_loads_stl(self, box_mesh_file):
        mesh = load_surface(box_mesh_file)
        assert isinstance(mesh, trimesh.Trimesh)
        assert len(mesh.faces) == 12
        np.testing.assert_allclose(mesh.bounds, [[-50, -50, 0], [50, 50, 100]])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_surface(str(tmp_path / "missing.stl"))

    def test_scene_falls_back_to_largest_mesh(self, box_mesh_file, monkeypatch):
        box = trimesh.creation.box(extents=[10, 10, 10])
        sphere = trimesh.creation.icosphere(subdivisions=1)
        scene = trimesh.Scene([box, sphere])
        monkeypatch.setattr(trimesh, "load", lambda path: scene)
        monkeypatch.setattr(trimesh.Scene, "to_mesh", lambda self: trimesh.Trimesh())

        mesh = load_surface(box_mesh_file)
        assert isinstance(mesh, trimesh.Trimesh)
        assert len(mesh.faces) == len(sphere.faces) == 80

    def test_scene_without_meshes(self, box_mesh_file, monkeypatch):
        monkeypatch.setattr(trimesh, "load", lambda path: trimesh.Scene())
        monkeypatch.setattr(trimesh.Scene, "to_mesh", lambda self: trimesh.Trimesh())
        with pytest.raises(ValueError):
            load_surface(box_mesh_file)
