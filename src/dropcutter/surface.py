"""Adapters from trimesh meshes to drop-cutter triangles."""

import logging
import os
from typing import List

import numpy as np
import trimesh

from dropcutter.geometry_primitives import Point, Triangle

logger = logging.getLogger(__name__)


def load_surface(filepath: str) -> trimesh.Trimesh:
    """Load a mesh file (STL, OBJ, GLB, PLY) as a single triangle mesh.

    Scenes are flattened with their transforms applied; if that yields no
    faces the largest mesh in the scene is used as-is. The mesh is neither
    rescaled nor re-oriented: cutter locations are in the mesh's own
    coordinates with +z as the tool axis.
    """
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"Mesh file not found: {filepath}")

    scene_or_mesh = trimesh.load(filepath)

    if isinstance(scene_or_mesh, trimesh.Scene):
        mesh = scene_or_mesh.to_mesh()
        if not isinstance(mesh, trimesh.Trimesh) or len(mesh.faces) == 0:
            # Fallback: largest geometry without scene transforms
            meshes = [
                g for g in scene_or_mesh.geometry.values()
                if isinstance(g, trimesh.Trimesh)
            ]
            if not meshes:
                raise ValueError(f"No triangle meshes found in {filepath}")
            mesh = max(meshes, key=lambda m: len(m.faces))
            logger.warning(
                "Scene in %s did not flatten; using its largest mesh (%d faces)",
                filepath, len(mesh.faces),
            )
    elif isinstance(scene_or_mesh, trimesh.Trimesh):
        mesh = scene_or_mesh
    else:
        raise ValueError(
            f"Unsupported type from trimesh.load: {type(scene_or_mesh)}"
        )

    logger.info(
        "Loaded %s: %d vertices, %d faces",
        filepath, len(mesh.vertices), len(mesh.faces),
    )
    return mesh


def triangles_from_mesh(mesh: trimesh.Trimesh) -> List[Triangle]:
    """Convert every face of *mesh* into a Triangle.

    Normals come from ``mesh.face_normals``; degenerate faces (zero normal)
    are kept, the drop tests treat them as vertical.
    """
    vertices = np.asarray(mesh.vertices, dtype=float)
    faces = np.asarray(mesh.faces, dtype=int)
    normals = np.asarray(mesh.face_normals, dtype=float)

    triangles = []
    for face, normal in zip(faces, normals):
        p0, p1, p2 = (Point.from_sequence(vertices[i]) for i in face)
        triangles.append(Triangle(p=(p0, p1, p2), n=Point.from_sequence(normal)))
    return triangles
