"""
Shared test fixtures for drop-cutter tests.
"""
import sys
from pathlib import Path

import pytest
import trimesh

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dropcutter import CCPoint, CylCutter, Point, Triangle


@pytest.fixture
def box_mesh():
    """A 100x100x100 box centred on the z axis with bottom at z=0."""
    mesh = trimesh.creation.box(extents=[100, 100, 100])
    mesh.apply_translation([0, 0, 50])
    return mesh


@pytest.fixture
def box_mesh_file(box_mesh, tmp_path) -> str:
    """The box mesh written to an STL file."""
    path = tmp_path / "box.stl"
    box_mesh.export(str(path))
    return str(path)


@pytest.fixture
def cutter():
    """Cylindrical cutter with diameter 2 (radius 1)."""
    return CylCutter(2.0)


@pytest.fixture
def cc():
    return CCPoint()


@pytest.fixture
def flat_triangle():
    """Horizontal triangle at z=3 with an upward normal."""
    return Triangle(
        p=(Point(0, 0, 3), Point(10, 0, 3), Point(0, 10, 3)),
        n=Point(0, 0, 1),
    )


@pytest.fixture
def sloped_triangle():
    """Triangle on the plane z = x, normal computed from its vertices."""
    return Triangle.from_points(Point(0, 0, 0), Point(10, 0, 10), Point(0, 10, 0))


@pytest.fixture
def wall_triangle():
    """Vertical triangle in the plane x=5."""
    return Triangle(
        p=(Point(5, 0, 0), Point(5, 10, 0), Point(5, 0, 10)),
        n=Point(1, 0, 0),
    )
