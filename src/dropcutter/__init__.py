"""Public API for cylindrical-cutter drop-cutter queries."""

from dropcutter.batch import batch_drop_cutter, drop_cutter, grid_points
from dropcutter.contracts import (
    DropCutterConfig,
    DropCutterError,
    DropResult,
    GeometricInconsistencyError,
    TriangleError,
)
from dropcutter.cylcutter import CylCutter
from dropcutter.geometry_primitives import CCPoint, CCType, Point, Triangle, combine_height
from dropcutter.surface import load_surface, triangles_from_mesh

__all__ = [
    "CCPoint",
    "CCType",
    "CylCutter",
    "DropCutterConfig",
    "DropCutterError",
    "DropResult",
    "GeometricInconsistencyError",
    "Point",
    "Triangle",
    "TriangleError",
    "batch_drop_cutter",
    "combine_height",
    "drop_cutter",
    "grid_points",
    "load_surface",
    "triangles_from_mesh",
]
