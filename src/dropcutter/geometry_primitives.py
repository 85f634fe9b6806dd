"""
Core geometry types for drop-cutter queries.

Provides Point (with the planar helpers the cutter tests need), the
contact-point classification CCPoint, and Triangle. Points are plain
dataclasses; NumPy is used where whole-vector math is clearer (normals),
and Shapely exposes triangle footprints for inspection.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon

from dropcutter.numeric import TOLERANCE, is_zero


def combine_height(current: float, candidate: float) -> Tuple[float, bool]:
    """Fold a candidate height into a running maximum.

    Returns:
        (new_height, raised) where *raised* is True only when *candidate*
        is strictly higher than *current*.
    """
    if candidate > current:
        return candidate, True
    return current, False


@dataclass
class Point:
    """A 3D point or vector.

    Used for triangle vertices, normals, and cutter locations. For a cutter
    location, ``z`` is the running maximum height and only ``lift_z`` changes
    it during a drop query.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, s: float) -> "Point":
        return Point(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Point":
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def xy_norm(self) -> float:
        return math.hypot(self.x, self.y)

    def xy_distance(self, other: "Point") -> float:
        """Distance to *other* in the xy-plane."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def xy_distance_to_line(self, p1: "Point", p2: "Point") -> float:
        """Distance in the xy-plane to the infinite line through p1 and p2.

        Falls back to the distance to p1 when the line has no xy extent.
        """
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        length = math.hypot(dx, dy)
        if is_zero(length):
            return self.xy_distance(p1)
        return abs(dx * (p1.y - self.y) - (p1.x - self.x) * dy) / length

    def xy_normalized(self) -> "Point":
        """Copy with (x, y) scaled to unit length; z is left as-is.

        A vector with no xy component is returned unchanged.
        """
        n = self.xy_norm()
        if n == 0.0:
            return Point(self.x, self.y, self.z)
        return Point(self.x / n, self.y / n, self.z)

    def is_inside(self, t: "Triangle", tol: float = TOLERANCE) -> bool:
        """Point-in-triangle test on the xy footprint of *t* (z ignored).

        Barycentric coordinates in the xy-plane; points on the boundary count
        as inside. A triangle whose footprint has no area contains nothing.
        """
        ax, ay = t.p[0].x, t.p[0].y
        v0x, v0y = t.p[2].x - ax, t.p[2].y - ay
        v1x, v1y = t.p[1].x - ax, t.p[1].y - ay
        v2x, v2y = self.x - ax, self.y - ay

        dot00 = v0x * v0x + v0y * v0y
        dot01 = v0x * v1x + v0y * v1y
        dot02 = v0x * v2x + v0y * v2y
        dot11 = v1x * v1x + v1y * v1y
        dot12 = v1x * v2x + v1y * v2y

        denom = dot00 * dot11 - dot01 * dot01
        if denom <= tol * dot00 * dot11:
            return False
        u = (dot11 * dot02 - dot01 * dot12) / denom
        v = (dot00 * dot12 - dot01 * dot02) / denom
        return u >= -tol and v >= -tol and u + v <= 1.0 + tol

    def is_inside_points(self, p1: "Point", p2: "Point", tol: float = TOLERANCE) -> bool:
        """True if this point's xy projection lies within segment p1-p2.

        Assumes the point is already on the line through p1 and p2; only the
        position along the line is checked, endpoints inclusive.
        """
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        length_sq = dx * dx + dy * dy
        if length_sq == 0.0:
            return is_zero(self.xy_distance(p1), tol)
        t = ((self.x - p1.x) * dx + (self.y - p1.y) * dy) / length_sq
        return -tol <= t <= 1.0 + tol

    def lift_z(self, z: float) -> bool:
        """Raise this point to height *z* if that is higher.

        Returns True if the point moved.
        """
        self.z, raised = combine_height(self.z, z)
        return raised


class CCType(Enum):
    """Surface feature that determines the cutter height."""
    NONE = "none"
    VERTEX = "vertex"
    FACET = "facet"
    EDGE = "edge"
    ERROR = "error"


@dataclass
class CCPoint(Point):
    """Cutter-contact point: where the cutter touches the surface."""

    type: CCType = CCType.NONE

    @classmethod
    def from_point(cls, p: Point, cc_type: CCType) -> "CCPoint":
        return cls(p.x, p.y, p.z, cc_type)

    def assign(self, p: Point, cc_type: CCType) -> None:
        """Overwrite this contact in place with *p* tagged *cc_type*."""
        self.x, self.y, self.z = p.x, p.y, p.z
        self.type = cc_type


@dataclass(frozen=True)
class Triangle:
    """A surface triangle with its (possibly unnormalised) normal.

    The normal is perpendicular to the triangle but may point up or down.
    """

    p: Tuple[Point, Point, Point]
    n: Point

    @classmethod
    def from_points(
        cls,
        p0: Point,
        p1: Point,
        p2: Point,
        normal: Optional[Point] = None,
    ) -> "Triangle":
        """Build a triangle, computing the unit normal if none is given."""
        if normal is None:
            normal = _face_normal(p0, p1, p2)
        return cls(p=(p0, p1, p2), n=normal)

    def edges(self) -> Iterator[Tuple[Point, Point]]:
        """Yield the edges (0,1), (1,2), (2,0)."""
        for i in range(3):
            yield self.p[i], self.p[(i + 1) % 3]

    def footprint(self) -> Polygon:
        """Projection of the triangle onto the xy-plane."""
        return Polygon([(q.x, q.y) for q in self.p])

    def z_range(self) -> Tuple[float, float]:
        zs = [q.z for q in self.p]
        return min(zs), max(zs)


def _face_normal(p0: Point, p1: Point, p2: Point) -> Point:
    """Unit normal of the plane through three points (right-hand order)."""
    a = p0.as_array()
    n = np.cross(p1.as_array() - a, p2.as_array() - a)
    length = np.linalg.norm(n)
    if length > 1e-12:
        n = n / length
    return Point.from_sequence(n)
