"""
Drop-cutter tests for a cylindrical (flat end-mill) cutter.

Each test drops the cutter at (cl.x, cl.y) against one feature kind of a
triangle (vertices, the facet plane, or the three edges) and raises cl.z to
the highest height the cutter can rest at without gouging that feature.

The ``*_contacts`` methods are pure: they return the contact candidates a
feature offers at the cutter position. The ``*_test`` methods fold those
candidates into a caller-owned (cl, cc) pair through ``Point.lift_z``, so
the final height is the same whatever order triangles and tests run in.
"""

import itertools
import logging
import math
from typing import List, Optional

from dropcutter.contracts import GeometricInconsistencyError
from dropcutter.geometry_primitives import CCPoint, CCType, Point, Triangle
from dropcutter.numeric import is_negative, is_positive, is_zero, sign, square

logger = logging.getLogger(__name__)


def _fold(cl: Point, cc: CCPoint, candidates: List[CCPoint]) -> int:
    """Lift *cl* through each candidate; the last raising one lands in *cc*."""
    result = 0
    for candidate in candidates:
        if cl.lift_z(candidate.z):
            cc.assign(candidate, candidate.type)
            result = 1
    return result


class CylCutter:
    """Cylindrical cutter of a given diameter."""

    _ids = itertools.count(1)

    def __init__(self, diameter: float = 1.0):
        self.id = next(CylCutter._ids)
        self.diameter = diameter

    @property
    def diameter(self) -> float:
        return self._diameter

    @diameter.setter
    def diameter(self, value: float) -> None:
        value = float(value)
        if not value > 0.0:
            raise ValueError(f"Cutter diameter must be positive, got {value}")
        self._diameter = value

    @property
    def radius(self) -> float:
        return self._diameter / 2.0

    def __str__(self) -> str:
        return f"CylCutter{self.id}(d={self._diameter:g})"

    def __repr__(self) -> str:
        return f"CylCutter(diameter={self._diameter!r})"

    # ─── Vertex ──────────────────────────────────────────────────────────────

    def vertex_contacts(self, cl: Point, t: Triangle) -> List[CCPoint]:
        """Vertices of *t* that lie under the cutter footprint."""
        r = self.radius
        return [
            CCPoint.from_point(p, CCType.VERTEX)
            for p in t.p
            if cl.xy_distance(p) <= r
        ]

    def vertex_test(self, cl: Point, cc: CCPoint, t: Triangle) -> int:
        """Drop against the vertices of *t*. Returns 1 if cl was lifted."""
        return _fold(cl, cc, self.vertex_contacts(cl, t))

    # ─── Facet ───────────────────────────────────────────────────────────────

    def facet_contact(self, cl: Point, t: Triangle) -> Optional[CCPoint]:
        """Contact with the plane of *t*, or None.

        None covers both a vertical facet and a contact point that falls
        outside the triangle.
        """
        if is_zero(t.n.z):
            return None

        normal = -t.n if t.n.z < 0 else Point(t.n.x, t.n.y, t.n.z)

        # plane a*x + b*y + c*z + d = 0 with (a, b, c) the up-facing normal
        a, b, c = normal.x, normal.y, normal.z
        d = -normal.dot(t.p[0])

        # the cutter touches the plane on its rim, radius away from cl along -n
        normal = normal.xy_normalized()
        cc = cl - self.radius * normal
        if not cc.is_inside(t):
            return None

        # c > 0 here but may be tiny for near-vertical facets
        cc.z = (-d - a * cc.x - b * cc.y) / c
        return CCPoint.from_point(cc, CCType.FACET)

    def facet_test(self, cl: Point, cc: CCPoint, t: Triangle) -> int:
        """Drop against the facet of *t*.

        Returns -1 for a vertical facet (nothing to drop against), 1 if cl
        was lifted, 0 otherwise.
        """
        if is_zero(t.n.z):
            return -1
        contact = self.facet_contact(cl, t)
        if contact is None:
            return 0
        return _fold(cl, cc, [contact])

    # ─── Edge ────────────────────────────────────────────────────────────────

    def edge_contacts(self, cl: Point, t: Triangle) -> List[CCPoint]:
        """Points where the cutter rim meets the edges of *t*.

        Uses the circle-line intersection of the cutter footprint with each
        edge's supporting line, keeping only points inside the edge.

        Raises:
            GeometricInconsistencyError: negative discriminant after the
                distance check passed, or an edge with no xy extent reached
                height interpolation.
        """
        r = self.radius
        found: List[CCPoint] = []

        for i, (p1, p2) in enumerate(t.edges()):
            # vertical edges have no xy extent to drop against
            if is_zero(p1.x - p2.x) and is_zero(p1.y - p2.y):
                continue

            dist = cl.xy_distance_to_line(p1, p2)
            if is_positive((dist - r) / r):
                continue

            # http://mathworld.wolfram.com/Circle-LineIntersection.html
            x1 = p1.x - cl.x
            y1 = p1.y - cl.y
            x2 = p2.x - cl.x
            y2 = p2.y - cl.y
            dx = x2 - x1
            dy = y2 - y1
            dr_sq = dx * dx + dy * dy
            D = x1 * y2 - x2 * y1
            # r^2 - (distance to line)^2, compared relative to r^2
            discr = square(r) - square(D) / dr_sq
            ratio = discr / square(r)
            logger.debug("edge %d: xy distance=%.9g discr=%.9g", i, dist, discr)

            if is_negative(ratio):
                raise GeometricInconsistencyError(
                    f"{self}: negative discriminant {discr:.6g} on edge {i}",
                    contact=CCPoint(cl.x, cl.y, cl.z, CCType.ERROR),
                    details={
                        "edge": i,
                        "discriminant": discr,
                        "xy_distance": dist,
                        "radius": r,
                    },
                )

            if is_zero(ratio):
                points = [Point(D * dy / dr_sq + cl.x, -D * dx / dr_sq + cl.y)]
            else:
                root = math.sqrt(max(discr, 0.0) * dr_sq)
                sx = sign(dy) * dx * root
                sy = abs(dy) * root
                points = [
                    Point((D * dy + sx) / dr_sq + cl.x, (-D * dx + sy) / dr_sq + cl.y),
                    Point((D * dy - sx) / dr_sq + cl.x, (-D * dx - sy) / dr_sq + cl.y),
                ]

            for q in points:
                if not q.is_inside_points(p1, p2):
                    continue
                q.z = self._edge_height(cl, i, p1, p2, q)
                found.append(CCPoint.from_point(q, CCType.EDGE))

        return found

    def _edge_height(self, cl: Point, edge: int, p1: Point, p2: Point, q: Point) -> float:
        """Height of the edge p1-p2 at the xy location of *q*."""
        if not is_zero(p1.x - p2.x):
            return p1.z + ((p2.z - p1.z) / (p2.x - p1.x)) * (q.x - p1.x)
        if not is_zero(p1.y - p2.y):
            return p1.z + ((p2.z - p1.z) / (p2.y - p1.y)) * (q.y - p1.y)
        raise GeometricInconsistencyError(
            f"{self}: cannot interpolate height on edge {edge} with no xy extent",
            contact=CCPoint(cl.x, cl.y, cl.z, CCType.ERROR),
            details={
                "edge": edge,
                "dx": p2.x - p1.x,
                "dy": p2.y - p1.y,
            },
        )

    def edge_test(self, cl: Point, cc: CCPoint, t: Triangle) -> int:
        """Drop against the edges of *t*. Returns 1 if cl was lifted.

        Raises GeometricInconsistencyError before touching cl or cc.
        """
        return _fold(cl, cc, self.edge_contacts(cl, t))

    # ─── All features ────────────────────────────────────────────────────────

    def contacts(self, cl: Point, t: Triangle) -> List[CCPoint]:
        """Every vertex, facet and edge contact *t* offers at cl."""
        found = self.vertex_contacts(cl, t)
        facet = self.facet_contact(cl, t)
        if facet is not None:
            found.append(facet)
        found.extend(self.edge_contacts(cl, t))
        return found

    def drop(self, cl: Point, cc: CCPoint, t: Triangle) -> int:
        """Run the vertex, facet and edge tests against *t*.

        Returns 1 if any of them lifted cl. The triangle is all-or-nothing:
        if the edge test is inconsistent nothing is applied.
        """
        return _fold(cl, cc, self.contacts(cl, t))
