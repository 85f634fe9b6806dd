"""Contracts for drop-cutter queries: configuration, results and errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from dropcutter.geometry_primitives import CCPoint, CCType, Point


class DropCutterError(Exception):
    """Base error for drop-cutter queries."""


class GeometricInconsistencyError(DropCutterError):
    """A drop test reached a state its own earlier checks should rule out.

    Raised for a negative circle-line discriminant after the distance check
    passed, or for height interpolation along an edge with no xy extent.
    These are numerical bugs, not "no contact": the driver skips the
    triangle and logs them.
    """

    def __init__(self, message: str, contact: CCPoint, details: Dict[str, float]):
        super().__init__(message)
        self.contact = contact
        self.details = details

    def __reduce__(self):
        # keep contact and details when crossing a process pool
        return (type(self), (str(self), self.contact, self.details))


@dataclass(frozen=True)
class DropCutterConfig:
    """Configuration for single-position and batch drop-cutter runs."""

    min_z: float = float("-inf")  # floor height for positions given without z
    strict: bool = False  # re-raise GeometricInconsistencyError instead of skipping
    workers: int = 1
    chunk_size: int = 256


@dataclass
class TriangleError:
    """Record of a triangle skipped because a drop test was inconsistent."""

    triangle_index: int
    message: str
    details: Dict[str, float] = field(default_factory=dict)


@dataclass
class DropResult:
    """Outcome of dropping the cutter at one position."""

    cl: Point
    cc: CCPoint
    triangles_tested: int = 0
    errors: List[TriangleError] = field(default_factory=list)

    @property
    def height(self) -> float:
        return self.cl.z

    @property
    def contact_type(self) -> CCType:
        return self.cc.type

    @property
    def touched(self) -> bool:
        return self.cc.type not in (CCType.NONE, CCType.ERROR)
