"""
Tolerance predicates shared by the drop-cutter geometry.

All comparisons against zero go through a single absolute tolerance so the
vertex, facet and edge tests agree on what counts as "vertical", "tangent"
or "degenerate".
"""

TOLERANCE = 1e-7


def is_zero(x: float, tol: float = TOLERANCE) -> bool:
    return abs(x) < tol


def is_positive(x: float, tol: float = TOLERANCE) -> bool:
    """True when *x* is greater than zero by more than *tol*."""
    return x > tol


def is_negative(x: float, tol: float = TOLERANCE) -> bool:
    """True when *x* is less than zero by more than *tol*."""
    return x < -tol


def sign(x: float) -> float:
    """Sign of *x* with sign(0) == 1.

    The circle-line intersection formula needs a sign function that never
    returns zero, otherwise both intersections collapse onto one point for
    edges parallel to the x axis.
    """
    return -1.0 if x < 0.0 else 1.0


def square(x: float) -> float:
    return x * x
