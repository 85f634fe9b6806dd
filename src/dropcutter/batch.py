"""
Drop-cutter drivers: one cutter position against many triangles, and many
positions in a batch.

Every position owns its own (cl, cc) accumulator. Batches are split into
chunks that can run in a process pool; chunk results are concatenated in
input order, so parallel and serial runs give identical results.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from functools import partial
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from dropcutter.contracts import (
    DropCutterConfig,
    DropResult,
    GeometricInconsistencyError,
    TriangleError,
)
from dropcutter.cylcutter import CylCutter
from dropcutter.geometry_primitives import CCPoint, CCType, Point, Triangle

logger = logging.getLogger(__name__)

CutterLocation = Union[Point, Tuple[float, float], Tuple[float, float, float]]


def _as_cutter_location(location: CutterLocation, min_z: float) -> Point:
    """Fresh cutter-location point starting at max(z, min_z)."""
    if isinstance(location, Point):
        x, y, z = location.x, location.y, location.z
    elif len(location) == 2:
        x, y = location
        z = min_z
    else:
        x, y, z = location
    return Point(float(x), float(y), max(float(z), min_z))


def drop_cutter(
    cutter: CylCutter,
    location: CutterLocation,
    triangles: Iterable[Triangle],
    config: Optional[DropCutterConfig] = None,
) -> DropResult:
    """Drop *cutter* at one xy location against every triangle.

    The caller's *location* is not modified; the result carries its own
    cutter-location point. Triangles whose tests are geometrically
    inconsistent are skipped and recorded on the result, unless
    ``config.strict`` is set, in which case the error propagates.

    Returns:
        DropResult with the final height and the contact of whichever test
        last raised it. If nothing was touched but some triangle failed, the
        contact is tagged ``CCType.ERROR``.
    """
    if config is None:
        config = DropCutterConfig()

    cl = _as_cutter_location(location, config.min_z)
    cc = CCPoint()
    result = DropResult(cl=cl, cc=cc)

    for index, t in enumerate(triangles):
        result.triangles_tested += 1
        try:
            cutter.drop(cl, cc, t)
        except GeometricInconsistencyError as exc:
            if config.strict:
                raise
            logger.warning(
                "Skipping triangle %d at (%.6f, %.6f): %s", index, cl.x, cl.y, exc
            )
            result.errors.append(TriangleError(index, str(exc), dict(exc.details)))
            if cc.type is CCType.NONE:
                cc.assign(exc.contact, CCType.ERROR)

    return result


def _drop_chunk(
    cutter: CylCutter,
    triangles: Sequence[Triangle],
    config: DropCutterConfig,
    locations: Sequence[CutterLocation],
) -> List[DropResult]:
    return [drop_cutter(cutter, loc, triangles, config) for loc in locations]


def batch_drop_cutter(
    cutter: CylCutter,
    locations: Sequence[CutterLocation],
    triangles: Sequence[Triangle],
    config: Optional[DropCutterConfig] = None,
) -> List[DropResult]:
    """Drop *cutter* at every location; results follow input order.

    With ``config.workers > 1`` the locations are split into chunks of
    ``config.chunk_size`` and evaluated in a process pool.
    """
    if config is None:
        config = DropCutterConfig()
    triangles = list(triangles)
    locations = list(locations)

    chunk_size = max(1, config.chunk_size)
    chunks = [
        locations[i:i + chunk_size] for i in range(0, len(locations), chunk_size)
    ]
    work = partial(_drop_chunk, cutter, triangles, config)

    if config.workers > 1 and len(chunks) > 1:
        logger.info(
            "Dropping %s at %d locations over %d triangles (%d workers)",
            cutter, len(locations), len(triangles), config.workers,
        )
        try:
            with ProcessPoolExecutor(max_workers=config.workers) as pool:
                chunk_results = list(pool.map(work, chunks))
        except (BrokenProcessPool, PermissionError, OSError) as exc:
            logger.warning("Process pool unavailable (%s); running serially", exc)
            chunk_results = [work(chunk) for chunk in chunks]
    else:
        logger.info(
            "Dropping %s at %d locations over %d triangles",
            cutter, len(locations), len(triangles),
        )
        chunk_results = [work(chunk) for chunk in chunks]

    results = [r for chunk in chunk_results for r in chunk]
    n_errors = sum(len(r.errors) for r in results)
    if n_errors:
        logger.warning("%d inconsistent triangle tests were skipped", n_errors)
    return results


def grid_points(
    bounds: Union[np.ndarray, Sequence[Sequence[float]]],
    step: float,
) -> List[Tuple[float, float]]:
    """Row-major xy sample grid covering *bounds* with spacing *step*.

    *bounds* is ``[[xmin, ymin, ...], [xmax, ymax, ...]]`` (for example
    ``mesh.bounds``). The maximum edge is included when *step* divides the
    extent.
    """
    if step <= 0:
        raise ValueError(f"Grid step must be positive, got {step}")
    b = np.asarray(bounds, dtype=float)
    xs = np.arange(b[0][0], b[1][0] + step * 0.5, step)
    ys = np.arange(b[0][1], b[1][1] + step * 0.5, step)
    return [(float(x), float(y)) for y in ys for x in xs]
