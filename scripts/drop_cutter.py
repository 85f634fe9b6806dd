#!/usr/bin/env python3
"""
Drop a cylindrical cutter onto a triangulated surface over an xy grid.

Samples the mesh's xy bounds at a fixed step, finds the resting height of a
flat end-mill at every sample, and prints a summary of heights and contact
kinds.

Usage:
    python scripts/drop_cutter.py --input part.stl --diameter 6 --step 1
    python scripts/drop_cutter.py --input part.stl --diameter 3 --step 0.5 --workers 4 --verbose
"""
import argparse
import logging
import os
import sys
from collections import Counter
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dropcutter import (
    CCType,
    CylCutter,
    DropCutterConfig,
    batch_drop_cutter,
    grid_points,
    load_surface,
    triangles_from_mesh,
)


def main():
    parser = argparse.ArgumentParser(
        description="Drop a cylindrical cutter onto a mesh over an xy grid.",
    )
    parser.add_argument(
        "--input", required=True,
        help="Path to input mesh file (STL, OBJ, GLB, PLY)",
    )
    parser.add_argument(
        "--diameter", type=float, default=6.0,
        help="Cutter diameter in mesh units (default: 6)",
    )
    parser.add_argument(
        "--step", type=float, default=1.0,
        help="Grid spacing in mesh units (default: 1)",
    )
    parser.add_argument(
        "--min-z", type=float, default=None,
        help="Floor height for the cutter (default: lowest point of the mesh)",
    )
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Worker processes for the batch (default: 1)",
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Abort on geometrically inconsistent triangles instead of skipping them",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = os.path.abspath(args.input)
    if not os.path.isfile(input_path):
        parser.error(f"Input file not found: {input_path}")
    if args.diameter <= 0:
        parser.error("--diameter must be positive")
    if args.step <= 0:
        parser.error("--step must be positive")

    mesh = load_surface(input_path)
    triangles = triangles_from_mesh(mesh)
    min_z = float(mesh.bounds[0][2]) if args.min_z is None else args.min_z

    config = DropCutterConfig(
        min_z=min_z,
        strict=args.strict,
        workers=args.workers,
    )
    cutter = CylCutter(args.diameter)
    points = grid_points(mesh.bounds, args.step)

    print(f"Dropping {cutter} at {len(points)} points over {len(triangles)} triangles ...")
    results = batch_drop_cutter(cutter, points, triangles, config)

    # Summary
    counts = Counter(r.contact_type for r in results)
    heights = [r.height for r in results]
    n_errors = sum(len(r.errors) for r in results)

    print(f"\nResult: {len(results)} cutter locations")
    print(f"  height: min {min(heights):.4f}  max {max(heights):.4f}")
    for cc_type in CCType:
        print(f"  {cc_type.value}: {counts.get(cc_type, 0)}")
    print(f"  inconsistent triangle tests skipped: {n_errors}")


if __name__ == "__main__":
    main()
