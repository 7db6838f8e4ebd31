#!/usr/bin/env python3
"""
Demonstration of the incremental Delaunay triangulation.

This script shows:
1. Triangulating a jittered grid
2. Degenerate and nearly degenerate inputs
3. The mesh graph and its dual vertices
4. Comparison against scipy's Delaunay
"""

import time

import numpy as np
from scipy.spatial import Delaunay

from py_delaunay import TriangulationOptions, triangulate
from py_delaunay.core.mesh_analysis import (
    convex_hull_area, expected_triangle_count, hull_point_count, is_delaunay, triangulated_area
)
from py_delaunay.core.point_sets import jittered_grid, random_points
from py_delaunay.utils import configure_logging


def main():
    configure_logging(level="WARNING", fmt="plain")

    print("=== Delaunay Triangulation Demo ===\n")

    # 1. Jittered grid
    print("1. Triangulating a jittered grid...")
    points = jittered_grid(1000, 600, 20, seed=42)
    start = time.perf_counter()
    result = triangulate(points)
    elapsed = time.perf_counter() - start
    h = hull_point_count(result.points)
    print(f"   - {len(points)} points -> {len(result)} triangles in {elapsed:.2f}s")
    print(f"   - Expected 2N-2-h = {expected_triangle_count(len(result.points), h)} (h={h})")
    print(f"   - Flips: {result.stats['flips']}, walk fallbacks: {result.stats['walk_fallbacks']}")
    print(f"   - Area {triangulated_area(result.points, result.triangles):.1f} "
          f"vs hull {convex_hull_area(result.points):.1f}")
    print(f"   - Empty circumcircles: {is_delaunay(result.normalization.apply(result.points), result.triangles)}")

    # 2. Degenerate inputs
    print("\n2. Degenerate inputs...")
    for name, cloud in [
        ("collinear", [(0, 0), (1, 0), (2, 0)]),
        ("nearly collinear", [(0, 0), (1, 0), (2, 0.001)]),
        ("two points", [(0, 0), (1, 1)]),
        ("duplicates", [(0, 0), (1, 0), (0, 1), (0, 0), (1, 0)]),
    ]:
        degenerate = triangulate(cloud)
        print(f"   - {name}: status={degenerate.status.value}, triangles={len(degenerate)}, "
              f"index_map={degenerate.index_map.tolist()}")

    # 3. Mesh graph
    print("\n3. Mesh graph...")
    graph = result.mesh_graph()
    degrees = np.array([graph.degree(p) for p in range(len(graph.points))])
    print(f"   - Edges: {len(graph.edges())}")
    print(f"   - Mean degree: {degrees.mean():.2f} (max {degrees.max()})")
    print(f"   - Border points: {int(graph.border_flags.sum())}")
    print(f"   - Dual vertices: {len(graph.circumcenters)}")

    # 4. Compare with scipy
    print("\n4. Comparing with scipy.spatial.Delaunay...")
    cloud = random_points(5000, 1e4, 1e4, seed=7) + 1e6
    ours = triangulate(cloud, TriangulationOptions(validate_mesh=True))
    reference = Delaunay(cloud)
    print(f"   - Triangles: ours={len(ours)}, scipy={len(reference.simplices)}")
    same = {frozenset(t) for t in ours.triangles.tolist()} == \
        {frozenset(t) for t in reference.simplices.tolist()}
    print(f"   - Identical triangle sets: {same}")

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
