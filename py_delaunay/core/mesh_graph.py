"""Mesh connectivity and the dual (Voronoi) graph of a triangulation."""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import structlog

from .mesh_analysis import circumcircles

logger = structlog.get_logger()


@dataclass
class MeshGraph:
    """
    Point-centric and triangle-centric adjacency of a finished mesh.

    Each triangle circumcenter is a vertex of the dual Voronoi diagram and
    two circumcenters are joined when their triangles share an edge.
    """
    # Point data
    points: np.ndarray
    point_neighbors: List[List[int]]    # sorted ids of points joined by an edge
    point_triangles: List[List[int]]    # ids of triangles using the point
    border_flags: np.ndarray            # 1 if the point lies on the hull boundary

    # Triangle / dual vertex data
    triangle_neighbors: List[List[int]]  # adjacent triangle ids, hull edges omitted
    circumcenters: np.ndarray            # dual vertex coordinates, one per triangle

    @classmethod
    def from_result(cls, result) -> "MeshGraph":
        """Build the graph from a ``TriangulationResult``."""
        return build_mesh_graph(result.points, result.triangles, result.neighbors)

    def degree(self, point: int) -> int:
        return len(self.point_neighbors[point])

    def edges(self) -> List[Tuple[int, int]]:
        """Every mesh edge once, as (low, high) point ids."""
        return [(p, q) for p, nbrs in enumerate(self.point_neighbors) for q in nbrs if p < q]


def build_point_connectivity(triangles: np.ndarray, n_points: int) -> Tuple[List[List[int]], List[List[int]]]:
    """
    Build point adjacency from a triangle list.

    Args:
        triangles: (M, 3) point indices
        n_points: Number of points

    Returns:
        Tuple of (point_neighbors, point_triangles)
    """
    point_neighbors = [set() for _ in range(n_points)]
    point_triangles = [[] for _ in range(n_points)]

    for t, (a, b, c) in enumerate(np.asarray(triangles, dtype=int).tolist()):
        for p, q, r in ((a, b, c), (b, c, a), (c, a, b)):
            point_neighbors[p].update((q, r))
            point_triangles[p].append(t)

    return [sorted(nbrs) for nbrs in point_neighbors], point_triangles


def build_border_flags(triangles: np.ndarray, neighbors: np.ndarray, n_points: int) -> np.ndarray:
    """Flag both endpoints of every edge that has no neighbor triangle."""
    border_flags = np.zeros(n_points, dtype=np.uint8)
    triangles = np.asarray(triangles, dtype=int).reshape(-1, 3)
    neighbors = np.asarray(neighbors, dtype=int).reshape(-1, 3)

    hull_t, hull_slot = np.nonzero(neighbors < 0)
    border_flags[triangles[hull_t, (hull_slot + 1) % 3]] = 1
    border_flags[triangles[hull_t, (hull_slot + 2) % 3]] = 1
    return border_flags


def build_mesh_graph(points: np.ndarray, triangles: np.ndarray, neighbors: np.ndarray) -> MeshGraph:
    """
    Assemble a MeshGraph.

    Args:
        points: (N, 2) coordinates
        triangles: (M, 3) counter-clockwise point indices
        neighbors: (M, 3) neighbor triangle per slot, -1 on the hull

    Returns:
        MeshGraph over the mesh
    """
    points = np.asarray(points, dtype=float)
    n_points = len(points)

    point_neighbors, point_triangles = build_point_connectivity(triangles, n_points)
    border_flags = build_border_flags(triangles, neighbors, n_points)
    triangle_neighbors = [[n for n in row if n >= 0] for row in np.asarray(neighbors, dtype=int).tolist()]
    centers, _ = circumcircles(points, triangles)

    logger.debug("Mesh graph built", points=n_points, triangles=len(triangle_neighbors),
                 border_points=int(border_flags.sum()))

    return MeshGraph(
        points=points,
        point_neighbors=point_neighbors,
        point_triangles=point_triangles,
        border_flags=border_flags,
        triangle_neighbors=triangle_neighbors,
        circumcenters=centers,
    )
