"""
Mesh analysis and validation.

Vectorized checks over finished meshes: areas, hull coverage, the
``2N - 2 - h`` triangle count and the empty-circumcircle property. Used by the
test-suite and by the ``validate_mesh`` debug mode of the engine.
"""

from typing import List, Tuple

import numpy as np
import structlog
from scipy.spatial import ConvexHull, QhullError, cKDTree

from .errors import MeshInvariantError

logger = structlog.get_logger()


def signed_areas(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Signed area of every triangle, positive for counter-clockwise.

    Args:
        points: (N, 2) coordinates
        triangles: (M, 3) point indices

    Returns:
        (M,) array of areas
    """
    points = np.asarray(points, dtype=float)
    triangles = np.asarray(triangles, dtype=int).reshape(-1, 3)
    a = points[triangles[:, 0]]
    b = points[triangles[:, 1]]
    c = points[triangles[:, 2]]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
    return 0.5 * cross


def triangulated_area(points: np.ndarray, triangles: np.ndarray) -> float:
    """Total area covered by the triangles."""
    return float(np.sum(signed_areas(points, triangles)))


def convex_hull_area(points: np.ndarray) -> float:
    """Area of the convex hull, 0.0 for degenerate (collinear) clouds."""
    points = np.asarray(points, dtype=float)
    if len(points) < 3:
        return 0.0
    try:
        # In 2D qhull reports the area as "volume"
        return float(ConvexHull(points).volume)
    except QhullError:
        return 0.0


def hull_point_count(points: np.ndarray, tolerance: float = 1e-9) -> int:
    """
    Number of points on the convex hull boundary.

    Counts the hull corners plus every point lying on a hull edge, which is
    the ``h`` of the ``2N - 2 - h`` triangle count.

    Args:
        points: (N, 2) distinct coordinates
        tolerance: Distance to an edge, relative to the cloud extent

    Returns:
        Number of boundary points
    """
    points = np.asarray(points, dtype=float)
    hull = ConvexHull(points)
    extent = float(np.ptp(points, axis=0).max()) or 1.0
    limit = tolerance * extent

    on_boundary = np.zeros(len(points), dtype=bool)
    on_boundary[hull.vertices] = True

    for i, j in hull.simplices:
        a, b = points[i], points[j]
        direction = b - a
        length_sq = float(direction @ direction)
        offsets = points - a
        t = offsets @ direction / length_sq
        cross = direction[0] * offsets[:, 1] - direction[1] * offsets[:, 0]
        distance = np.abs(cross) / np.sqrt(length_sq)
        on_boundary |= (distance <= limit) & (t >= 0.0) & (t <= 1.0)

    return int(np.count_nonzero(on_boundary))


def expected_triangle_count(n_points: int, n_hull: int) -> int:
    """Triangle count of any triangulation of ``n_points`` with ``n_hull`` on the boundary."""
    return 2 * n_points - 2 - n_hull


def circumcircles(points: np.ndarray, triangles: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Circumcenters and squared radii of all triangles.

    Returns:
        Tuple of ((M, 2) centers, (M,) squared radii). Degenerate triangles
        get NaN entries.
    """
    points = np.asarray(points, dtype=float)
    triangles = np.asarray(triangles, dtype=int).reshape(-1, 3)
    a = points[triangles[:, 0]]
    b = points[triangles[:, 1]] - a
    c = points[triangles[:, 2]] - a

    d = 2.0 * (b[:, 0] * c[:, 1] - b[:, 1] * c[:, 0])
    b_len = np.einsum("ij,ij->i", b, b)
    c_len = np.einsum("ij,ij->i", c, c)
    with np.errstate(divide="ignore", invalid="ignore"):
        ux = (c[:, 1] * b_len - b[:, 1] * c_len) / d
        uy = (b[:, 0] * c_len - c[:, 0] * b_len) / d

    centers = np.column_stack([a[:, 0] + ux, a[:, 1] + uy])
    return centers, ux * ux + uy * uy


def find_delaunay_violations(points: np.ndarray, triangles: np.ndarray,
                             tolerance: float = 1e-9) -> List[Tuple[int, int]]:
    """
    Points lying strictly inside a triangle's circumcircle.

    A point counts as inside when its squared distance to the center is
    below ``r^2 * (1 - tolerance)``, so co-circular points are accepted.

    Returns:
        List of (triangle index, point index) pairs
    """
    points = np.asarray(points, dtype=float)
    triangles = np.asarray(triangles, dtype=int).reshape(-1, 3)
    if len(triangles) == 0:
        return []

    centers, radii_sq = circumcircles(points, triangles)
    tree = cKDTree(points)
    violations = []

    for t, (center, radius_sq) in enumerate(zip(centers, radii_sq)):
        if not np.isfinite(radius_sq):
            continue
        limit = radius_sq * (1.0 - tolerance)
        own = set(triangles[t].tolist())
        for p in tree.query_ball_point(center, np.sqrt(radius_sq)):
            if p in own:
                continue
            offset = points[p] - center
            if float(offset @ offset) < limit:
                violations.append((t, int(p)))

    return violations


def is_delaunay(points: np.ndarray, triangles: np.ndarray, tolerance: float = 1e-9) -> bool:
    """True when no point violates any circumcircle."""
    return not find_delaunay_violations(points, triangles, tolerance)


def check_mesh(points: np.ndarray, triangles: np.ndarray, neighbors: np.ndarray,
               tolerance: float = 0.0) -> None:
    """
    Validate mesh topology.

    Checks that every triangle is counter-clockwise with non-zero area, that
    no triangle appears twice and that neighbor links are symmetric and
    share an edge.

    Raises:
        MeshInvariantError: On the first violation found
    """
    triangles = np.asarray(triangles, dtype=int).reshape(-1, 3)
    neighbors = np.asarray(neighbors, dtype=int).reshape(-1, 3)

    areas = signed_areas(points, triangles)
    bad = np.flatnonzero(areas <= tolerance)
    if len(bad):
        logger.error("Degenerate or clockwise triangle", triangle=int(bad[0]), area=float(areas[bad[0]]))
        raise MeshInvariantError("Triangle is degenerate or clockwise", triangle=int(bad[0]))

    canonical = np.sort(triangles, axis=1)
    _, counts = np.unique(canonical, axis=0, return_counts=True)
    if np.any(counts > 1):
        raise MeshInvariantError("Mesh contains duplicate triangles")

    for t in range(len(triangles)):
        for slot in range(3):
            n = int(neighbors[t, slot])
            if n < 0:
                continue
            edge = {int(triangles[t, (slot + 1) % 3]), int(triangles[t, (slot + 2) % 3])}
            if t not in neighbors[n].tolist():
                logger.error("Asymmetric neighbor link", triangle=t, neighbor=n)
                raise MeshInvariantError(f"Neighbor {n} does not link back", triangle=t)
            if not edge <= set(triangles[n].tolist()):
                logger.error("Neighbors do not share an edge", triangle=t, neighbor=n)
                raise MeshInvariantError(f"Neighbor {n} does not share edge {sorted(edge)}", triangle=t)
