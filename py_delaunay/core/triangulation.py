"""
Incremental Delaunay triangulation.

This module implements the engine:
1. Normalize the cloud into the unit square and merge duplicates
2. Sort points into snake-ordered bins
3. Bootstrap a super-triangle whose corners lie at infinity
4. Insert points one by one (locate -> split -> legalize with Lawson flips)
5. Strip super-triangle triangles, check hull coverage, compact, denormalize

All mutable state of a run lives in one ``Triangulation`` session, so
independent runs never share anything.
"""

import enum
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..config import Settings, settings
from .errors import InvalidPointsError, MeshInvariantError
from .geometry import (
    Point,
    in_circle,
    is_strictly_convex_quad,
    orient2d,
    ranked_orient2d,
    squared_distance,
)
from .mesh_analysis import check_mesh
from .mesh_graph import MeshGraph
from .normalization import Normalization
from .spatial_bins import SpatialBins
from .triangle import NO_NEIGHBOR, EdgeRef, Triangle

logger = structlog.get_logger()

# Super-triangle corners recede from SUPER_CENTER along these counter-clockwise
# directions, corner k at distance R**(k + 1) as R grows without bound.
SUPER_CENTER = (0.5, 0.5)
SUPER_DIRECTIONS = tuple(
    (math.cos(math.radians(angle)), math.sin(math.radians(angle)))
    for angle in (200.0, 335.0, 95.0)
)


class TriangulationStatus(str, enum.Enum):
    """Outcome of a triangulation request."""
    OK = "ok"
    INSUFFICIENT_POINTS = "insufficient_points"  # fewer than 3 distinct points
    COLLINEAR = "collinear"  # all points on one line


@dataclass
class TriangulationOptions:
    """Per-run numerical options. Defaults mirror ``Settings``."""
    epsilon: float = 1e-12
    incircle_tolerance: float = 1e-12
    duplicate_tolerance: float = 1e-10
    validate_mesh: bool = False

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "TriangulationOptions":
        """Build options from the application settings."""
        source = source or settings
        return cls(
            epsilon=source.epsilon,
            incircle_tolerance=source.incircle_tolerance,
            duplicate_tolerance=source.duplicate_tolerance,
            validate_mesh=source.validate_mesh,
        )


@dataclass
class TriangulationResult:
    """
    Triangulation output in the caller's coordinate system.

    Attributes:
        points: (K, 2) distinct input points, denormalized
        triangles: (M, 3) counter-clockwise point indices into ``points``
        neighbors: (M, 3) triangle across the edge opposite each vertex, -1 on the hull
        index_map: (N,) output point index for every input point
        status: Why the result is empty, or OK
        normalization: Mapping used during the run
    """
    points: np.ndarray
    triangles: np.ndarray
    neighbors: np.ndarray
    index_map: np.ndarray
    status: TriangulationStatus
    normalization: Normalization
    stats: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, points: np.ndarray, index_map: np.ndarray,
              status: TriangulationStatus,
              normalization: Normalization) -> "TriangulationResult":
        return cls(
            points=points,
            triangles=np.empty((0, 3), dtype=int),
            neighbors=np.empty((0, 3), dtype=int),
            index_map=index_map,
            status=status,
            normalization=normalization,
        )

    @property
    def ok(self) -> bool:
        return self.status is TriangulationStatus.OK

    def __len__(self) -> int:
        return len(self.triangles)

    def triangle_points(self) -> List[Tuple[Point, Point, Point]]:
        """Triangles as triples of coordinates."""
        result = []
        for a, b, c in self.triangles.tolist():
            result.append(tuple(Point(*self.points[v].tolist()) for v in (a, b, c)))
        return result

    def mesh_graph(self) -> MeshGraph:
        """Point adjacency, incident triangles and dual graph of the mesh."""
        return MeshGraph.from_result(self)


class Triangulation:
    """
    One triangulation session over normalized points.

    Points live in a coordinate arena addressed by index. The three
    super-triangle corners take the next three indices but have no
    coordinates: they sit at infinity, and every predicate that involves one
    is decided symbolically (see :meth:`orientation` and :meth:`is_illegal`).
    An input triangle is therefore never flipped onto a corner, however thin
    it is. Triangles live in an append-only arena where removal only clears
    ``Triangle.active``.

    Typical use goes through :func:`triangulate`; the session is public so the
    incremental steps can be driven and inspected one at a time.
    """

    def __init__(self, points: np.ndarray, options: Optional[TriangulationOptions] = None):
        """
        Initialize the session with a super-triangle.

        Args:
            points: (N, 2) normalized, duplicate-free coordinates in [0, 1]^2
            options: Numerical options, defaults to the application settings
        """
        self.options = options or TriangulationOptions.from_settings()
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        self.n_points = len(points)

        self.coords: List[Tuple[float, float]] = [tuple(p) for p in points.tolist()]
        self.super_indices = (self.n_points, self.n_points + 1, self.n_points + 2)
        self._ranked = {
            index: ((rank + 1, direction), (0, SUPER_CENTER))
            for rank, (index, direction) in enumerate(zip(self.super_indices, SUPER_DIRECTIONS))
        }
        self.eps_sq = self.options.epsilon ** 2

        self.triangles: List[Triangle] = []
        self.stack: List[EdgeRef] = []
        self.merged: Dict[int, int] = {}
        self.stats = {
            "flips": 0,
            "refused_flips": 0,
            "edge_splits": 0,
            "walk_steps": 0,
            "walk_fallbacks": 0,
        }

        self.last_created = self._add_triangle(*self.super_indices,
                                               NO_NEIGHBOR, NO_NEIGHBOR, NO_NEIGHBOR)

    # ------------------------------------------------------------------
    # Arena helpers
    # ------------------------------------------------------------------

    def _add_triangle(self, a: int, b: int, c: int, n0: int, n1: int, n2: int) -> int:
        self.triangles.append(Triangle(vertices=(a, b, c), neighbors=[n0, n1, n2]))
        return len(self.triangles) - 1

    def _relink(self, triangle: int, old: int, new: int) -> None:
        if triangle != NO_NEIGHBOR:
            self.triangles[triangle].replace_neighbor(old, new)

    def active_triangles(self) -> List[int]:
        """Indices of all live triangles, super-triangle ones included."""
        return [i for i, t in enumerate(self.triangles) if t.active]

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def rank(self, v: int) -> int:
        """0 for an input point, 1 to 3 for the corners, farther corners higher."""
        return v - self.n_points + 1 if v >= self.n_points else 0

    def _ranked_point(self, v: int):
        return self._ranked[v] if v >= self.n_points else ((0, self.coords[v]),)

    def orientation(self, a: int, b: int, c: int) -> int:
        """
        Turn a -> b -> c: 1 for left, -1 for right, 0 for straight.

        Three input points count as collinear when the smallest height of
        their triangle is within epsilon, so the answer does not depend on
        the order of the arguments beyond its sign. A triple that involves a
        corner is decided with the corner at infinity.
        """
        n = self.n_points
        if a < n and b < n and c < n:
            pa, pb, pc = self.coords[a], self.coords[b], self.coords[c]
            side = orient2d(pa, pb, pc)
            longest = max(squared_distance(pa, pb), squared_distance(pb, pc),
                          squared_distance(pc, pa))
            if side * side <= self.eps_sq * longest:
                return 0
            return 1 if side > 0.0 else -1

        value = ranked_orient2d(self._ranked_point(a), self._ranked_point(b),
                                self._ranked_point(c))
        return (value > 0.0) - (value < 0.0)

    def is_illegal(self, w1: int, u: int, v: int, w2: int) -> bool:
        """
        True when ``w2`` lies inside the circumcircle of (w1, u, v).

        When a corner is involved the circle through the two nearer vertices
        and the farthest corner becomes the half-plane left of the nearer
        pair, and a corner farther than all three vertices is outside. So an
        edge between input points is never flipped towards a corner, and an
        edge with a corner endpoint flips only when the input points around
        it turn left.
        """
        n = self.n_points
        if w1 < n and u < n and v < n and w2 < n:
            coords = self.coords
            det, permanent = in_circle(coords[w1], coords[u], coords[v], coords[w2])
            return det > self.options.incircle_tolerance * permanent

        triangle = (w1, u, v)
        far = max(range(3), key=lambda i: self.rank(triangle[i]))
        if self.rank(w2) > self.rank(triangle[far]):
            return False
        return self.orientation(triangle[(far + 1) % 3], triangle[(far + 2) % 3], w2) > 0

    def _is_outside(self, u: int, v: int, p: int) -> bool:
        """``p`` is right of edge u-v, beyond the epsilon band when u and v are input points."""
        if u < self.n_points and v < self.n_points:
            a, b = self.coords[u], self.coords[v]
            side = orient2d(a, b, self.coords[p])
            return side < 0.0 and side * side > self.eps_sq * squared_distance(a, b)
        return self.orientation(u, v, p) < 0

    def _is_convex_quad(self, a: int, b: int, c: int, d: int) -> bool:
        if max(a, b, c, d) < self.n_points:
            coords = self.coords
            return is_strictly_convex_quad(coords[a], coords[b], coords[c], coords[d])
        return (self.orientation(a, b, c) > 0 and self.orientation(b, c, d) > 0
                and self.orientation(c, d, a) > 0 and self.orientation(d, a, b) > 0)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert_all(self, order: Optional[Sequence[int]] = None) -> None:
        """Insert every point, in ``order`` when given."""
        indices = range(self.n_points) if order is None else order
        for index in indices:
            self.insert_point(int(index))

    def insert_point(self, p: int) -> None:
        """
        Insert point ``p`` and restore the Delaunay property.

        Args:
            p: Index into the point arena
        """
        p_xy = self.coords[p]
        t_idx = self.locate(p)
        tri = self.triangles[t_idx]

        dup_sq = self.options.duplicate_tolerance ** 2
        for v in tri.vertices:
            if v < self.n_points and squared_distance(self.coords[v], p_xy) <= dup_sq:
                logger.debug("Merging coincident point", point=p, into=v)
                self.merged[p] = v
                return

        on_edge = self._edge_containing(p_xy, tri)
        if on_edge is None:
            self._split_triangle(p, t_idx)
        else:
            self._split_edge(p, t_idx, on_edge)

        self.legalize()

    def _edge_containing(self, p_xy: Tuple[float, float], tri: Triangle) -> Optional[int]:
        """Slot of the input-point edge ``p_xy`` lies on (within epsilon distance), if any."""
        best_slot, best_dist = None, self.options.epsilon
        for slot in range(3):
            u, v = tri.edge(slot)
            if u >= self.n_points or v >= self.n_points:
                continue
            length = squared_distance(self.coords[u], self.coords[v]) ** 0.5
            dist = abs(orient2d(self.coords[u], self.coords[v], p_xy)) / length
            if dist <= best_dist:
                best_slot, best_dist = slot, dist
        return best_slot

    def locate(self, p: int) -> int:
        """
        Find the triangle containing point ``p`` (boundary inclusive).

        Walks from the most recently created triangle across any edge that has
        the point outside (see :meth:`_is_outside`). Falls back to a linear scan
        when the walk dead-ends or runs longer than the number of triangles.

        Raises:
            MeshInvariantError: No active triangle contains the point
        """
        current = self.last_created

        if self.triangles[current].active:
            for step in range(len(self.triangles)):
                tri = self.triangles[current]
                next_triangle = None
                for k in range(3):
                    slot = (step + k) % 3
                    u, v = tri.edge(slot)
                    if self._is_outside(u, v, p):
                        next_triangle = tri.neighbors[slot]
                        break
                else:
                    self.stats["walk_steps"] += step
                    return current

                if next_triangle == NO_NEIGHBOR:
                    break
                current = next_triangle

        self.stats["walk_fallbacks"] += 1
        logger.debug("Point location walk failed, scanning", point=p)
        return self._scan_locate(p)

    def _scan_locate(self, p: int) -> int:
        for idx, tri in enumerate(self.triangles):
            if tri.active and not any(self._is_outside(u, v, p)
                                      for u, v in map(tri.edge, range(3))):
                return idx

        p_xy = self.coords[p]
        logger.error("No triangle contains point", point=p, x=p_xy[0], y=p_xy[1])
        raise MeshInvariantError("Mesh does not cover the inserted point", point=p)

    def _split_triangle(self, p: int, t_idx: int) -> None:
        """Replace triangle (a, b, c) with (p, b, c), (p, c, a), (p, a, b)."""
        tri = self.triangles[t_idx]
        tri.active = False
        v, n = tri.vertices, list(tri.neighbors)

        base = len(self.triangles)
        for i in range(3):
            self._add_triangle(p, v[(i + 1) % 3], v[(i + 2) % 3],
                               n[i], base + (i + 1) % 3, base + (i + 2) % 3)
        for i in range(3):
            self._relink(n[i], t_idx, base + i)
            self.stack.append(EdgeRef(base + i, 0))

        self.last_created = base

    def _split_edge(self, p: int, t_idx: int, slot: int) -> None:
        """
        Split both triangles sharing the edge ``p`` lies on.

        Triangle (o, u, v) becomes (o, u, p) and (o, p, v); the neighbor
        (w, v, u) across edge u-v becomes (w, v, p) and (w, p, u).
        """
        tri = self.triangles[t_idx]
        o = tri.vertices[slot]
        u, v = tri.edge(slot)
        across_vo = tri.neighbors[(slot + 1) % 3]
        across_ou = tri.neighbors[(slot + 2) % 3]
        nb = tri.neighbors[slot]
        tri.active = False
        self.stats["edge_splits"] += 1

        t1 = len(self.triangles)
        t2 = t1 + 1
        if nb == NO_NEIGHBOR:
            n1 = n2 = NO_NEIGHBOR
        else:
            n1, n2 = t1 + 2, t1 + 3

        self._add_triangle(o, u, p, n2, t2, across_ou)
        self._add_triangle(o, p, v, n1, across_vo, t1)
        self._relink(across_ou, t_idx, t1)
        self._relink(across_vo, t_idx, t2)
        self.stack.append(EdgeRef(t1, 2))
        self.stack.append(EdgeRef(t2, 1))

        if nb != NO_NEIGHBOR:
            other = self.triangles[nb]
            ns = other.neighbor_slot(t_idx)
            w = other.vertices[ns]
            across_uw = other.neighbors[(ns + 1) % 3]
            across_wv = other.neighbors[(ns + 2) % 3]
            other.active = False

            self._add_triangle(w, v, p, t2, n2, across_wv)
            self._add_triangle(w, p, u, t1, across_uw, n1)
            self._relink(across_wv, nb, n1)
            self._relink(across_uw, nb, n2)
            self.stack.append(EdgeRef(n1, 2))
            self.stack.append(EdgeRef(n2, 1))

        self.last_created = t1

    # ------------------------------------------------------------------
    # Legalization
    # ------------------------------------------------------------------

    def legalize(self) -> None:
        """
        Lawson flips until the work-list is empty.

        Each entry names an edge by (triangle, opposite slot). Entries whose
        triangle was replaced in the meantime are stale and skipped: the
        replacement already pushed its own outer edges.
        """
        while self.stack:
            t_idx, slot = self.stack.pop()
            tri = self.triangles[t_idx]
            if not tri.active:
                continue
            nb = tri.neighbors[slot]
            if nb == NO_NEIGHBOR:
                continue

            other = self.triangles[nb]
            ns = other.neighbor_slot(t_idx)
            w1 = tri.vertices[slot]
            u, v = tri.edge(slot)
            w2 = other.vertices[ns]

            if not self.is_illegal(w1, u, v, w2):
                continue

            if not self._is_convex_quad(w1, u, w2, v):
                self.stats["refused_flips"] += 1
                logger.debug("Refusing flip of non-convex quad", edge=(u, v), triangle=t_idx)
                continue

            self._flip(t_idx, slot, nb, ns)

    def _flip(self, t_idx: int, slot: int, nb: int, ns: int) -> None:
        """Replace (w1, u, v) + (w2, v, u) with (w1, u, w2) + (w1, w2, v)."""
        tri = self.triangles[t_idx]
        other = self.triangles[nb]
        w1 = tri.vertices[slot]
        u, v = tri.edge(slot)
        w2 = other.vertices[ns]

        across_vw1 = tri.neighbors[(slot + 1) % 3]
        across_w1u = tri.neighbors[(slot + 2) % 3]
        across_uw2 = other.neighbors[(ns + 1) % 3]
        across_w2v = other.neighbors[(ns + 2) % 3]
        tri.active = False
        other.active = False
        self.stats["flips"] += 1

        a = len(self.triangles)
        b = a + 1
        self._add_triangle(w1, u, w2, across_uw2, b, across_w1u)
        self._add_triangle(w1, w2, v, across_w2v, across_vw1, a)

        self._relink(across_uw2, nb, a)
        self._relink(across_w1u, t_idx, a)
        self._relink(across_w2v, nb, b)
        self._relink(across_vw1, t_idx, b)

        self.stack.extend([EdgeRef(a, 0), EdgeRef(a, 2), EdgeRef(b, 0), EdgeRef(b, 1)])
        self.last_created = a

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def finalize(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Strip the super-triangle, check hull coverage and compact the arena.

        Returns:
            Tuple of (triangles, neighbors) as (M, 3) integer arrays indexing
            the session's input points

        Raises:
            MeshInvariantError: The stripped mesh does not cover the convex
                hull of the inserted points, or fails validation
        """
        corners = set(self.super_indices)
        for tri in self.triangles:
            if tri.active and tri.has_vertex_in(corners):
                tri.active = False

        for tri in self.triangles:
            if not tri.active:
                continue
            for i, n in enumerate(tri.neighbors):
                if n != NO_NEIGHBOR and not self.triangles[n].active:
                    tri.neighbors[i] = NO_NEIGHBOR

        self._check_hull_coverage()

        active = self.active_triangles()
        remap = {old: new for new, old in enumerate(active)}
        triangles = np.array([self.triangles[i].vertices for i in active],
                             dtype=int).reshape(-1, 3)
        neighbors = np.array(
            [[remap[n] if n != NO_NEIGHBOR else NO_NEIGHBOR
              for n in self.triangles[i].neighbors] for i in active],
            dtype=int,
        ).reshape(-1, 3)

        if self.options.validate_mesh:
            self._check_local_delaunay(remap)
            check_mesh(np.array(self.coords, dtype=float).reshape(-1, 2), triangles, neighbors)

        return triangles, neighbors

    def _boundary_loop(self) -> List[int]:
        """
        Counter-clockwise boundary of the stripped mesh as a vertex loop.

        Raises:
            MeshInvariantError: The mesh is empty, or its boundary is not a
                single simple loop
        """
        outgoing: Dict[int, int] = {}
        for tri in self.triangles:
            if not tri.active:
                continue
            for slot in range(3):
                if tri.neighbors[slot] != NO_NEIGHBOR:
                    continue
                a, b = tri.edge(slot)
                if a in outgoing:
                    logger.error("Mesh boundary touches itself", vertex=a)
                    raise MeshInvariantError("Mesh boundary is pinched", point=a)
                outgoing[a] = b

        if not outgoing:
            logger.error("No triangles left after stripping the super-triangle",
                         points=self.n_points)
            raise MeshInvariantError("Triangulation produced no triangles")

        start = min(outgoing)
        loop = [start]
        current = outgoing[start]
        while current != start:
            if current not in outgoing or len(loop) > len(outgoing):
                logger.error("Mesh boundary is open", vertex=current)
                raise MeshInvariantError("Mesh boundary is not closed", point=current)
            loop.append(current)
            current = outgoing[current]

        if len(loop) != len(outgoing):
            stray = min(set(outgoing) - set(loop))
            logger.error("Mesh boundary has several components",
                         loop_edges=len(loop), boundary_edges=len(outgoing), vertex=stray)
            raise MeshInvariantError("Mesh boundary has several components", point=stray)

        return loop

    def _check_hull_coverage(self) -> None:
        """
        The stripped mesh must cover the convex hull of the inserted points.

        Its boundary has to be one loop that never turns right. Input points
        within epsilon of a hull edge may stay on the boundary.
        """
        loop = self._boundary_loop()
        for k, v in enumerate(loop):
            u, w = loop[k - 1], loop[(k + 1) % len(loop)]
            if self.orientation(u, v, w) < 0:
                logger.error("Mesh boundary is not convex", vertex=v, previous=u, next=w)
                raise MeshInvariantError("Mesh does not cover the convex hull", point=v)

    def _check_local_delaunay(self, remap: Dict[int, int]) -> None:
        """
        Every interior edge passes the in-circle test.

        The cached circumcircle rules out most opposite vertices; the rest go
        through the same predicate legalization uses.
        """
        for idx in remap:
            tri = self.triangles[idx]
            center, radius_sq = tri.circumcircle(self.coords)
            for slot, nb in enumerate(tri.neighbors):
                if nb == NO_NEIGHBOR:
                    continue
                other = self.triangles[nb]
                w2 = other.vertices[other.neighbor_slot(idx)]
                if center is not None and squared_distance(center, self.coords[w2]) > radius_sq:
                    continue
                u, v = tri.edge(slot)
                if self.is_illegal(tri.vertices[slot], u, v, w2):
                    logger.error("Edge fails the in-circle test", triangle=remap[idx], edge=(u, v))
                    raise MeshInvariantError("Mesh is not Delaunay", triangle=remap[idx])


def validate_points(points) -> np.ndarray:
    """
    Coerce input to an (N, 2) float array.

    Raises:
        InvalidPointsError: Wrong shape, non-numeric, NaN or infinite values
    """
    try:
        array = np.asarray(points, dtype=float)
    except (TypeError, ValueError) as exc:
        logger.warning("Rejected non-numeric points", error=str(exc))
        raise InvalidPointsError(f"Points are not numeric coordinate pairs: {exc}") from exc

    if array.size == 0:
        return array.reshape(0, 2)
    if array.ndim != 2 or array.shape[1] != 2:
        logger.warning("Rejected points with wrong shape", shape=array.shape)
        raise InvalidPointsError(f"Expected an (N, 2) array of points, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        bad = int(np.count_nonzero(~np.isfinite(array).all(axis=1)))
        logger.warning("Rejected non-finite points", count=bad)
        raise InvalidPointsError("Points contain NaN or infinite coordinates")
    return array


def deduplicate_points(points: np.ndarray, tolerance: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Merge points that fall in the same ``tolerance``-sized cell.

    The first occurrence of each point is kept, in input order.

    Returns:
        Tuple of (unique points, index_map) where ``index_map[i]`` is the
        position of input point ``i`` in the unique array
    """
    keys = np.round(points / tolerance).astype(np.int64)
    _, first_index, inverse = np.unique(keys, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)

    order = np.argsort(first_index)
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    return points[first_index[order]], rank[inverse]


def are_collinear(points: np.ndarray, tolerance: float) -> bool:
    """True when every point lies within ``tolerance`` of one line."""
    origin = points[0]
    offsets = points - origin
    lengths = np.einsum("ij,ij->i", offsets, offsets)
    far = int(np.argmax(lengths))
    if lengths[far] == 0.0:
        return True

    direction = offsets[far]
    cross = direction[0] * offsets[:, 1] - direction[1] * offsets[:, 0]
    return bool(np.all(np.abs(cross) / np.sqrt(lengths[far]) <= tolerance))


def _drop_merged(points: np.ndarray, triangles: np.ndarray, index_map: np.ndarray,
                 merged: Dict[int, int]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Remove points merged during insertion and renumber everything."""
    keep = np.array([i for i in range(len(points)) if i not in merged], dtype=int)
    new_index = np.full(len(points), -1, dtype=int)
    new_index[keep] = np.arange(len(keep))
    for point, target in merged.items():
        new_index[point] = new_index[target]
    return points[keep], new_index[triangles], new_index[index_map]


def triangulate(points, options: Optional[TriangulationOptions] = None) -> TriangulationResult:
    """
    Delaunay triangulation of a 2D point cloud.

    Args:
        points: (N, 2) array-like of coordinates
        options: Numerical options, defaults to the application settings

    Returns:
        TriangulationResult. Inputs with fewer than 3 distinct points or with
        all points collinear give an empty result with a matching status.

    Raises:
        InvalidPointsError: Malformed input
        MeshInvariantError: Internal consistency failure
    """
    options = options or TriangulationOptions.from_settings()
    raw = validate_points(points)
    normalization = Normalization.from_points(raw)

    if len(raw) < 3:
        logger.info("Too few points to triangulate", points=len(raw))
        return TriangulationResult.empty(raw.copy(), np.arange(len(raw)),
                                         TriangulationStatus.INSUFFICIENT_POINTS, normalization)

    normalized = normalization.apply(raw)
    unique, index_map = deduplicate_points(normalized, options.duplicate_tolerance)
    denormalized = normalization.invert(unique)

    if len(unique) < 3:
        logger.info("Too few distinct points to triangulate",
                    points=len(raw), distinct=len(unique))
        return TriangulationResult.empty(denormalized, index_map,
                                         TriangulationStatus.INSUFFICIENT_POINTS, normalization)

    if are_collinear(unique, options.epsilon):
        logger.info("All points are collinear", points=len(unique))
        return TriangulationResult.empty(denormalized, index_map,
                                         TriangulationStatus.COLLINEAR, normalization)

    logger.info("Starting triangulation", points=len(raw), distinct=len(unique),
                scale=normalization.scale)

    order = SpatialBins.from_points(unique).insertion_order()
    session = Triangulation(unique, options)
    session.insert_all(order)
    triangles, neighbors = session.finalize()

    if session.merged:
        denormalized, triangles, index_map = _drop_merged(
            denormalized, triangles, index_map, session.merged)

    logger.info("Triangulation complete", triangles=len(triangles),
                merged=len(session.merged), **session.stats)

    return TriangulationResult(
        points=denormalized,
        triangles=triangles,
        neighbors=neighbors,
        index_map=index_map,
        status=TriangulationStatus.OK,
        normalization=normalization,
        stats=dict(session.stats),
    )
