"""
Geometric primitives and numeric predicates.

Predicates are pure functions of coordinates. They accept anything indexable
as ``p[0], p[1]`` (``Point``, tuples, numpy rows) and never look at mesh state.
Tolerances are passed explicitly by the caller.
"""

from typing import Dict, NamedTuple, Optional, Sequence, Tuple

Coordinate = Sequence[float]


class Point(NamedTuple):
    """2D coordinate pair."""
    x: float
    y: float


class Edge:
    """
    Unordered pair of two distinct point indices.

    ``Edge(a, b) == Edge(b, a)`` and both hash the same, so edges can be used
    as set members and dict keys to find shared triangle boundaries.
    """

    __slots__ = ("a", "b")

    def __init__(self, a: int, b: int):
        if a == b:
            raise ValueError(f"Edge endpoints must differ, got {a} twice")
        self.a, self.b = (a, b) if a < b else (b, a)

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return self.a == other.a and self.b == other.b

    def __hash__(self):
        return hash((self.a, self.b))

    def __repr__(self):
        return f"Edge({self.a}, {self.b})"

    def __iter__(self):
        yield self.a
        yield self.b

    def other(self, vertex: int) -> int:
        """Return the endpoint that is not ``vertex``."""
        if vertex == self.a:
            return self.b
        if vertex == self.b:
            return self.a
        raise ValueError(f"Vertex {vertex} is not an endpoint of {self}")


def orient2d(a: Coordinate, b: Coordinate, c: Coordinate) -> float:
    """
    Twice the signed area of triangle (a, b, c).

    Positive for counter-clockwise order, negative for clockwise, zero when
    collinear.
    """
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def in_circle(a: Coordinate, b: Coordinate, c: Coordinate,
              d: Coordinate) -> Tuple[float, float]:
    """
    In-circle determinant for point ``d`` against the circle through a, b, c.

    For counter-clockwise (a, b, c) the determinant is positive when ``d`` lies
    strictly inside the circumcircle, zero on it and negative outside.

    Returns:
        Tuple of (determinant, permanent). The permanent is the same expansion
        with absolute values and bounds the rounding error of the determinant.
    """
    adx, ady = a[0] - d[0], a[1] - d[1]
    bdx, bdy = b[0] - d[0], b[1] - d[1]
    cdx, cdy = c[0] - d[0], c[1] - d[1]

    alift = adx * adx + ady * ady
    blift = bdx * bdx + bdy * bdy
    clift = cdx * cdx + cdy * cdy

    bc = bdx * cdy - cdx * bdy
    ca = cdx * ady - adx * cdy
    ab = adx * bdy - bdx * ady

    det = alift * bc + blift * ca + clift * ab
    permanent = (
        (abs(bdx * cdy) + abs(cdx * bdy)) * alift
        + (abs(cdx * ady) + abs(adx * cdy)) * blift
        + (abs(adx * bdy) + abs(bdx * ady)) * clift
    )
    return det, permanent


def barycentric(p: Coordinate, a: Coordinate, b: Coordinate,
                c: Coordinate) -> Optional[Tuple[float, float, float]]:
    """
    Barycentric coordinates of ``p`` with respect to triangle (a, b, c).

    Returns:
        (l1, l2, l3) with ``p = l1*a + l2*b + l3*c``, or None when the triangle
        is degenerate or clockwise (non-positive denominator).
    """
    denom = orient2d(a, b, c)
    if denom <= 0.0:
        return None
    l1 = orient2d(p, b, c) / denom
    l2 = orient2d(a, p, c) / denom
    return l1, l2, 1.0 - l1 - l2


def point_in_triangle(p: Coordinate, a: Coordinate, b: Coordinate,
                      c: Coordinate, tolerance: float = 0.0) -> bool:
    """Boundary-inclusive containment test based on barycentric signs."""
    weights = barycentric(p, a, b, c)
    if weights is None:
        return False
    return all(w >= -tolerance for w in weights)


def circumcircle(a: Coordinate, b: Coordinate,
                 c: Coordinate) -> Optional[Tuple[Tuple[float, float], float]]:
    """
    Circumcircle of triangle (a, b, c).

    The center is computed relative to ``a`` to keep the terms small.

    Returns:
        ((cx, cy), radius_squared), or None for collinear points.
    """
    bx, by = b[0] - a[0], b[1] - a[1]
    cx, cy = c[0] - a[0], c[1] - a[1]
    d = 2.0 * (bx * cy - by * cx)
    if d == 0.0:
        return None

    b_len = bx * bx + by * by
    c_len = cx * cx + cy * cy
    ux = (cy * b_len - by * c_len) / d
    uy = (bx * c_len - cx * b_len) / d
    return (a[0] + ux, a[1] + uy), ux * ux + uy * uy


def squared_distance(a: Coordinate, b: Coordinate) -> float:
    """Squared Euclidean distance between two points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def is_strictly_convex_quad(a: Coordinate, b: Coordinate, c: Coordinate,
                            d: Coordinate) -> bool:
    """True when quadrilateral a-b-c-d (in order) turns left at every corner."""
    return (orient2d(a, b, c) > 0.0 and orient2d(b, c, d) > 0.0
            and orient2d(c, d, a) > 0.0 and orient2d(d, a, b) > 0.0)


def ranked_orient2d(a: Sequence[Tuple[int, Coordinate]],
                    b: Sequence[Tuple[int, Coordinate]],
                    c: Sequence[Tuple[int, Coordinate]]) -> float:
    """
    Orientation of points that may lie arbitrarily far away.

    Each point is a polynomial in a growing scale ``R``, given as
    ``(power, (x, y))`` terms: a finite point is ``[(0, xy)]`` and a point
    receding along direction ``d`` from ``o`` is ``[(k, d), (0, o)]``.
    ``orient2d`` of such points is itself a polynomial in ``R``; its sign for
    ``R -> inf`` is the sign of the highest non-zero coefficient.

    Returns:
        That coefficient, or 0.0 when every coefficient vanishes
    """
    u: Dict[int, Tuple[float, float]] = {}
    v: Dict[int, Tuple[float, float]] = {}
    for target, head in ((u, b), (v, c)):
        for power, (x, y) in head:
            px, py = target.get(power, (0.0, 0.0))
            target[power] = (px + x, py + y)
        for power, (x, y) in a:
            px, py = target.get(power, (0.0, 0.0))
            target[power] = (px - x, py - y)

    coefficients: Dict[int, float] = {}
    for i, (ux, uy) in u.items():
        for j, (vx, vy) in v.items():
            coefficients[i + j] = coefficients.get(i + j, 0.0) + ux * vy - uy * vx

    for power in sorted(coefficients, reverse=True):
        if coefficients[power] != 0.0:
            return coefficients[power]
    return 0.0
