"""Tests for geometric primitives and triangle records."""

import pytest
import numpy as np
from py_delaunay.core.geometry import (
    Edge, Point, barycentric, circumcircle, in_circle, is_strictly_convex_quad,
    orient2d, point_in_triangle, ranked_orient2d, squared_distance
)
from py_delaunay.core.triangle import NO_NEIGHBOR, Triangle


class TestPredicates:
    """Test orientation, in-circle and containment predicates."""

    def test_orientation_sign(self):
        """Counter-clockwise is positive, clockwise negative, collinear zero."""
        assert orient2d((0, 0), (1, 0), (0, 1)) == 1.0
        assert orient2d((0, 0), (0, 1), (1, 0)) == -1.0
        assert orient2d((0, 0), (1, 1), (2, 2)) == 0.0

    @pytest.mark.parametrize("d,sign", [
        ((0.5, 0.5), 1),
        ((2.0, 2.0), -1),
        ((1.0, 1.0), 0),
    ])
    def test_in_circle(self, d, sign):
        """Determinant sign tells inside / outside / on the circle."""
        det, permanent = in_circle((0, 0), (1, 0), (0, 1), d)
        assert np.sign(det) == sign
        assert permanent > 0
        assert abs(det) <= permanent

    def test_barycentric_centroid(self):
        weights = barycentric((1 / 3, 1 / 3), (0, 0), (1, 0), (0, 1))
        np.testing.assert_allclose(weights, [1 / 3, 1 / 3, 1 / 3])

    def test_barycentric_rejects_clockwise(self):
        """Degenerate or clockwise triangles have no barycentric coordinates."""
        assert barycentric((0.2, 0.2), (0, 0), (0, 1), (1, 0)) is None
        assert barycentric((0.2, 0.2), (0, 0), (1, 1), (2, 2)) is None

    def test_point_in_triangle_is_boundary_inclusive(self):
        a, b, c = (0, 0), (1, 0), (0, 1)
        assert point_in_triangle((0.25, 0.25), a, b, c)
        assert point_in_triangle((0.5, 0.0), a, b, c)
        assert point_in_triangle((0.0, 0.0), a, b, c)
        assert not point_in_triangle((1.0, 1.0), a, b, c)

    def test_point_in_triangle_tolerance(self):
        a, b, c = (0, 0), (1, 0), (0, 1)
        assert not point_in_triangle((0.5, -1e-9), a, b, c)
        assert point_in_triangle((0.5, -1e-9), a, b, c, tolerance=1e-6)

    def test_circumcircle(self):
        center, radius_sq = circumcircle((0, 0), (1, 0), (0, 1))
        np.testing.assert_allclose(center, (0.5, 0.5))
        assert radius_sq == pytest.approx(0.5)

    def test_circumcircle_collinear(self):
        assert circumcircle((0, 0), (1, 0), (2, 0)) is None

    def test_convex_quad(self):
        assert is_strictly_convex_quad((0, 0), (1, 0), (1, 1), (0, 1))
        # Collinear corner at (1, 0)
        assert not is_strictly_convex_quad((0, 0), (1, 0), (2, 0), (1, 1))
        # Reflex corner at (0.4, 0.4)
        assert not is_strictly_convex_quad((0, 0), (1, 0), (0.4, 0.4), (0, 1))

    def test_squared_distance(self):
        assert squared_distance(Point(0, 0), Point(3, 4)) == 25.0


class TestRankedOrientation:
    """Test orientation with points receding to infinity."""

    FAR_UP = [(1, (0.0, 1.0)), (0, (0.5, 0.5))]
    FARTHER_LEFT = [(2, (-1.0, 0.0)), (0, (0.5, 0.5))]

    def test_finite_points_match_orient2d(self):
        a, b, c = (0.1, 0.2), (0.9, 0.3), (0.4, 0.7)
        value = ranked_orient2d([(0, a)], [(0, b)], [(0, c)])
        assert value == pytest.approx(orient2d(a, b, c))

    @pytest.mark.parametrize("c,sign", [
        ((0.5, 0.0), -1),
        ((-0.5, 0.0), 1),
        ((0.0, -9.0), -1),
    ])
    def test_edge_towards_infinity(self, c, sign):
        """The sign follows x, and the finite offset decides points on the line x = 0."""
        value = ranked_orient2d([(0, (0.0, 0.0))], self.FAR_UP, [(0, c)])
        assert np.sign(value) == sign

    def test_farther_point_dominates(self):
        value = ranked_orient2d([(0, (0.0, 0.0))], self.FAR_UP, self.FARTHER_LEFT)
        assert value > 0
        assert ranked_orient2d([(0, (0.0, 0.0))], self.FARTHER_LEFT, self.FAR_UP) < 0

    def test_falls_back_to_lower_terms(self):
        """Points on the receding line are decided by the finite offsets."""
        value = ranked_orient2d([(0, (0.0, 0.0))], [(0, (0.0, 1.0))], self.FAR_UP)
        assert value == pytest.approx(-0.5)

    def test_identical_points(self):
        assert ranked_orient2d(self.FAR_UP, self.FAR_UP, [(0, (1.0, 1.0))]) == 0.0


class TestEdge:
    """Test unordered edge semantics."""

    def test_unordered_equality(self):
        assert Edge(1, 2) == Edge(2, 1)
        assert hash(Edge(1, 2)) == hash(Edge(2, 1))
        assert len({Edge(1, 2), Edge(2, 1), Edge(2, 3)}) == 2

    def test_endpoints_are_sorted(self):
        edge = Edge(7, 3)
        assert (edge.a, edge.b) == (3, 7)
        assert tuple(edge) == (3, 7)

    def test_same_endpoints_rejected(self):
        with pytest.raises(ValueError):
            Edge(4, 4)

    def test_other_endpoint(self):
        edge = Edge(3, 7)
        assert edge.other(3) == 7
        assert edge.other(7) == 3
        with pytest.raises(ValueError):
            edge.other(5)


class TestTriangle:
    """Test triangle arena records."""

    @pytest.fixture
    def coords(self):
        return [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)]

    def test_defaults(self):
        triangle = Triangle(vertices=(0, 1, 2))
        assert triangle.neighbors == [NO_NEIGHBOR] * 3
        assert triangle.active

    def test_edges_follow_vertex_order(self):
        triangle = Triangle(vertices=(0, 1, 2))
        assert triangle.edges() == [Edge(0, 1), Edge(1, 2), Edge(2, 0)]

    def test_edge_opposite_slot(self):
        triangle = Triangle(vertices=(4, 5, 6))
        assert triangle.edge(0) == (5, 6)
        assert triangle.edge(1) == (6, 4)
        assert triangle.edge(2) == (4, 5)
        assert triangle.slot_of(6) == 2

    def test_neighbor_bookkeeping(self):
        triangle = Triangle(vertices=(0, 1, 2), neighbors=[3, NO_NEIGHBOR, 5])
        assert triangle.neighbor_slot(5) == 2
        triangle.replace_neighbor(5, 9)
        assert triangle.neighbors == [3, NO_NEIGHBOR, 9]

    def test_circumcircle_computed_on_first_use(self, coords):
        triangle = Triangle(vertices=(0, 1, 2))
        assert triangle.radius_sq is None

        center, radius_sq = triangle.circumcircle(coords)
        np.testing.assert_allclose(center, (0.5, 0.5))
        assert radius_sq == pytest.approx(0.5)

        coords[0] = (5.0, 5.0)
        assert triangle.circumcircle(coords) == (center, radius_sq)

    def test_degenerate_circumcircle(self):
        triangle = Triangle(vertices=(0, 1, 2))
        assert triangle.circumcircle([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]) == (None, float("inf"))

    def test_has_vertex_in(self):
        triangle = Triangle(vertices=(0, 1, 2))
        assert triangle.has_vertex_in({2, 10})
        assert not triangle.has_vertex_in({10, 11, 12})
