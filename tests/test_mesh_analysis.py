"""Tests for mesh analysis, validation and the mesh graph."""

import pytest
import numpy as np

from py_delaunay import MeshInvariantError, triangulate
from py_delaunay.core.mesh_analysis import (
    check_mesh, circumcircles, convex_hull_area, expected_triangle_count,
    find_delaunay_violations, hull_point_count, is_delaunay, signed_areas, triangulated_area
)
from py_delaunay.core.mesh_graph import build_mesh_graph
from py_delaunay.core.point_sets import circle_points, jittered_grid, random_points, regular_grid


# Flat rhombus: the short diagonal C-D is Delaunay, the long one A-B is not
RHOMBUS = np.array([[0.0, 0.0], [1.0, 0.0], [0.5, 0.1], [0.5, -0.1]])
LONG_DIAGONAL = np.array([[0, 1, 2], [0, 3, 1]])
SHORT_DIAGONAL = np.array([[2, 0, 3], [2, 3, 1]])


class TestAreas:
    """Test area and hull helpers."""

    def test_signed_areas(self):
        points = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0]])
        np.testing.assert_allclose(signed_areas(points, [[0, 1, 2], [0, 2, 1]]), [2.0, -2.0])

    def test_triangulated_area(self):
        assert triangulated_area(RHOMBUS, SHORT_DIAGONAL) == pytest.approx(0.1)

    def test_convex_hull_area(self):
        assert convex_hull_area(regular_grid(3, 3)) == pytest.approx(4.0)

    def test_convex_hull_area_degenerate(self):
        assert convex_hull_area(np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])) == 0.0
        assert convex_hull_area(np.array([[0.0, 0.0], [1.0, 1.0]])) == 0.0

    @pytest.mark.parametrize("cols,rows,expected", [(2, 2, 4), (3, 3, 8), (5, 4, 14)])
    def test_hull_point_count_includes_collinear(self, cols, rows, expected):
        assert hull_point_count(regular_grid(cols, rows)) == expected

    def test_expected_triangle_count(self):
        assert expected_triangle_count(4, 4) == 2
        assert expected_triangle_count(9, 8) == 8


class TestDelaunayChecks:
    """Test the empty-circumcircle check."""

    def test_circumcircles(self):
        centers, radii_sq = circumcircles(np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]), [[0, 1, 2]])
        np.testing.assert_allclose(centers, [[0.5, 0.5]])
        np.testing.assert_allclose(radii_sq, [0.5])

    def test_violation_found(self):
        violations = find_delaunay_violations(RHOMBUS, LONG_DIAGONAL)

        assert (0, 3) in violations
        assert (1, 2) in violations
        assert not is_delaunay(RHOMBUS, LONG_DIAGONAL)

    def test_legal_triangulation(self):
        assert find_delaunay_violations(RHOMBUS, SHORT_DIAGONAL) == []
        assert is_delaunay(RHOMBUS, SHORT_DIAGONAL)

    def test_cocircular_points_are_accepted(self):
        """Points exactly on a circumcircle are not violations."""
        square = regular_grid(2, 2)
        assert is_delaunay(square, [[0, 1, 3], [0, 3, 2]])
        assert is_delaunay(square, [[0, 1, 2], [1, 3, 2]])

    def test_empty_mesh(self):
        assert find_delaunay_violations(RHOMBUS, np.empty((0, 3), dtype=int)) == []


class TestCheckMesh:
    """Test topology validation."""

    def test_valid(self):
        check_mesh(RHOMBUS, SHORT_DIAGONAL, [[-1, 1, -1], [-1, -1, 0]])

    def test_clockwise_triangle(self):
        with pytest.raises(MeshInvariantError) as excinfo:
            check_mesh(RHOMBUS, [[2, 3, 0]], [[-1, -1, -1]])
        assert excinfo.value.triangle == 0

    def test_degenerate_triangle(self):
        points = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])
        with pytest.raises(MeshInvariantError):
            check_mesh(points, [[0, 1, 2]], [[-1, -1, -1]])

    def test_duplicate_triangle(self):
        with pytest.raises(MeshInvariantError):
            check_mesh(RHOMBUS, [[2, 0, 3], [0, 3, 2]], [[-1, -1, -1], [-1, -1, -1]])

    def test_asymmetric_link(self):
        with pytest.raises(MeshInvariantError) as excinfo:
            check_mesh(RHOMBUS, SHORT_DIAGONAL, [[-1, 1, -1], [-1, -1, -1]])
        assert excinfo.value.triangle == 0

    def test_link_without_shared_edge(self):
        with pytest.raises(MeshInvariantError):
            check_mesh(RHOMBUS, SHORT_DIAGONAL, [[1, -1, -1], [0, -1, -1]])


class TestMeshGraph:
    """Test point adjacency and the dual graph."""

    @pytest.fixture
    def square_graph(self):
        return triangulate([(0, 0), (1, 0), (1, 1), (0, 1)]).mesh_graph()

    @pytest.fixture
    def random_graph(self):
        return triangulate(random_points(200, seed=81)).mesh_graph()

    def test_square(self, square_graph):
        assert len(square_graph.edges()) == 5
        assert square_graph.triangle_neighbors == [[1], [0]]
        np.testing.assert_array_equal(square_graph.border_flags, [1, 1, 1, 1])
        np.testing.assert_allclose(square_graph.circumcenters, [[0.5, 0.5], [0.5, 0.5]])

    def test_degrees_sum_to_twice_the_edges(self, random_graph):
        degrees = sum(random_graph.degree(p) for p in range(len(random_graph.points)))
        assert degrees == 2 * len(random_graph.edges())

    def test_neighbor_symmetry(self, random_graph):
        for p, nbrs in enumerate(random_graph.point_neighbors):
            assert nbrs == sorted(nbrs)
            for q in nbrs:
                assert p in random_graph.point_neighbors[q]

    def test_point_triangles(self, random_graph):
        incidences = sum(len(tris) for tris in random_graph.point_triangles)
        assert incidences == 3 * len(random_graph.circumcenters)
        assert all(random_graph.point_triangles)

    def test_euler_characteristic(self, random_graph):
        """V - E + F = 1 for a triangulated disk."""
        v = len(random_graph.points)
        e = len(random_graph.edges())
        f = len(random_graph.circumcenters)
        assert v - e + f == 1

    def test_border_flags_match_hull(self, random_graph):
        assert int(random_graph.border_flags.sum()) == hull_point_count(random_graph.points)

    def test_interior_points_on_circle(self):
        """The center of a regular ring is the only interior point."""
        points = circle_points(10, radius=2.0, with_center=True)
        graph = triangulate(points).mesh_graph()

        assert graph.border_flags[10] == 0
        assert graph.degree(10) == 10
        assert np.all(graph.border_flags[:10] == 1)

    def test_build_from_arrays(self):
        graph = build_mesh_graph(RHOMBUS, SHORT_DIAGONAL, [[-1, 1, -1], [-1, -1, 0]])

        assert graph.point_neighbors[2] == [0, 1, 3]
        assert graph.point_triangles[2] == [0, 1]
        assert graph.triangle_neighbors == [[1], [0]]

    def test_dual_vertices_inside_jittered_grid(self):
        """Circumcenters of a well-spaced grid stay near the point cloud."""
        points = jittered_grid(50, 50, 5, seed=9)
        graph = triangulate(points).mesh_graph()
        interior = graph.border_flags == 0

        assert interior.any()
        assert np.all(np.isfinite(graph.circumcenters))
