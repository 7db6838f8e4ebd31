"""Exceptions raised by the triangulation engine."""

from typing import Optional


class TriangulationError(Exception):
    """Base class for triangulation failures."""


class InvalidPointsError(TriangulationError, ValueError):
    """Input points are malformed (wrong shape, NaN or infinite coordinates)."""


class MeshInvariantError(TriangulationError, RuntimeError):
    """
    The mesh lost an internal invariant (coverage, planarity or adjacency).

    Never expected for valid input. Carries the offending point and triangle
    indices when known so the failing step can be reproduced.
    """

    def __init__(self, message: str, point: Optional[int] = None,
                 triangle: Optional[int] = None):
        details = []
        if point is not None:
            details.append(f"point={point}")
        if triangle is not None:
            details.append(f"triangle={triangle}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)
        self.point = point
        self.triangle = triangle
