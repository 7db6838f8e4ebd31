"""
2D Delaunay triangulation by incremental insertion.
"""

from .core import (Edge, InvalidPointsError, MeshGraph, MeshInvariantError, Point,
                   TriangulationError, TriangulationOptions, TriangulationResult,
                   TriangulationStatus, triangulate)

__version__ = "0.1.0"

__all__ = ['triangulate', 'TriangulationOptions', 'TriangulationResult', 'TriangulationStatus',
           'MeshGraph', 'Point', 'Edge', 'TriangulationError', 'InvalidPointsError',
           'MeshInvariantError']
