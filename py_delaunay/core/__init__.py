"""
Core triangulation functionality.
"""

from .errors import TriangulationError, InvalidPointsError, MeshInvariantError
from .geometry import Point, Edge
from .normalization import Normalization
from .spatial_bins import SpatialBins
from .mesh_graph import MeshGraph
from .triangulation import (Triangulation, TriangulationOptions, TriangulationResult,
                            TriangulationStatus, triangulate)

__all__ = ['TriangulationError', 'InvalidPointsError', 'MeshInvariantError',
           'Point', 'Edge', 'Normalization', 'SpatialBins', 'MeshGraph',
           'Triangulation', 'TriangulationOptions', 'TriangulationResult',
           'TriangulationStatus', 'triangulate']
