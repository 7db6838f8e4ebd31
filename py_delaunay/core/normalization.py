"""
Unit-square normalization.

Mapping every input into [0, 1]^2 with one uniform scale bounds the magnitude
of the in-circle terms regardless of input units, so the engine can work with
fixed absolute tolerances.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Normalization:
    """Affine map ``(p - min) / scale`` and its inverse."""
    min_x: float
    min_y: float
    scale: float

    @classmethod
    def from_points(cls, points: np.ndarray) -> "Normalization":
        """
        Fit the mapping to a point cloud.

        The scale is the larger bounding-box side, but never below 1.0 so that
        tightly clustered inputs are translated rather than blown up.

        Args:
            points: (N, 2) array of coordinates, N >= 1

        Returns:
            Normalization for the cloud
        """
        points = np.asarray(points, dtype=float)
        if points.size == 0:
            return cls(0.0, 0.0, 1.0)

        mins = points.min(axis=0)
        maxs = points.max(axis=0)
        scale = max(float(maxs[0] - mins[0]), float(maxs[1] - mins[1]), 1.0)
        return cls(float(mins[0]), float(mins[1]), scale)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Map points into the unit square (returns a new array)."""
        points = np.asarray(points, dtype=float)
        return (points - np.array([self.min_x, self.min_y])) / self.scale

    def invert(self, points: np.ndarray) -> np.ndarray:
        """Map normalized points back to the original coordinate system."""
        points = np.asarray(points, dtype=float)
        return points * self.scale + np.array([self.min_x, self.min_y])
