"""
Spatial bin index for insertion ordering.

Points are dropped into a g x g grid over the unit square and emitted bin by
bin in boustrophedon (snake) order, so consecutive insertions are close to
each other and the point-location walk only crosses a few triangles.
"""

import math
from dataclasses import dataclass

import numpy as np
import structlog

logger = structlog.get_logger()


def grid_size(n_points: int) -> int:
    """
    Number of bins per side for ``n_points`` points.

    ``ceil(sqrt(N))`` rounded up to an even number; a single bin for N < 2.
    """
    if n_points < 2:
        return 1
    g = int(math.ceil(math.sqrt(n_points)))
    if g % 2:
        g += 1
    return g


@dataclass
class SpatialBins:
    """
    Bin assignment of normalized points.

    Attributes:
        size: Bins per side (g)
        cols: Column of each point, 0 at the left
        rows: Row of each point, 0 at the top and g-1 at the bottom
    """
    size: int
    cols: np.ndarray
    rows: np.ndarray

    @classmethod
    def from_points(cls, points: np.ndarray) -> "SpatialBins":
        """
        Assign every point in [0, 1]^2 to its bin.

        Args:
            points: (N, 2) array of normalized coordinates

        Returns:
            SpatialBins over the points
        """
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        g = grid_size(len(points))
        bin_size = 1.0 / g

        cols = np.floor(points[:, 0] / bin_size).astype(int)
        rows = g - 1 - np.floor(points[:, 1] / bin_size).astype(int)
        cols = np.clip(cols, 0, g - 1)
        rows = np.clip(rows, 0, g - 1)

        return cls(size=g, cols=cols, rows=rows)

    def bin_numbers(self) -> np.ndarray:
        """
        Traversal rank of each point's bin.

        Rows are visited from the bottom row upward. Even rows run
        left-to-right and odd rows right-to-left.
        """
        g = self.size
        row_rank = (g - 1) - self.rows
        col_rank = np.where(self.rows % 2 == 0, self.cols, g - 1 - self.cols)
        return row_rank * g + col_rank

    def insertion_order(self) -> np.ndarray:
        """Permutation of point indices in snake order, stable within a bin."""
        order = np.argsort(self.bin_numbers(), kind="stable")
        logger.debug("Insertion order computed", points=len(order), grid_size=self.size)
        return order
