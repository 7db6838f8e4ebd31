"""Reproducible point clouds for demos, benchmarks and tests."""

from typing import Optional

import numpy as np


def random_points(n_points: int, width: float = 1.0, height: float = 1.0,
                  seed: Optional[int] = None) -> np.ndarray:
    """Uniformly distributed points in [0, width] x [0, height]."""
    rng = np.random.default_rng(seed)
    return rng.random((n_points, 2)) * np.array([width, height])


def jittered_grid(width: float, height: float, spacing: float,
                  seed: Optional[int] = None) -> np.ndarray:
    """
    Generate jittered square grid points.

    Creates a regular grid with cell centers moved by up to 45% of the
    spacing, which avoids both clustering and artificial regular patterns.

    Args:
        width: Grid width
        height: Grid height
        spacing: Distance between grid points
        seed: Random seed for reproducibility

    Returns:
        Array of [x, y] point coordinates
    """
    rng = np.random.default_rng(seed)

    radius = spacing / 2
    jittering = radius * 0.9  # max deviation

    xs = np.arange(radius, width, spacing)
    ys = np.arange(radius, height, spacing)
    grid_x, grid_y = np.meshgrid(xs, ys)
    points = np.column_stack([grid_x.ravel(), grid_y.ravel()])

    points += rng.uniform(-jittering, jittering, size=points.shape)
    return np.clip(points, 0.0, [width, height])


def regular_grid(cols: int, rows: int, spacing: float = 1.0) -> np.ndarray:
    """Exact ``cols`` x ``rows`` lattice, row by row from the origin."""
    grid_x, grid_y = np.meshgrid(np.arange(cols) * spacing, np.arange(rows) * spacing)
    return np.column_stack([grid_x.ravel(), grid_y.ravel()]).astype(float)


def circle_points(n_points: int, radius: float = 1.0, center=(0.0, 0.0),
                  with_center: bool = False) -> np.ndarray:
    """Points evenly spaced on a circle, optionally with its center appended."""
    angles = np.linspace(0.0, 2.0 * np.pi, n_points, endpoint=False)
    points = np.column_stack([np.cos(angles), np.sin(angles)]) * radius + np.asarray(center, dtype=float)
    if with_center:
        points = np.vstack([points, center])
    return points
