"""Triangle records stored in the triangulation arena."""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .geometry import Edge, circumcircle

NO_NEIGHBOR = -1


class EdgeRef(NamedTuple):
    """Edge of an arena triangle, identified by the slot of its opposite vertex."""
    triangle: int
    slot: int


@dataclass
class Triangle:
    """
    Counter-clockwise triangle addressed by point indices.

    ``neighbors[i]`` is the triangle across the edge opposite ``vertices[i]``,
    i.e. across edge (vertices[i+1], vertices[i+2]). ``NO_NEIGHBOR`` marks the
    boundary of the processed region.

    Triangles are created once and never re-vertexed: a split or a flip
    deactivates the old records and appends new ones, so an index that is
    still active always describes the same three vertices.
    """
    vertices: Tuple[int, int, int]
    neighbors: List[int] = field(default_factory=lambda: [NO_NEIGHBOR] * 3)
    active: bool = True
    center: Optional[Tuple[float, float]] = field(default=None, repr=False, compare=False)
    radius_sq: Optional[float] = field(default=None, repr=False, compare=False)

    def circumcircle(self, coords: Sequence[Sequence[float]]
                     ) -> Tuple[Optional[Tuple[float, float]], float]:
        """
        Circumcircle as (center, radius_squared), computed on first use.

        The vertices never change, so the result is cached on the record. A
        degenerate triangle has no center and an infinite radius.
        """
        if self.radius_sq is None:
            circle = circumcircle(*(coords[v] for v in self.vertices))
            if circle is None:
                self.center, self.radius_sq = None, float("inf")
            else:
                self.center, self.radius_sq = circle
        return self.center, self.radius_sq

    def edge(self, slot: int) -> Tuple[int, int]:
        """Directed edge opposite ``vertices[slot]`` in counter-clockwise order."""
        return self.vertices[(slot + 1) % 3], self.vertices[(slot + 2) % 3]

    def edges(self) -> List[Edge]:
        """Edges (v0, v1), (v1, v2), (v2, v0)."""
        v0, v1, v2 = self.vertices
        return [Edge(v0, v1), Edge(v1, v2), Edge(v2, v0)]

    def slot_of(self, vertex: int) -> int:
        """Position of ``vertex`` in this triangle."""
        return self.vertices.index(vertex)

    def neighbor_slot(self, triangle: int) -> int:
        """Slot whose neighbor link points at ``triangle``."""
        return self.neighbors.index(triangle)

    def replace_neighbor(self, old: int, new: int) -> None:
        """Repoint the link to ``old`` at ``new``."""
        for i in range(3):
            if self.neighbors[i] == old:
                self.neighbors[i] = new
                return

    def has_vertex_in(self, indices) -> bool:
        return any(v in indices for v in self.vertices)
