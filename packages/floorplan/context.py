"""Mutable working set shared by the wall clean-up passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from packages.core.types import FurnitureItem, Orientation, Wall

MIN_WALL_LENGTH = 1.0  # cm


@dataclass
class ReconstructionContext:
    """Walls and furniture being reconstructed, plus a flat endpoint arena.

    ``points`` is a ``(2N, 2)`` array: row ``2i`` is the start of wall ``i``
    and row ``2i + 1`` its end.  Passes edit the arena; :meth:`commit`
    writes it back onto the ``Wall`` objects.
    """

    walls: list[Wall]
    furniture: list[FurnitureItem] = field(default_factory=list)
    points: np.ndarray = field(default_factory=lambda: np.empty((0, 2)))
    orientations: list[Optional[Orientation]] = field(default_factory=list)

    @classmethod
    def from_walls(
        cls,
        walls: list[Wall],
        furniture: list[FurnitureItem] | None = None,
    ) -> ReconstructionContext:
        points = np.empty((2 * len(walls), 2), dtype=np.float64)
        for i, wall in enumerate(walls):
            points[2 * i] = (wall.start.x, wall.start.y)
            points[2 * i + 1] = (wall.end.x, wall.end.y)
        return cls(walls=walls, furniture=list(furniture or []), points=points)

    @property
    def wall_count(self) -> int:
        return len(self.walls)

    @property
    def starts(self) -> np.ndarray:
        return self.points[0::2]

    @property
    def ends(self) -> np.ndarray:
        return self.points[1::2]

    def vectors(self) -> np.ndarray:
        """``end - start`` for every wall, shape ``(N, 2)``."""
        return self.ends - self.starts

    def lengths(self) -> np.ndarray:
        v = self.vectors()
        return np.hypot(v[:, 0], v[:, 1])

    def midpoints(self) -> np.ndarray:
        return (self.starts + self.ends) / 2.0

    def valid_mask(self) -> np.ndarray:
        """Walls long enough to carry a direction."""
        return self.lengths() >= MIN_WALL_LENGTH

    def commit(self) -> None:
        """Write the arena back onto the walls' start/end points in place."""
        for i, wall in enumerate(self.walls):
            sx, sy = self.points[2 * i]
            ex, ey = self.points[2 * i + 1]
            wall.start.x, wall.start.y = float(sx), float(sy)
            wall.end.x, wall.end.y = float(ex), float(ey)
