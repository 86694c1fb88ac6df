"""Terrain damage — blast holes left by live building hits.

Holes are bookkeeping for rendering and duplicate suppression only.
They never erode a building's collision silhouette: a projectile that
lands inside an existing hole simply passes through that spot.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

BLAST_HOLE_RADIUS: float = 18.0


@dataclass(frozen=True)
class BlastHole:
    """Centre of a crater; the radius is shared by all holes."""
    x: float
    y: float


@dataclass
class TerrainDamage:
    """Append-only list of blast holes for one session.

    Invariant: every pair of recorded holes is at least ``radius`` apart.
    """

    radius: float = BLAST_HOLE_RADIUS
    holes: list[BlastHole] = field(default_factory=list)

    def would_overlap(self, point: tuple[float, float]) -> bool:
        """True if the point lies inside an existing hole."""
        px, py = point
        for hole in self.holes:
            if math.hypot(px - hole.x, py - hole.y) < self.radius:
                return True
        return False

    def record(self, point: tuple[float, float], *, search: bool = False) -> BlastHole | None:
        """Add a hole at ``point``.

        Returns the new hole, or None when called during a search trial or
        when the point is inside an existing hole.
        """
        if search or self.would_overlap(point):
            return None
        hole = BlastHole(point[0], point[1])
        self.holes.append(hole)
        log.debug("[CRATER] (%.1f, %.1f) — %d holes", hole.x, hole.y, len(self.holes))
        return hole

    def clear(self) -> None:
        self.holes.clear()

    def __len__(self) -> int:
        return len(self.holes)
