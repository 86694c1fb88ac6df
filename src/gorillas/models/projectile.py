"""Projectile model — the banana in flight.

Pure data.  Movement and collision are applied by
engine/projectile_simulator.py; repositioning by engine/turn_service.py.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Projectile:
    """Position and velocity in world units.

    Attributes:
        x: Horizontal position.
        y: Height above the ground.
        vx: Horizontal velocity (world units per 200 ms tick).
        vy: Vertical velocity, positive is up.
        rotation: Spin in radians, for visual purposes only.
    """

    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    rotation: float = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    def place(self, x: float, y: float, vx: float = 0.0, vy: float = 0.0) -> None:
        """Put the projectile at rest (or with a given velocity) at a point."""
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.rotation = 0.0

    def copy(self) -> Projectile:
        return Projectile(self.x, self.y, self.vx, self.vy, self.rotation)
