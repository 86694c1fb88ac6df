"""Aim telemetry — angle and speed derived from a velocity vector.

Shown next to each player as "Angle: 45°  Velocity: 100".
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class AimTelemetry:
    """Angle in degrees above the horizon and speed magnitude."""
    angle_deg: float = 0.0
    speed: float = 0.0

    def rounded(self) -> tuple[int, int]:
        """Whole-number values as displayed on screen."""
        return round(self.angle_deg), round(self.speed)


def aim_telemetry(vx: float, vy: float) -> AimTelemetry:
    """Compute telemetry for an aim vector.

    A zero-length vector has no defined angle; it reports 0° instead of NaN.
    """
    speed = math.sqrt(vx ** 2 + vy ** 2)
    if speed == 0:
        return AimTelemetry(0.0, 0.0)
    ratio = max(-1.0, min(1.0, vy / speed))
    return AimTelemetry(math.degrees(math.asin(ratio)), speed)


def velocity_from_drag(drag_dx: float, drag_dy: float) -> tuple[float, float]:
    """Translate a pointer drag (screen deltas) into a throw velocity.

    Dragging away from the target pulls the throw towards it, so the
    horizontal delta is inverted; screen y grows downwards, world y upwards.
    """
    return -drag_dx, drag_dy
