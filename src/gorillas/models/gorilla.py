"""Gorilla hit geometry, relative to the gorilla anchor.

The body is a fixed 12-vertex polygon; each arm is an 18-unit-wide stroke
along a quadratic curve from the shoulder.  The curve's control and end
points depend on the pose.  Geometry is computed on demand from the
anchor and never cached.
"""

from __future__ import annotations

from enum import Enum

from gorillas.models.city import Anchor
from gorillas.util.geometry import (
    Point,
    point_in_polygon,
    point_near_polyline,
    quadratic_curve,
    translate,
)

BODY: tuple[Point, ...] = (
    (0, 15), (-7, 0), (-20, 0), (-17, 18), (-20, 44), (-11, 77),
    (0, 84), (11, 77), (20, 44), (17, 18), (20, 0), (7, 0),
)

ARM_WIDTH: float = 18.0
SHOULDER_Y: float = 50.0
SHOULDER_X: float = 14.0
AIM_ARM_SCALE: float = 6.25  # velocity units per unit of arm pull-back
CURVE_SEGMENTS: int = 16


class Pose(Enum):
    """Arm pose of a gorilla."""

    NEUTRAL = "neutral"          # arms hanging down
    CELEBRATING = "celebrating"  # both arms raised
    AIMING = "aiming"            # throwing arm follows the aim vector


def _arm(side: int, control: Point, end: Point) -> list[Point]:
    """One arm polyline; side is -1 for the left arm, +1 for the right."""
    start = (side * SHOULDER_X, SHOULDER_Y)
    return quadratic_curve(start, (side * control[0], control[1]), end, CURVE_SEGMENTS)


def arm_curves(
    player: int,
    pose: Pose,
    aim: tuple[float, float] = (0.0, 0.0),
) -> list[list[Point]]:
    """Left and right arm polylines relative to the anchor.

    Player 1 throws with the left arm, player 2 with the right; only the
    throwing arm follows the aim vector in the aiming pose.
    """
    arms = []
    for side in (-1, 1):
        throwing_arm = (side == -1) == (player == 1)
        if pose is Pose.AIMING and throwing_arm:
            end = (side * 28 - aim[0] / AIM_ARM_SCALE, 107 - aim[1] / AIM_ARM_SCALE)
            arms.append(_arm(side, (44, 63), end))
        elif pose is Pose.CELEBRATING:
            arms.append(_arm(side, (44, 63), (side * 28, 107)))
        else:
            arms.append(_arm(side, (44, 45), (side * 28, 12)))
    return arms


def body_polygon(anchor: Anchor) -> list[Point]:
    """Body outline in world units."""
    return translate(BODY, anchor.x, anchor.height)


def is_hit(
    point: Point,
    anchor: Anchor,
    player: int,
    pose: Pose = Pose.NEUTRAL,
    aim: tuple[float, float] = (0.0, 0.0),
) -> bool:
    """True if a world point lies inside the gorilla's body or arm strokes."""
    if point_in_polygon(point, body_polygon(anchor)):
        return True
    half_width = ARM_WIDTH / 2
    for arm in arm_curves(player, pose, aim):
        if point_near_polyline(point, translate(arm, anchor.x, anchor.height), half_width):
            return True
    return False
