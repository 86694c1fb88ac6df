"""City model — the skyline the duel is fought over.

Buildings are packed left to right with a fixed gap.  Player 1's gorilla
stands on the second building, player 2's on the second to last.
Business logic (generation) is in engine/world_generator.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field

REQUIRED_BUILDINGS: int = 8


class CityLayoutError(ValueError):
    """The city does not satisfy the layout invariants."""


@dataclass(frozen=True)
class Building:
    """A single building, anchored on the ground (y=0).

    Attributes:
        x: Left edge in world units.
        width: Horizontal extent.
        height: Roof height.
        lights_on: Lit-window bitmap, row-major from the top floor. Rendering only.
    """

    x: float
    width: float
    height: float
    lights_on: tuple[bool, ...] = field(default=(), repr=False)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


@dataclass(frozen=True)
class Anchor:
    """Where a gorilla's feet touch the roof (centre of its building)."""
    x: float
    height: float


@dataclass(frozen=True)
class City:
    """Ordered playable buildings plus a cosmetic background skyline.

    Attributes:
        buildings: Playable buildings, strictly increasing and non-overlapping.
        background: Decorative buildings with no game-logic role.

    Raises:
        CityLayoutError: If fewer than the required buildings are given or
            the buildings overlap.
    """

    buildings: tuple[Building, ...]
    background: tuple[Building, ...] = ()

    def __post_init__(self) -> None:
        if len(self.buildings) < REQUIRED_BUILDINGS:
            raise CityLayoutError(
                f"city needs at least {REQUIRED_BUILDINGS} buildings, got {len(self.buildings)}"
            )
        for left, right in zip(self.buildings, self.buildings[1:]):
            if right.x < left.right:
                raise CityLayoutError(f"buildings overlap at x={right.x:.1f}")

    # -- Queries ---------------------------------------------------------

    @property
    def width(self) -> float:
        """Right edge of the last building."""
        return self.buildings[-1].right

    def gorilla_building(self, player: int) -> Building:
        """The building a player's gorilla stands on."""
        if player == 1:
            return self.buildings[1]
        if player == 2:
            return self.buildings[-2]
        raise ValueError(f"unknown player {player}")

    def gorilla_anchor(self, player: int) -> Anchor:
        building = self.gorilla_building(player)
        return Anchor(building.center_x, building.height)

    def hand_position(self, player: int, offset: tuple[float, float] = (28.0, 107.0)) -> tuple[float, float]:
        """Where a gorilla holds the projectile before a throw.

        The hand is on the side facing the opponent: left for player 1,
        right for player 2.
        """
        anchor = self.gorilla_anchor(player)
        dx = -offset[0] if player == 1 else offset[0]
        return anchor.x + dx, anchor.height + offset[1]


def opponent_of(player: int) -> int:
    """The other player in a two-player duel."""
    return 2 if player == 1 else 1
