"""Game state model — data container for one duel session.

The GameState holds all mutable state for a running game.  It is owned
by the engine and passed by reference to every service; collaborators
only ever see an immutable GameSnapshot.
Business logic is in engine/turn_service.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gorillas.models.city import City, opponent_of
from gorillas.models.gorilla import Pose
from gorillas.models.projectile import Projectile
from gorillas.models.terrain import BlastHole, TerrainDamage
from gorillas.util.telemetry import AimTelemetry


class Phase(Enum):
    """Turn phase."""

    AIMING = "aiming"
    IN_FLIGHT = "in_flight"
    CELEBRATING = "celebrating"


class Outcome(Enum):
    """Result of advancing a projectile."""

    CONTINUE = "continue"
    MISS = "miss"
    HIT = "hit"


@dataclass
class GameState:
    """Mutable state container for a game.

    Attributes:
        city: Skyline generated for this session.
        number_of_players: 2 for hot-seat, 1 when player 2 is the computer.
        session: Generation token; changes on every new game.

        phase: Current turn phase.
        current_player: Player whose turn it is (1 or 2).
        round: Starts at 1, increments when the turn returns to player 1.
        winner: Set when a throw hits the opponent.

        projectile: The one projectile of the session.
        terrain: Blast holes recorded by live throws.
        throw_id: Increments on every committed throw.
        computer_throw_pending: A planned computer throw awaits commit.
        telemetry: Last aim telemetry per player.
        field_width: Right boundary used for misses.
        field_height: Viewport height for renderers; None lets them fit the city.
    """

    city: City
    number_of_players: int = 2
    session: int = 0

    phase: Phase = Phase.AIMING
    current_player: int = 1
    round: int = 1
    winner: int | None = None

    projectile: Projectile = field(default_factory=Projectile)
    terrain: TerrainDamage = field(default_factory=TerrainDamage)
    throw_id: int = 0
    computer_throw_pending: bool = False
    telemetry: dict[int, AimTelemetry] = field(
        default_factory=lambda: {1: AimTelemetry(), 2: AimTelemetry()}
    )
    field_width: float | None = None
    field_height: float | None = None

    # -- Queries ---------------------------------------------------------

    @property
    def opponent(self) -> int:
        return opponent_of(self.current_player)

    def is_computer(self, player: int) -> bool:
        """Player 2 is computer controlled in single-player games."""
        return self.number_of_players == 1 and player == 2

    @property
    def flight_token(self) -> tuple[int, int]:
        """Identifies the current throw across sessions."""
        return self.session, self.throw_id

    def hit_pose(self, player: int) -> Pose:
        """Pose used when hit-testing a gorilla.

        Neutral, except while that gorilla itself is celebrating.
        """
        if self.phase is Phase.CELEBRATING and self.current_player == player:
            return Pose.CELEBRATING
        return Pose.NEUTRAL

    def display_pose(self, player: int) -> Pose:
        """Pose a renderer should draw, including the aiming arm."""
        if self.phase is Phase.AIMING and self.current_player == player:
            return Pose.AIMING
        return self.hit_pose(player)

    def snapshot(self) -> GameSnapshot:
        """Immutable copy of everything a renderer needs."""
        p = self.projectile
        return GameSnapshot(
            session=self.session,
            phase=self.phase,
            current_player=self.current_player,
            round=self.round,
            number_of_players=self.number_of_players,
            projectile=(p.x, p.y, p.vx, p.vy, p.rotation),
            buildings=self.city.buildings,
            background=self.city.background,
            blast_holes=tuple(self.terrain.holes),
            blast_hole_radius=self.terrain.radius,
            winner=self.winner,
            telemetry=(self.telemetry[1], self.telemetry[2]),
            field_width=self.field_width if self.field_width is not None else self.city.width,
            field_height=self.field_height,
        )


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a GameState, published after every tick."""

    session: int
    phase: Phase
    current_player: int
    round: int
    number_of_players: int
    projectile: tuple[float, float, float, float, float]
    buildings: tuple
    background: tuple
    blast_holes: tuple[BlastHole, ...]
    blast_hole_radius: float
    winner: int | None
    telemetry: tuple[AimTelemetry, AimTelemetry]
    field_width: float
    field_height: float | None

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable form for renderers and telemetry views."""
        x, y, vx, vy, rotation = self.projectile
        return {
            "session": self.session,
            "phase": self.phase.value,
            "current_player": self.current_player,
            "round": self.round,
            "number_of_players": self.number_of_players,
            "projectile": {"x": x, "y": y, "vx": vx, "vy": vy, "rotation": rotation},
            "buildings": [
                {"x": b.x, "width": b.width, "height": b.height, "lights_on": list(b.lights_on)}
                for b in self.buildings
            ],
            "background": [
                {"x": b.x, "width": b.width, "height": b.height} for b in self.background
            ],
            "blast_holes": [{"x": h.x, "y": h.y} for h in self.blast_holes],
            "blast_hole_radius": self.blast_hole_radius,
            "winner": self.winner,
            "field": {"width": self.field_width, "height": self.field_height},
            "telemetry": {
                str(player): {"angle": t.angle_deg, "speed": t.speed}
                for player, t in enumerate(self.telemetry, start=1)
            },
        }
