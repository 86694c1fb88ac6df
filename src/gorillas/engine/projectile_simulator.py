"""Projectile simulator — ballistic flight and collision classification.

Each animation tick is split into sub-steps (10 by default).  Collision
is classified after every sub-step, so a fast projectile cannot tunnel
through a building or a gorilla's thin arm within one coarse tick.

Sub-step order (must be preserved):
1. move          — linear gravity integration
2. boundary miss — below ground or outside the field
3. building hit  — may record a blast hole (not in search mode)
4. gorilla hit   — against the thrower's opponent only

A miss in 2 or 3 wins over a simultaneous hit in 4: the turn passes.

The same simulator serves live throws (one ``step`` per animation tick)
and the planner's search trials (``simulate`` with ``search=True``), which
never touch the blast-hole list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gorillas.models import gorilla
from gorillas.models.game_state import Outcome
from gorillas.models.projectile import Projectile

if TYPE_CHECKING:
    from gorillas.loaders.game_config_loader import GameConfig
    from gorillas.models.game_state import GameState

log = logging.getLogger(__name__)

SPIN_RATE: float = 5.0


@dataclass(frozen=True)
class FlightResult:
    """Outcome of a fast-forwarded flight.

    Attributes:
        outcome: MISS or HIT; CONTINUE when the iteration cap was reached.
        impact: Projectile position when the flight ended.
        iterations: Number of nominal ticks simulated.
    """

    outcome: Outcome
    impact: tuple[float, float]
    iterations: int

    @property
    def terminated(self) -> bool:
        return self.outcome is not Outcome.CONTINUE


class ProjectileSimulator:
    """Advances the projectile and classifies collisions.

    Args:
        config: Physics constants and field size.
    """

    def __init__(self, config: GameConfig) -> None:
        self._config = config

    # -- Field -----------------------------------------------------------

    def field_width(self, state: GameState) -> float:
        """Configured field width, or the city's right edge."""
        if self._config.field_width is not None:
            return self._config.field_width
        return state.city.width

    # -- Stepping --------------------------------------------------------

    def step(
        self,
        state: GameState,
        elapsed_ms: float,
        substeps: int | None = None,
        *,
        search: bool = False,
        projectile: Projectile | None = None,
    ) -> Outcome:
        """Advance one animation tick of ``elapsed_ms``.

        Args:
            state: Game state (city, blast holes, thrower).
            elapsed_ms: Real or nominal time since the previous tick.
            substeps: Sub-steps per tick; defaults to the configured value.
            search: Search trial — blast holes are not recorded.
            projectile: Projectile to move; defaults to ``state.projectile``.

        Returns:
            MISS or HIT as soon as a sub-step terminates the flight,
            otherwise CONTINUE.
        """
        n = substeps if substeps is not None else self._config.substeps
        if n < 1:
            raise ValueError(f"substeps must be >= 1, got {n}")
        bomb = projectile if projectile is not None else state.projectile
        dt = elapsed_ms / n
        for _ in range(n):
            self._move(state, bomb, dt)
            outcome = self.classify(state, bomb, search=search)
            if outcome is not Outcome.CONTINUE:
                return outcome
        return Outcome.CONTINUE

    def simulate(
        self,
        state: GameState,
        projectile: Projectile,
        *,
        tick_ms: float,
        max_iterations: int,
        search: bool = True,
    ) -> FlightResult:
        """Fast-forward a flight without pacing until it ends or hits the cap."""
        for iteration in range(1, max_iterations + 1):
            outcome = self.step(state, tick_ms, search=search, projectile=projectile)
            if outcome is not Outcome.CONTINUE:
                return FlightResult(outcome, projectile.position, iteration)
        log.debug("Flight did not terminate within %d iterations", max_iterations)
        return FlightResult(Outcome.CONTINUE, projectile.position, max_iterations)

    # -- Physics ---------------------------------------------------------

    def _move(self, state: GameState, bomb: Projectile, dt_ms: float) -> None:
        cfg = self._config
        multiplier = dt_ms / cfg.time_unit_ms
        bomb.vy -= cfg.gravity * multiplier
        bomb.x += bomb.vx * multiplier
        bomb.y += bomb.vy * multiplier
        direction = -1 if state.current_player == 1 else 1
        bomb.rotation += direction * SPIN_RATE * multiplier

    # -- Collision -------------------------------------------------------

    def classify(self, state: GameState, bomb: Projectile, *, search: bool = False) -> Outcome:
        """Classify the projectile's current position."""
        miss = self.boundary_miss(state, bomb) or self.building_hit(state, bomb, search=search)
        if miss:
            return Outcome.MISS
        if self.gorilla_hit(state, bomb):
            return Outcome.HIT
        return Outcome.CONTINUE

    def boundary_miss(self, state: GameState, bomb: Projectile) -> bool:
        return bomb.y < 0 or bomb.x < 0 or bomb.x > self.field_width(state)

    def building_hit(self, state: GameState, bomb: Projectile, *, search: bool = False) -> bool:
        """True if the projectile struck solid building.

        Inside an existing blast hole the projectile passes through and the
        scan moves on to the next building.
        """
        margin = self._config.projectile_margin
        point = bomb.position
        for building in state.city.buildings:
            if (
                bomb.x + margin > building.x
                and bomb.x - margin < building.right
                and bomb.y - margin < building.height
            ):
                if state.terrain.would_overlap(point):
                    continue
                state.terrain.record(point, search=search)
                return True
        return False

    def gorilla_hit(self, state: GameState, bomb: Projectile) -> bool:
        """True if the projectile is inside the opponent's hit area."""
        target = state.opponent
        anchor = state.city.gorilla_anchor(target)
        return gorilla.is_hit(bomb.position, anchor, target, state.hit_pose(target))
