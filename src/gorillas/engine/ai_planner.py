"""AI planner — Monte-Carlo throw search for the computer player.

=== Heuristic overview =====================================================

1.  **Trials** – ``base_trials + round × trials_per_round`` random throws
    (5 in round 1, 8 in round 2, …), so the computer gets more accurate
    the longer a game lasts.

2.  **Sampling** – angle uniform in [0°, 90°], speed uniform in [40, 140],
    mirrored horizontally for player 2.

3.  **Evaluation** – each trial is fast-forwarded on a scratch projectile
    from the thrower's hand in search mode: fixed 16 ms nominal ticks,
    no pacing, no blast holes.  The score is the distance from the impact
    point to a target 30 units above the opponent's feet.

4.  **Selection** – the smallest distance wins; ties keep the earlier
    trial.  Trials that hit the iteration cap are discarded.  If none
    terminates, a fixed fallback throw is returned so the computer never
    stalls.

=== Logging =================================================================

Every plan is logged as::

    [AI] player=<n> trials=<n> best=(<vx>, <vy>) distance=<d>
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gorillas.models.projectile import Projectile

if TYPE_CHECKING:
    from gorillas.engine.projectile_simulator import ProjectileSimulator
    from gorillas.loaders.game_config_loader import AIConfig, GameConfig
    from gorillas.models.game_state import GameState

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Trial:
    """One sampled and simulated candidate throw."""
    vx: float
    vy: float
    impact: tuple[float, float]
    distance: float
    terminated: bool


@dataclass(frozen=True)
class ThrowPlan:
    """The planner's choice.

    Attributes:
        vx, vy: Chosen throw velocity.
        distance: Impact distance to the target (inf for the fallback).
        trials: Every trial evaluated, in sampling order.
        fallback: True when no trial terminated.
    """
    vx: float
    vy: float
    distance: float
    trials: tuple[Trial, ...] = field(default=(), repr=False)
    fallback: bool = False

    @property
    def velocity(self) -> tuple[float, float]:
        return self.vx, self.vy


class AIPlanner:
    """Chooses throws for the computer player.

    Args:
        simulator: Shared projectile simulator, used in search mode.
        config: Game config (hand offsets and the ``ai`` section).
        rng: Random source for trial sampling.
    """

    def __init__(
        self,
        simulator: ProjectileSimulator,
        config: GameConfig,
        rng: random.Random | None = None,
    ) -> None:
        self._sim = simulator
        self._config = config
        self._params: AIConfig = config.ai
        self._rng = rng or random.Random()

    # -- Public API --------------------------------------------------------

    def trial_count(self, round_: int) -> int:
        return self._params.base_trials + round_ * self._params.trials_per_round

    def target(self, state: GameState) -> tuple[float, float]:
        """Aim point: just above the opponent's feet."""
        anchor = state.city.gorilla_anchor(state.opponent)
        return anchor.x, anchor.height + self._params.target_height_offset

    def choose_throw(self, state: GameState, trial_count: int | None = None) -> ThrowPlan:
        """Run the search and return the best throw.

        ``state`` is read only: trials fly a scratch projectile and never
        record blast holes.
        """
        count = trial_count if trial_count is not None else self.trial_count(state.round)
        target_x, target_y = self.target(state)
        hand = state.city.hand_position(state.current_player, self._config.hand_offset)
        direction = 1 if state.current_player == 1 else -1

        trials: list[Trial] = []
        best: Trial | None = None
        for _ in range(count):
            vx, vy = self._sample(direction)
            flight = self._sim.simulate(
                state,
                Projectile(hand[0], hand[1], vx, vy),
                tick_ms=self._params.search_tick_ms,
                max_iterations=self._params.max_iterations,
                search=True,
            )
            dist = math.hypot(target_x - flight.impact[0], target_y - flight.impact[1])
            trial = Trial(vx, vy, flight.impact, dist, flight.terminated)
            trials.append(trial)
            if trial.terminated and (best is None or trial.distance < best.distance):
                best = trial

        if best is None:
            fvx, fvy = self._params.fallback_velocity
            log.warning("[AI] player=%d no trial terminated in %d tries — fallback throw (%.1f, %.1f)",
                        state.current_player, count, fvx, fvy)
            return ThrowPlan(fvx, fvy, math.inf, tuple(trials), fallback=True)

        log.info("[AI] player=%d trials=%d best=(%.1f, %.1f) distance=%.1f",
                 state.current_player, count, best.vx, best.vy, best.distance)
        return ThrowPlan(best.vx, best.vy, best.distance, tuple(trials))

    # -- Internal ----------------------------------------------------------

    def _sample(self, direction: int) -> tuple[float, float]:
        p = self._params
        angle_deg = p.min_angle_deg + self._rng.random() * (p.max_angle_deg - p.min_angle_deg)
        angle = math.radians(angle_deg)
        speed = p.min_speed + self._rng.random() * (p.max_speed - p.min_speed)
        return math.cos(angle) * speed * direction, math.sin(angle) * speed
