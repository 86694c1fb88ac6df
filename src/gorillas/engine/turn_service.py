"""Turn service — the turn/phase state machine.

States::

    aiming ──commit_throw──▶ in_flight ──miss──▶ aiming (other player)
                                       └─hit───▶ celebrating (terminal)

The service owns the GameState.  Front ends submit commands
(``start_new_game``, ``set_aim_velocity``, ``commit_throw``) and read
``state.snapshot()``; the game loop calls ``advance`` once per animation
tick.  Commands outside their valid phase are ignored, not errors.

When the computer is up, the planner runs immediately and its throw is
left pending; the game loop commits it after a short "thinking" delay.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from gorillas.models.game_state import GameState, Outcome, Phase
from gorillas.models.terrain import TerrainDamage
from gorillas.util.events import (
    BlastHoleCreated,
    ComputerThrowPlanned,
    GameStarted,
    GorillaHit,
    ThrowCommitted,
    TurnPassed,
)
from gorillas.util.telemetry import aim_telemetry

if TYPE_CHECKING:
    from gorillas.engine.ai_planner import AIPlanner
    from gorillas.engine.projectile_simulator import ProjectileSimulator
    from gorillas.engine.world_generator import WorldGenerator
    from gorillas.loaders.game_config_loader import GameConfig
    from gorillas.util.events import EventBus

log = logging.getLogger(__name__)


class TurnService:
    """Drives a duel from new game to celebration.

    Args:
        config: Game configuration.
        event_bus: Bus on which transitions are published.
        world: Generator for each new game's city.
        simulator: Projectile simulator for live throws.
        planner: Throw search for the computer player.
    """

    def __init__(
        self,
        config: GameConfig,
        event_bus: EventBus,
        world: WorldGenerator,
        simulator: ProjectileSimulator,
        planner: AIPlanner,
    ) -> None:
        self._config = config
        self._events = event_bus
        self._world = world
        self._sim = simulator
        self._planner = planner
        self._generation = 0
        self._state: GameState | None = None

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("no game started")
        return self._state

    @property
    def has_game(self) -> bool:
        return self._state is not None

    # -- Commands ----------------------------------------------------------

    def start_new_game(self, number_of_players: int = 2) -> GameState:
        """Replace the current session with a fresh game."""
        if number_of_players not in (1, 2):
            raise ValueError(f"number_of_players must be 1 or 2, got {number_of_players}")
        self._generation += 1
        state = GameState(
            city=self._world.generate(),
            number_of_players=number_of_players,
            session=self._generation,
            terrain=TerrainDamage(radius=self._config.blast_hole_radius),
        )
        state.field_width = self._sim.field_width(state)
        state.field_height = self._config.field_height
        self._state = state
        self._reposition(state)
        log.info("New game (session=%d, players=%d)", state.session, number_of_players)
        self._events.emit(GameStarted(session=state.session, number_of_players=number_of_players))

        if state.is_computer(state.current_player):
            self._prepare_computer_turn(state)
        return state

    def set_aim_velocity(self, vx: float, vy: float) -> bool:
        """Aim the current human player's throw. Returns False if ignored."""
        state = self.state
        if state.phase is not Phase.AIMING or state.is_computer(state.current_player):
            log.debug("set_aim_velocity ignored (phase=%s, player=%d)",
                      state.phase.value, state.current_player)
            return False
        if vx == 0 and vy == 0:
            log.debug("set_aim_velocity ignored: zero-length aim")
            return False
        if not (math.isfinite(vx) and math.isfinite(vy)):
            log.debug("set_aim_velocity ignored: non-finite aim (%s, %s)", vx, vy)
            return False
        self._aim(state, vx, vy)
        return True

    def commit_throw(self) -> bool:
        """Release the current human player's throw. Returns False if ignored."""
        state = self.state
        if state.phase is not Phase.AIMING or state.is_computer(state.current_player):
            log.debug("commit_throw ignored (phase=%s, player=%d)",
                      state.phase.value, state.current_player)
            return False
        self._launch(state, by_computer=False)
        return True

    def commit_computer_throw(self, token: tuple[int, int]) -> bool:
        """Release a pending computer throw planned under ``token``.

        Stale tokens (a new game or another throw since planning) are ignored.
        """
        state = self._state
        if state is None or not state.computer_throw_pending or state.flight_token != token:
            log.debug("Stale computer throw dropped (token=%s)", token)
            return False
        self._launch(state, by_computer=True)
        return True

    # -- Simulation --------------------------------------------------------

    def advance(self, elapsed_ms: float) -> Outcome:
        """Advance the live throw by one animation tick."""
        state = self.state
        if state.phase is not Phase.IN_FLIGHT:
            return Outcome.CONTINUE

        holes_before = len(state.terrain)
        outcome = self._sim.step(state, elapsed_ms)
        if len(state.terrain) > holes_before:
            hole = state.terrain.holes[-1]
            self._events.emit(BlastHoleCreated(x=hole.x, y=hole.y))

        if outcome is Outcome.MISS:
            self._on_miss(state)
        elif outcome is Outcome.HIT:
            self._on_hit(state)
        return outcome

    def play_out(self, tick_ms: float = 16.0, max_ticks: int = 100_000) -> Outcome:
        """Run the live throw to completion without pacing (headless play)."""
        for _ in range(max_ticks):
            outcome = self.advance(tick_ms)
            if outcome is not Outcome.CONTINUE:
                return outcome
        return Outcome.CONTINUE

    # -- Transitions -------------------------------------------------------

    def _launch(self, state: GameState, by_computer: bool) -> None:
        p = state.projectile
        state.computer_throw_pending = False
        state.phase = Phase.IN_FLIGHT
        state.throw_id += 1
        log.info("[THROW] player=%d v=(%.1f, %.1f)%s",
                 state.current_player, p.vx, p.vy, " (computer)" if by_computer else "")
        self._events.emit(ThrowCommitted(
            player=state.current_player, vx=p.vx, vy=p.vy, by_computer=by_computer,
        ))

    def _on_miss(self, state: GameState) -> None:
        impact_x, impact_y = state.projectile.position
        previous = state.current_player
        state.current_player = state.opponent
        if state.current_player == 1:
            state.round += 1
        state.phase = Phase.AIMING
        self._reposition(state)
        log.info("[MISS] player=%d at (%.1f, %.1f) — player %d up, round %d",
                 previous, impact_x, impact_y, state.current_player, state.round)
        self._events.emit(TurnPassed(
            previous_player=previous,
            current_player=state.current_player,
            round=state.round,
            impact_x=impact_x,
            impact_y=impact_y,
        ))
        if state.is_computer(state.current_player):
            self._prepare_computer_turn(state)

    def _on_hit(self, state: GameState) -> None:
        state.winner = state.current_player
        state.phase = Phase.CELEBRATING
        x, y = state.projectile.position
        log.info("[HIT] player=%d wins in round %d", state.winner, state.round)
        self._events.emit(GorillaHit(winner=state.winner, impact_x=x, impact_y=y))

    def _prepare_computer_turn(self, state: GameState) -> None:
        plan = self._planner.choose_throw(state)
        self._reposition(state)
        self._aim(state, plan.vx, plan.vy)
        state.computer_throw_pending = True
        self._events.emit(ComputerThrowPlanned(
            player=state.current_player,
            vx=plan.vx,
            vy=plan.vy,
            trials=len(plan.trials),
            distance=plan.distance,
            fallback=plan.fallback,
        ))

    # -- Helpers -----------------------------------------------------------

    def _reposition(self, state: GameState) -> None:
        """Put the projectile at rest in the current player's hand."""
        x, y = state.city.hand_position(state.current_player, self._config.hand_offset)
        state.projectile.place(x, y)

    @staticmethod
    def _aim(state: GameState, vx: float, vy: float) -> None:
        state.projectile.vx = vx
        state.projectile.vy = vy
        state.telemetry[state.current_player] = aim_telemetry(vx, vy)
