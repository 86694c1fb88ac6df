"""Main game loop — asyncio-based animation tick.

Responsibilities:
- Advance the live throw once per tick (nominally one display refresh)
- Commit pending computer throws after the "thinking" delay
- Publish an immutable snapshot to observers after every tick

Each throw is identified by its flight token ``(session, throw_id)``.
The first tick of a new flight only records a timestamp, so a delta
measured during a previous throw or a previous game is never applied
to a freshly reset state.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

from gorillas.models.game_state import Phase

if TYPE_CHECKING:
    from gorillas.engine.turn_service import TurnService
    from gorillas.loaders.game_config_loader import GameConfig
    from gorillas.models.game_state import GameSnapshot

log = logging.getLogger(__name__)

SnapshotListener = Callable[["GameSnapshot"], None]


class GameLoop:
    """The real-time animation loop.

    Args:
        turns: Turn service owning the game state.
        game_config: Tick interval and computer thinking delay.
    """

    def __init__(self, turns: TurnService, game_config: GameConfig | None = None) -> None:
        self._turns = turns
        self._running = False
        self._step_interval = (game_config.tick_interval_ms / 1000.0) if game_config else 0.016
        self._think_delay = (game_config.computer_think_delay_ms / 1000.0) if game_config else 1.0
        self._listeners: list[SnapshotListener] = []

        self._flight: tuple[int, int] | None = None
        self._last_tick: float = 0.0
        self._scheduled: dict[tuple[int, int], asyncio.Task] = {}

        # --- Debug / monitoring counters ---
        self.tick_count: int = 0
        self.started_at: float = 0.0
        self.last_snapshot: GameSnapshot | None = None

    def subscribe(self, listener: SnapshotListener) -> None:
        """Call ``listener`` with a fresh snapshot after every tick."""
        self._listeners.append(listener)

    async def run(self) -> None:
        """Start the game loop. Runs until stop() is called."""
        self._running = True
        self.started_at = time.monotonic()
        while self._running:
            self.step(time.monotonic())
            self.tick_count += 1
            await asyncio.sleep(self._step_interval)
        self._cancel_scheduled()

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the loop started."""
        if self.started_at == 0.0:
            return 0.0
        return time.monotonic() - self.started_at

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Signal the game loop to stop."""
        self._running = False

    def step(self, now: float) -> None:
        """One tick at monotonic time ``now`` (seconds)."""
        if not self._turns.has_game:
            return
        state = self._turns.state

        if state.computer_throw_pending:
            self._schedule_computer_throw(state.flight_token)

        if state.phase is Phase.IN_FLIGHT:
            token = state.flight_token
            if token != self._flight:
                self._flight = token
                self._last_tick = now
            else:
                elapsed_ms = (now - self._last_tick) * 1000.0
                self._last_tick = now
                self._turns.advance(elapsed_ms)
        else:
            self._flight = None

        self._publish(state.snapshot())

    # -- Computer turns ----------------------------------------------------

    def _schedule_computer_throw(self, token: tuple[int, int]) -> None:
        if token in self._scheduled:
            return
        self._scheduled[token] = asyncio.get_running_loop().create_task(
            self._commit_later(token)
        )

    async def _commit_later(self, token: tuple[int, int]) -> None:
        try:
            await asyncio.sleep(self._think_delay)
            self._turns.commit_computer_throw(token)
        finally:
            self._scheduled.pop(token, None)

    def _cancel_scheduled(self) -> None:
        for task in list(self._scheduled.values()):
            task.cancel()
        self._scheduled.clear()

    # -- Observers ---------------------------------------------------------

    def _publish(self, snapshot: GameSnapshot) -> None:
        self.last_snapshot = snapshot
        for listener in self._listeners:
            listener(snapshot)
