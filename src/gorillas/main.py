"""Headless duel entry point.

Initializes all components and runs one game on the asyncio event loop:
1. Load configuration (config/game.yaml)
2. Create engine services (world, simulator, planner, turns, loop)
3. Create event bus and wire up logging of game transitions
4. Start a new game and drive human seats with the autopilot
5. Run the game loop until a gorilla is hit

There is no renderer here; seats that would belong to a human are played
by an autopilot that submits commands through the router, exactly as an
input adapter would.

Usage:
    python -m gorillas.main --players 1
    # or via entry point:
    gorillas --players 2 --config config/game.yaml --max-rounds 20
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
import signal
import sys
from dataclasses import dataclass
from typing import Optional

from gorillas.control.router import Router, register_command_handlers
from gorillas.engine.ai_planner import AIPlanner
from gorillas.engine.game_loop import GameLoop
from gorillas.engine.projectile_simulator import ProjectileSimulator
from gorillas.engine.turn_service import TurnService
from gorillas.engine.world_generator import WorldGenerator
from gorillas.loaders.game_config_loader import (
    DEFAULT_GAME_CONFIG_PATH,
    GameConfig,
    load_game_config,
)
from gorillas.models.game_state import Phase
from gorillas.util.events import (
    BlastHoleCreated,
    ComputerThrowPlanned,
    EventBus,
    GameStarted,
    GorillaHit,
    TurnPassed,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 20


# ---------------------------------------------------------------------------
# Container for all services (makes passing around easier)
# ---------------------------------------------------------------------------


@dataclass
class Services:
    """Holds references to all engine services."""

    game_config: GameConfig
    event_bus: EventBus
    world: WorldGenerator
    simulator: ProjectileSimulator
    planner: AIPlanner
    turns: TurnService
    router: Router
    game_loop: GameLoop
    autopilot: Optional[AIPlanner] = None


# ===================================================================
# 1. Create services
# ===================================================================


def create_services(config: GameConfig) -> Services:
    """Instantiate all engine services.

    A configured ``seed`` makes the city and every planner decision
    reproducible; each consumer gets its own stream derived from it.
    """
    log.info("Creating services …")
    seeds = random.Random(config.seed)

    event_bus = EventBus()
    world = WorldGenerator(config.city, random.Random(seeds.random()))
    simulator = ProjectileSimulator(config)
    planner = AIPlanner(simulator, config, random.Random(seeds.random()))
    turns = TurnService(config, event_bus, world, simulator, planner)
    router = Router()
    register_command_handlers(router, turns)
    game_loop = GameLoop(turns, config)
    autopilot = AIPlanner(simulator, config, random.Random(seeds.random()))

    log.info("  all services created (seed=%s)", config.seed)
    return Services(
        game_config=config,
        event_bus=event_bus,
        world=world,
        simulator=simulator,
        planner=planner,
        turns=turns,
        router=router,
        game_loop=game_loop,
        autopilot=autopilot,
    )


# ===================================================================
# 2. Wire events
# ===================================================================


def wire_events(services: Services, max_rounds: int = DEFAULT_MAX_ROUNDS) -> None:
    """Register event handlers: log transitions, stop the loop when done."""
    log.info("Wiring event handlers …")
    bus = services.event_bus
    loop = services.game_loop

    bus.on(GameStarted, lambda evt: log.info(
        "Game %d started (%d player%s)", evt.session, evt.number_of_players,
        "" if evt.number_of_players == 1 else "s"))
    bus.on(BlastHoleCreated, lambda evt: log.info("Crater at (%.0f, %.0f)", evt.x, evt.y))
    bus.on(ComputerThrowPlanned, lambda evt: log.info(
        "Computer thinks … (%d trials, distance %.0f)", evt.trials, evt.distance))

    def _on_hit(evt: GorillaHit) -> None:
        log.info("Player %d won!", evt.winner)
        loop.stop()

    def _on_turn(evt: TurnPassed) -> None:
        if evt.round > max_rounds:
            log.warning("No winner after %d rounds — stopping", max_rounds)
            loop.stop()

    bus.on(GorillaHit, _on_hit)
    bus.on(TurnPassed, _on_turn)


# ===================================================================
# 3. Autopilot for human seats
# ===================================================================


async def run_autopilot(services: Services) -> None:
    """Play human seats through the router, as an input adapter would."""
    turns = services.turns
    delay = services.game_config.computer_think_delay_ms / 1000.0
    last_token: tuple[int, int] | None = None
    while services.game_loop.is_running:
        state = turns.state
        token = state.flight_token
        if (state.phase is Phase.AIMING
                and not state.is_computer(state.current_player)
                and token != last_token):
            last_token = token
            plan = services.autopilot.choose_throw(state)
            await services.router.route({"type": "set_aim_velocity", "vx": plan.vx, "vy": plan.vy})
            await asyncio.sleep(delay)
            await services.router.route({"type": "commit_throw"})
        await asyncio.sleep(services.game_config.tick_interval_ms / 1000.0)


# ===================================================================
# 4. Run
# ===================================================================


async def start_game_loop(services: Services) -> None:
    """Run the animation loop until the game ends or a signal arrives."""
    log.info("Starting game loop …")
    loop = asyncio.get_running_loop()

    # Graceful shutdown on SIGINT / SIGTERM
    def _request_shutdown() -> None:
        log.info("Shutdown signal received — stopping …")
        services.game_loop.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_shutdown)

    def _on_autopilot_done(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            log.error("Autopilot failed: %r", task.exception())
            services.game_loop.stop()

    autopilot = asyncio.create_task(run_autopilot(services))
    autopilot.add_done_callback(_on_autopilot_done)
    await services.game_loop.run()
    autopilot.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await autopilot
    log.info("  goodbye")


async def _start(
    config_path: str = DEFAULT_GAME_CONFIG_PATH,
    number_of_players: int = 1,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
) -> Optional[int]:
    """Initialize all components, play one game and return the winner."""
    config = load_game_config(config_path)
    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    log.info("=== Gorillas starting ===")

    services = create_services(config)
    wire_events(services, max_rounds=max_rounds)
    await services.router.route({"type": "start_new_game", "number_of_players": number_of_players})
    await start_game_loop(services)
    return services.turns.state.winner


def _arg(name: str, default: str) -> str:
    if name in sys.argv:
        idx = sys.argv.index(name)
        if idx + 1 < len(sys.argv):
            return sys.argv[idx + 1]
        print(f"Error: {name} requires an argument", file=sys.stderr)
        sys.exit(1)
    return default


def main() -> None:
    """Entry point for the headless duel.

    Supports command-line arguments:
        --players <1|2>      1 = computer plays player 2 (default: 1)
        --config <path>      Game config YAML (default: config/game.yaml)
        --max-rounds <n>     Give up after n rounds (default: 20)
    """
    try:
        players = int(_arg("--players", "1"))
        max_rounds = int(_arg("--max-rounds", str(DEFAULT_MAX_ROUNDS)))
    except ValueError:
        print("Error: --players and --max-rounds take integers", file=sys.stderr)
        sys.exit(1)
    if players not in (1, 2):
        print("Error: --players must be 1 or 2", file=sys.stderr)
        sys.exit(1)
    config_path = _arg("--config", DEFAULT_GAME_CONFIG_PATH)

    asyncio.run(_start(config_path=config_path, number_of_players=players, max_rounds=max_rounds))


if __name__ == "__main__":
    main()
