"""Shared fixtures: a hand-built city with known geometry.

Layout (x ranges, heights)::

    b0   0–80   h200     b4 386–486 h250
    b1  84–174  h100     b5 490–590 h200
    b2 178–278  h250     b6 594–694 h80
    b3 282–382  h150     b7 698–798 h150

Player 1 stands on b1 (anchor (129, 100), hand (101, 207)).
Player 2 stands on b6 (anchor (644, 80), hand (672, 187)).
"""

import random

import pytest

from gorillas.engine.ai_planner import AIPlanner
from gorillas.engine.projectile_simulator import ProjectileSimulator
from gorillas.engine.turn_service import TurnService
from gorillas.loaders.game_config_loader import GameConfig
from gorillas.models.city import Building, City
from gorillas.models.game_state import GameState
from gorillas.util.events import EventBus

WIDTHS = [80, 90, 100, 100, 100, 100, 100, 100]
HEIGHTS = [200, 100, 250, 150, 250, 200, 80, 150]


def make_city() -> City:
    buildings = []
    x = 0.0
    for width, height in zip(WIDTHS, HEIGHTS):
        buildings.append(Building(x, float(width), float(height)))
        x += width + 4
    return City(tuple(buildings))


class FixedWorld:
    """World generator stand-in that always returns the same city."""

    def __init__(self, city: City) -> None:
        self.city = city
        self.calls = 0

    def generate(self) -> City:
        self.calls += 1
        return self.city


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def city() -> City:
    return make_city()


@pytest.fixture
def state(city) -> GameState:
    return GameState(city=city)


@pytest.fixture
def simulator(config) -> ProjectileSimulator:
    return ProjectileSimulator(config)


@pytest.fixture
def events():
    """EventBus plus a list collecting every emitted event."""
    bus = EventBus()
    received = []
    original_emit = bus.emit

    def emit(event):
        received.append(event)
        original_emit(event)

    bus.emit = emit
    return bus, received


@pytest.fixture
def planner_rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def turns(config, city, simulator, events, planner_rng) -> TurnService:
    bus, _ = events
    planner = AIPlanner(simulator, config, planner_rng)
    return TurnService(config, bus, FixedWorld(city), simulator, planner)
