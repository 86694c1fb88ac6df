"""Typed event bus — decoupled notification of game transitions.

Rendering, telemetry and the entry point subscribe here instead of
polling the engine after every tick.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Session events ------------------------------------------------------

@dataclass(frozen=True)
class GameStarted:
    """A new game replaced the previous session."""
    session: int
    number_of_players: int


# -- Throw events --------------------------------------------------------

@dataclass(frozen=True)
class ThrowCommitted:
    """A projectile left a gorilla's hand."""
    player: int
    vx: float
    vy: float
    by_computer: bool


@dataclass(frozen=True)
class BlastHoleCreated:
    """A live throw cratered a building."""
    x: float
    y: float


@dataclass(frozen=True)
class TurnPassed:
    """A throw missed; the other player is up."""
    previous_player: int
    current_player: int
    round: int
    impact_x: float
    impact_y: float


@dataclass(frozen=True)
class GorillaHit:
    """A throw struck the opponent; the game is over."""
    winner: int
    impact_x: float
    impact_y: float


@dataclass(frozen=True)
class ComputerThrowPlanned:
    """The planner picked a throw for the computer player."""
    player: int
    vx: float
    vy: float
    trials: int
    distance: float
    fallback: bool


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Simple synchronous event bus with typed events.

    Usage:
        bus = EventBus()
        bus.on(GorillaHit, lambda e: print(e.winner))
        bus.emit(GorillaHit(winner=1, impact_x=0.0, impact_y=0.0))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for an event type."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unregister a handler."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers."""
        for handler in self._handlers.get(type(event), []):
            handler(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
