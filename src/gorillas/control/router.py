"""Command router — dispatches incoming commands to the turn service.

Front ends (renderers, input adapters, the headless autopilot) submit raw
command dicts.  The router parses them into typed models and routes them
by type.  Handlers are async callables that receive the parsed message
and may return a response dict; the built-in handlers answer with the
current game snapshot.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from gorillas.models.messages import (
    CommitThrow,
    GameMessage,
    SetAimVelocity,
    StartNewGame,
    parse_message,
)

if TYPE_CHECKING:
    from gorillas.engine.turn_service import TurnService

log = logging.getLogger(__name__)

# Handler signature: async (message) -> optional response dict
Handler = Callable[[GameMessage], Awaitable[Optional[dict[str, Any]]]]


class Router:
    """Dispatches game commands by their ``type`` field.

    One handler per command type; registering a type again replaces the
    previous handler.  The game registers ``start_new_game``,
    ``set_aim_velocity`` and ``commit_throw`` through
    ``register_command_handlers``; other front ends may add their own.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, msg_type: str, handler: Handler) -> None:
        """Register a handler for a command type.

        Args:
            msg_type: The command type string (e.g. ``"commit_throw"``).
            handler: Async callable ``(message) -> dict | None``.
        """
        self._handlers[msg_type] = handler
        log.debug("Handler registered: %s", msg_type)

    @property
    def registered_types(self) -> list[str]:
        """List of all command types that have a handler."""
        return list(self._handlers.keys())

    async def route(self, raw: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Validate a raw command and hand it to its handler.

        Validation happens before dispatch, so a rejected payload (a player
        count other than 1 or 2, a missing or non-finite velocity) never
        reaches the turn service.

        Returns:
            The handler's reply, or None for a command type nobody handles.

        Raises:
            pydantic.ValidationError: If the payload does not validate.
        """
        message = parse_message(raw)
        handler = self._handlers.get(message.type)
        if handler is None:
            log.debug("No handler for command type: %s", message.type)
            return None
        return await handler(message)


def register_command_handlers(router: Router, turns: TurnService) -> None:
    """Register the three game commands on the router.

    Every handler replies with::

        {"accepted": bool, "state": GameSnapshot.to_dict()}

    ``accepted`` is False when the turn service ignored the command (wrong
    phase, computer to move, zero or non-finite aim).  ``state`` is the
    snapshot after the command: phase, current player, round, projectile,
    buildings, blast holes, winner, telemetry and field size.
    """

    def _reply(accepted: bool) -> dict[str, Any]:
        return {"accepted": accepted, "state": turns.state.snapshot().to_dict()}

    async def handle_start_new_game(message: GameMessage) -> dict[str, Any]:
        assert isinstance(message, StartNewGame)
        turns.start_new_game(message.number_of_players)
        return _reply(True)

    async def handle_set_aim_velocity(message: GameMessage) -> dict[str, Any]:
        assert isinstance(message, SetAimVelocity)
        return _reply(turns.set_aim_velocity(message.vx, message.vy))

    async def handle_commit_throw(message: GameMessage) -> dict[str, Any]:
        assert isinstance(message, CommitThrow)
        return _reply(turns.commit_throw())

    router.register("start_new_game", handle_start_new_game)
    router.register("set_aim_velocity", handle_set_aim_velocity)
    router.register("commit_throw", handle_commit_throw)
