"""Command message models.

Typed Pydantic models for the three commands a front end may submit.
Each command gets its own model with validation.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


# -- Base ----------------------------------------------------------------

class GameMessage(BaseModel):
    """Base class for all game commands."""

    type: str


# -- Commands ------------------------------------------------------------

class StartNewGame(GameMessage):
    type: Literal["start_new_game"] = "start_new_game"
    number_of_players: int = Field(default=2, ge=1, le=2)


class SetAimVelocity(GameMessage):
    type: Literal["set_aim_velocity"] = "set_aim_velocity"
    vx: float = Field(allow_inf_nan=False)
    vy: float = Field(allow_inf_nan=False)


class CommitThrow(GameMessage):
    type: Literal["commit_throw"] = "commit_throw"


# -- Registry ------------------------------------------------------------

MESSAGE_TYPES: dict[str, type[GameMessage]] = {
    "start_new_game": StartNewGame,
    "set_aim_velocity": SetAimVelocity,
    "commit_throw": CommitThrow,
}


def parse_message(data: dict[str, Any]) -> GameMessage:
    """Parse a raw dict into the appropriate typed command model.

    Unknown types parse as a bare GameMessage, which the router ignores.
    Invalid payloads raise ``pydantic.ValidationError``.
    """
    msg_type = data.get("type", "")
    model_cls = MESSAGE_TYPES.get(msg_type, GameMessage)
    return model_cls.model_validate(data)
