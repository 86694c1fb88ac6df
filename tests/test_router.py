"""Tests for command parsing and routing."""

import json

import pytest
from pydantic import ValidationError

from gorillas.control.router import Router, register_command_handlers
from gorillas.models.messages import (
    MESSAGE_TYPES,
    CommitThrow,
    SetAimVelocity,
    StartNewGame,
    parse_message,
)


class TestParseMessage:
    def test_parse_start_new_game(self):
        msg = parse_message({"type": "start_new_game", "number_of_players": 1})
        assert isinstance(msg, StartNewGame)
        assert msg.number_of_players == 1

    def test_player_count_defaults_to_two(self):
        assert parse_message({"type": "start_new_game"}).number_of_players == 2

    def test_parse_set_aim_velocity(self):
        msg = parse_message({"type": "set_aim_velocity", "vx": 30, "vy": 40.5})
        assert isinstance(msg, SetAimVelocity)
        assert (msg.vx, msg.vy) == (30.0, 40.5)

    def test_parse_commit(self):
        assert isinstance(parse_message({"type": "commit_throw"}), CommitThrow)

    def test_invalid_player_count(self):
        with pytest.raises(ValidationError):
            parse_message({"type": "start_new_game", "number_of_players": 3})

    def test_missing_velocity(self):
        with pytest.raises(ValidationError):
            parse_message({"type": "set_aim_velocity", "vx": 1.0})

    @pytest.mark.parametrize("payload", [
        '{"type": "set_aim_velocity", "vx": NaN, "vy": NaN}',
        '{"type": "set_aim_velocity", "vx": Infinity, "vy": 10}',
        '{"type": "set_aim_velocity", "vx": 10, "vy": -Infinity}',
    ])
    def test_non_finite_velocity_rejected(self, payload):
        with pytest.raises(ValidationError):
            parse_message(json.loads(payload))

    def test_parse_unknown_type(self):
        msg = parse_message({"type": "nonexistent"})
        assert msg.type == "nonexistent"

    def test_all_types_registered(self):
        for key, cls in MESSAGE_TYPES.items():
            assert "type" in cls.model_fields
            assert cls.model_fields["type"].default == key


@pytest.fixture
def router(turns) -> Router:
    r = Router()
    register_command_handlers(r, turns)
    return r


class TestRouter:
    def test_registered_types(self, router):
        assert set(router.registered_types) == set(MESSAGE_TYPES)

    @pytest.mark.asyncio
    async def test_full_turn_through_router(self, router, turns):
        reply = await router.route({"type": "start_new_game", "number_of_players": 2})
        assert reply["accepted"]
        assert reply["state"]["phase"] == "aiming"

        reply = await router.route({"type": "set_aim_velocity", "vx": 0.0, "vy": 100.0})
        assert reply["accepted"]
        assert reply["state"]["projectile"]["vy"] == 100.0

        reply = await router.route({"type": "commit_throw"})
        assert reply["accepted"]
        assert reply["state"]["phase"] == "in_flight"

        reply = await router.route({"type": "commit_throw"})
        assert not reply["accepted"]

    @pytest.mark.asyncio
    async def test_nan_aim_never_reaches_the_game(self, router, turns):
        await router.route({"type": "start_new_game", "number_of_players": 2})
        with pytest.raises(ValidationError):
            await router.route(json.loads('{"type": "set_aim_velocity", "vx": NaN, "vy": NaN}'))
        state = turns.state
        assert (state.projectile.vx, state.projectile.vy) == (0.0, 0.0)
        assert state.telemetry[1].speed == 0.0

    @pytest.mark.asyncio
    async def test_unknown_type_has_no_handler(self, router):
        assert await router.route({"type": "nonexistent"}) is None

    @pytest.mark.asyncio
    async def test_invalid_payload_raises(self, router, turns):
        with pytest.raises(ValidationError):
            await router.route({"type": "start_new_game", "number_of_players": 3})
        assert not turns.has_game

    @pytest.mark.asyncio
    async def test_custom_handler(self):
        r = Router()
        seen = []

        async def handler(message):
            seen.append(message)
            return {"ok": True}

        r.register("commit_throw", handler)
        assert await r.route({"type": "commit_throw"}) == {"ok": True}
        assert isinstance(seen[0], CommitThrow)
