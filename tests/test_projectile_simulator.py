"""Tests for projectile physics and collision classification."""

import pytest

from gorillas.engine.projectile_simulator import ProjectileSimulator
from gorillas.loaders.game_config_loader import GameConfig
from gorillas.models.game_state import GameState, Outcome
from gorillas.models.projectile import Projectile
from gorillas.models.terrain import BlastHole


def _fly(sim, state, tick_ms=16.0, max_ticks=10_000):
    """Step a live throw until it ends; returns the list of tick outcomes."""
    outcomes = []
    for _ in range(max_ticks):
        outcome = sim.step(state, tick_ms)
        outcomes.append(outcome)
        if outcome is not Outcome.CONTINUE:
            break
    return outcomes


class TestPhysics:
    def test_single_substep(self, simulator, state):
        state.projectile.place(400.0, 500.0, 10.0, 0.0)
        assert simulator.step(state, 200.0, substeps=1) is Outcome.CONTINUE
        p = state.projectile
        assert (p.x, p.y, p.vx, p.vy) == pytest.approx((410.0, 480.0, 10.0, -20.0))

    def test_substeps_integrate_gravity_per_slice(self, simulator, state):
        state.projectile.place(400.0, 500.0, 10.0, 0.0)
        simulator.step(state, 200.0)
        p = state.projectile
        assert p.vy == pytest.approx(-20.0)
        assert p.x == pytest.approx(410.0)
        assert p.y == pytest.approx(489.0)

    def test_zero_elapsed_does_not_move(self, simulator, state):
        state.projectile.place(400.0, 500.0, 10.0, 5.0)
        simulator.step(state, 0.0)
        assert state.projectile.position == (400.0, 500.0)

    def test_rotation_direction_follows_thrower(self, simulator, state):
        state.projectile.place(400.0, 500.0)
        simulator.step(state, 200.0, substeps=1)
        assert state.projectile.rotation == pytest.approx(-5.0)
        state.current_player = 2
        state.projectile.place(400.0, 500.0)
        simulator.step(state, 200.0, substeps=1)
        assert state.projectile.rotation == pytest.approx(5.0)

    def test_invalid_substeps(self, simulator, state):
        with pytest.raises(ValueError):
            simulator.step(state, 16.0, substeps=0)


class TestBoundary:
    def test_below_ground(self, simulator, state):
        state.projectile.place(176.0, -1.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.MISS

    def test_left_of_field(self, simulator, state):
        state.projectile.place(-1.0, 500.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.MISS

    def test_right_of_city_edge(self, simulator, state):
        state.projectile.place(799.0, 500.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.MISS

    def test_configured_field_width(self, state):
        sim = ProjectileSimulator(GameConfig(field_width=1000.0))
        state.projectile.place(900.0, 500.0)
        assert sim.step(state, 0.0, substeps=1) is Outcome.CONTINUE
        state.projectile.place(1001.0, 500.0)
        assert sim.step(state, 0.0, substeps=1) is Outcome.MISS

    def test_boundary_miss_records_no_hole(self, simulator, state):
        state.projectile.place(-1.0, 50.0)
        simulator.step(state, 0.0, substeps=1)
        assert len(state.terrain) == 0


class TestBuildingHit:
    def test_hit_records_hole(self, simulator, state):
        state.projectile.place(300.0, 100.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.MISS
        assert state.terrain.holes == [BlastHole(300.0, 100.0)]

    def test_margin_reaches_past_the_roof(self, simulator, state):
        # b3 is 150 high; the projectile has a 4-unit margin
        state.projectile.place(300.0, 153.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.MISS
        state.projectile.place(300.0, 155.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.CONTINUE

    def test_inside_existing_hole_passes_through(self, simulator, state):
        state.terrain.holes.append(BlastHole(305.0, 100.0))
        state.projectile.place(300.0, 100.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.CONTINUE
        assert len(state.terrain) == 1

    def test_search_mode_leaves_terrain_alone(self, simulator, state):
        state.projectile.place(300.0, 100.0)
        assert simulator.step(state, 0.0, substeps=1, search=True) is Outcome.MISS
        assert len(state.terrain) == 0

    def test_explicit_projectile_leaves_state_projectile_alone(self, simulator, state):
        state.projectile.place(101.0, 207.0)
        scratch = Projectile(400.0, 500.0, 10.0, 0.0)
        simulator.step(state, 200.0, search=True, projectile=scratch)
        assert state.projectile.position == (101.0, 207.0)
        assert scratch.x == pytest.approx(410.0)


class TestGorillaHit:
    def test_opponent_body_is_hit(self, simulator, state):
        # player 2's anchor is (644, 80)
        state.projectile.place(644.0, 120.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.HIT

    def test_own_gorilla_is_never_hit(self, simulator, state):
        # player 1's anchor is (129, 100); chest at (129, 140)
        state.projectile.place(129.0, 140.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.CONTINUE

    def test_player_two_targets_player_one(self, simulator, state):
        state.current_player = 2
        state.projectile.place(129.0, 140.0)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.HIT

    def test_miss_takes_precedence_over_simultaneous_hit(self, simulator, state):
        # left leg of player 2 reaches into the roof margin of b6
        point = (644.0 - 12.0, 80.0 + 3.0)
        state.projectile.place(*point)
        assert simulator.gorilla_hit(state, state.projectile)
        assert simulator.step(state, 0.0, substeps=1) is Outcome.MISS
        assert state.terrain.holes == [BlastHole(*point)]

    def test_fast_projectile_does_not_tunnel_through_gorilla(self, simulator, state):
        # 80 units per tick would skip the 40-unit-wide body in one coarse step
        state.projectile.place(590.0, 130.0, 1000.0, 100.0)
        assert simulator.step(state, 16.0, substeps=1) is Outcome.CONTINUE
        state.projectile.place(590.0, 130.0, 1000.0, 100.0)
        assert simulator.step(state, 16.0) is Outcome.HIT


class TestWorkedExample:
    def test_vertical_throw_lands_on_own_roof(self, simulator, state):
        state.projectile.place(101.0, 207.0, 0.0, 100.0)
        outcomes = _fly(simulator, state)
        assert outcomes[-1] is Outcome.MISS
        assert state.projectile.x == 101.0
        assert 90.0 < state.projectile.y < 104.0
        assert state.terrain.holes == [BlastHole(101.0, state.projectile.y)]


class TestDeterminism:
    def test_identical_runs(self, simulator, city):
        results = []
        for _ in range(2):
            state = GameState(city=city)
            state.terrain.holes.append(BlastHole(300.0, 150.0))
            state.projectile.place(101.0, 207.0, 55.0, 60.0)
            outcomes = _fly(simulator, state)
            results.append((outcomes, state.projectile.position, list(state.terrain.holes)))
        assert results[0] == results[1]

    def test_simulate_matches_stepping(self, simulator, city):
        stepped = GameState(city=city)
        stepped.projectile.place(101.0, 207.0, 55.0, 60.0)
        outcomes = _fly(simulator, stepped)

        searched = GameState(city=city)
        flight = simulator.simulate(
            searched, Projectile(101.0, 207.0, 55.0, 60.0),
            tick_ms=16.0, max_iterations=10_000,
        )
        assert flight.outcome is outcomes[-1]
        assert flight.impact == stepped.projectile.position
        assert flight.iterations == len(outcomes)
        assert len(searched.terrain) == 0

    def test_simulate_cap(self, simulator, state):
        flight = simulator.simulate(
            state, Projectile(101.0, 207.0, 0.0, 100.0),
            tick_ms=16.0, max_iterations=3,
        )
        assert not flight.terminated
        assert flight.iterations == 3
