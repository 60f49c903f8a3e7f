"""Tests for Session: lifecycle wiring, pause, restart, dispose and listeners."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.arena import ArcadeArena
from arcade_engine.config import ConfigurationError, SessionConfig
from arcade_engine.core.enums import ActorKind, Intent, LifecycleState
from arcade_engine.engine.clock import ManualClock
from arcade_engine.engine.session import create_session
from arcade_engine.variants.snake import SnakeVariant


def _observable(arena: ArcadeArena) -> tuple:
    snap = arena.snapshot
    return (
        snap.tick,
        snap.score,
        snap.interval_ms,
        tuple((a.id, a.kind, a.x, a.y, a.direction, a.segments) for a in snap.actors),
        dict(snap.stats),
    )


class _BrokenSnake(SnakeVariant):
    """Raises on every third tick."""

    def advance(self, model, intent, rng):
        if model.elapsed_ticks % 3 == 2:
            raise RuntimeError("boom")
        super().advance(model, intent, rng)


class TestCreation:

    def test_starts_idle_with_snapshot(self):
        arena = ArcadeArena("snake")
        assert arena.state == LifecycleState.IDLE
        assert arena.snapshot.tick == 0
        assert arena.snapshot.lifecycle_state == LifecycleState.IDLE
        assert not arena.clock.running

    def test_input_before_start_rejected(self):
        arena = ArcadeArena("snake")
        assert arena.press(Intent.UP) is False

    @pytest.mark.parametrize("overrides", [
        {"width": 0},
        {"initial_interval_ms": 50, "min_interval_ms": 100},
        {"bogus": 1},
        {"actor_counts": {"food": -1}},
    ])
    def test_bad_config_fails_fast(self, overrides):
        with pytest.raises(ConfigurationError):
            create_session("snake", overrides, clock=ManualClock())

    @pytest.mark.parametrize("overrides", [
        {"width": "10"},
        {"seed": 1.5},
        {"width": True},
        {"difficulty_curve": {"kind": "step", "step_score": "fifty"}},
        {"difficulty_curve": {"kind": "step", "pace": 3}},
        {"difficulty_curve": "step"},
        {"actor_counts": {"ghosts": "x"}},
        {"actor_counts": [1, 2]},
        {"world_bounds": (10,)},
        {"world_bounds": 10},
    ])
    def test_malformed_values_raise_configuration_error(self, overrides):
        with pytest.raises(ConfigurationError):
            create_session("snake", overrides, clock=ManualClock())

    def test_world_bounds_key(self):
        session = create_session("snake", {"world_bounds": (10, 7)}, clock=ManualClock())
        assert session.config.world_bounds == (10, 7)
        assert (session.snapshot().width, session.snapshot().height) == (10, 7)

    def test_curve_and_counts_from_plain_dicts(self):
        session = create_session(
            "snake",
            {"difficulty_curve": {"kind": "linear", "step_score": 20, "step_ms": 5}, "actor_counts": {"food": 1}},
            clock=ManualClock(),
        )
        assert session.config.difficulty_curve.kind == "linear"
        assert session.config.difficulty_curve.step_score == 20
        assert dict(session.config.actor_counts) == {"food": 1}

    def test_unknown_variant(self):
        with pytest.raises(ConfigurationError):
            create_session("tetris", clock=ManualClock())

    def test_pacman_world_fixed_by_maze(self):
        with pytest.raises(ConfigurationError):
            create_session("pacman", {"width": 10}, clock=ManualClock())

    def test_accepts_config_object(self):
        session = create_session(SnakeVariant, SessionConfig(width=8, height=6), clock=ManualClock())
        assert (session.config.width, session.config.height) == (8, 6)


class TestRunning:

    def test_start_arms_clock_at_initial_interval(self):
        arena = ArcadeArena("snake")
        assert arena.start() is True
        assert arena.start() is False
        assert arena.clock.running
        assert arena.clock.interval_ms == 150

    def test_one_snapshot_per_tick(self):
        arena = ArcadeArena("snake")
        arena.start()
        arena.run_ticks(3)
        assert [s.tick for s in arena.snapshots] == [1, 2, 3]

    def test_input_during_tick_applies_next_tick(self):
        arena = ArcadeArena("snake")
        pressed: list[bool] = []

        def press_once(snapshot):
            if not pressed:
                pressed.append(arena.press(Intent.UP))

        arena.session.on_snapshot(press_once)
        arena.start()
        arena.run_ticks(1)
        assert (arena.player.x, arena.player.y) == (11, 10)
        arena.run_ticks(1)
        assert (arena.player.x, arena.player.y) == (11, 9)
        assert pressed == [True]

    def test_failing_tick_keeps_previous_model(self):
        arena = ArcadeArena(_BrokenSnake())
        arena.start()
        arena.run_ticks(2)
        before = _observable(arena)
        arena.run_ticks(1)
        assert _observable(arena) == before
        assert arena.state == LifecycleState.RUNNING


class TestPause:

    def test_pause_preserves_model_exactly(self):
        arena = ArcadeArena("snake")
        arena.start()
        arena.run_ticks(2)
        before = _observable(arena)

        assert arena.session.pause() is True
        assert arena.run_ticks(10) == 0
        assert arena.press(Intent.UP) is False
        assert _observable(arena) == before

        assert arena.session.resume() is True
        assert arena.run_ticks(1) == 1
        assert arena.snapshot.tick == 3

    def test_pause_intent_toggles(self):
        arena = ArcadeArena("snake")
        arena.start()
        assert arena.press(Intent.PAUSE) is True
        assert arena.state == LifecycleState.PAUSED
        assert arena.press(Intent.PAUSE) is True
        assert arena.state == LifecycleState.RUNNING

    def test_pause_from_idle_is_noop(self):
        arena = ArcadeArena("snake")
        assert arena.session.pause() is False
        assert arena.session.resume() is False


class TestRestart:

    def _finished(self) -> ArcadeArena:
        arena = ArcadeArena("snake", width=10, height=10)
        arena.start()
        arena.run_until_over()
        assert arena.state == LifecycleState.OVER
        return arena

    def test_restart_only_from_over(self):
        arena = ArcadeArena("snake")
        arena.start()
        assert arena.session.restart() is False

    def test_restart_discards_the_run(self):
        arena = self._finished()
        assert arena.session.restart() is True
        snap = arena.snapshot

        assert arena.state == LifecycleState.IDLE
        assert snap.run_index == 1
        assert snap.tick == 0
        assert snap.score == 0
        assert arena.session.final_score is None
        head = snap.player
        assert (head.x, head.y) == (5, 5)
        assert head.segments == ()
        assert len(snap.actors_of(ActorKind.COLLECTIBLE)) == 1

    def test_restart_resets_input(self):
        arena = self._finished()
        arena.session.restart()
        assert arena.press(Intent.UP) is False
        arena.start()
        assert arena.press(Intent.LEFT) is False
        assert arena.press(Intent.DOWN) is True

    def test_events_are_tagged_by_run(self):
        arena = self._finished()
        arena.session.restart()
        arena.start()
        arena.run_ticks(1)
        runs = {e.run_index for e in arena.events()}
        assert runs == {0, 1}


class TestDispose:

    def test_dispose_is_idempotent_and_final(self):
        arena = ArcadeArena("snake")
        arena.start()
        arena.run_ticks(2)
        last = arena.snapshot

        arena.session.dispose()
        arena.session.dispose()

        assert arena.session.disposed
        assert not arena.clock.running
        assert arena.press(Intent.UP) is False
        assert arena.start() is False
        assert arena.run_ticks(3) == 0
        assert arena.session.snapshot().tick == last.tick

    def test_no_snapshots_after_dispose(self):
        arena = ArcadeArena("snake")
        arena.start()
        arena.run_ticks(1)
        arena.session.dispose()
        arena.clock.start(10)
        arena.run_ticks(1)
        assert len(arena.snapshots) == 1


class TestListeners:

    def test_failing_listener_does_not_break_ticks(self):
        arena = ArcadeArena("snake")

        def explode(snapshot):
            raise ValueError("listener bug")

        arena.session.on_snapshot(explode)
        arena.start()
        arena.run_ticks(2)
        assert len(arena.snapshots) == 2

    def test_unsubscribe(self):
        arena = ArcadeArena("snake")
        seen = []
        unsubscribe = arena.session.on_snapshot(seen.append)
        arena.start()
        arena.run_ticks(1)
        unsubscribe()
        unsubscribe()
        arena.run_ticks(1)
        assert len(seen) == 1
        assert len(arena.snapshots) == 2
