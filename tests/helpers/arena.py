"""ArcadeArena: E2E test fixture for sessions.

Creates a real Session on a ManualClock, so tests decide exactly when ticks
happen. Snapshots pushed to listeners are collected for assertion.

Usage:
    arena = ArcadeArena("snake", width=10, height=10)
    arena.start()
    arena.press(Intent.UP)
    arena.run_ticks(3)
    assert arena.snapshot.tick == 3
"""

from __future__ import annotations

import sys
import os
from typing import Any, Hashable

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from arcade_engine.config import SessionConfig
from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, LifecycleState
from arcade_engine.core.snapshot import ActorState, Snapshot
from arcade_engine.engine.clock import ManualClock
from arcade_engine.engine.difficulty import DifficultyScaler
from arcade_engine.engine.session import create_session
from arcade_engine.engine.simulation_loop import SimulationLoop
from arcade_engine.systems.rng import DeterministicRNG
from arcade_engine.utils.event_log import EventLog, SimEvent
from arcade_engine.variants.base import Variant


class ArcadeArena:
    """Session driven by hand: start it, press keys, advance ticks, inspect."""

    def __init__(
        self,
        variant: str | Variant,
        config: SessionConfig | None = None,
        seed: int = 42,
        **config_overrides: Any,
    ):
        self.clock = ManualClock()
        self.event_log = EventLog()
        if config is None:
            config = {"seed": seed, **config_overrides}
        self.session = create_session(variant, config, clock=self.clock, event_log=self.event_log)
        self.snapshots: list[Snapshot] = []
        self.session.on_snapshot(self.snapshots.append)

    # -- driving --

    def start(self) -> bool:
        return self.session.start()

    def press(self, intent: Hashable) -> bool:
        return self.session.submit_intent(intent)

    def run_ticks(self, n: int) -> int:
        """Advance up to *n* ticks; returns how many were processed."""
        return self.clock.advance(n)

    def run_until_over(self, max_ticks: int = 1000) -> int:
        ticks = 0
        while ticks < max_ticks and self.session.state != LifecycleState.OVER:
            if not self.clock.advance(1):
                break
            ticks += 1
        return ticks

    # -- inspection --

    @property
    def state(self) -> LifecycleState:
        return self.session.state

    @property
    def snapshot(self) -> Snapshot:
        snap = self.session.snapshot()
        assert snap is not None, "Session must always have a snapshot"
        return snap

    @property
    def model(self) -> EntityModel:
        """Live model behind the session, including values snapshots mask."""
        return self.session._loop.model

    @property
    def player(self) -> ActorState | None:
        return self.snapshot.player

    def actors(self, kind: ActorKind) -> tuple[ActorState, ...]:
        return self.snapshot.actors_of(kind)

    def events(self, category: str | None = None) -> list[SimEvent]:
        return [e for e in self.event_log.latest(10_000) if category is None or e.category == category]


def build_loop(variant: Variant, model: EntityModel, seed: int = 42, **config_overrides: Any) -> SimulationLoop:
    """SimulationLoop around a hand-built model, for single-tick scenarios."""
    config = variant.configure(config_overrides or None)
    return SimulationLoop(
        variant,
        model,
        DeterministicRNG(seed),
        DifficultyScaler.from_config(config),
        event_log=EventLog(),
    )
