"""SimulationLoop: one tick of one session.

Stage pipeline, each stage consuming the previous stage's value:
  1. Step       - variant moves every actor on a fresh model copy
  2. Resolve    - classify collisions on the post-move model
  3. Apply      - score, removals, growth; termination requested?
  4. Spawn      - variant spawn policy (skipped once terminated)
  5. Outcome    - external win/lose conditions
  6. Difficulty - interval for the *next* tick
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Hashable

from arcade_engine.core.enums import EffectKind, LifecycleState, Outcome
from arcade_engine.core.snapshot import Snapshot
from arcade_engine.engine.collision import CollisionEvent, CollisionResolver
from arcade_engine.utils.event_log import SimEvent

if TYPE_CHECKING:
    from arcade_engine.core.entity_model import EntityModel
    from arcade_engine.engine.difficulty import DifficultyScaler
    from arcade_engine.systems.rng import DeterministicRNG
    from arcade_engine.utils.event_log import EventLog
    from arcade_engine.variants.base import Variant

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TickResult:
    """What one tick produced. ``model`` is the new authoritative model."""

    model: EntityModel
    events: tuple[CollisionEvent, ...]
    terminated: bool
    interval_ms: int
    outcome: Outcome | None = None

    @property
    def finished(self) -> bool:
        return self.terminated or self.outcome is not None


class SimulationLoop:
    """Owns the EntityModel of one run and advances it tick by tick."""

    __slots__ = (
        "_variant",
        "_resolver",
        "_scaler",
        "_rng",
        "_model",
        "_interval_ms",
        "_event_log",
        "_run_index",
    )

    def __init__(
        self,
        variant: Variant,
        model: EntityModel,
        rng: DeterministicRNG,
        scaler: DifficultyScaler,
        event_log: EventLog | None = None,
        run_index: int = 0,
    ) -> None:
        self._variant = variant
        self._resolver = CollisionResolver(variant.rules)
        self._scaler = scaler
        self._rng = rng
        self._model = model
        self._interval_ms = scaler.interval_for(model.score)
        self._event_log = event_log
        self._run_index = run_index

    @property
    def model(self) -> EntityModel:
        return self._model

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def run_index(self) -> int:
        return self._run_index

    def snapshot(self, lifecycle_state: LifecycleState) -> Snapshot:
        return Snapshot.from_model(
            self._model,
            variant=self._variant.key,
            run_index=self._run_index,
            lifecycle_state=lifecycle_state,
            interval_ms=self._interval_ms,
        )

    # -- tick-driven --

    def tick(self, intent: Hashable | None) -> TickResult:
        """Advance one tick. Never raises: a failing tick keeps the previous model."""
        previous = self._model
        try:
            result = self._run_stages(previous, intent)
        except Exception:
            logger.exception("Tick %d of %s failed, model left unchanged", previous.elapsed_ticks, self._variant.key)
            return TickResult(previous, (), False, self._interval_ms)

        self._model = result.model
        self._interval_ms = result.interval_ms
        return result

    def _run_stages(self, previous: EntityModel, intent: Hashable | None) -> TickResult:
        variant = self._variant

        stepped = variant.step(previous, intent, rng=self._rng)
        events = self._resolver.resolve(stepped)
        terminated = self._resolver.apply(events, stepped)

        spawned = [] if terminated else variant.spawn_policy(stepped, self._rng)
        for actor in spawned:
            stepped.add_actor(actor)

        outcome = Outcome.LOST if terminated else variant.check_outcome(stepped)
        stepped.outcome = outcome

        interval = self._scaler.interval_for(stepped.score)
        if interval != self._interval_ms:
            logger.debug("Interval %dms -> %dms at score %d", self._interval_ms, interval, stepped.score)

        self._log_tick(stepped, previous.score, events, spawned, outcome)
        return TickResult(stepped, tuple(events), terminated, interval, outcome)

    # -- turn-based --

    def act(self, intent: Hashable) -> TickResult | None:
        """Apply one player action. Returns None when the variant rejects it."""
        previous = self._model
        model = self._variant.apply_action(previous, intent)
        if model is None:
            return None
        model.outcome = self._variant.check_outcome(model)
        self._model = model
        self._log_score(model, previous.score)
        return TickResult(model, (), False, self._interval_ms, model.outcome)

    def fire_timer(self) -> EntityModel:
        self._model = self._variant.on_timer(self._model)
        return self._model

    def timer_delay_ms(self) -> int | None:
        return self._variant.timer_delay_ms(self._model)

    # -- event feed --

    def _emit(self, events: list[SimEvent]) -> None:
        if self._event_log is not None:
            self._event_log.append_many(events)

    def _log_tick(
        self,
        model: EntityModel,
        previous_score: int,
        events: list[CollisionEvent],
        spawned: list,
        outcome: Outcome | None,
    ) -> None:
        if self._event_log is None:
            return
        tick = model.elapsed_ticks
        feed: list[SimEvent] = []
        for event in events:
            if not event.effects:
                continue
            kinds = ", ".join(e.kind.value for e in event.effects)
            feed.append(SimEvent(tick, "collision", f"{event.kind.value}: {kinds}", event.participants, self._run_index))
            if any(e.kind == EffectKind.TERMINATE for e in event.effects):
                logger.debug("Tick %d: terminal %s collision %s", tick, event.kind.value, event.participants)
        for actor in spawned:
            feed.append(SimEvent(tick, "spawn", f"{actor.kind.value} at {actor.position}", (actor.id,), self._run_index))
        if model.score != previous_score:
            feed.append(SimEvent(tick, "score", f"score {previous_score} -> {model.score}", (), self._run_index))
        if outcome is not None:
            feed.append(SimEvent(tick, "outcome", f"run {outcome.value} with score {model.score}", (), self._run_index))
        self._emit(feed)

    def _log_score(self, model: EntityModel, previous_score: int) -> None:
        if model.score != previous_score:
            self._emit([SimEvent(model.elapsed_ticks, "score", f"score {previous_score} -> {model.score}", (), self._run_index)])
