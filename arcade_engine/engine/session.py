"""Session: the handle a presentation layer drives.

Owns one Clock, one InputLatch, one LifecycleController and, per run, one
SimulationLoop. Clock callbacks and API calls are serialized by a single
re-entrant lock, so the model is only ever touched by one thread at a time.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Hashable, Mapping

from arcade_engine.core.enums import Intent, LifecycleEvent, LifecycleState
from arcade_engine.engine.clock import Clock, ThreadClock, TickEvent
from arcade_engine.engine.difficulty import DifficultyScaler
from arcade_engine.engine.input_latch import InputLatch
from arcade_engine.engine.lifecycle import LifecycleController
from arcade_engine.engine.simulation_loop import SimulationLoop, TickResult
from arcade_engine.systems.rng import DeterministicRNG, derive_seed
from arcade_engine.utils.event_log import EventLog, SimEvent

if TYPE_CHECKING:
    from arcade_engine.config import SessionConfig
    from arcade_engine.core.snapshot import Snapshot
    from arcade_engine.variants.base import Variant

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[["Snapshot"], None]


class Session:
    """One game session: start / pause / resume / restart / dispose.

    Snapshots are pushed to listeners once per processed tick and once per
    accepted turn-based action (plus the conceal timer). Control calls do not
    push; ``snapshot()`` always reflects the current state.
    """

    def __init__(
        self,
        variant: Variant,
        config: SessionConfig,
        clock: Clock,
        event_log: EventLog | None = None,
    ) -> None:
        self._variant = variant
        self._config = config
        self._clock = clock
        self._event_log = event_log if event_log is not None else EventLog()
        self._lock = threading.RLock()
        self._lifecycle = LifecycleController(pausable=variant.pausable)
        self._scaler = DifficultyScaler.from_config(config)
        self._listeners: list[SnapshotCallback] = []
        self._run_index = 0
        self._disposed = False
        self._timer_pending = False
        self._terminal_snapshot: Snapshot | None = None

        self._latch: InputLatch
        self._rng: DeterministicRNG
        self._loop: SimulationLoop | None = None
        self._new_run()
        clock.on_tick(self._on_tick)

    # -- public properties --

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def state(self) -> LifecycleState:
        return self._lifecycle.state

    @property
    def run_index(self) -> int:
        return self._run_index

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def final_score(self) -> int | None:
        return self._lifecycle.final_score

    @property
    def runs_completed(self) -> int:
        return self._lifecycle.runs_completed

    # -- snapshot access --

    def snapshot(self) -> Snapshot | None:
        """Current snapshot, or the last one taken before dispose()."""
        with self._lock:
            if self._loop is None:
                return self._terminal_snapshot
            return self._loop.snapshot(self._lifecycle.state)

    def on_snapshot(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Subscribe *callback*. Returns an idempotent unsubscribe function."""
        with self._lock:
            if not self._disposed:
                self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                try:
                    self._listeners.remove(callback)
                except ValueError:
                    pass

        return unsubscribe

    # -- lifecycle --

    def start(self) -> bool:
        with self._lock:
            if self._disposed or not self._lifecycle.fire(LifecycleEvent.START):
                return False
            self._record("lifecycle", "started")
            if self._variant.tick_driven:
                self._clock.start(self._loop.interval_ms)
            return True

    def pause(self) -> bool:
        with self._lock:
            if self._disposed or not self._lifecycle.fire(LifecycleEvent.PAUSE):
                return False
            self._clock.stop()
            self._record("lifecycle", "paused")
            return True

    def resume(self) -> bool:
        with self._lock:
            if self._disposed or not self._lifecycle.fire(LifecycleEvent.RESUME):
                return False
            self._record("lifecycle", "resumed")
            self._clock.start(self._loop.interval_ms)
            return True

    def restart(self) -> bool:
        """Over -> Idle with a fresh model, latch and RNG stream."""
        with self._lock:
            if self._disposed or not self._lifecycle.fire(LifecycleEvent.RESTART):
                return False
            self._clock.stop()
            self._run_index += 1
            self._new_run()
            self._record("lifecycle", "restarted")
            return True

    def dispose(self) -> None:
        """Stop the clock, release input and listeners, then drop the model."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            self._clock.dispose()
            self._latch.close()
            self._listeners.clear()
            if self._loop is not None:
                self._terminal_snapshot = self._loop.snapshot(self._lifecycle.state)
            self._loop = None
        logger.info("Session %s disposed after %d run(s)", self._variant.key, self._run_index + 1)

    # -- input --

    def submit_intent(self, intent: Hashable) -> bool:
        """The single player-input entry point. Returns whether it was accepted."""
        with self._lock:
            if self._disposed:
                return False
            state = self._lifecycle.state
            if intent == Intent.PAUSE:
                if state == LifecycleState.RUNNING:
                    return self.pause()
                if state == LifecycleState.PAUSED:
                    return self.resume()
                return False
            if not self._variant.tick_driven:
                return self._act(intent)
            if intent == Intent.RELEASE and state != LifecycleState.OVER:
                return self._latch.submit(intent)
            if state != LifecycleState.RUNNING:
                return False
            return self._latch.submit(intent)

    # -- internals --

    def _new_run(self) -> None:
        """Allocate a new model and latch; nothing from the previous run survives."""
        self._rng = DeterministicRNG(derive_seed(self._config.seed, self._run_index))
        model = self._variant.initial_model(self._config, self._rng)
        self._latch = InputLatch(self._variant.input_filter(), self._variant.initial_intent())
        self._loop = SimulationLoop(
            self._variant,
            model,
            self._rng,
            self._scaler,
            event_log=self._event_log,
            run_index=self._run_index,
        )
        self._timer_pending = False

    def _on_tick(self, event: TickEvent) -> None:
        with self._lock:
            if self._disposed or self._loop is None:
                return
            if event.generation != self._clock.generation:
                logger.debug("Dropped stale tick %d (generation %d)", event.sequence, event.generation)
                return
            if not self._variant.tick_driven:
                self._on_timer()
                return
            if self._lifecycle.state != LifecycleState.RUNNING:
                return

            intent = self._latch.consume()
            result = self._loop.tick(intent)
            if result.finished:
                self._finish(result)
            elif result.interval_ms != self._clock.interval_ms:
                self._clock.set_interval(result.interval_ms)
            self._publish()

    def _act(self, intent: Hashable) -> bool:
        state = self._lifecycle.state
        if state not in (LifecycleState.IDLE, LifecycleState.RUNNING) or self._timer_pending:
            return False
        result = self._loop.act(intent)
        if result is None:
            return False
        # The first legal action of a run starts it.
        if state == LifecycleState.IDLE:
            self.start()
        if result.finished:
            self._finish(result)
        else:
            delay = self._loop.timer_delay_ms()
            if delay is not None:
                self._timer_pending = True
                self._clock.start(delay)
        self._publish()
        return True

    def _on_timer(self) -> None:
        # One-shot: the clock is only used to schedule a single deferred step.
        self._clock.stop()
        if not self._timer_pending:
            return
        self._timer_pending = False
        self._loop.fire_timer()
        self._publish()

    def _finish(self, result: TickResult) -> None:
        model = result.model
        if not self._lifecycle.fire(LifecycleEvent.FINISH, score=model.score):
            return
        self._clock.stop()
        self._latch.close()
        outcome = model.outcome.value if model.outcome is not None else "ended"
        self._record("lifecycle", f"over ({outcome}) with score {model.score}")
        logger.info(
            "%s run %d %s: score=%d ticks=%d",
            self._variant.key, self._run_index, outcome, model.score, model.elapsed_ticks,
        )

    def _publish(self) -> None:
        snapshot = self._loop.snapshot(self._lifecycle.state)
        for callback in list(self._listeners):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")

    def _record(self, category: str, message: str) -> None:
        tick = self._loop.model.elapsed_ticks if self._loop is not None else 0
        self._event_log.append(SimEvent(tick, category, message, (), self._run_index))


def create_session(
    variant: str | Variant | type[Variant],
    config: SessionConfig | Mapping[str, Any] | None = None,
    clock: Clock | None = None,
    event_log: EventLog | None = None,
) -> Session:
    """Build a session in Idle. Raises ConfigurationError for unusable config."""
    from arcade_engine.variants import resolve_variant

    instance = resolve_variant(variant)
    merged = instance.configure(config)
    clock = clock if clock is not None else ThreadClock(name=f"{instance.key}-clock")
    session = Session(instance, merged, clock, event_log)
    logger.info(
        "Created %s session (%dx%d, %dms, seed=%d)",
        instance.key, merged.width, merged.height, merged.initial_interval_ms, merged.seed,
    )
    return session
