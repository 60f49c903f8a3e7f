"""Tick sources: a background-thread clock for live sessions and a manual one.

Both use fixed-delay semantics: the wait before tick N+1 starts after tick N
was dispatched, using whatever interval is current at that moment. There is
no drift correction.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from arcade_engine.config import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TickEvent:
    """One tick. ``generation`` identifies the start() call that produced it."""

    sequence: int
    generation: int
    interval_ms: int


TickCallback = Callable[[TickEvent], None]


class Clock(ABC):
    """Produces a monotonically increasing sequence of TickEvents."""

    def __init__(self) -> None:
        self._interval_ms: int = 1
        self._running: bool = False
        self._generation: int = 0
        self._sequence: int = 0
        self._callback: TickCallback | None = None
        self._in_flight: bool = False

    # -- public properties --

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    # -- contract --

    def on_tick(self, callback: TickCallback | None) -> None:
        self._callback = callback

    def set_interval(self, interval_ms: int) -> None:
        """Change the interval; the tick already waiting is unaffected."""
        self._check_interval(interval_ms)
        self._interval_ms = int(interval_ms)

    @abstractmethod
    def start(self, interval_ms: int) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    def dispose(self) -> None:
        self.stop()
        self._callback = None

    # -- internals --

    @staticmethod
    def _check_interval(interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ConfigurationError(f"Clock interval must be positive, got {interval_ms}")

    def _fire(self, generation: int) -> bool:
        """Dispatch one tick unless stopped, superseded, or already in flight."""
        callback = self._callback
        if callback is None or not self._running or generation != self._generation or self._in_flight:
            return False
        self._sequence += 1
        event = TickEvent(sequence=self._sequence, generation=generation, interval_ms=self._interval_ms)
        self._in_flight = True
        try:
            callback(event)
        finally:
            self._in_flight = False
        return True


class ThreadClock(Clock):
    """Runs each start() on its own daemon thread.

    Every run owns a private halt event, so ``stop()`` never blocks and is safe
    to call from inside the tick callback itself.
    """

    def __init__(self, name: str = "clock") -> None:
        super().__init__()
        self._name = name
        self._lock = threading.Lock()
        self._halt: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def start(self, interval_ms: int) -> None:
        self._check_interval(interval_ms)
        with self._lock:
            self._interval_ms = int(interval_ms)
            if self._running:
                return
            self._generation += 1
            self._running = True
            halt = threading.Event()
            self._halt = halt
            self._thread = threading.Thread(
                target=self._run,
                args=(halt, self._generation),
                name=f"{self._name}-{self._generation}",
                daemon=True,
            )
            self._thread.start()
        logger.debug("%s started (interval=%dms, generation=%d)", self._name, interval_ms, self._generation)

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            if self._halt is not None:
                self._halt.set()
        logger.debug("%s stopped (generation=%d)", self._name, self._generation)

    def _run(self, halt: threading.Event, generation: int) -> None:
        while not halt.wait(self._interval_ms / 1000.0):
            try:
                self._fire(generation)
            except Exception:
                logger.exception("%s tick callback failed", self._name)


class ManualClock(Clock):
    """Deterministic clock: ticks only when ``advance()`` is called.

    Used by the headless CLI and by tests; honours start/stop exactly like the
    threaded clock.
    """

    def start(self, interval_ms: int) -> None:
        self._check_interval(interval_ms)
        self._interval_ms = int(interval_ms)
        if self._running:
            return
        self._generation += 1
        self._running = True

    def stop(self) -> None:
        self._running = False

    def advance(self, ticks: int = 1) -> int:
        """Fire up to *ticks* ticks. Returns how many were dispatched."""
        fired = 0
        for _ in range(ticks):
            if not self._fire(self._generation):
                break
            fired += 1
        return fired
