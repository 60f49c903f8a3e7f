"""Thread-safe ring buffer of session events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

DEFAULT_CAPACITY = 5000


@dataclass(frozen=True, slots=True)
class SimEvent:
    """A single session event for the API event feed."""

    tick: int
    category: str
    message: str
    entity_ids: tuple[int, ...] = ()
    run_index: int = 0


class EventLog:
    """Bounded event log. Writers append; readers get a copied slice.

    Sessions tick for as long as a player keeps playing, so the oldest events
    fall off once ``capacity`` is reached.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._buffer: deque[SimEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, event: SimEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def append_many(self, events: list[SimEvent]) -> None:
        if not events:
            return
        with self._lock:
            self._buffer.extend(events)

    def since_tick(self, tick: int, run_index: int | None = None) -> list[SimEvent]:
        """Return all events with tick >= *tick*, optionally for one run only."""
        with self._lock:
            return [
                e for e in self._buffer
                if e.tick >= tick and (run_index is None or e.run_index == run_index)
            ]

    def latest(self, count: int = 50) -> list[SimEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
