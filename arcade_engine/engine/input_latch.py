"""Input latching between ticks.

Intents may arrive at any time; the loop reads them only at the start of a
tick. Whatever was submitted during tick N is visible no earlier than N+1.
"""

from __future__ import annotations

import logging
import threading
from typing import Hashable

from arcade_engine.core.enums import DIRECTIONAL_INTENTS, OPPOSITE, Intent

logger = logging.getLogger(__name__)


class IntentFilter:
    """Variant-supplied legality rules.

    ``persistent`` filters keep returning the last applied intent on ticks
    without fresh input (a held direction); action filters do not.
    """

    persistent: bool = False

    def accepts(self, intent: Hashable, current: Hashable | None) -> bool:
        return True

    def observe(self, intent: Hashable) -> bool:
        """See every submission, including ones that are not latched.

        Returns False when the submission was fully handled here (e.g. a
        release edge) and must not be latched.
        """
        return True

    def reset(self) -> None:
        """Forget per-run state."""


class DirectionFilter(IntentFilter):
    """Cardinal directions only; optionally rejects a 180 degree reversal."""

    persistent = True

    def __init__(self, allow_reversal: bool = False) -> None:
        self.allow_reversal = allow_reversal

    def accepts(self, intent: Hashable, current: Hashable | None) -> bool:
        if intent not in DIRECTIONAL_INTENTS:
            return False
        if not self.allow_reversal and current is not None and OPPOSITE.get(current) == intent:
            return False
        return True


class EdgeTriggerFilter(IntentFilter):
    """Stateless action edges, one per physical key-down.

    After an action is latched, repeats (key auto-repeat, a held button) are
    ignored until a ``RELEASE`` intent re-arms it.
    """

    def __init__(self, actions: frozenset[Intent] = frozenset({Intent.FLAP})) -> None:
        self.actions = actions
        self._armed = True

    def observe(self, intent: Hashable) -> bool:
        if intent == Intent.RELEASE:
            self._armed = True
            return False
        return True

    def accepts(self, intent: Hashable, current: Hashable | None) -> bool:
        if intent not in self.actions or not self._armed:
            return False
        self._armed = False
        return True

    def reset(self) -> None:
        self._armed = True


class StepAndActionFilter(IntentFilter):
    """Discrete steps plus actions; every intent applies to one tick only."""

    def __init__(self, intents: frozenset[Intent]) -> None:
        self.intents = intents

    def accepts(self, intent: Hashable, current: Hashable | None) -> bool:
        return intent in self.intents


class InputLatch:
    """Most-recent-wins holder for the next tick's intent."""

    __slots__ = ("_filter", "_pending", "_last_applied", "_closed", "_lock")

    def __init__(self, intent_filter: IntentFilter | None = None, initial: Hashable | None = None) -> None:
        self._filter = intent_filter or IntentFilter()
        self._pending: Hashable | None = None
        self._last_applied: Hashable | None = initial
        self._closed = False
        self._lock = threading.Lock()

    @property
    def pending_intent(self) -> Hashable | None:
        return self._pending

    @property
    def last_applied_intent(self) -> Hashable | None:
        return self._last_applied

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, intent: Hashable) -> bool:
        """Latch *intent* if legal. Returns whether it was latched."""
        with self._lock:
            if self._closed:
                return False
            if not self._filter.observe(intent):
                return False
            if not self._filter.accepts(intent, self._last_applied):
                logger.debug("Rejected intent %s (current=%s)", intent, self._last_applied)
                return False
            self._pending = intent
            return True

    def consume(self) -> Hashable | None:
        """Return and clear the pending intent (or the held one, if persistent)."""
        with self._lock:
            intent = self._pending
            self._pending = None
            if intent is not None:
                self._last_applied = intent
            elif self._filter.persistent:
                intent = self._last_applied
            return intent

    def reset(self, initial: Hashable | None = None) -> None:
        with self._lock:
            self._pending = None
            self._last_applied = initial
            self._closed = False
            self._filter.reset()

    def close(self) -> None:
        """Stop accepting input. Safe to call more than once."""
        with self._lock:
            self._closed = True
            self._pending = None
