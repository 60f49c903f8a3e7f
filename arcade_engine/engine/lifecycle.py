"""Session lifecycle finite-state machine."""

from __future__ import annotations

import logging

from arcade_engine.core.enums import LifecycleEvent, LifecycleState

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[tuple[LifecycleState, LifecycleEvent], LifecycleState] = {
    (LifecycleState.IDLE, LifecycleEvent.START): LifecycleState.RUNNING,
    (LifecycleState.RUNNING, LifecycleEvent.PAUSE): LifecycleState.PAUSED,
    (LifecycleState.PAUSED, LifecycleEvent.RESUME): LifecycleState.RUNNING,
    (LifecycleState.RUNNING, LifecycleEvent.FINISH): LifecycleState.OVER,
    (LifecycleState.OVER, LifecycleEvent.RESTART): LifecycleState.IDLE,
}


class LifecycleController:
    """Idle -> Running <-> Paused, Running -> Over -> Idle.

    Illegal transitions are no-ops that return False: a double-tapped button
    must never raise. Turn-based variants construct it with ``pausable=False``.
    """

    __slots__ = ("_state", "_pausable", "_final_score", "_runs_completed")

    def __init__(self, pausable: bool = True) -> None:
        self._state = LifecycleState.IDLE
        self._pausable = pausable
        self._final_score: int | None = None
        self._runs_completed = 0

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def pausable(self) -> bool:
        return self._pausable

    @property
    def final_score(self) -> int | None:
        """Score frozen when the last run entered Over (None while a run is live)."""
        return self._final_score

    @property
    def runs_completed(self) -> int:
        return self._runs_completed

    def can(self, event: LifecycleEvent) -> bool:
        if not self._pausable and event in (LifecycleEvent.PAUSE, LifecycleEvent.RESUME):
            return False
        return (self._state, event) in _TRANSITIONS

    def fire(self, event: LifecycleEvent, score: int = 0) -> bool:
        """Apply *event*. Returns True when the state changed."""
        if not self.can(event):
            logger.debug("Ignored %s while %s", event.value, self._state.value)
            return False
        previous = self._state
        self._state = _TRANSITIONS[(previous, event)]
        if self._state == LifecycleState.OVER:
            self._final_score = score
            self._runs_completed += 1
        elif self._state == LifecycleState.IDLE:
            self._final_score = None
        logger.info("Lifecycle %s -> %s", previous.value, self._state.value)
        return True
