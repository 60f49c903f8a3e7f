"""Tests for the LifecycleController state machine."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from arcade_engine.core.enums import LifecycleEvent, LifecycleState
from arcade_engine.engine.lifecycle import LifecycleController


def _running(pausable: bool = True) -> LifecycleController:
    ctl = LifecycleController(pausable=pausable)
    ctl.fire(LifecycleEvent.START)
    return ctl


class TestTransitions:

    def test_starts_idle(self):
        ctl = LifecycleController()
        assert ctl.state == LifecycleState.IDLE
        assert ctl.final_score is None

    def test_full_cycle(self):
        ctl = _running()
        assert ctl.fire(LifecycleEvent.PAUSE)
        assert ctl.state == LifecycleState.PAUSED
        assert ctl.fire(LifecycleEvent.RESUME)
        assert ctl.fire(LifecycleEvent.FINISH, score=120)
        assert ctl.state == LifecycleState.OVER
        assert ctl.final_score == 120
        assert ctl.fire(LifecycleEvent.RESTART)
        assert ctl.state == LifecycleState.IDLE
        assert ctl.final_score is None
        assert ctl.runs_completed == 1

    @pytest.mark.parametrize("event", [
        LifecycleEvent.PAUSE,
        LifecycleEvent.RESUME,
        LifecycleEvent.FINISH,
        LifecycleEvent.RESTART,
    ])
    def test_illegal_from_idle_is_noop(self, event):
        ctl = LifecycleController()
        assert ctl.fire(event) is False
        assert ctl.state == LifecycleState.IDLE

    def test_double_start_is_noop(self):
        ctl = _running()
        assert ctl.fire(LifecycleEvent.START) is False
        assert ctl.state == LifecycleState.RUNNING

    def test_finish_only_from_running(self):
        ctl = _running()
        ctl.fire(LifecycleEvent.PAUSE)
        assert ctl.fire(LifecycleEvent.FINISH, score=5) is False
        assert ctl.state == LifecycleState.PAUSED

    def test_restart_only_from_over(self):
        ctl = _running()
        assert ctl.fire(LifecycleEvent.RESTART) is False

    def test_finish_counted_once(self):
        ctl = _running()
        ctl.fire(LifecycleEvent.FINISH, score=10)
        assert ctl.fire(LifecycleEvent.FINISH, score=99) is False
        assert ctl.final_score == 10
        assert ctl.runs_completed == 1


class TestNonPausable:

    def test_pause_never_legal(self):
        ctl = _running(pausable=False)
        assert not ctl.can(LifecycleEvent.PAUSE)
        assert ctl.fire(LifecycleEvent.PAUSE) is False
        assert ctl.state == LifecycleState.RUNNING

    def test_finish_still_legal(self):
        ctl = _running(pausable=False)
        assert ctl.fire(LifecycleEvent.FINISH, score=3)
        assert ctl.state == LifecycleState.OVER
