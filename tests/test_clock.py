"""Tests for tick sources: ManualClock and ThreadClock."""

import sys
import os
import threading

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from arcade_engine.config import ConfigurationError
from arcade_engine.engine.clock import ManualClock, ThreadClock, TickEvent


def _recording_clock() -> tuple[ManualClock, list[TickEvent]]:
    clock = ManualClock()
    received: list[TickEvent] = []
    clock.on_tick(received.append)
    return clock, received


class TestManualClock:

    def test_no_ticks_before_start(self):
        clock, received = _recording_clock()
        assert clock.advance(5) == 0
        assert received == []

    def test_ticks_are_sequential(self):
        clock, received = _recording_clock()
        clock.start(100)
        assert clock.advance(3) == 3
        assert [e.sequence for e in received] == [1, 2, 3]
        assert all(e.interval_ms == 100 for e in received)

    def test_stop_halts_ticks(self):
        clock, received = _recording_clock()
        clock.start(50)
        clock.advance(2)
        clock.stop()
        assert clock.advance(2) == 0
        assert len(received) == 2

    def test_stop_inside_callback_ends_advance(self):
        clock = ManualClock()
        received: list[TickEvent] = []

        def on_tick(event: TickEvent) -> None:
            received.append(event)
            clock.stop()

        clock.on_tick(on_tick)
        clock.start(10)
        assert clock.advance(10) == 1
        assert len(received) == 1

    def test_restart_bumps_generation(self):
        clock, received = _recording_clock()
        clock.start(10)
        clock.advance(1)
        clock.stop()
        clock.start(10)
        clock.advance(1)
        assert received[0].generation + 1 == received[1].generation

    def test_start_while_running_keeps_generation(self):
        clock = ManualClock()
        clock.start(10)
        gen = clock.generation
        clock.start(20)
        assert clock.generation == gen
        assert clock.interval_ms == 20

    def test_set_interval_applies_to_next_tick(self):
        clock, received = _recording_clock()
        clock.start(100)
        clock.advance(1)
        clock.set_interval(80)
        clock.advance(1)
        assert [e.interval_ms for e in received] == [100, 80]

    @pytest.mark.parametrize("interval", [0, -5])
    def test_non_positive_interval_rejected(self, interval):
        clock = ManualClock()
        with pytest.raises(ConfigurationError):
            clock.start(interval)
        with pytest.raises(ConfigurationError):
            clock.set_interval(interval)

    def test_dispose_drops_callback(self):
        clock, received = _recording_clock()
        clock.start(10)
        clock.dispose()
        clock.start(10)
        assert clock.advance(3) == 0
        assert received == []

    def test_reentrant_dispatch_is_refused(self):
        """At most one callback is in flight: a nested advance() fires nothing."""
        clock = ManualClock()
        nested: list[int] = []

        def on_tick(event: TickEvent) -> None:
            nested.append(clock.advance(1))

        clock.on_tick(on_tick)
        clock.start(10)
        clock.advance(1)
        assert nested == [0]


class TestThreadClock:

    def test_ticks_then_stops_from_callback(self):
        clock = ThreadClock(name="test-clock")
        done = threading.Event()
        received: list[TickEvent] = []

        def on_tick(event: TickEvent) -> None:
            received.append(event)
            if len(received) >= 3:
                clock.stop()
                done.set()

        clock.on_tick(on_tick)
        clock.start(5)
        assert done.wait(2.0), "ThreadClock never produced three ticks"
        clock.dispose()
        assert not clock.running
        assert [e.sequence for e in received[:3]] == [1, 2, 3]

    def test_stop_is_idempotent(self):
        clock = ThreadClock()
        clock.stop()
        clock.start(50)
        clock.stop()
        clock.stop()
        assert not clock.running
