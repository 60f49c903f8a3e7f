"""Tests for DeterministicRNG, run-seed derivation and free-cell placement."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from arcade_engine.core.enums import Domain
from arcade_engine.systems.placement import find_free_cell
from arcade_engine.systems.rng import DeterministicRNG, derive_seed


class TestDeterministicRNG:

    def test_pure_function_of_inputs(self):
        a, b = DeterministicRNG(42), DeterministicRNG(42)
        assert [a.next_float(Domain.SPAWN, 1, t) for t in range(20)] == [b.next_float(Domain.SPAWN, 1, t) for t in range(20)]

    def test_domains_are_independent(self):
        rng = DeterministicRNG(42)
        spawn = [rng.next_float(Domain.SPAWN, 0, t) for t in range(10)]
        ai = [rng.next_float(Domain.AI_DECISION, 0, t) for t in range(10)]
        assert spawn != ai

    def test_ranges(self):
        rng = DeterministicRNG(7)
        for t in range(500):
            assert 0.0 <= rng.next_float(Domain.SPAWN, 3, t) < 1.0
            assert 2 <= rng.next_int(Domain.SPAWN, 3, t, 2, 5) <= 5

    def test_bool_extremes(self):
        rng = DeterministicRNG(7)
        assert not any(rng.next_bool(Domain.AI_DECISION, 1, t, 0.0) for t in range(100))
        assert all(rng.next_bool(Domain.AI_DECISION, 1, t, 1.0) for t in range(100))

    def test_shuffled_is_a_stable_permutation(self):
        rng = DeterministicRNG(11)
        items = list(range(16))
        shuffled = rng.shuffled(Domain.SHUFFLE, items)
        assert sorted(shuffled) == items
        assert shuffled == DeterministicRNG(11).shuffled(Domain.SHUFFLE, items)
        assert items == list(range(16))


class TestDeriveSeed:

    def test_each_run_reseeds(self):
        seeds = {derive_seed(42, run) for run in range(10)}
        assert len(seeds) == 10

    def test_stable(self):
        assert derive_seed(42, 3) == derive_seed(42, 3)
        assert derive_seed(42, 0) >= 0


class TestPlacement:

    def test_never_returns_occupied(self):
        rng = DeterministicRNG(5)
        occupied = {(x, y) for x in range(5) for y in range(5) if (x + y) % 2 == 0}
        for tick in range(50):
            cell = find_free_cell(5, 5, occupied, rng, salt=1, tick=tick)
            assert cell is not None
            assert cell.cell() not in occupied

    def test_full_board_returns_none(self):
        occupied = {(x, y) for x in range(3) for y in range(3)}
        assert find_free_cell(3, 3, occupied, DeterministicRNG(5), salt=1, tick=0) is None

    def test_scan_fallback_finds_last_cell(self):
        occupied = {(x, y) for x in range(4) for y in range(4)} - {(2, 3)}
        cell = find_free_cell(4, 4, occupied, DeterministicRNG(5), salt=1, tick=0, attempts=0)
        assert cell.cell() == (2, 3)

    def test_is_open_filter(self):
        cell = find_free_cell(
            6, 1, set(), DeterministicRNG(5), salt=1, tick=0,
            is_open=lambda x, y: x == 4,
        )
        assert cell.cell() == (4, 0)
