"""Tests for the memory variant: turn-based reveals and the conceal timer."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.arena import ArcadeArena
from arcade_engine.config import ConfigurationError
from arcade_engine.core.enums import Intent, LifecycleState, Outcome
from arcade_engine.core.models import Reveal
from arcade_engine.core.snapshot import MASKED_VALUE, ActorState
from arcade_engine.variants.memory import SYMBOLS, MemoryVariant


def _make_arena(difficulty: str = "easy", seed: int = 42) -> ArcadeArena:
    return ArcadeArena("memory", config=MemoryVariant.config_for(difficulty, seed=seed))


def _pairs(arena: ArcadeArena) -> list[tuple[int, int]]:
    by_symbol: dict[int, list[int]] = {}
    for card in arena.model.actors.values():
        by_symbol.setdefault(card.value, []).append(card.id)
    return [tuple(ids) for ids in by_symbol.values()]


def _mismatch(arena: ArcadeArena) -> tuple[int, int]:
    cards = list(arena.model.actors.values())
    first = cards[0]
    other = next(c for c in cards if c.value != first.value)
    return first.id, other.id


def _card(arena: ArcadeArena, card_id: int) -> ActorState:
    return next(a for a in arena.snapshot.actors if a.id == card_id)


class TestDeck:

    @pytest.mark.parametrize("difficulty,pairs,columns", [
        ("easy", 6, 4),
        ("medium", 8, 4),
        ("hard", 12, 6),
    ])
    def test_presets(self, difficulty, pairs, columns):
        arena = _make_arena(difficulty)
        cards = arena.snapshot.actors
        assert len(cards) == 2 * pairs
        assert all(len(ids) == 2 for ids in _pairs(arena))
        assert max(c.x for c in cards) == columns - 1

    def test_cards_start_face_down(self):
        cards = _make_arena().snapshot.actors
        assert {c.state for c in cards} == {"hidden"}
        assert {c.tag for c in cards} == {""}

    def test_shuffle_follows_seed(self):
        a = [c.value for c in _make_arena(seed=1).model.actors.values()]
        b = [c.value for c in _make_arena(seed=1).model.actors.values()]
        assert a == b

    def test_hidden_cards_do_not_leak_symbols(self):
        arena = _make_arena()
        assert {c.value for c in arena.snapshot.actors} == {MASKED_VALUE}

        a, b = _pairs(arena)[0]
        arena.press(Reveal(a))
        shown = _card(arena, a)
        assert shown.value == arena.model.actors[a].value
        assert _card(arena, b).value == MASKED_VALUE

    def test_unknown_difficulty(self):
        with pytest.raises(ConfigurationError):
            MemoryVariant.config_for("nightmare")

    def test_too_many_pairs(self):
        with pytest.raises(ConfigurationError):
            MemoryVariant.configure({"actor_counts": {"pairs": len(SYMBOLS) + 1, "columns": 4}})


class TestTurns:

    def test_first_reveal_starts_session(self):
        arena = _make_arena()
        assert arena.state == LifecycleState.IDLE
        card_id = arena.snapshot.actors[0].id
        assert arena.press(Reveal(card_id)) is True
        assert arena.state == LifecycleState.RUNNING
        card = _card(arena, card_id)
        assert card.state == "revealed"
        assert card.tag == SYMBOLS[card.value]
        assert len(arena.snapshots) == 1

    def test_revealing_face_up_card_rejected(self):
        arena = _make_arena()
        card_id = arena.snapshot.actors[0].id
        arena.press(Reveal(card_id))
        assert arena.press(Reveal(card_id)) is False
        assert arena.press(Reveal(999)) is False

    def test_match_scores(self):
        arena = _make_arena()
        a, b = _pairs(arena)[0]
        arena.press(Reveal(a))
        arena.press(Reveal(b))
        assert _card(arena, a).state == _card(arena, b).state == "matched"
        assert arena.snapshot.score == 1
        assert arena.snapshot.stats["moves"] == 1
        assert not arena.clock.running

    def test_mismatch_conceals_on_timer(self):
        arena = _make_arena()
        a, b = _mismatch(arena)
        arena.press(Reveal(a))
        arena.press(Reveal(b))
        assert arena.snapshot.stats["pending"] == 1
        assert arena.clock.running
        assert arena.clock.interval_ms == 1000

        third = next(c.id for c in arena.snapshot.actors if c.id not in (a, b))
        assert arena.press(Reveal(third)) is False

        arena.run_ticks(1)
        assert _card(arena, a).state == _card(arena, b).state == "hidden"
        assert _card(arena, a).tag == ""
        assert arena.snapshot.stats["pending"] == 0
        assert not arena.clock.running
        assert arena.press(Reveal(third)) is True

    def test_pause_not_available(self):
        arena = _make_arena()
        arena.press(Reveal(arena.snapshot.actors[0].id))
        assert arena.session.pause() is False
        assert arena.press(Intent.PAUSE) is False
        assert arena.state == LifecycleState.RUNNING

    def test_rejected_action_does_not_start(self):
        arena = _make_arena()
        assert arena.press(Intent.UP) is False
        assert arena.press(Reveal(999)) is False
        assert arena.state == LifecycleState.IDLE


class TestWin:

    def test_all_pairs_matched(self):
        arena = _make_arena()
        pairs = _pairs(arena)
        for a, b in pairs:
            arena.press(Reveal(a))
            arena.press(Reveal(b))

        assert arena.state == LifecycleState.OVER
        assert arena.snapshot.outcome == Outcome.WON
        assert arena.session.final_score == len(pairs)
        assert arena.snapshot.stats["moves"] == len(pairs)

    def test_restart_deals_a_fresh_deck(self):
        arena = _make_arena()
        for a, b in _pairs(arena):
            arena.press(Reveal(a))
            arena.press(Reveal(b))
        assert arena.session.restart()

        snap = arena.snapshot
        assert snap.run_index == 1
        assert snap.score == 0
        assert {c.state for c in snap.actors} == {"hidden"}
