"""Seeded scripted input for headless runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Hashable

from arcade_engine.core.enums import Domain, Intent
from arcade_engine.core.models import Reveal
from arcade_engine.core.snapshot import HIDDEN
from arcade_engine.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from arcade_engine.core.snapshot import Snapshot

SCRIPT_INTENTS: dict[str, tuple[Intent, ...]] = {
    "snake": (Intent.UP, Intent.DOWN, Intent.LEFT, Intent.RIGHT),
    "pacman": (Intent.UP, Intent.DOWN, Intent.LEFT, Intent.RIGHT),
    "flappy": (Intent.FLAP,),
    "invaders": (Intent.LEFT, Intent.RIGHT, Intent.FIRE),
}


class ScriptedInput:
    """Deterministic stand-in for a player: same seed, same intents."""

    __slots__ = ("_variant", "_rng", "_rate")

    def __init__(self, variant: str, seed: int, rate: float = 0.25) -> None:
        self._variant = variant
        self._rng = DeterministicRNG(seed)
        self._rate = rate

    def next_intent(self, snapshot: Snapshot | None, step: int) -> Hashable | None:
        if snapshot is None:
            return None
        if self._variant == "memory":
            hidden = [a.id for a in snapshot.actors if a.state == HIDDEN]
            return Reveal(self._rng.choice(Domain.SCRIPT, 2, step, hidden)) if hidden else None

        if not self._rng.next_bool(Domain.SCRIPT, 0, step, self._rate):
            # Key-up between presses, so edge-triggered actions re-arm.
            return Intent.RELEASE if self._variant == "flappy" else None
        options = SCRIPT_INTENTS.get(self._variant, ())
        if not options:
            return None
        return self._rng.choice(Domain.SCRIPT, 1, step, options)
