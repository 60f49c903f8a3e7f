"""Autonomous pursuit for maze enemies.

Usage:
    brain = PursuitBrain(straight_bias=0.75)
    direction = brain.choose(ghost, grid, rng, tick, target=player.position)

A direction is only re-evaluated at a junction (two or more continuations,
not counting the reversal) or when the current direction is blocked, so
actors never jitter between ticks in a plain corridor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arcade_engine.core.enums import OPPOSITE, Domain, Intent
from arcade_engine.core.models import DIRECTION_OFFSETS

if TYPE_CHECKING:
    from arcade_engine.core.grid import Grid
    from arcade_engine.core.models import Actor, Vector2
    from arcade_engine.systems.rng import DeterministicRNG

# Fixed evaluation order keeps every choice deterministic for a given seed.
_ORDER = (Intent.UP, Intent.LEFT, Intent.DOWN, Intent.RIGHT)


class PursuitBrain:
    """Junction-driven direction choice with a straight-ahead preference.

    ``straight_bias`` is the chance of keeping the current direction at a
    junction; ``chase_bias`` the chance of then turning toward the target
    rather than picking a random continuation.
    """

    __slots__ = ("_straight_bias", "_chase_bias", "_wrap_x")

    def __init__(self, straight_bias: float = 0.75, chase_bias: float = 0.5, wrap_x: bool = True) -> None:
        self._straight_bias = straight_bias
        self._chase_bias = chase_bias
        self._wrap_x = wrap_x

    def open_directions(self, pos: Vector2, grid: Grid) -> list[Intent]:
        x, y = pos.cell()
        return [
            d for d in _ORDER
            if grid.is_open_xy(x + int(DIRECTION_OFFSETS[d].x), y + int(DIRECTION_OFFSETS[d].y), wrap_x=self._wrap_x)
        ]

    def choose(
        self,
        actor: Actor,
        grid: Grid,
        rng: DeterministicRNG | None,
        tick: int,
        target: Vector2 | None = None,
    ) -> Intent | None:
        """Direction for this tick, or None when the actor is boxed in."""
        open_dirs = self.open_directions(actor.position, grid)
        if not open_dirs:
            return None

        current = actor.direction
        if current is None:
            return self._pick(open_dirs, actor, rng, tick, target)

        reverse = OPPOSITE[current]
        continuations = [d for d in open_dirs if d != reverse]
        if not continuations:
            return reverse  # dead end

        blocked = current not in open_dirs
        if not blocked and len(continuations) < 2:
            return current  # corridor: never re-evaluate
        if blocked and len(continuations) == 1:
            return continuations[0]  # corner

        if not blocked and (rng is None or rng.next_bool(Domain.AI_DECISION, actor.id, tick, self._straight_bias)):
            return current
        options = [d for d in continuations if d != current] if not blocked else continuations
        return self._pick(options or continuations, actor, rng, tick, target)

    def _pick(
        self,
        options: list[Intent],
        actor: Actor,
        rng: DeterministicRNG | None,
        tick: int,
        target: Vector2 | None,
    ) -> Intent:
        if rng is None:
            return options[0]
        if target is not None and rng.next_bool(Domain.AI_DECISION, actor.id + 1_000_000, tick, self._chase_bias):
            return min(options, key=lambda d: (actor.position + DIRECTION_OFFSETS[d]).manhattan(target))
        return rng.choice(Domain.AI_DECISION, actor.id, tick, options)
