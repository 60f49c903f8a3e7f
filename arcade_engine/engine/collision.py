"""Deterministic collision detection and resolution.

Pass order per tick, always on the post-move model:
  1. Boundary: wrap, clamp or fatal, per actor kind
  2. Self: grid-chase head against its own body (vacated tail excluded)
  3. Actor-actor: exact cell (plus swap-through) on grids, AABB otherwise
  4. Actor-static: static actors and maze tiles

An actor removed by an earlier pass takes part in no later one. Any number
of terminal collisions in one tick terminates the run exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping

from arcade_engine.core.enums import ActorKind, BoundaryPolicy, CollisionKind, EffectKind, Geometry, Tile
from arcade_engine.core.models import Actor, Vector2

if TYPE_CHECKING:
    from arcade_engine.core.entity_model import EntityModel

logger = logging.getLogger(__name__)

# Pair arguments are ordered by this rank so rules only handle one orientation.
KIND_RANK: dict[ActorKind, int] = {
    ActorKind.PLAYER: 0,
    ActorKind.ENEMY: 1,
    ActorKind.PROJECTILE: 2,
    ActorKind.COLLECTIBLE: 3,
    ActorKind.STATIC: 4,
}


@dataclass(frozen=True, slots=True)
class Effect:
    """A single resolution effect. ``cell`` is set only for tile effects."""

    kind: EffectKind
    target: int | None = None
    amount: int = 0
    cell: tuple[int, int] | None = None


@dataclass(frozen=True, slots=True)
class CollisionEvent:
    """One classified collision. Produced fresh each tick, never persisted."""

    kind: CollisionKind
    participants: tuple[int, ...]
    effects: tuple[Effect, ...] = ()

    @property
    def terminal(self) -> bool:
        return any(e.kind == EffectKind.TERMINATE for e in self.effects)

    @property
    def score_delta(self) -> int:
        return sum(e.amount for e in self.effects if e.kind in (EffectKind.SCORE, EffectKind.COLLECT))


def score(amount: int) -> Effect:
    return Effect(EffectKind.SCORE, amount=amount)


def remove(actor: Actor) -> Effect:
    return Effect(EffectKind.REMOVE, target=actor.id)


def terminate() -> Effect:
    return Effect(EffectKind.TERMINATE)


def bounce(actor: Actor) -> Effect:
    return Effect(EffectKind.BOUNCE, target=actor.id)


def absorb(obstacle: Actor, hits: int = 1) -> Effect:
    return Effect(EffectKind.ABSORB, target=obstacle.id, amount=hits)


def grow(actor: Actor) -> Effect:
    return Effect(EffectKind.GROW, target=actor.id)


def collect(x: int, y: int, amount: int) -> Effect:
    return Effect(EffectKind.COLLECT, amount=amount, cell=(x, y))


class CollisionRules:
    """Variant-declared collision policy. Subclasses override the hooks."""

    geometry: Geometry = Geometry.GRID
    self_collision: bool = False
    boundaries: Mapping[ActorKind, BoundaryPolicy] = {}
    default_boundary: BoundaryPolicy = BoundaryPolicy.CLAMP

    def boundary_for(self, actor: Actor) -> BoundaryPolicy:
        return self.boundaries.get(actor.kind, self.default_boundary)

    def pair_effects(self, first: Actor, second: Actor) -> tuple[Effect, ...]:
        """Effects for two touching non-static actors, *first* ranked lower."""
        return ()

    def static_effects(self, mover: Actor, obstacle: Actor) -> tuple[Effect, ...]:
        """Effects for a non-static actor touching a static one."""
        return ()

    def tile_effects(self, mover: Actor, tile: Tile, x: int, y: int) -> tuple[Effect, ...]:
        """Effects for a non-static actor standing on a maze tile."""
        return ()


class CollisionResolver:
    """Detects and classifies collisions, then applies their effects."""

    __slots__ = ("_rules",)

    def __init__(self, rules: CollisionRules) -> None:
        self._rules = rules

    @property
    def rules(self) -> CollisionRules:
        return self._rules

    def resolve(self, model: EntityModel) -> list[CollisionEvent]:
        """Classify every collision in *model*. Boundary corrections are applied in place."""
        events: list[CollisionEvent] = []
        removed: set[int] = set()

        self._pass_boundary(model, events, removed)
        if self._rules.self_collision and self._rules.geometry == Geometry.GRID:
            self._pass_self(model, events)
        self._pass_actors(model, events, removed)
        self._pass_static(model, events, removed)
        return events

    def apply(self, events: list[CollisionEvent], model: EntityModel) -> bool:
        """Apply effects to *model*. Returns True if the run must terminate."""
        terminated = False
        for event in events:
            for effect in event.effects:
                if effect.kind == EffectKind.TERMINATE:
                    terminated = True
                else:
                    self._apply_one(effect, model)
        return terminated

    # -- passes --

    def _pass_boundary(self, model: EntityModel, events: list[CollisionEvent], removed: set[int]) -> None:
        for actor in list(model.actors.values()):
            policy = self._rules.boundary_for(actor)
            if policy == BoundaryPolicy.IGNORE or self._inside(actor, model):
                continue
            if policy == BoundaryPolicy.WRAP:
                actor.position = self._wrapped(actor.position, model)
                events.append(CollisionEvent(CollisionKind.BOUNDARY, (actor.id,)))
            elif policy == BoundaryPolicy.CLAMP:
                actor.position = self._clamped(actor, model)
                events.append(CollisionEvent(CollisionKind.BOUNDARY, (actor.id,)))
            elif actor.kind == ActorKind.PLAYER:
                events.append(CollisionEvent(CollisionKind.BOUNDARY, (actor.id,), (terminate(), bounce(actor))))
            else:
                removed.add(actor.id)
                events.append(CollisionEvent(CollisionKind.BOUNDARY, (actor.id,), (remove(actor),)))

            # A bounced player is handled by apply(); everything else must now be inside.
            if actor.id not in removed and policy != BoundaryPolicy.FATAL and not self._inside(actor, model):
                logger.debug("Actor %d still outside bounds after %s, re-clamping", actor.id, policy.value)
                actor.position = self._clamped(actor, model)

    def _pass_self(self, model: EntityModel, events: list[CollisionEvent]) -> None:
        for actor in model.actors.values():
            if not actor.segments or actor.kind != ActorKind.PLAYER:
                continue
            # segments already exclude the tail cell vacated this tick
            if actor.position in actor.segments:
                events.append(CollisionEvent(CollisionKind.SELF, (actor.id,), (terminate(), bounce(actor))))

    def _pass_actors(self, model: EntityModel, events: list[CollisionEvent], removed: set[int]) -> None:
        movers = sorted(
            (a for a in model.actors.values() if a.kind != ActorKind.STATIC),
            key=lambda a: a.id,
        )
        for i, a in enumerate(movers):
            for b in movers[i + 1:]:
                if a.id in removed:
                    break
                if b.id in removed or not self._touching(a, b):
                    continue
                first, second = (a, b) if KIND_RANK[a.kind] <= KIND_RANK[b.kind] else (b, a)
                effects = self._rules.pair_effects(first, second)
                if not effects:
                    continue
                events.append(CollisionEvent(CollisionKind.ACTOR_ACTOR, (first.id, second.id), effects))
                self._mark_removed(effects, removed)

    def _pass_static(self, model: EntityModel, events: list[CollisionEvent], removed: set[int]) -> None:
        obstacles = sorted(model.of_kind(ActorKind.STATIC), key=lambda a: a.id)
        movers = sorted(
            (a for a in model.actors.values() if a.kind != ActorKind.STATIC),
            key=lambda a: a.id,
        )
        for mover in movers:
            for obstacle in obstacles:
                if mover.id in removed:
                    break
                if obstacle.id in removed or not self._touching(mover, obstacle):
                    continue
                effects = self._rules.static_effects(mover, obstacle)
                if effects:
                    events.append(CollisionEvent(CollisionKind.ACTOR_STATIC, (mover.id, obstacle.id), effects))
                    self._mark_removed(effects, removed)

        grid = model.grid
        if grid is None or self._rules.geometry != Geometry.GRID:
            return
        for mover in movers:
            if mover.id in removed:
                continue
            x, y = mover.position.cell()
            effects = self._rules.tile_effects(mover, grid.get_xy(x, y), x, y)
            if effects:
                events.append(CollisionEvent(CollisionKind.ACTOR_STATIC, (mover.id,), effects))
                self._mark_removed(effects, removed)

    # -- geometry --

    def _inside(self, actor: Actor, model: EntityModel) -> bool:
        x, y = actor.position.x, actor.position.y
        if self._rules.geometry == Geometry.GRID:
            return 0 <= x < model.width and 0 <= y < model.height
        return 0 <= x <= model.width - actor.size.x and 0 <= y <= model.height - actor.size.y

    def _touching(self, a: Actor, b: Actor) -> bool:
        if self._rules.geometry == Geometry.CONTINUOUS:
            return a.overlaps(b)
        if a.position == b.position:
            return True
        # swap-through: both moved and exchanged cells this tick
        return (
            a.previous_position is not None
            and b.previous_position is not None
            and a.previous_position != a.position
            and a.previous_position == b.position
            and b.previous_position == a.position
        )

    @staticmethod
    def _wrapped(pos: Vector2, model: EntityModel) -> Vector2:
        return Vector2(_wrap(pos.x, model.width), _wrap(pos.y, model.height))

    def _clamped(self, actor: Actor, model: EntityModel) -> Vector2:
        if self._rules.geometry == Geometry.GRID:
            max_x, max_y = model.width - 1, model.height - 1
        else:
            max_x, max_y = model.width - actor.size.x, model.height - actor.size.y
        return Vector2(
            min(max(actor.position.x, 0), max(max_x, 0)),
            min(max(actor.position.y, 0), max(max_y, 0)),
        )

    # -- effects --

    @staticmethod
    def _mark_removed(effects: tuple[Effect, ...], removed: set[int]) -> None:
        for effect in effects:
            if effect.kind == EffectKind.REMOVE and effect.target is not None:
                removed.add(effect.target)

    @staticmethod
    def _apply_one(effect: Effect, model: EntityModel) -> None:
        match effect.kind:
            case EffectKind.SCORE:
                model.score += effect.amount

            case EffectKind.REMOVE:
                model.remove_actor(effect.target)

            case EffectKind.BOUNCE:
                actor = model.actors.get(effect.target)
                if actor is not None:
                    _revert_move(actor)

            case EffectKind.ABSORB:
                obstacle = model.actors.get(effect.target)
                if obstacle is not None:
                    obstacle.hp -= effect.amount
                    if obstacle.hp <= 0:
                        model.remove_actor(obstacle.id)

            case EffectKind.GROW:
                actor = model.actors.get(effect.target)
                if actor is not None and actor.vacated is not None:
                    actor.segments.append(actor.vacated)
                    actor.vacated = None

            case EffectKind.COLLECT:
                model.score += effect.amount
                if model.grid is not None and effect.cell is not None:
                    model.grid.set_xy(effect.cell[0], effect.cell[1], Tile.FLOOR)


def _wrap(value: float, bound: int) -> float:
    """Wrap into [0, bound). Guards the float case where -tiny % bound == bound."""
    wrapped = value % bound
    if wrapped >= bound:
        wrapped = 0
    return wrapped


def _revert_move(actor: Actor) -> None:
    """Undo this tick's move, re-attaching the vacated tail of a grid-chase body."""
    if actor.previous_position is None:
        return
    if actor.vacated is not None and actor.segments:
        actor.segments = actor.segments[1:] + [actor.vacated]
    actor.position = actor.previous_position
    actor.vacated = None
