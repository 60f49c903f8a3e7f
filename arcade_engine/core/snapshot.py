"""Immutable snapshot of a session, handed to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, Intent, LifecycleState, Outcome
from arcade_engine.core.models import Actor, Vector2

# Face-down actors (memory cards) keep their value out of every snapshot.
HIDDEN = "hidden"
MASKED_VALUE = -1


@dataclass(frozen=True, slots=True)
class ActorState:
    """Read-only copy of an Actor."""

    id: int
    kind: ActorKind
    x: float
    y: float
    width: float
    height: float
    direction: Intent | None
    hp: int
    value: int
    tag: str
    state: str
    segments: tuple[Vector2, ...]

    @classmethod
    def from_actor(cls, actor: Actor) -> ActorState:
        return cls(
            id=actor.id,
            kind=actor.kind,
            x=actor.position.x,
            y=actor.position.y,
            width=actor.size.x,
            height=actor.size.y,
            direction=actor.direction,
            hp=actor.hp,
            value=MASKED_VALUE if actor.state == HIDDEN else actor.value,
            tag=actor.tag,
            state=actor.state,
            segments=tuple(actor.segments),
        )


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of a session, safe to hand to any thread."""

    variant: str
    run_index: int
    tick: int
    score: int
    lifecycle_state: LifecycleState
    actors: tuple[ActorState, ...]
    width: int
    height: int
    interval_ms: int
    tiles: tuple[str, ...]
    stats: Mapping[str, int]
    outcome: Outcome | None

    @classmethod
    def from_model(
        cls,
        model: EntityModel,
        *,
        variant: str,
        run_index: int,
        lifecycle_state: LifecycleState,
        interval_ms: int,
    ) -> Snapshot:
        return cls(
            variant=variant,
            run_index=run_index,
            tick=model.elapsed_ticks,
            score=model.score,
            lifecycle_state=lifecycle_state,
            actors=tuple(ActorState.from_actor(a) for a in model.actors.values()),
            width=model.width,
            height=model.height,
            interval_ms=interval_ms,
            tiles=model.grid.rows() if model.grid is not None else (),
            stats=MappingProxyType(dict(model.stats)),
            outcome=model.outcome,
        )

    def actors_of(self, kind: ActorKind) -> tuple[ActorState, ...]:
        return tuple(a for a in self.actors if a.kind == kind)

    @property
    def player(self) -> ActorState | None:
        for a in self.actors:
            if a.kind == ActorKind.PLAYER:
                return a
        return None
