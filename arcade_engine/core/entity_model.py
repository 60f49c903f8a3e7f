"""Authoritative per-session game state."""

from __future__ import annotations

from arcade_engine.core.enums import ActorKind, Outcome
from arcade_engine.core.grid import Grid
from arcade_engine.core.models import Actor


class EntityModel:
    """The single source of truth for one run of one variant.

    Owned by exactly one SimulationLoop. Ticks never mutate a model in place:
    every step works on ``copy()`` and hands the copy to the next stage.
    """

    __slots__ = ("width", "height", "actors", "score", "elapsed_ticks", "grid", "stats", "outcome", "_next_actor_id")

    def __init__(self, width: int, height: int, grid: Grid | None = None) -> None:
        self.width: int = width
        self.height: int = height
        self.actors: dict[int, Actor] = {}
        self.score: int = 0
        self.elapsed_ticks: int = 0
        self.grid: Grid | None = grid
        self.stats: dict[str, int] = {}
        self.outcome: Outcome | None = None
        self._next_actor_id: int = 1

    # -- actors --

    def allocate_actor_id(self) -> int:
        aid = self._next_actor_id
        self._next_actor_id += 1
        return aid

    def add_actor(self, actor: Actor) -> None:
        self.actors[actor.id] = actor
        if actor.id >= self._next_actor_id:
            self._next_actor_id = actor.id + 1

    def remove_actor(self, actor_id: int) -> Actor | None:
        return self.actors.pop(actor_id, None)

    def of_kind(self, kind: ActorKind) -> list[Actor]:
        return [a for a in self.actors.values() if a.kind == kind]

    @property
    def player(self) -> Actor | None:
        for actor in self.actors.values():
            if actor.kind == ActorKind.PLAYER:
                return actor
        return None

    def occupied_cells(self) -> set[tuple[int, int]]:
        """Every cell covered by an actor body (grid variants)."""
        cells: set[tuple[int, int]] = set()
        for actor in self.actors.values():
            for part in actor.body():
                cells.add(part.cell())
        return cells

    # -- copy --

    def copy(self) -> EntityModel:
        new = EntityModel.__new__(EntityModel)
        new.width = self.width
        new.height = self.height
        new.actors = {aid: a.copy() for aid, a in self.actors.items()}
        new.score = self.score
        new.elapsed_ticks = self.elapsed_ticks
        new.grid = self.grid.copy() if self.grid is not None else None
        new.stats = dict(self.stats)
        new.outcome = self.outcome
        new._next_actor_id = self._next_actor_id
        return new
