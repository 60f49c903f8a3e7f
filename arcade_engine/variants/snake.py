"""Classic snake: grid-chase with growth on consume."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Hashable

from arcade_engine.config import ConfigurationError, DifficultyCurve, SessionConfig
from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, BoundaryPolicy, Geometry, Intent, Outcome
from arcade_engine.core.models import DIRECTION_OFFSETS, Actor, Vector2
from arcade_engine.engine.collision import CollisionRules, Effect, grow, remove, score
from arcade_engine.engine.input_latch import DirectionFilter, IntentFilter
from arcade_engine.systems.placement import find_free_cell
from arcade_engine.variants.base import Variant

if TYPE_CHECKING:
    from arcade_engine.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

FOOD_POINTS = 10
FOOD_SALT = 101


class SnakeRules(CollisionRules):
    geometry = Geometry.GRID
    self_collision = True
    boundaries = {ActorKind.PLAYER: BoundaryPolicy.FATAL}

    def pair_effects(self, first: Actor, second: Actor) -> tuple[Effect, ...]:
        if first.kind == ActorKind.PLAYER and second.kind == ActorKind.COLLECTIBLE:
            return (score(second.value), remove(second), grow(first))
        return ()


class SnakeVariant(Variant):
    key = "snake"
    title = "Classic Snake"
    default_config = SessionConfig(
        width=20,
        height=20,
        initial_interval_ms=150,
        min_interval_ms=60,
        difficulty_curve=DifficultyCurve(kind="step", step_score=50, step_ms=10),
    )
    rules = SnakeRules()

    @classmethod
    def validate_config(cls, config: SessionConfig) -> None:
        if config.width < 2 or config.height < 1:
            raise ConfigurationError(f"snake needs at least a 2x1 board, got {config.width}x{config.height}")

    def initial_model(self, config: SessionConfig, rng: DeterministicRNG) -> EntityModel:
        model = EntityModel(config.width, config.height)
        model.add_actor(Actor(
            id=model.allocate_actor_id(),
            kind=ActorKind.PLAYER,
            position=Vector2(config.width // 2, config.height // 2),
            direction=Intent.RIGHT,
            tag="snake",
        ))
        for food in self.spawn_policy(model, rng):
            model.add_actor(food)
        model.stats["length"] = 1
        return model

    def input_filter(self) -> IntentFilter:
        return DirectionFilter(allow_reversal=False)

    def initial_intent(self) -> Hashable | None:
        return Intent.RIGHT

    def advance(self, model: EntityModel, intent: Hashable | None, rng: DeterministicRNG | None) -> None:
        head = model.player
        if head is None:
            return
        if intent in DIRECTION_OFFSETS:
            head.direction = intent
        offset = DIRECTION_OFFSETS[head.direction]

        # The tail moves in the same tick as the head, so it is popped before
        # self-collision is checked. Eating re-attaches it.
        head.segments.insert(0, head.position)
        head.position = head.position + offset
        head.vacated = head.segments.pop()

    def spawn_policy(self, model: EntityModel, rng: DeterministicRNG) -> list[Actor]:
        head = model.player
        if head is not None:
            model.stats["length"] = 1 + len(head.segments)
        if model.of_kind(ActorKind.COLLECTIBLE):
            return []
        cell = find_free_cell(
            model.width, model.height, model.occupied_cells(), rng,
            salt=FOOD_SALT, tick=model.elapsed_ticks,
        )
        if cell is None:
            return []
        return [Actor(
            id=model.allocate_actor_id(),
            kind=ActorKind.COLLECTIBLE,
            position=cell,
            value=FOOD_POINTS,
            tag="food",
        )]

    def check_outcome(self, model: EntityModel) -> Outcome | None:
        head = model.player
        if head is None:
            return None
        if not model.of_kind(ActorKind.COLLECTIBLE) and 1 + len(head.segments) >= model.width * model.height:
            logger.info("Snake filled the %dx%d board", model.width, model.height)
            return Outcome.WON
        return None
