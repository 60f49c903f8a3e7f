"""Space invaders: formation descent, player bullets and destructible bunkers."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Hashable

from arcade_engine.config import ConfigurationError, DifficultyCurve, SessionConfig
from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, BoundaryPolicy, Geometry, Intent, Outcome
from arcade_engine.core.models import Actor, Vector2
from arcade_engine.engine.collision import CollisionRules, Effect, absorb, remove, score, terminate
from arcade_engine.engine.input_latch import IntentFilter, StepAndActionFilter
from arcade_engine.variants.base import Variant

if TYPE_CHECKING:
    from arcade_engine.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

# Formation
INVADER_WIDTH = 32
INVADER_HEIGHT = 24
COLUMN_SPACING = 60
ROW_SPACING = 40
FORMATION_ORIGIN = Vector2(40, 40)
HORIZONTAL_STEP = 10
DROP_STEP = 5
LOSE_LINE_Y = 360

# Player and bullets
PLAYER_START_X = 380
PLAYER_Y = 560
PLAYER_WIDTH = 40
PLAYER_HEIGHT = 24
PLAYER_STEP = 20
BULLET_OFFSET_X = 18
BULLET_Y = 520
BULLET_WIDTH = 4
BULLET_HEIGHT = 12
BULLET_SPEED = 8

# Bunkers
BUNKER_X0 = 120
BUNKER_SPACING = 160
BUNKER_Y = 450
BUNKER_WIDTH = 80
BUNKER_HEIGHT = 60
BUNKER_HITS = 3


def row_value(row: int) -> int:
    """Top row is worth most."""
    if row == 0:
        return 30
    if row <= 2:
        return 20
    return 10


class InvadersRules(CollisionRules):
    geometry = Geometry.CONTINUOUS
    boundaries = {
        ActorKind.PLAYER: BoundaryPolicy.CLAMP,
        ActorKind.ENEMY: BoundaryPolicy.CLAMP,
        ActorKind.PROJECTILE: BoundaryPolicy.FATAL,
    }

    def pair_effects(self, first: Actor, second: Actor) -> tuple[Effect, ...]:
        if first.kind == ActorKind.PLAYER and second.kind == ActorKind.ENEMY:
            return (terminate(),)
        if first.kind == ActorKind.ENEMY and second.kind == ActorKind.PROJECTILE:
            return (score(first.value), remove(first), remove(second))
        return ()

    def static_effects(self, mover: Actor, obstacle: Actor) -> tuple[Effect, ...]:
        if mover.kind == ActorKind.PROJECTILE:
            return (absorb(obstacle), remove(mover))
        return ()


class InvadersVariant(Variant):
    key = "invaders"
    title = "Space Invaders"
    default_config = SessionConfig(
        width=800,
        height=600,
        initial_interval_ms=100,
        min_interval_ms=40,
        difficulty_curve=DifficultyCurve(kind="step", step_score=200, step_ms=10),
        actor_counts=MappingProxyType({"rows": 5, "columns": 10, "bunkers": 4}),
    )
    rules = InvadersRules()

    @classmethod
    def validate_config(cls, config: SessionConfig) -> None:
        rows, columns = config.count("rows", 5), config.count("columns", 10)
        if rows < 1 or columns < 1:
            raise ConfigurationError(f"invaders needs a non-empty formation, got {rows}x{columns}")
        right = FORMATION_ORIGIN.x + (columns - 1) * COLUMN_SPACING + INVADER_WIDTH
        if right > config.width or config.height <= PLAYER_Y + PLAYER_HEIGHT:
            raise ConfigurationError(f"a {rows}x{columns} formation does not fit {config.width}x{config.height}")

    def initial_model(self, config: SessionConfig, rng: DeterministicRNG) -> EntityModel:
        model = EntityModel(config.width, config.height)
        model.add_actor(Actor(
            id=model.allocate_actor_id(),
            kind=ActorKind.PLAYER,
            position=Vector2(PLAYER_START_X, PLAYER_Y),
            size=Vector2(PLAYER_WIDTH, PLAYER_HEIGHT),
            tag="cannon",
        ))
        for row in range(config.count("rows", 5)):
            for col in range(config.count("columns", 10)):
                model.add_actor(Actor(
                    id=model.allocate_actor_id(),
                    kind=ActorKind.ENEMY,
                    position=Vector2(FORMATION_ORIGIN.x + col * COLUMN_SPACING, FORMATION_ORIGIN.y + row * ROW_SPACING),
                    size=Vector2(INVADER_WIDTH, INVADER_HEIGHT),
                    direction=Intent.RIGHT,
                    value=row_value(row),
                    tag=f"invader-{row}-{col}",
                ))
        for i in range(config.count("bunkers", 4)):
            model.add_actor(Actor(
                id=model.allocate_actor_id(),
                kind=ActorKind.STATIC,
                position=Vector2(BUNKER_X0 + i * BUNKER_SPACING, BUNKER_Y),
                size=Vector2(BUNKER_WIDTH, BUNKER_HEIGHT),
                hp=BUNKER_HITS,
                tag="bunker",
            ))
        model.stats["shots"] = 0
        return model

    def input_filter(self) -> IntentFilter:
        return StepAndActionFilter(frozenset({Intent.LEFT, Intent.RIGHT, Intent.FIRE}))

    def advance(self, model: EntityModel, intent: Hashable | None, rng: DeterministicRNG | None) -> None:
        player = model.player
        if player is not None:
            if intent == Intent.LEFT:
                player.position = Vector2(max(player.position.x - PLAYER_STEP, 0), player.position.y)
            elif intent == Intent.RIGHT:
                limit = model.width - player.size.x
                player.position = Vector2(min(player.position.x + PLAYER_STEP, limit), player.position.y)

        for bullet in model.of_kind(ActorKind.PROJECTILE):
            bullet.position = Vector2(bullet.position.x, bullet.position.y - BULLET_SPEED)

        self._march(model, model.of_kind(ActorKind.ENEMY))

        if intent == Intent.FIRE and player is not None:
            model.add_actor(Actor(
                id=model.allocate_actor_id(),
                kind=ActorKind.PROJECTILE,
                position=Vector2(player.position.x + BULLET_OFFSET_X, BULLET_Y),
                size=Vector2(BULLET_WIDTH, BULLET_HEIGHT),
                velocity=Vector2(0, -BULLET_SPEED),
                tag="bullet",
            ))
            model.stats["shots"] = model.stats.get("shots", 0) + 1

    @staticmethod
    def _march(model: EntityModel, invaders: list[Actor]) -> None:
        """Move the whole block. The edge test uses pre-move positions only."""
        if not invaders:
            return
        heading = invaders[0].direction
        if heading == Intent.RIGHT:
            at_edge = any(a.position.x >= model.width - a.size.x for a in invaders)
        else:
            at_edge = any(a.position.x <= 0 for a in invaders)

        if at_edge:
            reverse = Intent.LEFT if heading == Intent.RIGHT else Intent.RIGHT
            for a in invaders:
                a.direction = reverse
                a.position = Vector2(a.position.x, a.position.y + DROP_STEP)
            return

        # Clamp the shift for the whole block so it stops flush with the edge.
        if heading == Intent.RIGHT:
            dx = min(HORIZONTAL_STEP, min(model.width - a.right for a in invaders))
        else:
            dx = -min(HORIZONTAL_STEP, min(a.position.x for a in invaders))
        for a in invaders:
            a.position = Vector2(a.position.x + dx, a.position.y)

    def check_outcome(self, model: EntityModel) -> Outcome | None:
        invaders = model.of_kind(ActorKind.ENEMY)
        if not invaders:
            logger.info("Formation destroyed at tick %d", model.elapsed_ticks)
            return Outcome.WON
        if any(a.position.y > LOSE_LINE_Y for a in invaders):
            return Outcome.LOST
        return None
