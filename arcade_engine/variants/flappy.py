"""Flappy bird: continuous physics with impulse input and scrolling pipes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Hashable

from arcade_engine.config import ConfigurationError, SessionConfig
from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, BoundaryPolicy, Domain, Geometry, Intent
from arcade_engine.core.models import Actor, Vector2
from arcade_engine.engine.collision import CollisionRules, Effect, terminate
from arcade_engine.engine.difficulty import DifficultyScaler
from arcade_engine.engine.input_latch import EdgeTriggerFilter, IntentFilter
from arcade_engine.variants.base import Variant

if TYPE_CHECKING:
    from arcade_engine.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

BIRD_SIZE = 30
GRAVITY = 0.5
JUMP_IMPULSE = -10.0
PIPE_WIDTH = 80
PIPE_GAP = 200
PIPE_SPEED = 3
PIPE_SPAWN_MS = 1500
GAP_MARGIN = 50


class FlappyRules(CollisionRules):
    geometry = Geometry.CONTINUOUS
    boundaries = {ActorKind.PLAYER: BoundaryPolicy.FATAL, ActorKind.STATIC: BoundaryPolicy.IGNORE}

    def static_effects(self, mover: Actor, obstacle: Actor) -> tuple[Effect, ...]:
        if mover.kind == ActorKind.PLAYER:
            return (terminate(),)
        return ()


class FlappyVariant(Variant):
    key = "flappy"
    title = "Flappy Bird"
    default_config = SessionConfig(
        width=800,
        height=600,
        initial_interval_ms=16,
        min_interval_ms=16,
    )
    rules = FlappyRules()

    @classmethod
    def validate_config(cls, config: SessionConfig) -> None:
        if config.height < PIPE_GAP + 2 * GAP_MARGIN:
            raise ConfigurationError(f"flappy needs height >= {PIPE_GAP + 2 * GAP_MARGIN}, got {config.height}")
        if config.width < PIPE_WIDTH + BIRD_SIZE:
            raise ConfigurationError(f"flappy needs width >= {PIPE_WIDTH + BIRD_SIZE}, got {config.width}")

    def initial_model(self, config: SessionConfig, rng: DeterministicRNG) -> EntityModel:
        model = EntityModel(config.width, config.height)
        model.add_actor(Actor(
            id=model.allocate_actor_id(),
            kind=ActorKind.PLAYER,
            position=Vector2(config.width / 2 - BIRD_SIZE / 2, config.height / 2),
            size=Vector2(BIRD_SIZE, BIRD_SIZE),
            tag="bird",
        ))
        scaler = DifficultyScaler.from_config(config)
        model.stats["spawn_every"] = scaler.spawn_interval_ticks(PIPE_SPAWN_MS, config.initial_interval_ms)
        model.stats["next_pipe_tick"] = 1
        model.stats["pipes_passed"] = 0
        return model

    def input_filter(self) -> IntentFilter:
        return EdgeTriggerFilter(frozenset({Intent.FLAP}))

    def advance(self, model: EntityModel, intent: Hashable | None, rng: DeterministicRNG | None) -> None:
        bird = model.player
        if bird is not None:
            # A flap replaces the velocity; gravity is integrated afterwards.
            vy = JUMP_IMPULSE if intent == Intent.FLAP else bird.velocity.y
            vy += GRAVITY
            bird.velocity = Vector2(0, vy)
            bird.position = Vector2(bird.position.x, bird.position.y + vy)

        bird_x = bird.position.x if bird is not None else model.width / 2
        for pipe in model.of_kind(ActorKind.STATIC):
            pipe.position = Vector2(pipe.position.x - PIPE_SPEED, pipe.position.y)
            if pipe.right <= 0:
                model.remove_actor(pipe.id)
                continue
            if pipe.state != "passed" and pipe.right < bird_x:
                pipe.state = "passed"
                # Top and bottom halves pass together; only the top one scores.
                if pipe.tag == "pipe-top":
                    model.score += 1
                    model.stats["pipes_passed"] = model.stats.get("pipes_passed", 0) + 1

    def spawn_policy(self, model: EntityModel, rng: DeterministicRNG) -> list[Actor]:
        if model.elapsed_ticks < model.stats.get("next_pipe_tick", 1):
            return []
        model.stats["next_pipe_tick"] = model.elapsed_ticks + model.stats.get("spawn_every", 1)

        span = model.height - PIPE_GAP - 2 * GAP_MARGIN
        gap_top = GAP_MARGIN + rng.next_float(Domain.SPAWN, 0, model.elapsed_ticks) * span
        x = model.width
        top = Actor(
            id=model.allocate_actor_id(),
            kind=ActorKind.STATIC,
            position=Vector2(x, 0),
            size=Vector2(PIPE_WIDTH, gap_top),
            tag="pipe-top",
        )
        bottom_y = gap_top + PIPE_GAP
        bottom = Actor(
            id=model.allocate_actor_id(),
            kind=ActorKind.STATIC,
            position=Vector2(x, bottom_y),
            size=Vector2(PIPE_WIDTH, model.height - bottom_y),
            tag="pipe-bottom",
        )
        return [top, bottom]
