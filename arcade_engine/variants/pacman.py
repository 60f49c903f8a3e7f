"""Pac-Man: maze grid-chase with pellets and pursuing ghosts."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Hashable

from arcade_engine.ai.pursuit import PursuitBrain
from arcade_engine.config import ConfigurationError, SessionConfig
from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, BoundaryPolicy, Geometry, Intent, Outcome, Tile
from arcade_engine.core.grid import Grid
from arcade_engine.core.models import DIRECTION_OFFSETS, Actor, Vector2
from arcade_engine.engine.collision import CollisionRules, Effect, bounce, collect, terminate
from arcade_engine.engine.input_latch import DirectionFilter, IntentFilter
from arcade_engine.variants.base import Variant

if TYPE_CHECKING:
    from arcade_engine.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

PELLET_POINTS = 10

# '#' wall, '.' pellet. Row 14 is open at both ends: the wrap-around tunnel.
MAZE: tuple[str, ...] = (
    "############################",
    "#............##............#",
    "#.####.#####.##.#####.####.#",
    "#.####.#####.##.#####.####.#",
    "#..........................#",
    "#.####.##.########.##.####.#",
    "#......##....##....##......#",
    "######.#####.##.#####.######",
    "######.##..........##.######",
    "######.##.########.##.######",
    "#.........########.........#",
    "######.##.########.##.######",
    "######.##.#........##.######",
    "######.##.#.######.##.######",
    "..........#.######.#........",
    "######.##.#.######.##.######",
    "######.##.#........##.######",
    "######.##.########.##.######",
    "#............##............#",
    "#.####.#####.##.#####.####.#",
    "#...##................##...#",
    "###.##.##.########.##.##.###",
    "#......##....##....##......#",
    "#.##########.##.##########.#",
    "#..........................#",
    "############################",
)
MAZE_WIDTH = len(MAZE[0])
MAZE_HEIGHT = len(MAZE)

PLAYER_START = Vector2(14, 24)
GHOST_STARTS: tuple[tuple[str, Vector2, Intent], ...] = (
    ("blinky", Vector2(12, 12), Intent.LEFT),
    ("pinky", Vector2(13, 12), Intent.RIGHT),
    ("inky", Vector2(14, 12), Intent.LEFT),
    ("clyde", Vector2(15, 12), Intent.RIGHT),
)


class PacmanRules(CollisionRules):
    geometry = Geometry.GRID
    boundaries = {ActorKind.PLAYER: BoundaryPolicy.WRAP, ActorKind.ENEMY: BoundaryPolicy.WRAP}

    def pair_effects(self, first: Actor, second: Actor) -> tuple[Effect, ...]:
        if first.kind == ActorKind.PLAYER and second.kind == ActorKind.ENEMY:
            return (terminate(),)
        return ()

    def tile_effects(self, mover: Actor, tile: Tile, x: int, y: int) -> tuple[Effect, ...]:
        if tile == Tile.WALL:
            return (bounce(mover),)
        if tile == Tile.PELLET and mover.kind == ActorKind.PLAYER:
            return (collect(x, y, PELLET_POINTS),)
        return ()


class PacmanVariant(Variant):
    key = "pacman"
    title = "Pac-Man"
    default_config = SessionConfig(
        width=MAZE_WIDTH,
        height=MAZE_HEIGHT,
        initial_interval_ms=200,
        min_interval_ms=200,
        actor_counts=MappingProxyType({"ghosts": len(GHOST_STARTS)}),
    )
    rules = PacmanRules()

    def __init__(self, straight_bias: float = 0.75) -> None:
        self._brain = PursuitBrain(straight_bias=straight_bias)

    @classmethod
    def validate_config(cls, config: SessionConfig) -> None:
        if (config.width, config.height) != (MAZE_WIDTH, MAZE_HEIGHT):
            raise ConfigurationError(
                f"pacman world is fixed by its maze ({MAZE_WIDTH}x{MAZE_HEIGHT}), got {config.width}x{config.height}"
            )
        ghosts = config.count("ghosts", len(GHOST_STARTS))
        if ghosts > len(GHOST_STARTS):
            raise ConfigurationError(f"pacman supports at most {len(GHOST_STARTS)} ghosts, got {ghosts}")

    def initial_model(self, config: SessionConfig, rng: DeterministicRNG) -> EntityModel:
        grid = Grid.from_rows(MAZE)
        grid.set_xy(int(PLAYER_START.x), int(PLAYER_START.y), Tile.FLOOR)
        model = EntityModel(grid.width, grid.height, grid=grid)
        model.add_actor(Actor(
            id=model.allocate_actor_id(),
            kind=ActorKind.PLAYER,
            position=PLAYER_START,
            direction=Intent.LEFT,
            tag="pacman",
        ))
        for name, start, heading in GHOST_STARTS[:config.count("ghosts", len(GHOST_STARTS))]:
            model.add_actor(Actor(
                id=model.allocate_actor_id(),
                kind=ActorKind.ENEMY,
                position=start,
                direction=heading,
                tag=name,
            ))
        model.stats["pellets"] = grid.count(Tile.PELLET)
        return model

    def input_filter(self) -> IntentFilter:
        return DirectionFilter(allow_reversal=True)

    def initial_intent(self) -> Hashable | None:
        return Intent.LEFT

    def advance(self, model: EntityModel, intent: Hashable | None, rng: DeterministicRNG | None) -> None:
        grid = model.grid
        player = model.player
        if player is not None:
            self._move_player(player, grid, intent)
        target = player.position if player is not None else None
        for ghost in sorted(model.of_kind(ActorKind.ENEMY), key=lambda a: a.id):
            direction = self._brain.choose(ghost, grid, rng, model.elapsed_ticks, target=target)
            if direction is None:
                continue
            ghost.direction = direction
            ghost.position = ghost.position + DIRECTION_OFFSETS[direction]

    @staticmethod
    def _move_player(player: Actor, grid: Grid, intent: Hashable | None) -> None:
        # The requested turn stays latched until the maze lets it happen.
        wanted = intent if intent in DIRECTION_OFFSETS else None
        player.state = wanted.value if wanted is not None else ""
        if wanted is not None and _open_towards(player.position, wanted, grid):
            player.direction = wanted
        if player.direction is not None and _open_towards(player.position, player.direction, grid):
            player.position = player.position + DIRECTION_OFFSETS[player.direction]

    def check_outcome(self, model: EntityModel) -> Outcome | None:
        remaining = model.grid.count(Tile.PELLET) if model.grid is not None else 0
        model.stats["pellets"] = remaining
        if remaining == 0:
            logger.info("All pellets cleared at tick %d", model.elapsed_ticks)
            return Outcome.WON
        return None


def _open_towards(pos: Vector2, direction: Intent, grid: Grid) -> bool:
    step = DIRECTION_OFFSETS[direction]
    x, y = pos.cell()
    return grid.is_open_xy(x + int(step.x), y + int(step.y), wrap_x=True)
