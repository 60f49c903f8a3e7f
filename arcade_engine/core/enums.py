"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class LifecycleState(str, Enum):
    """Session lifecycle states."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVER = "over"


@unique
class LifecycleEvent(str, Enum):
    """Inputs to the lifecycle state machine."""

    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    FINISH = "finish"
    RESTART = "restart"


@unique
class ActorKind(str, Enum):
    """Role tag carried by every actor."""

    PLAYER = "player"
    ENEMY = "enemy"
    PROJECTILE = "projectile"
    COLLECTIBLE = "collectible"
    STATIC = "static"


@unique
class Geometry(IntEnum):
    """How a variant measures positions and overlaps."""

    GRID = 0        # integer cells, exact-cell equality
    CONTINUOUS = 1  # float coordinates, axis-aligned bounding boxes


@unique
class BoundaryPolicy(str, Enum):
    """What happens to an actor that leaves the world bounds."""

    WRAP = "wrap"
    CLAMP = "clamp"
    FATAL = "fatal"   # player: terminate the run; anything else: removed
    IGNORE = "ignore"  # the variant manages the actor's lifetime off-screen


@unique
class CollisionKind(str, Enum):
    """Collision classes, listed in resolution order."""

    BOUNDARY = "boundary"
    SELF = "self"
    ACTOR_ACTOR = "actor-actor"
    ACTOR_STATIC = "actor-static"


@unique
class EffectKind(str, Enum):
    """Resolution effects a collision can request."""

    SCORE = "score"
    REMOVE = "remove"
    TERMINATE = "terminate"
    BOUNCE = "bounce"
    ABSORB = "absorb"
    GROW = "grow"
    COLLECT = "collect"


@unique
class Outcome(str, Enum):
    """How a finished run ended."""

    WON = "won"
    LOST = "lost"


@unique
class Intent(str, Enum):
    """Normalized player inputs."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    FLAP = "flap"
    FIRE = "fire"
    RELEASE = "release"   # key-up edge; re-arms edge-triggered actions
    PAUSE = "pause"       # toggles Running <-> Paused


DIRECTIONAL_INTENTS: frozenset[Intent] = frozenset({Intent.UP, Intent.DOWN, Intent.LEFT, Intent.RIGHT})

OPPOSITE: dict[Intent, Intent] = {
    Intent.UP: Intent.DOWN,
    Intent.DOWN: Intent.UP,
    Intent.LEFT: Intent.RIGHT,
    Intent.RIGHT: Intent.LEFT,
}


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    SPAWN = 0
    AI_DECISION = 1
    SHUFFLE = 2
    PLACEMENT = 3
    SCRIPT = 4


@unique
class Tile(IntEnum):
    """Static maze tiles."""

    FLOOR = 0
    WALL = 1
    PELLET = 2
