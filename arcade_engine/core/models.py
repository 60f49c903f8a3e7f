"""Core data models: Vector2, Actor, Reveal."""

from __future__ import annotations

from dataclasses import dataclass, field

from arcade_engine.core.enums import ActorKind, Intent


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D coordinate. Grid variants keep it integral."""

    x: float = 0
    y: float = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def manhattan(self, other: Vector2) -> float:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def cell(self) -> tuple[int, int]:
        return int(self.x), int(self.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


ZERO = Vector2(0, 0)
UNIT = Vector2(1, 1)

# Screen coordinates: y grows downward.
DIRECTION_OFFSETS: dict[Intent, Vector2] = {
    Intent.UP: Vector2(0, -1),
    Intent.DOWN: Vector2(0, 1),
    Intent.LEFT: Vector2(-1, 0),
    Intent.RIGHT: Vector2(1, 0),
}


@dataclass(frozen=True, slots=True)
class Reveal:
    """Turn-based intent: flip the card with *card_id* face up."""

    card_id: int


@dataclass(slots=True)
class Actor:
    """A single simulated entity.

    ``position`` is the top-left corner for continuous variants and the cell
    for grid variants. ``segments`` holds the trailing body of a grid-chase
    player, head excluded, nearest-to-head first.
    """

    id: int
    kind: ActorKind
    position: Vector2
    velocity: Vector2 = ZERO
    size: Vector2 = UNIT
    direction: Intent | None = None
    hp: int = 1
    value: int = 0
    tag: str = ""
    state: str = ""
    segments: list[Vector2] = field(default_factory=list)

    # --- per-tick bookkeeping (reset by every step) ---
    previous_position: Vector2 | None = None
    vacated: Vector2 | None = None

    @property
    def right(self) -> float:
        return self.position.x + self.size.x

    @property
    def bottom(self) -> float:
        return self.position.y + self.size.y

    def body(self) -> list[Vector2]:
        """Head followed by the trailing segments."""
        return [self.position, *self.segments]

    def overlaps(self, other: Actor) -> bool:
        """Axis-aligned bounding-box overlap (touching edges do not count)."""
        return (
            self.position.x < other.right
            and other.position.x < self.right
            and self.position.y < other.bottom
            and other.position.y < self.bottom
        )

    def copy(self) -> Actor:
        return Actor(
            id=self.id,
            kind=self.kind,
            position=self.position,
            velocity=self.velocity,
            size=self.size,
            direction=self.direction,
            hp=self.hp,
            value=self.value,
            tag=self.tag,
            state=self.state,
            segments=list(self.segments),
            previous_position=self.previous_position,
            vacated=self.vacated,
        )
