"""Memory match: turn-based card pairing with a timed conceal after a miss."""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import TYPE_CHECKING, Hashable

from arcade_engine.config import ConfigurationError, SessionConfig
from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.enums import ActorKind, Domain, Outcome
from arcade_engine.core.models import Actor, Reveal, Vector2
from arcade_engine.core.snapshot import HIDDEN
from arcade_engine.variants.base import Variant

if TYPE_CHECKING:
    from arcade_engine.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

SYMBOLS: tuple[str, ...] = (
    "🐶", "🐱", "🐭", "🐹", "🐰", "🦊", "🐻", "🐼",
    "🐨", "🐯", "🦁", "🐮", "🐷", "🐸", "🐵", "🐔",
    "🦄", "🦋", "🐢", "🐙", "🦀", "🐠", "🦖", "🦕",
)

DIFFICULTY_LEVELS: dict[str, tuple[int, int]] = {
    "easy": (6, 4),
    "medium": (8, 4),
    "hard": (12, 6),
}

CONCEAL_DELAY_MS = 1000

# Card states
REVEALED = "revealed"
MATCHED = "matched"


def _grid_size(pairs: int, columns: int) -> tuple[int, int]:
    return columns, math.ceil(2 * pairs / columns)


class MemoryVariant(Variant):
    """Cards are actors; ``value`` holds the symbol index.

    The face (``tag``) is only filled in while a card is face up, and
    snapshots mask ``value`` while a card is hidden.
    """

    key = "memory"
    title = "Memory Match"
    tick_driven = False
    pausable = False
    default_config = SessionConfig(
        width=4,
        height=4,
        initial_interval_ms=CONCEAL_DELAY_MS,
        min_interval_ms=CONCEAL_DELAY_MS,
        actor_counts=MappingProxyType({"pairs": 8, "columns": 4}),
    )

    @classmethod
    def config_for(cls, difficulty: str, **overrides) -> SessionConfig:
        """Preset for ``easy``, ``medium`` or ``hard``."""
        try:
            pairs, columns = DIFFICULTY_LEVELS[difficulty]
        except KeyError:
            raise ConfigurationError(
                f"Unknown difficulty {difficulty!r}; expected one of {tuple(DIFFICULTY_LEVELS)}"
            ) from None
        width, height = _grid_size(pairs, columns)
        values = {
            "width": width,
            "height": height,
            "actor_counts": MappingProxyType({"pairs": pairs, "columns": columns}),
            **overrides,
        }
        return cls.configure(values)

    @classmethod
    def validate_config(cls, config: SessionConfig) -> None:
        pairs, columns = config.count("pairs", 8), config.count("columns", 4)
        if not 1 <= pairs <= len(SYMBOLS):
            raise ConfigurationError(f"memory supports 1..{len(SYMBOLS)} pairs, got {pairs}")
        if columns < 1:
            raise ConfigurationError(f"memory needs at least one column, got {columns}")
        width, height = _grid_size(pairs, columns)
        if config.width < width or config.height < height:
            raise ConfigurationError(f"{pairs} pairs in {columns} columns need a {width}x{height} board")

    def initial_model(self, config: SessionConfig, rng: DeterministicRNG) -> EntityModel:
        pairs, columns = config.count("pairs", 8), config.count("columns", 4)
        model = EntityModel(config.width, config.height)
        deck = rng.shuffled(Domain.SHUFFLE, [i for i in range(pairs) for _ in range(2)])
        for slot, symbol in enumerate(deck):
            model.add_actor(Actor(
                id=slot,
                kind=ActorKind.COLLECTIBLE,
                position=Vector2(slot % columns, slot // columns),
                value=symbol,
                state=HIDDEN,
            ))
        model.stats.update(moves=0, matches=0, pairs=pairs, pending=0)
        return model

    # -- turn-based hooks --

    def apply_action(self, model: EntityModel, intent: Hashable) -> EntityModel | None:
        if not isinstance(intent, Reveal):
            return None
        card = model.actors.get(intent.card_id)
        if card is None or card.state != HIDDEN or model.stats.get("pending", 0):
            return None
        face_up = [c for c in model.actors.values() if c.state == REVEALED]
        if len(face_up) >= 2:
            return None

        new = model.copy()
        new.elapsed_ticks += 1
        card = new.actors[intent.card_id]
        _show(card)
        if not face_up:
            return new

        other = new.actors[face_up[0].id]
        new.stats["moves"] += 1
        if other.value == card.value:
            other.state = card.state = MATCHED
            new.stats["matches"] += 1
            new.score = new.stats["matches"]
        else:
            new.stats["pending"] = 1
        return new

    def timer_delay_ms(self, model: EntityModel) -> int | None:
        return CONCEAL_DELAY_MS if model.stats.get("pending", 0) else None

    def on_timer(self, model: EntityModel) -> EntityModel:
        if not model.stats.get("pending", 0):
            return model
        new = model.copy()
        for card in new.actors.values():
            if card.state == REVEALED:
                card.state = HIDDEN
                card.tag = ""
        new.stats["pending"] = 0
        return new

    def check_outcome(self, model: EntityModel) -> Outcome | None:
        if model.stats.get("matches", 0) >= model.stats.get("pairs", 0) > 0:
            logger.info("All %d pairs matched in %d moves", model.stats["pairs"], model.stats["moves"])
            return Outcome.WON
        return None

    def describe(self) -> dict:
        info = super().describe()
        info["difficulties"] = {k: {"pairs": p, "columns": c} for k, (p, c) in DIFFICULTY_LEVELS.items()}
        return info


def _show(card: Actor) -> None:
    card.state = REVEALED
    card.tag = SYMBOLS[card.value]
