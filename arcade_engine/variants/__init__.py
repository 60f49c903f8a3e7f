"""Variant registry: the five pluggable game behaviours."""

from __future__ import annotations

from arcade_engine.config import ConfigurationError
from arcade_engine.variants.base import Variant
from arcade_engine.variants.flappy import FlappyVariant
from arcade_engine.variants.invaders import InvadersVariant
from arcade_engine.variants.memory import MemoryVariant
from arcade_engine.variants.pacman import PacmanVariant
from arcade_engine.variants.snake import SnakeVariant

VARIANTS: dict[str, type[Variant]] = {
    cls.key: cls
    for cls in (SnakeVariant, PacmanVariant, FlappyVariant, InvadersVariant, MemoryVariant)
}


def resolve_variant(variant: str | Variant | type[Variant]) -> Variant:
    """Return a fresh Variant instance for a key, class or instance."""
    if isinstance(variant, Variant):
        return variant
    if isinstance(variant, type) and issubclass(variant, Variant):
        return variant()
    try:
        return VARIANTS[str(variant)]()
    except KeyError:
        raise ConfigurationError(f"Unknown variant {variant!r}; expected one of {sorted(VARIANTS)}") from None


__all__ = [
    "FlappyVariant",
    "InvadersVariant",
    "MemoryVariant",
    "PacmanVariant",
    "SnakeVariant",
    "VARIANTS",
    "Variant",
    "resolve_variant",
]
