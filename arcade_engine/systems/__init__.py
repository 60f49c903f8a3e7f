"""Systems layer: deterministic RNG and placement."""

from arcade_engine.systems.placement import find_free_cell
from arcade_engine.systems.rng import DeterministicRNG, derive_seed

__all__ = ["DeterministicRNG", "derive_seed", "find_free_cell"]
