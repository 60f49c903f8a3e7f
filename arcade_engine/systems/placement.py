"""Free-cell placement for spawned collectibles."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from arcade_engine.core.enums import Domain
from arcade_engine.core.models import Vector2
from arcade_engine.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

MAX_RANDOM_ATTEMPTS = 32


def find_free_cell(
    width: int,
    height: int,
    occupied: Iterable[tuple[int, int]],
    rng: DeterministicRNG,
    salt: int,
    tick: int,
    *,
    is_open: Callable[[int, int], bool] | None = None,
    attempts: int = MAX_RANDOM_ATTEMPTS,
) -> Vector2 | None:
    """Return a random cell not in *occupied*, or None when the board is full.

    Tries up to *attempts* random draws, then falls back to an exhaustive scan
    and picks deterministically among every remaining free cell.
    """
    taken = set(occupied)

    def free(x: int, y: int) -> bool:
        return (x, y) not in taken and (is_open is None or is_open(x, y))

    for attempt in range(attempts):
        x = rng.next_int(Domain.PLACEMENT, salt, tick * attempts + attempt, 0, width - 1)
        y = rng.next_int(Domain.PLACEMENT, salt + 1, tick * attempts + attempt, 0, height - 1)
        if free(x, y):
            return Vector2(x, y)

    candidates = [(x, y) for y in range(height) for x in range(width) if free(x, y)]
    if not candidates:
        logger.debug("No free cell left on %dx%d board", width, height)
        return None
    x, y = rng.choice(Domain.PLACEMENT, salt, tick, candidates)
    logger.debug("Random placement exhausted after %d attempts, scanned %d free cells", attempts, len(candidates))
    return Vector2(x, y)
