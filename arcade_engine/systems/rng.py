"""Domain-separated deterministic RNG using xxhash.

The outcome of tick T depends only on the run seed and the state at T-1, so a
session replays identically for the same seed and input sequence.

Formula: RNG_Value = Hash(RunSeed, Domain, EntityID, Tick)
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from arcade_engine.core.enums import Domain

T = TypeVar("T")


def derive_seed(base_seed: int, run_index: int) -> int:
    """Seed for the *run_index*-th run of a session (restart reseeds)."""
    payload = struct.pack("<qq", base_seed, run_index)
    return xxhash.xxh64(payload).intdigest() >> 1


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, entity_id, tick), so there
    is no internal mutable state to leak between runs.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, entity_id: int, tick: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, entity_id, tick)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, entity_id: int, tick: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, entity_id, tick) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, entity_id: int, tick: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, entity_id, tick)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, entity_id: int, tick: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, entity_id, tick) < probability

    def choice(self, domain: Domain, entity_id: int, tick: int, options: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        return options[self.next_int(domain, entity_id, tick, 0, len(options) - 1)]

    def shuffled(self, domain: Domain, items: Sequence[T], salt: int = 0) -> list[T]:
        """Fisher-Yates shuffle driven by the hash stream."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(domain, salt, i, 0, i)
            result[i], result[j] = result[j], result[i]
        return result
