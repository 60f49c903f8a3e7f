"""Score-driven pacing: tick interval and spawn period."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arcade_engine.config import DifficultyCurve, SessionConfig


class DifficultyScaler:
    """Pure mapping from cumulative score to the next tick interval.

    ``interval_for`` is monotonically non-increasing in score and never drops
    below ``min_interval_ms``. The loop consults it once per tick, after
    scoring, and the result applies to the following tick only.
    """

    __slots__ = ("_initial", "_minimum", "_curve")

    def __init__(self, initial_interval_ms: int, min_interval_ms: int, curve: DifficultyCurve) -> None:
        self._initial = initial_interval_ms
        self._minimum = min(min_interval_ms, initial_interval_ms)
        self._curve = curve

    @classmethod
    def from_config(cls, config: SessionConfig) -> DifficultyScaler:
        return cls(config.initial_interval_ms, config.min_interval_ms, config.difficulty_curve)

    @property
    def initial_interval_ms(self) -> int:
        return self._initial

    @property
    def min_interval_ms(self) -> int:
        return self._minimum

    def interval_for(self, score: int) -> int:
        score = max(0, score)
        curve = self._curve
        if curve.kind == "step":
            interval = self._initial - (score // curve.step_score) * curve.step_ms
        elif curve.kind == "linear":
            interval = self._initial - (score * curve.step_ms) // curve.step_score
        else:
            interval = self._initial
        return max(self._minimum, int(interval))

    def spawn_interval_ticks(self, period_ms: int, interval_ms: int) -> int:
        """Ticks between spawns so that spawns keep a wall-clock *period_ms*."""
        return max(1, math.ceil(period_ms / max(1, interval_ms)))
