"""Session and server configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

CURVE_KINDS = ("constant", "step", "linear")
INT_FIELDS = ("width", "height", "initial_interval_ms", "min_interval_ms", "seed")


class ConfigurationError(ValueError):
    """Raised at session creation for configuration that can never run."""


@dataclass(frozen=True)
class DifficultyCurve:
    """Shape of the score -> tick interval mapping.

    - ``constant``: the interval never changes
    - ``step``: ``step_ms`` faster for every full ``step_score`` points
    - ``linear``: ``step_ms`` faster per ``step_score`` points, pro rata
    """

    kind: str = "constant"
    step_score: int = 50
    step_ms: int = 10


def _frozen_counts(counts: Mapping[str, int] | None = None) -> Mapping[str, int]:
    return MappingProxyType(dict(counts or {}))


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class SessionConfig:
    """Immutable configuration for one game session."""

    # World
    width: int = 20
    height: int = 20

    # Timing
    initial_interval_ms: int = 150
    min_interval_ms: int = 60
    difficulty_curve: DifficultyCurve = field(default_factory=DifficultyCurve)

    # Population (variant-specific keys: "ghosts", "rows", "columns", "bunkers", "pairs", ...)
    actor_counts: Mapping[str, int] = field(default_factory=_frozen_counts)

    # Randomness
    seed: int = 42

    # Logging
    log_level: str = "INFO"

    @property
    def world_bounds(self) -> tuple[int, int]:
        return self.width, self.height

    def count(self, key: str, default: int) -> int:
        return int(self.actor_counts.get(key, default))

    def validate(self) -> SessionConfig:
        """Fail fast on programming mistakes. Returns self for chaining."""
        for name in INT_FIELDS:
            if not _is_int(getattr(self, name)):
                raise ConfigurationError(f"{name} must be an integer, got {getattr(self, name)!r}")
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"world_bounds must be non-empty, got {self.width}x{self.height}")
        if self.initial_interval_ms <= 0:
            raise ConfigurationError(f"initial_interval_ms must be positive, got {self.initial_interval_ms}")
        if self.min_interval_ms <= 0:
            raise ConfigurationError(f"min_interval_ms must be positive, got {self.min_interval_ms}")
        if self.min_interval_ms > self.initial_interval_ms:
            raise ConfigurationError(
                f"min_interval_ms ({self.min_interval_ms}) exceeds initial_interval_ms ({self.initial_interval_ms})"
            )
        curve = self.difficulty_curve
        if not isinstance(curve, DifficultyCurve):
            raise ConfigurationError(f"difficulty_curve must be a DifficultyCurve, got {type(curve).__name__}")
        if not (_is_int(curve.step_score) and _is_int(curve.step_ms)):
            raise ConfigurationError("difficulty_curve step_score and step_ms must be integers")
        if curve.kind not in CURVE_KINDS:
            raise ConfigurationError(f"Unknown difficulty curve {curve.kind!r}; expected one of {CURVE_KINDS}")
        if curve.step_score <= 0 or curve.step_ms < 0:
            raise ConfigurationError("difficulty_curve needs step_score > 0 and step_ms >= 0")
        for key, value in self.actor_counts.items():
            if not _is_int(value):
                raise ConfigurationError(f"actor_counts[{key!r}] must be an integer, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"actor_counts[{key!r}] must be >= 0, got {value}")
        return self


@dataclass(frozen=True)
class ServerConfig:
    """Immutable configuration for the HTTP control surface."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    max_sessions: int = 64
