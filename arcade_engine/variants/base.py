"""Variant interface: everything a game contributes to the shared loop."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Hashable, Mapping

from arcade_engine.config import ConfigurationError, DifficultyCurve, SessionConfig
from arcade_engine.engine.collision import CollisionRules
from arcade_engine.engine.input_latch import IntentFilter

if TYPE_CHECKING:
    from arcade_engine.core.entity_model import EntityModel
    from arcade_engine.core.enums import Outcome
    from arcade_engine.core.models import Actor
    from arcade_engine.systems.rng import DeterministicRNG


def _normalize_overrides(overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Map loose override values (tuples, plain dicts) onto SessionConfig fields."""
    values = dict(overrides)
    if "world_bounds" in values:
        bounds = values.pop("world_bounds")
        try:
            width, height = bounds
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"world_bounds must be a (width, height) pair, got {bounds!r}") from exc
        values.setdefault("width", width)
        values.setdefault("height", height)
    curve = values.get("difficulty_curve")
    if isinstance(curve, Mapping):
        values["difficulty_curve"] = DifficultyCurve(**curve)
    counts = values.get("actor_counts")
    if isinstance(counts, Mapping):
        values["actor_counts"] = MappingProxyType(dict(counts))
    return values


class Variant(ABC):
    """Base class for a pluggable game behaviour.

    ``step`` is pure: it copies the model, clears per-tick bookkeeping and
    calls ``advance`` on the copy ``dt_ticks`` times. Only the first sub-step
    sees the intent.
    """

    key: ClassVar[str] = ""
    title: ClassVar[str] = ""
    tick_driven: ClassVar[bool] = True
    pausable: ClassVar[bool] = True
    default_config: ClassVar[SessionConfig] = SessionConfig()
    rules: ClassVar[CollisionRules] = CollisionRules()

    # -- configuration --

    @classmethod
    def configure(cls, config: SessionConfig | Mapping[str, Any] | None = None) -> SessionConfig:
        """Merge caller overrides into ``default_config`` and validate."""
        if config is None:
            merged = cls.default_config
        elif isinstance(config, SessionConfig):
            merged = config
        else:
            try:
                merged = replace(cls.default_config, **_normalize_overrides(config))
            except ConfigurationError:
                raise
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(str(exc)) from exc
        try:
            merged.validate()
            cls.validate_config(merged)
        except ConfigurationError:
            raise
        except (TypeError, ValueError, AttributeError) as exc:
            raise ConfigurationError(f"malformed configuration: {exc}") from exc
        return merged

    @classmethod
    def validate_config(cls, config: SessionConfig) -> None:
        """Variant-specific checks; raise ConfigurationError."""

    # -- behaviour --

    @abstractmethod
    def initial_model(self, config: SessionConfig, rng: DeterministicRNG) -> EntityModel: ...

    def input_filter(self) -> IntentFilter:
        return IntentFilter()

    def initial_intent(self) -> Hashable | None:
        return None

    def step(
        self,
        model: EntityModel,
        intent: Hashable | None,
        dt_ticks: int = 1,
        *,
        rng: DeterministicRNG | None = None,
    ) -> EntityModel:
        new = model.copy()
        for i in range(max(1, dt_ticks)):
            for actor in new.actors.values():
                actor.previous_position = actor.position
                actor.vacated = None
            self.advance(new, intent if i == 0 else None, rng)
            new.elapsed_ticks += 1
        return new

    def advance(self, model: EntityModel, intent: Hashable | None, rng: DeterministicRNG | None) -> None:
        """Move every actor one tick, in place on a private copy."""

    def spawn_policy(self, model: EntityModel, rng: DeterministicRNG) -> list[Actor]:
        return []

    def check_outcome(self, model: EntityModel) -> Outcome | None:
        """Win/lose conditions that are not collisions."""
        return None

    # -- turn-based hooks --

    def apply_action(self, model: EntityModel, intent: Hashable) -> EntityModel | None:
        """Turn-based variants: a new model, or None when the action is illegal."""
        return None

    def timer_delay_ms(self, model: EntityModel) -> int | None:
        """Delay after which ``on_timer`` must run, or None for no timer."""
        return None

    def on_timer(self, model: EntityModel) -> EntityModel:
        return model

    def describe(self) -> dict[str, Any]:
        config = self.default_config
        return {
            "key": self.key,
            "title": self.title,
            "tick_driven": self.tick_driven,
            "pausable": self.pausable,
            "width": config.width,
            "height": config.height,
            "initial_interval_ms": config.initial_interval_ms,
            "min_interval_ms": config.min_interval_ms,
            "actor_counts": dict(config.actor_counts),
        }
