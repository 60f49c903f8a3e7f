"""Core layer: enums, models, grid, entity model, snapshot."""

from arcade_engine.core.entity_model import EntityModel
from arcade_engine.core.grid import Grid
from arcade_engine.core.models import Actor, Reveal, Vector2
from arcade_engine.core.snapshot import ActorState, Snapshot

__all__ = ["Actor", "ActorState", "EntityModel", "Grid", "Reveal", "Snapshot", "Vector2"]
