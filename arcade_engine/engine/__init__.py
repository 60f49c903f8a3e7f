"""Engine layer: clock, input latch, collisions, lifecycle, loop, session."""

from arcade_engine.engine.clock import Clock, ManualClock, ThreadClock, TickEvent
from arcade_engine.engine.collision import CollisionEvent, CollisionResolver, CollisionRules, Effect
from arcade_engine.engine.difficulty import DifficultyScaler
from arcade_engine.engine.input_latch import InputLatch
from arcade_engine.engine.lifecycle import LifecycleController
from arcade_engine.engine.session import Session, create_session
from arcade_engine.engine.simulation_loop import SimulationLoop, TickResult

__all__ = [
    "Clock",
    "CollisionEvent",
    "CollisionResolver",
    "CollisionRules",
    "DifficultyScaler",
    "Effect",
    "InputLatch",
    "LifecycleController",
    "ManualClock",
    "Session",
    "SimulationLoop",
    "ThreadClock",
    "TickEvent",
    "TickResult",
    "create_session",
]
