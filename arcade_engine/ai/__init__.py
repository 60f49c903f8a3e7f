"""AI layer: autonomous pursuit for non-player maze actors."""

from arcade_engine.ai.pursuit import PursuitBrain

__all__ = ["PursuitBrain"]
