"""Pydantic response and request schemas for the HTTP control surface."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Variants ---

class VariantSchema(BaseModel):
    key: str
    title: str
    tick_driven: bool
    pausable: bool
    width: int
    height: int
    initial_interval_ms: int
    min_interval_ms: int
    actor_counts: dict[str, int] = Field(default_factory=dict)
    difficulties: dict[str, dict[str, int]] | None = None


# --- Sessions ---

class CurveSchema(BaseModel):
    kind: str = "constant"
    step_score: int = 50
    step_ms: int = 10


class CreateSessionRequest(BaseModel):
    variant: str
    width: int | None = None
    height: int | None = None
    initial_interval_ms: int | None = None
    min_interval_ms: int | None = None
    difficulty_curve: CurveSchema | None = None
    actor_counts: dict[str, int] | None = None
    seed: int | None = None
    difficulty: str | None = Field(None, description="Memory preset: easy, medium or hard")
    autostart: bool = False


class SessionSummary(BaseModel):
    session_id: str
    variant: str
    state: str
    run_index: int
    score: int = 0


class ActorSchema(BaseModel):
    id: int
    kind: str
    x: float
    y: float
    width: float
    height: float
    direction: str | None = None
    hp: int
    value: int
    tag: str = ""
    state: str = ""
    segments: list[list[float]] = Field(default_factory=list)


class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    entity_ids: list[int] = Field(default_factory=list)
    run_index: int = 0


class SnapshotResponse(BaseModel):
    session_id: str
    variant: str
    run_index: int
    tick: int
    score: int
    lifecycle_state: str
    outcome: str | None = None
    final_score: int | None = None
    interval_ms: int
    width: int
    height: int
    actors: list[ActorSchema]
    tiles: list[str] = Field(default_factory=list)
    stats: dict[str, int] = Field(default_factory=dict)


# --- Input ---

class IntentRequest(BaseModel):
    intent: str = Field(description="up, down, left, right, flap, fire, release, pause or reveal")
    card_id: int | None = Field(None, description="Card to flip when intent is 'reveal'")


class IntentResponse(BaseModel):
    accepted: bool
    state: str
    tick: int = 0


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    state: str
    tick: int = 0
