"""Session endpoints: create, inspect, feed input, dispose."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Hashable

from fastapi import APIRouter, Depends, HTTPException, Query

from arcade_engine.api.dependencies import get_session_manager, lookup_session
from arcade_engine.api.schemas import (
    ActorSchema,
    CreateSessionRequest,
    EventSchema,
    IntentRequest,
    IntentResponse,
    SessionSummary,
    SnapshotResponse,
)
from arcade_engine.api.session_manager import SessionLimitReached, SessionManager
from arcade_engine.config import ConfigurationError, DifficultyCurve
from arcade_engine.core.enums import Intent
from arcade_engine.core.models import Reveal
from arcade_engine.engine.session import Session
from arcade_engine.variants import MemoryVariant

router = APIRouter()

_OVERRIDE_FIELDS = ("width", "height", "initial_interval_ms", "min_interval_ms", "seed")


def _overrides(req: CreateSessionRequest) -> dict[str, Any]:
    values: dict[str, Any] = {f: getattr(req, f) for f in _OVERRIDE_FIELDS if getattr(req, f) is not None}
    if req.difficulty_curve is not None:
        values["difficulty_curve"] = DifficultyCurve(**req.difficulty_curve.model_dump())
    if req.actor_counts is not None:
        values["actor_counts"] = MappingProxyType(dict(req.actor_counts))
    return values


def _summary(session_id: str, session: Session) -> SessionSummary:
    snapshot = session.snapshot()
    return SessionSummary(
        session_id=session_id,
        variant=session.variant.key,
        state=session.state.value,
        run_index=session.run_index,
        score=snapshot.score if snapshot else 0,
    )


@router.post("/sessions", response_model=SessionSummary, status_code=201)
def create_session(
    req: CreateSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionSummary:
    try:
        config: Any = _overrides(req)
        if req.difficulty is not None:
            if req.variant != MemoryVariant.key:
                raise ConfigurationError(f"'difficulty' only applies to {MemoryVariant.key}")
            config = MemoryVariant.config_for(req.difficulty, **config)
        session_id, session = manager.create(req.variant, config)
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    except SessionLimitReached as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from None

    if req.autostart:
        session.start()
    return _summary(session_id, session)


@router.get("/sessions", response_model=list[SessionSummary])
def list_sessions(
    manager: SessionManager = Depends(get_session_manager),
) -> list[SessionSummary]:
    return [_summary(sid, s) for sid, s in manager.items()]


@router.get("/sessions/{session_id}/state", response_model=SnapshotResponse)
def get_state(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> SnapshotResponse:
    session = lookup_session(manager, session_id)
    snapshot = session.snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available.")

    actors = [
        ActorSchema(
            id=a.id,
            kind=a.kind.value,
            x=a.x,
            y=a.y,
            width=a.width,
            height=a.height,
            direction=a.direction.value if a.direction is not None else None,
            hp=a.hp,
            value=a.value,
            tag=a.tag,
            state=a.state,
            segments=[[s.x, s.y] for s in a.segments],
        )
        for a in snapshot.actors
    ]
    return SnapshotResponse(
        session_id=session_id,
        variant=snapshot.variant,
        run_index=snapshot.run_index,
        tick=snapshot.tick,
        score=snapshot.score,
        lifecycle_state=snapshot.lifecycle_state.value,
        outcome=snapshot.outcome.value if snapshot.outcome is not None else None,
        final_score=session.final_score,
        interval_ms=snapshot.interval_ms,
        width=snapshot.width,
        height=snapshot.height,
        actors=actors,
        tiles=list(snapshot.tiles),
        stats=dict(snapshot.stats),
    )


@router.get("/sessions/{session_id}/events", response_model=list[EventSchema])
def get_events(
    session_id: str,
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    current_run: bool = Query(True, description="Only events of the current run"),
    limit: int = Query(200, ge=1, le=5000),
    manager: SessionManager = Depends(get_session_manager),
) -> list[EventSchema]:
    session = lookup_session(manager, session_id)
    run_index = session.run_index if current_run else None
    events = session.event_log.since_tick(since_tick, run_index=run_index)[-limit:]
    return [
        EventSchema(
            tick=e.tick,
            category=e.category,
            message=e.message,
            entity_ids=list(e.entity_ids),
            run_index=e.run_index,
        )
        for e in events
    ]


def parse_intent(req: IntentRequest) -> Hashable:
    """Map the wire form onto an Intent or a Reveal."""
    if req.intent == "reveal":
        if req.card_id is None:
            raise HTTPException(status_code=422, detail="'reveal' needs a card_id")
        return Reveal(req.card_id)
    try:
        return Intent(req.intent)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown intent {req.intent!r}") from None


@router.post("/sessions/{session_id}/intent", response_model=IntentResponse)
def submit_intent(
    session_id: str,
    req: IntentRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> IntentResponse:
    session = lookup_session(manager, session_id)
    accepted = session.submit_intent(parse_intent(req))
    snapshot = session.snapshot()
    return IntentResponse(
        accepted=accepted,
        state=session.state.value,
        tick=snapshot.tick if snapshot else 0,
    )


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> None:
    if not manager.remove(session_id):
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id!r}")
