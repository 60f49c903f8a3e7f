"""POST /api/v1/sessions/{id}/control/{action}: session lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends

from arcade_engine.api.dependencies import get_session_manager, lookup_session
from arcade_engine.api.schemas import ControlResponse
from arcade_engine.api.session_manager import SessionManager

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    restart = "restart"


@router.post("/sessions/{session_id}/control/{action}", response_model=ControlResponse)
def control(
    session_id: str,
    action: ControlAction,
    manager: SessionManager = Depends(get_session_manager),
) -> ControlResponse:
    session = lookup_session(manager, session_id)

    # Illegal transitions are no-ops, reported as such rather than as errors.
    match action:
        case ControlAction.start:
            changed = session.start()
            message = "Session started." if changed else "Can only start from idle."
        case ControlAction.pause:
            changed = session.pause()
            message = "Session paused." if changed else "Can only pause a running, pausable session."
        case ControlAction.resume:
            changed = session.resume()
            message = "Session resumed." if changed else "Can only resume a paused session."
        case ControlAction.restart:
            changed = session.restart()
            message = "Session reset to idle." if changed else "Can only restart a finished session."

    snapshot = session.snapshot()
    return ControlResponse(
        status="ok" if changed else "noop",
        message=message,
        state=session.state.value,
        tick=snapshot.tick if snapshot else 0,
    )
