"""FastAPI dependency injection: provides the SessionManager singleton."""

from __future__ import annotations

from fastapi import HTTPException

from arcade_engine.api.session_manager import SessionManager, SessionNotFound
from arcade_engine.engine.session import Session

_session_manager: SessionManager | None = None


def set_session_manager(manager: SessionManager | None) -> None:
    global _session_manager
    _session_manager = manager


def get_session_manager() -> SessionManager:
    if _session_manager is None:
        raise RuntimeError("SessionManager not initialized, server not started correctly.")
    return _session_manager


def lookup_session(manager: SessionManager, session_id: str) -> Session:
    """Resolve *session_id* or answer 404."""
    try:
        return manager.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id!r}") from None
