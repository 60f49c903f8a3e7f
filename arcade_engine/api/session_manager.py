"""SessionManager: the table of live sessions behind the HTTP API.

Every session ticks on its own clock thread; the manager only guards the
id -> Session table. Sessions are disposed on removal and on shutdown.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Mapping

from arcade_engine.engine.clock import Clock, ThreadClock
from arcade_engine.engine.session import Session, create_session
from arcade_engine.utils.event_log import EventLog
from arcade_engine.variants import resolve_variant

if TYPE_CHECKING:
    from arcade_engine.config import ServerConfig, SessionConfig

logger = logging.getLogger(__name__)

ClockFactory = Callable[[str], Clock]


class SessionNotFound(KeyError):
    """No live session has this id."""


class SessionLimitReached(RuntimeError):
    """The manager already holds ``max_sessions`` sessions."""


class SessionManager:
    """Creates, looks up and disposes sessions. Thread-safe."""

    def __init__(self, config: ServerConfig, clock_factory: ClockFactory | None = None) -> None:
        self._config = config
        self._clock_factory = clock_factory or (lambda name: ThreadClock(name=name))
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    @property
    def max_sessions(self) -> int:
        return self._config.max_sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(
        self,
        variant: str,
        config: SessionConfig | Mapping[str, Any] | None = None,
    ) -> tuple[str, Session]:
        """Build a session in Idle. Raises ConfigurationError or SessionLimitReached."""
        instance = resolve_variant(variant)
        with self._lock:
            if len(self._sessions) >= self._config.max_sessions:
                raise SessionLimitReached(f"Session limit of {self._config.max_sessions} reached")
            session_id = f"{instance.key}-{next(self._ids)}"
        session = create_session(
            instance,
            config,
            clock=self._clock_factory(f"{session_id}-clock"),
            event_log=EventLog(),
        )
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Session %s created (%d live)", session_id, len(self._sessions))
        return session_id, session

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def items(self) -> list[tuple[str, Session]]:
        with self._lock:
            return list(self._sessions.items())

    def remove(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.dispose()
        logger.info("Session %s removed", session_id)
        return True

    def shutdown(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.dispose()
        logger.info("SessionManager stopped (%d session(s) disposed)", len(sessions))
