"""Arcade Engine: a tick-driven simulation core for arcade mini-games."""

from arcade_engine.config import ConfigurationError, ServerConfig, SessionConfig
from arcade_engine.engine.session import Session, create_session

__version__ = "0.1.0"

__all__ = ["ConfigurationError", "ServerConfig", "Session", "SessionConfig", "create_session"]
