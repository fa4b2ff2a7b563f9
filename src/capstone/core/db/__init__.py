"""Database utilities - engine, session, schema."""

from src.capstone.core.db.engine import create_schema, dispose_engine, get_engine
from src.capstone.core.db.session import get_session, get_session_factory

__all__ = [
    # Engine
    "create_schema",
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    "get_session_factory",
]
