"""Database utilities - engine, session, tenant routing."""

from src.gatekeeper.core.db.engine import dispose_engine, get_engine
from src.gatekeeper.core.db.router import ConnectionRouter, SchemaConnectionRouter
from src.gatekeeper.core.db.session import get_session

__all__ = [
    "ConnectionRouter",
    "SchemaConnectionRouter",
    "dispose_engine",
    "get_engine",
    "get_session",
]
