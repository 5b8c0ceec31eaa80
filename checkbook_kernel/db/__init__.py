"""Database layer - engine, base classes, append-only listeners."""

from checkbook_kernel.db.base import UUID, Base, UUIDString
from checkbook_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)

__all__ = [
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "session_scope",
    "create_tables",
    "Base",
    "UUIDString",
    "UUID",
]
