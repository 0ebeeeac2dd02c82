"""Lookup collaborators backed by SQLAlchemy, plus an in-memory stand-in."""

from lifecycle_kernel.db.engine import (
    build_session_factory,
    create_lookup_engine,
    session_scope,
)
from lifecycle_kernel.db.lookup import ExistenceLookup, InMemoryLookup, SqlAlchemyLookup

__all__ = [
    "ExistenceLookup",
    "InMemoryLookup",
    "SqlAlchemyLookup",
    "build_session_factory",
    "create_lookup_engine",
    "session_scope",
]
