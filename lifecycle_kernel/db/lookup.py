"""
Existence lookups -- the synchronous persistence capability guards call.

Guards such as "email already registered" or "referral code exists" need a
fact from storage.  They depend on the ``ExistenceLookup`` protocol only;
the host decides whether that is a dict in a test or a SQL query in
production.  Guards never manage connections or retries themselves.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import exists, select
from sqlalchemy.orm import InstrumentedAttribute, Session, sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from lifecycle_kernel.exceptions import UnknownLookupFieldError
from lifecycle_kernel.logging_config import get_logger

logger = get_logger("db.lookup")


@runtime_checkable
class ExistenceLookup(Protocol):
    """Answers "is there a record whose <field> equals <value>?"."""

    def exists(self, field: str, value: Any) -> bool:
        ...


class InMemoryLookup:
    """Dict-of-sets lookup for tests and embedded hosts."""

    def __init__(self, data: Mapping[str, Iterable[Any]] | None = None) -> None:
        self._data: dict[str, set[Any]] = {
            field: set(values) for field, values in (data or {}).items()
        }
        self._lock = threading.Lock()

    def add(self, field: str, value: Any) -> None:
        with self._lock:
            self._data.setdefault(field, set()).add(value)

    def discard(self, field: str, value: Any) -> None:
        with self._lock:
            self._data.get(field, set()).discard(value)

    def exists(self, field: str, value: Any) -> bool:
        if field not in self._data:
            raise UnknownLookupFieldError(field)
        return value in self._data[field]


class SqlAlchemyLookup:
    """
    Existence checks issued as ``SELECT EXISTS (... WHERE column = :value)``.

    ``columns`` maps a lookup field name to the mapped attribute or table
    column holding it, e.g. ``{"email": User.email}``.  Each call opens and
    closes its own session from ``session_factory``.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        columns: Mapping[str, InstrumentedAttribute | ColumnElement],
    ) -> None:
        self._session_factory = session_factory
        self._columns = dict(columns)

    def exists(self, field: str, value: Any) -> bool:
        column = self._columns.get(field)
        if column is None:
            raise UnknownLookupFieldError(field)
        stmt = select(exists().where(column == value))
        with self._session_factory() as session:
            found = bool(session.execute(stmt).scalar())
        logger.debug("lookup_exists", extra={"field": field, "found": found})
        return found
