"""
Module: lifecycle_kernel.db.engine
Responsibility: SQLAlchemy engine and session-factory construction for the
    lookup collaborator guards consult (``lifecycle_kernel.db.lookup``).
Architecture position: Kernel > DB.  The only kernel package allowed to
    import SQLAlchemy.  MUST NOT import from domain/ or services/.

Invariants enforced:
    - Sessions are created by a ``sessionmaker`` with expire_on_commit=False,
      so rows read by a lookup stay usable after the session closes.
    - In-memory SQLite uses a single shared connection (StaticPool), so
      every session sees the same database.

Failure modes:
    - sqlalchemy.exc.ArgumentError on a malformed URL.
    - OperationalError on connection failure, raised on first use.
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lifecycle_kernel.logging_config import get_logger

logger = get_logger("db.engine")


def create_lookup_engine(
    database_url: str,
    echo: bool = False,
    pool_pre_ping: bool = True,
) -> Engine:
    """
    Create a SQLAlchemy engine for lookup queries.

    Args:
        database_url: Any SQLAlchemy URL (e.g. postgresql://..., sqlite://).
        echo: If True, log all SQL statements.
        pool_pre_ping: If True, test connections before use.

    Returns:
        SQLAlchemy Engine instance.
    """
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        engine = create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(database_url, echo=echo, pool_pre_ping=pool_pre_ping)

    logger.info(
        "engine_initialized",
        extra={"dialect": engine.dialect.name, "echo": echo},
    )
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to ``engine``; safe to share across threads."""
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    On normal exit the session is committed and closed.  On exception it is
    rolled back and closed, and the exception is re-raised.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()
