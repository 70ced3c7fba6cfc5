"""Database connection and session management."""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

DATABASE_NAME = "newsletter"


def get_database_url() -> str:
    """Build the PostgreSQL database URL from environment variables.

    A full ``DATABASE_URL`` takes precedence over the individual settings.

    :returns: The database connection URL.
    :raises KeyError: If required environment variables are not set.
    """
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    host = os.environ["DATABASE_HOST"]
    port = os.environ.get("DATABASE_PORT", "5432")
    password = os.environ["APP_DB_PASSWORD"]

    return f"postgresql://app:{password}@{host}:{port}/{DATABASE_NAME}"


def create_db_engine(*, url: str | None = None, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the database.

    Every request handler and delivery worker opens its own transaction on a
    pooled connection; nothing is coordinated in memory.

    :param url: Database URL. If not provided, built from the environment.
    :param echo: If True, log all SQL statements.
    :returns: A configured SQLAlchemy engine.
    """
    return create_engine(url or get_database_url(), echo=echo, pool_pre_ping=True)


@dataclass
class _DatabaseState:
    """Container for database connection state."""

    engine: Engine | None = field(default=None)
    session_factory: sessionmaker[Session] | None = field(default=None)


_state = _DatabaseState()


def get_engine() -> Engine:
    """Get or create the database engine singleton.

    :returns: The database engine.
    """
    if _state.engine is None:
        _state.engine = create_db_engine()
    return _state.engine


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory singleton.

    :returns: A sessionmaker bound to the database engine.
    """
    if _state.session_factory is None:
        _state.session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _state.session_factory


def configure_engine(engine: Engine) -> None:
    """Bind the session factory to an existing engine.

    Used by integration tests and tooling that manage their own engine.

    :param engine: The engine to use for all new sessions.
    """
    _state.engine = engine
    _state.session_factory = sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    """Create a new database session with automatic cleanup.

    The session is one transaction: it commits on successful completion and
    rolls back on exception, which also releases any row locks it holds.

    :yields: A database session.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()

    except Exception:
        session.rollback()
        raise

    finally:
        session.close()
