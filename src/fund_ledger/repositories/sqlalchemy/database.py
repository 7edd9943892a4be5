"""SQLite engine and session handling for the key-value table."""

import logging
from typing import Optional

from sqlalchemy import create_engine, event, Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from fund_ledger.config.settings import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Built on first use from the current settings; reset_database() drops them
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def get_engine() -> Engine:
    """Return the engine for the configured database URL."""
    global _engine
    if _engine is None:
        url = get_settings().get_database_url()
        connect_args = {"check_same_thread": False} if _is_sqlite(url) else {}
        _engine = create_engine(url, connect_args=connect_args, echo=False)
        if _is_sqlite(url):
            event.listen(_engine, "connect", _enable_wal)
        logger.debug("Created engine for %s", url)
    return _engine


def _enable_wal(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def open_session() -> Session:
    """Open a new session bound to the configured engine."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal()


def init_db() -> None:
    """Create the key-value table if it does not exist."""
    from fund_ledger.repositories.sqlalchemy import orm_models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def reset_database() -> None:
    """Dispose the engine so the next use picks up changed settings."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _SessionLocal = None
