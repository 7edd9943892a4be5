"""SQLAlchemy-backed key-value store."""

from fund_ledger.repositories.sqlalchemy.database import (
    Base,
    get_engine,
    init_db,
    open_session,
    reset_database,
)
from fund_ledger.repositories.sqlalchemy.kv_store import SqlAlchemyKeyValueStore

__all__ = [
    "Base",
    "get_engine",
    "init_db",
    "open_session",
    "reset_database",
    "SqlAlchemyKeyValueStore",
]
