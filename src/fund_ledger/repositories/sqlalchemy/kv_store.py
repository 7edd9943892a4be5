"""SQLAlchemy implementation of KeyValueStore."""

import json
from typing import Any, Optional

from sqlalchemy.orm import Session

from fund_ledger.repositories.sqlalchemy.orm_models import KeyValueORM


class SqlAlchemyKeyValueStore:
    """SQLAlchemy-backed key-value store; each slot is one row of JSON text."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        orm_row = self._db.get(KeyValueORM, key)
        if orm_row is None:
            return default
        return json.loads(orm_row.value)

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        orm_row = self._db.get(KeyValueORM, key)
        if orm_row:
            orm_row.value = payload
        else:
            self._db.add(KeyValueORM(key=key, value=payload))
        self._db.commit()

    def delete(self, key: str) -> None:
        self._db.query(KeyValueORM).filter(KeyValueORM.key == key).delete()
        self._db.commit()

    def keys(self) -> list[str]:
        rows = self._db.query(KeyValueORM.key).order_by(KeyValueORM.key).all()
        return [row[0] for row in rows]
