"""
Record store over the SQLAlchemy entity models.

Every operation runs its blocking session work in Starlette's threadpool
and returns plain dict records. Persistence failures are logged and
reported as ``None``; callers translate that into their own errors.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from school_backend.database import session_scope
from school_backend.model.base import utcnow

logger = logging.getLogger(__name__)

# Columns owned by the store, never taken from callers
MANAGED_COLUMNS = ("id", "created_at", "updated_at")


def column_names(model: Type) -> List[str]:
    return [column.name for column in model.__table__.columns]


def rule_query(model: Type, rule: Dict[str, Any]):
    """Select statement for records whose columns equal every value in ``rule``."""
    return select(model).filter_by(**rule).order_by(model.created_at, model.id)


class RecordStore:
    """
    Async document-style access to the entity tables.

    Args:
        session_factory: Callable returning a new SQLAlchemy Session
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    @staticmethod
    def _serialize_entity(entity) -> Optional[Dict[str, Any]]:
        """Serialize entity to a JSON-compatible dictionary."""
        if entity is None:
            return None

        result = {}
        for column in entity.__table__.columns:
            value = getattr(entity, column.name)
            if isinstance(value, datetime):
                result[column.name] = value.isoformat()
            else:
                result[column.name] = value
        return result

    @staticmethod
    def _writable(model: Type, record: Dict[str, Any]) -> Dict[str, Any]:
        columns = set(column_names(model)) - set(MANAGED_COLUMNS)
        return {key: value for key, value in record.items() if key in columns}

    async def _run(self, operation: str, model: Type, work: Callable[[Session], Any]) -> Any:
        def _execute():
            with session_scope(self.session_factory) as db:
                return work(db)

        try:
            return await run_in_threadpool(_execute)
        except SQLAlchemyError as e:
            logger.error(f"Record store {operation} failed for {model.__tablename__}: {e}")
            return None

    async def get_all_documents(self, model: Type) -> Optional[List[Dict[str, Any]]]:
        def _work(db: Session):
            rows = db.query(model).order_by(model.created_at, model.id).all()
            return [self._serialize_entity(row) for row in rows]

        return await self._run("get_all", model, _work)

    async def get_document(self, model: Type, entity_id: str) -> Optional[Dict[str, Any]]:
        def _work(db: Session):
            return self._serialize_entity(db.get(model, entity_id))

        return await self._run("get", model, _work)

    async def get_documents_by_rule(self, model: Type, rule: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
        def _work(db: Session):
            rows = db.scalars(rule_query(model, rule)).all()
            return [self._serialize_entity(row) for row in rows]

        return await self._run("get_by_rule", model, _work)

    async def get_documents_by_ids(self, model: Type, ids: List[str]) -> Optional[List[Dict[str, Any]]]:
        """Records for ``ids`` in the order given; unknown ids are skipped."""
        if not ids:
            return []

        def _work(db: Session):
            rows = db.query(model).filter(model.id.in_(ids)).all()
            by_id = {row.id: self._serialize_entity(row) for row in rows}
            return [by_id[entity_id] for entity_id in ids if entity_id in by_id]

        return await self._run("get_by_ids", model, _work)

    async def create_document(self, model: Type, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        def _work(db: Session):
            db_item = model(**self._writable(model, record))
            if record.get("id"):
                db_item.id = record["id"]
            db.add(db_item)
            db.flush()
            return self._serialize_entity(db_item)

        return await self._run("create", model, _work)

    async def update_document(self, model: Type, entity_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply ``record`` to the stored row; ``None`` when no row has ``entity_id``."""
        def _work(db: Session):
            db_item = db.get(model, entity_id)
            if db_item is None:
                return None
            for key, value in self._writable(model, record).items():
                setattr(db_item, key, value)
            db_item.updated_at = utcnow()
            db.flush()
            return self._serialize_entity(db_item)

        return await self._run("update", model, _work)

    async def delete_document(self, model: Type, entity_id: str) -> Optional[Dict[str, Any]]:
        """Delete the row and return what it held; ``None`` when it does not exist."""
        def _work(db: Session):
            db_item = db.get(model, entity_id)
            if db_item is None:
                return None
            deleted = self._serialize_entity(db_item)
            db.delete(db_item)
            db.flush()
            return deleted

        return await self._run("delete", model, _work)
