import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata

# Id lists and nested documents; JSONB on postgres, where plain json has no equality operator
Document = JSON().with_variant(JSONB(), "postgresql")


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityMixin:
    """
    Columns shared by every entity table.

    Single references are ``String(36)`` id columns and reference lists are
    ``Document`` columns holding ids; both are expanded by the populator,
    not by SQL joins.
    """

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
