"""Declarative base and shared column mixins."""
import os
import re
import time
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import DeclarativeBase

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """Generate a 24-char hex id: 4-byte big-endian timestamp + 8 random bytes."""
    return int(time.time()).to_bytes(4, "big").hex() + os.urandom(8).hex()


def is_valid_object_id(value: Any) -> bool:
    """Return True if value is a well-formed id, regardless of whether it exists."""
    return isinstance(value, str) and OBJECT_ID_PATTERN.match(value) is not None


def canonical_object_id(value: str) -> str:
    """Ids are stored lowercase; hex digits are accepted in either case."""
    return value.lower()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for catalog tables."""

    def to_document(self) -> Dict[str, Any]:
        """Return the row as a plain dict keyed by column name."""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}


class ObjectIdMixin:
    """Primary key holding a generated 24-char hex id."""

    id = Column(String(24), primary_key=True, default=new_object_id)


class TimestampMixin:
    """Creation and last-update timestamps."""

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
