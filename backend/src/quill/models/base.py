"""
Base model helpers for the Quill backend.

Provides timestamp and UUID mixins shared by database models.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String
from sqlalchemy.types import TIMESTAMP

from ..core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin for adding timestamp columns to models."""

    created_at = Column(TIMESTAMP(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class UUIDMixin:
    """Mixin for adding UUID primary key to models."""

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))


__all__ = ["Base", "TimestampMixin", "UUIDMixin"]
