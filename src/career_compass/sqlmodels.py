"""SQLAlchemy models for the local SQLite key-value substrate.

The store keeps one row per composed key (``root:namespace:key``) holding the
JSON-encoded value. Namespaces are not modelled separately; prefix scans over
``key`` recover them.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class KeyValueEntry(Base):
    """One stored value."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(500), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
