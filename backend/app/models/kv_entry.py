"""SQLAlchemy model backing the key-value persistence collaborator."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func

from ..database import Base


class KeyValueEntry(Base):
    """One named collection serialized as JSON text."""

    __tablename__ = "kv_entries"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
