"""Key-value storage entry model."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from backend.database import Base


class StorageEntry(Base):
    """One path-like key and its JSON document.

    ``id`` keeps insertion order so scans walk the namespace from position 0.
    """
    __tablename__ = "storage_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(512), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)
    size_bytes = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
