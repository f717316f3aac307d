"""
Local cache entry model.
"""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from fairfare.db.base import CacheBase


class CacheEntry(CacheBase):
    """Key-value row holding serialized JSON."""
    __tablename__ = "local_cache"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
