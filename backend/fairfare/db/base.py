"""
Declarative bases for the remote document store and the local cache.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# The local cache lives in its own database file
CacheBase = declarative_base()


def generate_id() -> str:
    """Generate a document id the way the remote store assigns them."""
    return uuid.uuid4().hex


class BaseModel(Base):
    """Abstract document with a string id and timestamps."""
    __abstract__ = True

    id = Column(String(64), primary_key=True, default=generate_id)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=True, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=True)
