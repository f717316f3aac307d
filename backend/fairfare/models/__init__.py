"""Models package - Import all models for SQLAlchemy registration."""
from fairfare.models.user import User
from fairfare.models.trip import Trip, TripStatus
from fairfare.models.expense import Expense
from fairfare.models.cache_entry import CacheEntry

__all__ = [
    "User",
    "Trip",
    "TripStatus",
    "Expense",
    "CacheEntry",
]
