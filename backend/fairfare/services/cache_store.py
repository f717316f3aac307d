"""
Local cache store.

Durable key-value storage for expense lists, the last-selected view and an
offline copy of the current trip. Every failure degrades to "nothing cached":
reads return empty, writes are logged and dropped.
"""
import logging
from typing import List, Optional
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from fairfare.models.cache_entry import CacheEntry
from fairfare.schemas.expense import ExpenseRecord
from fairfare.schemas.trip import TripRecord

logger = logging.getLogger(__name__)

_expense_list = TypeAdapter(List[ExpenseRecord])


def expenses_key(trip_id: str) -> str:
    return f"expenses:{trip_id}"


def last_view_key(uid: str) -> str:
    return f"last_view:{uid}"


def current_trip_key(uid: str) -> str:
    return f"current_trip:{uid}"


class LocalCacheStore:
    """Key-value cache persisted in a local database."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    # Raw entries

    def _read(self, key: str) -> Optional[str]:
        try:
            with self._session_factory() as db:
                entry = db.query(CacheEntry).filter(CacheEntry.key == key).first()
                return entry.value if entry else None
        except SQLAlchemyError as e:
            logger.warning(f"Local cache read failed for {key}: {e}")
            return None

    def _write(self, key: str, value: str):
        try:
            with self._session_factory() as db:
                entry = db.query(CacheEntry).filter(CacheEntry.key == key).first()
                if entry:
                    entry.value = value
                else:
                    db.add(CacheEntry(key=key, value=value))
                db.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Local cache write failed for {key}: {e}")

    def _remove(self, key: str):
        try:
            with self._session_factory() as db:
                db.query(CacheEntry).filter(CacheEntry.key == key).delete()
                db.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Local cache delete failed for {key}: {e}")

    # Expense lists

    def get(self, trip_id: str) -> List[ExpenseRecord]:
        """Cached expenses for a trip; empty when missing or unreadable."""
        raw = self._read(expenses_key(trip_id))
        if raw is None:
            return []
        try:
            return _expense_list.validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Discarding corrupt cached expenses for trip {trip_id}: {e}")
            return []

    def put(self, trip_id: str, expenses: List[ExpenseRecord]):
        """Replace the cached expense list for a trip."""
        self._write(expenses_key(trip_id), _expense_list.dump_json(list(expenses)).decode("utf-8"))

    def clear(self, trip_id: str):
        """Forget a trip's cached expenses."""
        self._remove(expenses_key(trip_id))

    # Last view

    def get_last_view(self, uid: str) -> Optional[str]:
        return self._read(last_view_key(uid))

    def set_last_view(self, uid: str, view_name: str):
        self._write(last_view_key(uid), view_name)

    # Offline copy of the current trip

    def get_current_trip(self, uid: str) -> Optional[TripRecord]:
        """Last selected trip, used when the remote store is unreachable."""
        raw = self._read(current_trip_key(uid))
        if raw is None:
            return None
        try:
            return TripRecord.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Discarding corrupt cached current trip for {uid}: {e}")
            return None

    def put_current_trip(self, uid: str, trip: TripRecord):
        self._write(current_trip_key(uid), trip.model_dump_json())

    def clear_current_trip(self, uid: str):
        self._remove(current_trip_key(uid))
