"""
Trip registry for one user.

Holds the user's trips, the current selection and its sync coordinator.
Lifecycle changes apply locally first; the remote store is updated through
the write queue and failures there are only logged.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
from sqlalchemy.exc import SQLAlchemyError
from fairfare.core.config import settings
from fairfare.models.trip import TripStatus
from fairfare.schemas.trip import LOCAL_TRIP_PREFIX, TripRecord, TripView
from fairfare.services.aggregator import compute_totals
from fairfare.services.cache_store import LocalCacheStore
from fairfare.services.document_store import DocumentStore
from fairfare.services.remote_feed import RemoteFeedAdapter
from fairfare.services.sync_coordinator import SyncCoordinator
from fairfare.services.write_queue import WriteQueue

logger = logging.getLogger(__name__)


class TripNotFoundError(ValueError):
    """Raised for unknown trip ids or when no trip is selected."""


def sort_trips(trips: Iterable[TripRecord]) -> List[TripRecord]:
    """Newest first; trips without a creation time go last."""
    trips = list(trips)
    dated = sorted((t for t in trips if t.created_at is not None),
                   key=lambda t: t.created_at, reverse=True)
    undated = [t for t in trips if t.created_at is None]
    return dated + undated


class TripRegistry:
    """A user's trips and the selected trip's coordinator."""

    def __init__(
        self,
        uid: str,
        store: DocumentStore,
        cache: LocalCacheStore,
        feed: RemoteFeedAdapter,
        write_queue: WriteQueue,
        default_budget: Any = None
    ):
        self.uid = uid
        self._store = store
        self._cache = cache
        self._feed = feed
        self._write_queue = write_queue
        self.default_budget = Decimal(default_budget if default_budget is not None else settings.DEFAULT_BUDGET)

        self._trips: Dict[str, TripRecord] = {}
        self.current_trip_id: Optional[str] = None
        self.coordinator: Optional[SyncCoordinator] = None
        # Deleted locally; ignored in fetched results even while the remote delete is pending
        self._deleted: Set[str] = set()

    @property
    def trips(self) -> List[TripRecord]:
        return sort_trips(self._trips.values())

    @property
    def current_trip(self) -> Optional[TripRecord]:
        if self.current_trip_id is None:
            return None
        return self._trips.get(self.current_trip_id)

    def get_trip(self, trip_id: str) -> TripRecord:
        trip = self._trips.get(trip_id)
        if trip is None:
            raise TripNotFoundError(f"Trip {trip_id} not found")
        return trip

    async def list_trips(self, user_id: str = None) -> List[TripRecord]:
        """
        Fetch the user's trips from the remote store, newest first.

        Known trips are updated in place so the selected trip's coordinator
        keeps seeing the same record. If the store is unreachable the known
        trips are returned, plus the cached current trip.
        """
        user_id = user_id or self.uid
        try:
            documents = self._store.where("trips", "owner_id", user_id)
        except SQLAlchemyError as e:
            logger.warning(f"Could not load trips for {user_id} (using local state): {e}")
            cached = self._cache.get_current_trip(user_id)
            if cached is not None and cached.owner_id == user_id and cached.id not in self._trips \
                    and cached.id not in self._deleted:
                self._trips[cached.id] = cached
            return self.trips

        fetched = [TripRecord.model_validate(d) for d in documents if d["id"] not in self._deleted]
        fetched_ids = {t.id for t in fetched}
        for trip in fetched:
            known = self._trips.get(trip.id)
            if known is None:
                self._trips[trip.id] = trip
                continue
            local_status = known.status
            for name in TripRecord.model_fields:
                setattr(known, name, getattr(trip, name))
            if local_status == TripStatus.COMPLETED:
                # Completion is never undone by a stale remote copy
                known.status = TripStatus.COMPLETED

        for trip_id in list(self._trips):
            if trip_id in fetched_ids or trip_id == self.current_trip_id:
                continue
            if not self._trips[trip_id].local_only:
                del self._trips[trip_id]

        return self.trips

    async def _push_trip_update(self, trip_id: str, fields: dict):
        if trip_id in self._deleted:
            return
        self._store.update("trips", trip_id, fields)

    async def _push_trip_delete(self, trip_id: str):
        self._store.delete("trips", trip_id)

    def is_live(self, trip_id: str) -> bool:
        """False once the trip has been deleted here."""
        return trip_id not in self._deleted

    def select_trip(self, trip_id: str) -> SyncCoordinator:
        """
        Make a trip current.

        The previous coordinator is closed before the new one opens, so the
        view only ever shows the selected trip's expenses and budget.
        """
        trip = self.get_trip(trip_id)
        if self.coordinator is not None:
            self.coordinator.close()
            self.coordinator = None

        self.current_trip_id = trip.id
        self.coordinator = SyncCoordinator(
            trip,
            self._cache,
            self._feed,
            self._write_queue,
            update_trip=self._push_trip_update,
            write_allowed=self.is_live
        )
        self.coordinator.open()
        self._cache.put_current_trip(self.uid, trip)
        return self.coordinator

    async def create_trip(
        self,
        destination: str,
        budget: Decimal,
        duration: int,
        purpose: Optional[str] = None,
        recommendations: Optional[Dict[str, Any]] = None
    ) -> Tuple[TripRecord, Optional[str]]:
        """
        Save a new trip and select it.

        Returns:
            (trip, notice). If the remote save fails the trip is kept locally
            under a local_ id and notice explains why.
        """
        now = datetime.utcnow()
        data = {
            "owner_id": self.uid,
            "destination": destination,
            "purpose": purpose,
            "budget": budget,
            "duration": duration,
            "status": TripStatus.ACTIVE,
            "recommendations": recommendations,
            "remaining_budget": budget,
            "created_at": now,
        }
        notice = None
        try:
            trip_id = self._store.add("trips", data)
            trip = TripRecord(id=trip_id, **data)
        except SQLAlchemyError as e:
            logger.error(f"Database save error for new trip: {e}")
            trip = TripRecord(id=f"{LOCAL_TRIP_PREFIX}{int(now.timestamp() * 1000)}", **data)
            notice = ("Plan generated! However, we couldn't save it to your history. "
                      "You can still view it now.")

        self._trips[trip.id] = trip
        self.select_trip(trip.id)
        return trip, notice

    def complete_trip(self, trip_id: str) -> TripRecord:
        """End a trip: no more expenses. The remote update is fire-and-forget."""
        trip = self.get_trip(trip_id)
        trip.status = TripStatus.COMPLETED
        if trip_id == self.current_trip_id:
            self._cache.put_current_trip(self.uid, trip)
        if not trip.local_only:
            self._write_queue.submit(
                f"complete trip {trip_id}",
                lambda: self._push_trip_update(trip_id, {"status": TripStatus.COMPLETED})
            )
        return trip

    def delete_trip(self, trip_id: str):
        """
        Remove a trip and its cached expenses.

        If it was selected, the newest remaining trip is selected, or the
        registry falls back to the empty state.
        """
        trip = self.get_trip(trip_id)
        del self._trips[trip_id]
        self._deleted.add(trip_id)
        self._cache.clear(trip_id)

        cached_current = self._cache.get_current_trip(self.uid)
        if cached_current is not None and cached_current.id == trip_id:
            self._cache.clear_current_trip(self.uid)

        if not trip.local_only:
            self._write_queue.submit(
                f"delete trip {trip_id}",
                lambda: self._push_trip_delete(trip_id)
            )

        if trip_id == self.current_trip_id:
            if self.coordinator is not None:
                self.coordinator.close()
            self.coordinator = None
            self.current_trip_id = None
            remaining = self.trips
            if remaining:
                self.select_trip(remaining[0].id)

    def view(self) -> TripView:
        """The selected trip's dashboard state, or the empty state."""
        coordinator = self.coordinator
        if coordinator is None:
            return TripView(
                trip=None,
                budget=self.default_budget,
                expenses=[],
                totals=compute_totals([], self.default_budget),
                sync_state=None
            )
        return TripView(
            trip=coordinator.trip,
            budget=coordinator.trip.budget,
            expenses=coordinator.expenses,
            totals=coordinator.totals,
            sync_state=coordinator.state.value
        )

    def reset(self):
        """Drop all in-memory trip state (sign-out)."""
        if self.coordinator is not None:
            self.coordinator.close()
        self.coordinator = None
        self.current_trip_id = None
        self._trips.clear()
