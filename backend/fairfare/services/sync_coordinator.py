"""
Per-trip sync coordinator.

Serves the cached expense list immediately, subscribes to the remote feed and
replaces the list with every snapshot it receives (remote is authoritative).
Local additions are applied optimistically and pushed through the write
queue. Provisional expenses are not matched against the ids the store
assigns; the next snapshot simply supersedes the whole list.

States: uninitialized -> cache_loaded -> subscribed -> reconciled, and
closed once unsubscribed.
"""
import enum
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, List, Optional
from fairfare.schemas.budget import BudgetTotals
from fairfare.schemas.expense import ExpenseRecord
from fairfare.schemas.trip import TripRecord
from fairfare.services.aggregator import compute_totals
from fairfare.services.cache_store import LocalCacheStore
from fairfare.services.remote_feed import RemoteFeedAdapter
from fairfare.services.write_queue import WriteQueue

logger = logging.getLogger(__name__)


class SyncState(str, enum.Enum):
    """Coordinator lifecycle."""
    UNINITIALIZED = "uninitialized"
    CACHE_LOADED = "cache_loaded"
    SUBSCRIBED = "subscribed"
    RECONCILED = "reconciled"
    CLOSED = "closed"


class TripCompletedError(ValueError):
    """Raised when adding an expense to a completed trip."""


class SyncCoordinator:
    """Keeps one trip's expenses and totals in step with cache and remote."""

    def __init__(
        self,
        trip: TripRecord,
        cache: LocalCacheStore,
        feed: RemoteFeedAdapter,
        write_queue: WriteQueue,
        update_trip: Optional[Callable[[str, dict], Any]] = None,
        write_allowed: Optional[Callable[[str], bool]] = None
    ):
        """
        Args:
            trip: Trip to coordinate; its remaining_budget is refreshed on reconcile
            cache: Local cache store
            feed: Remote feed adapter
            write_queue: Queue for remote writes
            update_trip: Async callable (trip_id, fields) pushing trip fields remotely
            write_allowed: Called with the trip id before a queued expense write runs;
                the write is skipped when it returns False
        """
        self.trip = trip
        self._cache = cache
        self._feed = feed
        self._write_queue = write_queue
        self._update_trip = update_trip
        self._write_allowed = write_allowed
        self._unsubscribe: Optional[Callable[[], None]] = None

        self.state = SyncState.UNINITIALIZED
        self.expenses: List[ExpenseRecord] = []
        self.totals: BudgetTotals = compute_totals([], trip.budget)

    @property
    def remote_enabled(self) -> bool:
        return not self.trip.local_only

    def _transition(self, state: SyncState, expenses: List[ExpenseRecord]):
        """Move to a state with a new expense list and fresh totals in one step."""
        self.expenses = list(expenses)
        self.totals = compute_totals(self.expenses, self.trip.budget)
        self.state = state

    def open(self):
        """Load the cache, then subscribe to the remote feed."""
        if self.state != SyncState.UNINITIALIZED:
            return
        self._transition(SyncState.CACHE_LOADED, self._cache.get(self.trip.id))
        if not self.remote_enabled:
            logger.info(f"Trip {self.trip.id} is local-only, serving cached expenses")
            self._refresh_remaining()
            return
        self.state = SyncState.SUBSCRIBED
        try:
            unsubscribe = self._feed.subscribe(self.trip.id, self._on_snapshot, self._on_error)
        except Exception as e:
            logger.warning(f"Could not subscribe to trip {self.trip.id}, serving cache: {e}")
            return
        if self.state == SyncState.CLOSED:
            unsubscribe()
        else:
            self._unsubscribe = unsubscribe

    def _on_snapshot(self, snapshot: List[ExpenseRecord]):
        if self.state == SyncState.CLOSED:
            return
        self._transition(SyncState.RECONCILED, snapshot)
        self._cache.put(self.trip.id, self.expenses)
        self._refresh_remaining()

    def _on_error(self, error: Exception):
        logger.warning(f"Expense feed error for trip {self.trip.id} (using local cache): {error}")

    def _refresh_remaining(self):
        """Keep the trip's remaining-budget cache equal to budget - spent."""
        remaining = self.totals.remaining
        if self.trip.remaining_budget is not None and Decimal(self.trip.remaining_budget) == remaining:
            return
        self.trip.remaining_budget = remaining
        if self._update_trip is not None and self.remote_enabled:
            trip_id = self.trip.id
            self._write_queue.submit(
                f"update remaining budget of trip {trip_id}",
                lambda: self._update_trip(trip_id, {"remaining_budget": remaining})
            )

    def add_expense(self, name: str, cost: Any, location: Optional[str]) -> ExpenseRecord:
        """
        Record an expense optimistically and queue the remote write.

        Raises:
            TripCompletedError: If the trip has been ended
            RuntimeError: If the coordinator is closed
        """
        if self.trip.is_completed:
            raise TripCompletedError(f"Trip {self.trip.id} is completed")
        if self.state == SyncState.CLOSED:
            raise RuntimeError("Sync coordinator is closed")

        expense = ExpenseRecord(
            id=f"pending-{uuid.uuid4().hex[:12]}",
            trip_id=self.trip.id,
            name=name,
            cost=cost,
            location=location,
            created_at=datetime.utcnow()
        )
        self._transition(self.state, [expense] + self.expenses)
        self._cache.put(self.trip.id, self.expenses)

        if self.remote_enabled:
            trip_id = self.trip.id
            self._write_queue.submit(
                f"add expense '{expense.name}' to trip {trip_id}",
                lambda: self._push_expense(trip_id, expense)
            )
        else:
            self._refresh_remaining()
        return expense

    async def _push_expense(self, trip_id: str, expense: ExpenseRecord):
        if self._write_allowed is not None and not self._write_allowed(trip_id):
            logger.info(f"Skipping write of '{expense.name}', trip {trip_id} was deleted")
            return
        await self._feed.write(trip_id, expense)

    def close(self):
        """Release the subscription; later snapshots are ignored."""
        if self.state == SyncState.CLOSED:
            return
        self.state = SyncState.CLOSED
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
