"""
Per-user trip sessions.

A session joins the trip registry with the fair-price gate and the dashboard
form state (an expense waiting for "proceed anyway"). Sessions start on first
use after sign-in and are dropped on sign-out.
"""
import logging
from typing import Dict, Optional
from fairfare.core.config import settings
from fairfare.schemas.budget import TravelStats
from fairfare.schemas.expense import ExpenseCreate, ExpenseRecord, ExpenseSubmitResponse
from fairfare.schemas.trip import TripCreate, TripCreateResponse, TripRecord, TripView
from fairfare.services.aggregator import travel_stats
from fairfare.services.cache_store import LocalCacheStore
from fairfare.services.document_store import DocumentStore
from fairfare.services.fairness_service import FairnessChecker
from fairfare.services.recommendation_service import RecommendationGenerator
from fairfare.services.remote_feed import RemoteFeedAdapter
from fairfare.services.sync_coordinator import SyncCoordinator, TripCompletedError
from fairfare.services.trip_registry import TripNotFoundError, TripRegistry
from fairfare.services.write_queue import WriteQueue

logger = logging.getLogger(__name__)

DEFAULT_VIEW = "dashboard"


class TripSession:
    """One signed-in user's trips, selection and expense form."""

    def __init__(
        self,
        uid: str,
        registry: TripRegistry,
        cache: LocalCacheStore,
        fairness: FairnessChecker,
        recommender: RecommendationGenerator,
        restore_last_view: bool = False
    ):
        self.uid = uid
        self.registry = registry
        self._cache = cache
        self._fairness = fairness
        self._recommender = recommender
        self._restore_last_view = restore_last_view

        self.view_name = DEFAULT_VIEW
        self.pending_expense: Optional[ExpenseRecord] = None

    async def start(self):
        """Load trips and select the last used one, else the newest."""
        trips = await self.registry.list_trips()
        known = {t.id for t in trips}
        cached = self._cache.get_current_trip(self.uid)
        if cached is not None and cached.id in known:
            self.registry.select_trip(cached.id)
        elif trips:
            self.registry.select_trip(trips[0].id)

        if self._restore_last_view:
            self.view_name = self._cache.get_last_view(self.uid) or DEFAULT_VIEW
        logger.info(f"Session started for {self.uid} with {len(trips)} trips")

    def set_view(self, view_name: str):
        self.view_name = view_name
        self._cache.set_last_view(self.uid, view_name)

    def _require_coordinator(self) -> SyncCoordinator:
        coordinator = self.registry.coordinator
        if coordinator is None:
            raise TripNotFoundError("No trip selected")
        return coordinator

    def view(self) -> TripView:
        return self.registry.view().model_copy(update={
            "view_name": self.view_name,
            "pending_expense": self.pending_expense,
        })

    def stats(self) -> TravelStats:
        return travel_stats(self.registry.trips)

    async def refresh_trips(self):
        return await self.registry.list_trips()

    def select_trip(self, trip_id: str):
        self.pending_expense = None
        self.registry.select_trip(trip_id)

    async def create_trip(self, trip_data: TripCreate) -> TripCreateResponse:
        """
        Generate recommendations, then save and select the trip.

        Raises:
            RecommendationError: Nothing is saved when generation fails
        """
        recommendations = await self._recommender.generate_trip_plan(
            trip_data.destination,
            trip_data.duration,
            trip_data.purpose,
            trip_data.budget
        )
        self.pending_expense = None
        trip, notice = await self.registry.create_trip(
            destination=trip_data.destination,
            budget=trip_data.budget,
            duration=trip_data.duration,
            purpose=trip_data.purpose,
            recommendations=recommendations
        )
        self.view_name = DEFAULT_VIEW
        return TripCreateResponse(trip=trip, notice=notice)

    async def submit_expense(self, expense_data: ExpenseCreate) -> ExpenseSubmitResponse:
        """
        Add an expense unless the price looks expensive.

        An incomplete form (a zero cost counts as missing) does nothing. An
        "expensive" verdict keeps the expense pending until confirm_pending
        or cancel_pending.
        """
        if not expense_data.name or not expense_data.cost or not expense_data.location:
            return ExpenseSubmitResponse(saved=False)

        coordinator = self._require_coordinator()
        if coordinator.trip.is_completed:
            raise TripCompletedError(f"Trip {coordinator.trip.id} is completed")

        if not expense_data.force:
            verdict = await self._fairness.check(expense_data.name, expense_data.cost, expense_data.location)
            if self.registry.coordinator is not coordinator:
                # Trip switched while waiting on the check
                return ExpenseSubmitResponse(saved=False)
            if verdict.warning:
                self.pending_expense = ExpenseRecord(
                    id="pending",
                    trip_id=coordinator.trip.id,
                    name=expense_data.name,
                    cost=expense_data.cost,
                    location=expense_data.location
                )
                return ExpenseSubmitResponse(saved=False, warning=verdict.message)

        expense = coordinator.add_expense(expense_data.name, expense_data.cost, expense_data.location)
        self.pending_expense = None
        return ExpenseSubmitResponse(saved=True, expense=expense)

    def confirm_pending(self) -> ExpenseSubmitResponse:
        """Save the held-back expense ("proceed anyway")."""
        pending = self.pending_expense
        if pending is None:
            return ExpenseSubmitResponse(saved=False)
        coordinator = self._require_coordinator()
        self.pending_expense = None
        if coordinator.trip.id != pending.trip_id:
            return ExpenseSubmitResponse(saved=False)
        expense = coordinator.add_expense(pending.name, pending.cost, pending.location)
        return ExpenseSubmitResponse(saved=True, expense=expense)

    def cancel_pending(self):
        self.pending_expense = None

    def complete_trip(self, trip_id: str) -> TripRecord:
        trip = self.registry.complete_trip(trip_id)
        if self.pending_expense is not None and self.pending_expense.trip_id == trip_id:
            self.pending_expense = None
        return trip

    def delete_trip(self, trip_id: str):
        was_current = trip_id == self.registry.current_trip_id
        self.registry.delete_trip(trip_id)
        if was_current:
            self.pending_expense = None

    def close(self):
        """Clear all trip state (sign-out)."""
        self.pending_expense = None
        self.registry.reset()


class SessionManager:
    """Owns one TripSession per signed-in user."""

    def __init__(
        self,
        store: DocumentStore,
        cache: LocalCacheStore,
        feed: RemoteFeedAdapter,
        write_queue: WriteQueue,
        fairness: FairnessChecker,
        recommender: RecommendationGenerator,
        default_budget=None,
        restore_last_view: bool = None
    ):
        self._store = store
        self._cache = cache
        self._feed = feed
        self._write_queue = write_queue
        self._fairness = fairness
        self._recommender = recommender
        self._default_budget = default_budget if default_budget is not None else settings.DEFAULT_BUDGET
        self._restore_last_view = (restore_last_view if restore_last_view is not None
                                   else settings.RESTORE_LAST_VIEW)
        self._sessions: Dict[str, TripSession] = {}

    def get(self, uid: str) -> Optional[TripSession]:
        return self._sessions.get(uid)

    async def open(self, uid: str) -> TripSession:
        """Existing session for uid, or a newly started one."""
        session = self._sessions.get(uid)
        if session is not None:
            return session
        registry = TripRegistry(
            uid,
            self._store,
            self._cache,
            self._feed,
            self._write_queue,
            default_budget=self._default_budget
        )
        session = TripSession(
            uid,
            registry,
            self._cache,
            self._fairness,
            self._recommender,
            restore_last_view=self._restore_last_view
        )
        self._sessions[uid] = session
        await session.start()
        return session

    def end(self, uid: str):
        """Sign-out: clear the user's trip state."""
        session = self._sessions.pop(uid, None)
        if session is not None:
            session.close()
            logger.info(f"Session ended for {uid}")

    def close_all(self):
        for uid in list(self._sessions):
            self.end(uid)
