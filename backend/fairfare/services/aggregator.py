"""
Budget aggregation over expenses and trips.

Pure functions: callers recompute on every change instead of keeping
running totals.
"""
from decimal import Decimal
from typing import Any, Iterable
from fairfare.core.utils import coerce_amount
from fairfare.models.trip import TripStatus
from fairfare.schemas.budget import BudgetTotals, TravelStats


def _cost_of(expense: Any) -> Decimal:
    """Read a cost from a record or a raw document."""
    if isinstance(expense, dict):
        return coerce_amount(expense.get("cost"))
    return coerce_amount(getattr(expense, "cost", None))


def _field(item: Any, name: str):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def compute_totals(expenses: Iterable[Any], budget: Any) -> BudgetTotals:
    """
    Compute spend, remaining budget and percentage used.

    Args:
        expenses: Expense records or documents; order is irrelevant
        budget: Trip budget (non-numeric counts as 0)

    Returns:
        BudgetTotals. `remaining` goes negative on overspend; `percent_used`
        is clamped to 0-100. With a zero budget, any spend is 100% used.
    """
    budget_amount = coerce_amount(budget)
    spent = sum((_cost_of(e) for e in expenses), Decimal(0))
    remaining = budget_amount - spent

    if budget_amount > 0:
        percent = float(spent / budget_amount * 100)
        percent_used = min(max(percent, 0.0), 100.0)
    else:
        percent_used = 100.0 if spent > 0 else 0.0

    return BudgetTotals(
        spent=spent,
        remaining=remaining,
        percent_used=percent_used,
        overspent=remaining < 0
    )


def compute_savings(trips: Iterable[Any]) -> Decimal:
    """
    Total savings across trips.

    A trip contributes its cached remaining budget, or its full budget when
    nothing has been synced yet (assumed fully unspent).
    """
    total = Decimal(0)
    for trip in trips:
        remaining = _field(trip, "remaining_budget")
        total += coerce_amount(remaining if remaining is not None else _field(trip, "budget"))
    return total


def travel_stats(trips: Iterable[Any]) -> TravelStats:
    """Summarize trips for the analytics view."""
    trips = list(trips)
    places = set()
    completed = 0
    for trip in trips:
        destination = _field(trip, "destination")
        if destination and destination.strip():
            places.add(destination.strip().lower())
        if _field(trip, "status") == TripStatus.COMPLETED:
            completed += 1

    return TravelStats(
        total_trips=len(trips),
        unique_places=len(places),
        total_savings=compute_savings(trips),
        active_trips=len(trips) - completed,
        completed_trips=completed
    )
