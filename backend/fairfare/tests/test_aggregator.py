"""
Tests for budget aggregation.
"""
from decimal import Decimal
from fairfare.models.trip import TripStatus
from fairfare.schemas.expense import ExpenseRecord
from fairfare.services.aggregator import compute_savings, compute_totals, travel_stats


def expense(cost, name="Item"):
    return ExpenseRecord(id=name, name=name, cost=cost, location="Goa")


def test_single_expense_totals():
    """Budget 5000 with a 250 taxi ride."""
    totals = compute_totals([expense(250, "Taxi")], 5000)
    assert totals.spent == Decimal(250)
    assert totals.remaining == Decimal(4750)
    assert totals.percent_used == 5.0
    assert totals.overspent is False


def test_overspend_is_not_clamped():
    """Remaining goes negative while percent used stops at 100."""
    totals = compute_totals([expense(700, "Stay"), expense(500, "Food")], 1000)
    assert totals.spent == Decimal(1200)
    assert totals.remaining == Decimal(-200)
    assert totals.percent_used == 100.0
    assert totals.overspent is True


def test_spent_and_remaining_match_sum():
    costs = [Decimal("12.50"), Decimal("0"), Decimal("99.99"), Decimal("300")]
    totals = compute_totals([expense(c, str(i)) for i, c in enumerate(costs)], 2500)
    assert totals.spent == sum(costs)
    assert totals.remaining == Decimal(2500) - sum(costs)


def test_no_expenses_is_zero_percent():
    assert compute_totals([], 5000).percent_used == 0.0
    assert compute_totals([], 1).percent_used == 0.0


def test_zero_budget():
    """Any spend against a zero budget is fully used; no spend is 0%."""
    assert compute_totals([expense(1)], 0).percent_used == 100.0
    assert compute_totals([], 0).percent_used == 0.0
    assert compute_totals([expense(1)], 0).remaining == Decimal(-1)


def test_non_numeric_costs_count_as_zero():
    documents = [
        {"id": "a", "cost": "abc"},
        {"id": "b", "cost": None},
        {"id": "c", "cost": "40"},
        {"id": "d", "cost": float("nan")},
        {"id": "e", "cost": 10},
    ]
    totals = compute_totals(documents, 100)
    assert totals.spent == Decimal(50)
    assert totals.percent_used == 50.0


def test_record_coerces_bad_cost():
    assert ExpenseRecord(id="x", cost="not a number").cost == Decimal(0)


def test_same_input_same_totals():
    expenses = [expense(100, "a"), expense(200, "b")]
    assert compute_totals(expenses, 1000) == compute_totals(list(expenses), 1000)


def test_savings_fall_back_to_budget():
    """Trips without a synced remaining budget count as fully unspent."""
    trips = [
        {"budget": 5000, "remaining_budget": 4750},
        {"budget": 3000, "remaining_budget": None},
        {"budget": 1000, "remaining_budget": -200},
    ]
    assert compute_savings(trips) == Decimal(7550)


def test_savings_keeps_zero_remaining():
    assert compute_savings([{"budget": 1000, "remaining_budget": 0}]) == Decimal(0)


def test_travel_stats():
    trips = [
        {"destination": "Goa", "budget": 5000, "remaining_budget": 4000, "status": TripStatus.ACTIVE},
        {"destination": " goa ", "budget": 2000, "remaining_budget": None, "status": TripStatus.COMPLETED},
        {"destination": "Manali", "budget": 1000, "remaining_budget": 100, "status": "completed"},
        {"destination": "", "budget": 0, "remaining_budget": None, "status": TripStatus.ACTIVE},
    ]
    stats = travel_stats(trips)
    assert stats.total_trips == 4
    assert stats.unique_places == 2
    assert stats.total_savings == Decimal(6100)
    assert stats.completed_trips == 2
    assert stats.active_trips == 2
