"""
Pydantic schemas for budget totals and travel analytics.
"""
from pydantic import BaseModel
from decimal import Decimal


class BudgetTotals(BaseModel):
    """Derived totals for one trip."""
    spent: Decimal
    remaining: Decimal  # Negative when overspent, never clamped
    percent_used: float  # 0-100
    overspent: bool


class TravelStats(BaseModel):
    """Aggregate analytics across a user's trips."""
    total_trips: int
    unique_places: int
    total_savings: Decimal
    active_trips: int
    completed_trips: int
