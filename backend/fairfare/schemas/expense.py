"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, field_validator
from typing import Any, Optional
from datetime import datetime
from decimal import Decimal
from fairfare.core.utils import coerce_amount


class ExpenseRecord(BaseModel):
    """A single recorded spend item, as cached locally and delivered in snapshots."""
    id: str
    trip_id: Optional[str] = None
    name: str = ""
    cost: Decimal = Decimal(0)
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("cost", mode="before")
    @classmethod
    def coerce_cost(cls, v: Any) -> Decimal:
        """Non-numeric costs count as 0."""
        return coerce_amount(v)


class ExpenseCreate(BaseModel):
    """Schema for expense submission from the dashboard form.

    Fields are optional: an incomplete form is a no-op, not an error.
    """
    name: Optional[str] = None
    cost: Optional[Decimal] = None
    location: Optional[str] = None
    force: bool = False  # Skip the fair-price check


class FairnessVerdict(BaseModel):
    """Outcome of a fair-price check."""
    warning: bool = False
    message: Optional[str] = None


class ExpenseSubmitResponse(BaseModel):
    """Result of submitting or confirming an expense."""
    saved: bool
    expense: Optional[ExpenseRecord] = None
    warning: Optional[str] = None  # Model reply when the price looks expensive
