"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from decimal import Decimal
from fairfare.core.utils import coerce_amount
from fairfare.models.trip import TripStatus
from fairfare.schemas.budget import BudgetTotals
from fairfare.schemas.expense import ExpenseRecord

LOCAL_TRIP_PREFIX = "local_"


class TripCreate(BaseModel):
    """Schema for the trip setup form."""
    destination: str = Field(min_length=1)
    purpose: Optional[str] = None
    budget: Decimal = Field(ge=0)
    duration: int = Field(default=1, ge=1)  # Days


class TripRecord(BaseModel):
    """A trip as held by the registry and cached locally."""
    id: str
    owner_id: str
    destination: str = ""
    purpose: Optional[str] = None
    budget: Decimal = Decimal(0)
    duration: int = 1
    created_at: Optional[datetime] = None
    status: TripStatus = TripStatus.ACTIVE
    recommendations: Optional[Dict[str, Any]] = None
    remaining_budget: Optional[Decimal] = None

    model_config = {"from_attributes": True}

    @field_validator("budget", mode="before")
    @classmethod
    def coerce_budget(cls, v: Any) -> Decimal:
        return coerce_amount(v)

    @property
    def local_only(self) -> bool:
        """True for trips that never reached the remote store."""
        return self.id.startswith(LOCAL_TRIP_PREFIX)

    @property
    def is_completed(self) -> bool:
        return self.status == TripStatus.COMPLETED


class TripView(BaseModel):
    """Dashboard state for the selected trip, or the empty state."""
    trip: Optional[TripRecord] = None
    budget: Decimal
    expenses: List[ExpenseRecord] = []
    totals: BudgetTotals
    sync_state: Optional[str] = None
    view_name: str = "dashboard"
    pending_expense: Optional[ExpenseRecord] = None


class TripCreateResponse(BaseModel):
    """Schema for trip setup response."""
    trip: TripRecord
    notice: Optional[str] = None  # Set when the trip could only be kept locally
