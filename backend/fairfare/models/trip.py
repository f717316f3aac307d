"""
Trip document for the remote store.
"""
from sqlalchemy import Column, String, Numeric, Integer, Enum as SQLEnum, ForeignKey, JSON
from sqlalchemy.orm import relationship
from fairfare.db.base import BaseModel
import enum


class TripStatus(str, enum.Enum):
    """Trip lifecycle status."""
    ACTIVE = "active"
    COMPLETED = "completed"


class Trip(BaseModel):
    """Trip document ("trips" collection)."""
    __tablename__ = "trips"

    owner_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    destination = Column(String(200), nullable=False)
    purpose = Column(String(100), nullable=True)
    budget = Column(Numeric(15, 2), nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=1)  # Days
    status = Column(SQLEnum(TripStatus, values_callable=lambda e: [m.value for m in e]),
                    default=TripStatus.ACTIVE, nullable=False)
    recommendations = Column(JSON, nullable=True)  # Opaque bundle from the recommendation generator
    remaining_budget = Column(Numeric(15, 2), nullable=True)  # Derived, may be stale

    # Relationships
    owner = relationship("User", back_populates="trips")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
