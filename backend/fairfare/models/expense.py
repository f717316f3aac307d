"""
Expense document for the remote store.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from fairfare.db.base import BaseModel


class Expense(BaseModel):
    """Expense document, nested under a trip ("expenses" collection)."""
    __tablename__ = "expenses"

    trip_id = Column(String(64), ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    cost = Column(Numeric(15, 2), nullable=False, default=0)
    location = Column(String(200), nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
