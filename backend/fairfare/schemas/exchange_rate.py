"""
Pydantic schemas for currency conversion.
"""
from pydantic import BaseModel
from typing import Dict
from decimal import Decimal


class RatesResponse(BaseModel):
    """Latest rates for a base currency (1 base = rate target)."""
    base_currency: str
    rates: Dict[str, Decimal]


class ConversionResponse(BaseModel):
    """Schema for a single conversion."""
    amount: Decimal
    from_currency: str
    to_currency: str
    rate: Decimal
    converted: Decimal
