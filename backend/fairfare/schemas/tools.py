"""
Pydantic schemas for the trip tools (packing list).
"""
from pydantic import BaseModel, Field
from typing import List


class PackingListRequest(BaseModel):
    """Schema for packing list generation."""
    destination: str = Field(min_length=1)


class PackingCategory(BaseModel):
    name: str
    items: List[str] = []


class PackingListResponse(BaseModel):
    """Generated packing list grouped by category."""
    destination: str
    categories: List[PackingCategory] = []
