"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Schema for user creation."""
    email: EmailStr
    password: str
    display_name: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user response."""
    uid: str
    email: EmailStr
    display_name: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"


class ViewUpdate(BaseModel):
    """Schema for storing the last-selected view."""
    view_name: str
