"""
User routes.
"""
from fastapi import APIRouter, Depends
from fairfare.api.dependencies import get_current_user, get_trip_session
from fairfare.models.user import User
from fairfare.schemas.user import UserResponse, ViewUpdate
from fairfare.services.trip_session import TripSession

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user


@router.put("/me/view", response_model=ViewUpdate)
async def set_last_view(
    view: ViewUpdate,
    session: TripSession = Depends(get_trip_session)
):
    """Remember the last-selected view."""
    session.set_view(view.view_name)
    return ViewUpdate(view_name=session.view_name)
