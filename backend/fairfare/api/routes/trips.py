"""
Trip management routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from fairfare.api.dependencies import get_trip_session
from fairfare.schemas.trip import TripCreate, TripCreateResponse, TripRecord, TripView
from fairfare.services.recommendation_service import RecommendationError
from fairfare.services.trip_registry import TripNotFoundError
from fairfare.services.trip_session import TripSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


def trip_not_found(e: TripNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(e)
    )


@router.get("", response_model=List[TripRecord])
async def list_trips(session: TripSession = Depends(get_trip_session)):
    """List the user's trips, newest first."""
    return await session.refresh_trips()


@router.post("", response_model=TripCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    session: TripSession = Depends(get_trip_session)
):
    """Generate recommendations and start a new trip."""
    try:
        return await session.create_trip(trip_data)
    except RecommendationError as e:
        logger.error(f"Planning error: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )


@router.get("/current", response_model=TripView)
async def get_current_trip(session: TripSession = Depends(get_trip_session)):
    """Dashboard state for the selected trip (or the empty state)."""
    return session.view()


@router.post("/{trip_id}/select", response_model=TripView)
async def select_trip(
    trip_id: str,
    session: TripSession = Depends(get_trip_session)
):
    """Switch the selected trip."""
    try:
        session.select_trip(trip_id)
    except TripNotFoundError as e:
        raise trip_not_found(e)
    return session.view()


@router.post("/{trip_id}/complete", response_model=TripRecord)
async def complete_trip(
    trip_id: str,
    session: TripSession = Depends(get_trip_session)
):
    """End a trip; it accepts no more expenses."""
    try:
        return session.complete_trip(trip_id)
    except TripNotFoundError as e:
        raise trip_not_found(e)


@router.delete("/{trip_id}", response_model=TripView)
async def delete_trip(
    trip_id: str,
    session: TripSession = Depends(get_trip_session)
):
    """Delete a trip and return the resulting dashboard state."""
    try:
        session.delete_trip(trip_id)
    except TripNotFoundError as e:
        raise trip_not_found(e)
    return session.view()
