"""
Travel analytics routes.
"""
from fastapi import APIRouter, Depends
from typing import Dict, List
from fairfare.api.dependencies import get_trip_session
from fairfare.schemas.budget import TravelStats
from fairfare.schemas.trip import TripRecord
from fairfare.services.trip_session import TripSession

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/stats", response_model=TravelStats)
async def get_travel_stats(session: TripSession = Depends(get_trip_session)):
    """Total trips, unique places and total savings."""
    await session.refresh_trips()
    return session.stats()


@router.get("/history", response_model=Dict[str, List[TripRecord]])
async def get_travel_history(session: TripSession = Depends(get_trip_session)):
    """Trips split into ongoing and completed."""
    trips = await session.refresh_trips()
    return {
        "ongoing": [t for t in trips if not t.is_completed],
        "completed": [t for t in trips if t.is_completed],
    }
