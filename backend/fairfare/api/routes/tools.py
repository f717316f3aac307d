"""
Trip tool routes (packing list).
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from fairfare.api.dependencies import get_current_user, get_recommender
from fairfare.models.user import User
from fairfare.schemas.tools import PackingListRequest, PackingListResponse
from fairfare.services.recommendation_service import (
    INVALID_JSON_MESSAGE, RecommendationError, RecommendationGenerator
)

router = APIRouter(prefix="/tools", tags=["tools"])


@router.post("/packing-list", response_model=PackingListResponse)
async def generate_packing_list(
    request: PackingListRequest,
    current_user: User = Depends(get_current_user),
    recommender: RecommendationGenerator = Depends(get_recommender)
):
    """Generate a packing list for a destination."""
    try:
        data = await recommender.generate_packing_list(request.destination)
        return PackingListResponse(destination=request.destination, categories=data["categories"])
    except RecommendationError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=INVALID_JSON_MESSAGE
        )
