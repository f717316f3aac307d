"""
Expense routes for the selected trip.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from fairfare.api.dependencies import get_trip_session
from fairfare.schemas.budget import BudgetTotals
from fairfare.schemas.expense import ExpenseCreate, ExpenseRecord, ExpenseSubmitResponse
from fairfare.services.sync_coordinator import TripCompletedError
from fairfare.services.trip_registry import TripNotFoundError
from fairfare.services.trip_session import TripSession

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseRecord])
async def list_expenses(session: TripSession = Depends(get_trip_session)):
    """Expenses of the selected trip, newest first."""
    return session.view().expenses


@router.get("/totals", response_model=BudgetTotals)
async def get_totals(session: TripSession = Depends(get_trip_session)):
    """Spent, remaining and percentage used for the selected trip."""
    return session.view().totals


@router.post("", response_model=ExpenseSubmitResponse)
async def add_expense(
    expense_data: ExpenseCreate,
    session: TripSession = Depends(get_trip_session)
):
    """Add an expense after a fair-price check.

    An expensive verdict returns saved=false with the warning; confirm with
    POST /expenses/pending/confirm or resubmit with force=true.
    """
    try:
        return await session.submit_expense(expense_data)
    except TripNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except TripCompletedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Trip is completed"
        )


@router.post("/pending/confirm", response_model=ExpenseSubmitResponse)
async def confirm_pending_expense(session: TripSession = Depends(get_trip_session)):
    """Proceed anyway with the expense held back by the price warning."""
    try:
        return session.confirm_pending()
    except TripNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except TripCompletedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Trip is completed"
        )


@router.delete("/pending")
async def cancel_pending_expense(session: TripSession = Depends(get_trip_session)):
    """Discard the held-back expense."""
    session.cancel_pending()
    return {"message": "Pending expense discarded"}
