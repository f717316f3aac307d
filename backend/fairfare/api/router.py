"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from fairfare.api.routes import (
    auth, users, trips, expenses, analytics, fx_rates, tools
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(trips.router)
api_router.include_router(expenses.router)
api_router.include_router(analytics.router)
api_router.include_router(fx_rates.router)
api_router.include_router(tools.router)
