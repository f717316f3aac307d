"""
Shared FastAPI dependencies.

Clients and services are built once in create_app and read from app.state.
"""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from fairfare.core.security import decode_access_token
from fairfare.models.user import User
from fairfare.services.fx_service import RateProvider
from fairfare.services.recommendation_service import RecommendationGenerator
from fairfare.services.trip_session import SessionManager, TripSession

bearer_scheme = HTTPBearer()


def get_db(request: Request) -> Session:
    """Dependency for getting a database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user."""
    uid = decode_access_token(credentials.credentials)
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    user = db.query(User).filter(User.id == uid).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )
    return user


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


async def get_trip_session(
    current_user: User = Depends(get_current_user),
    sessions: SessionManager = Depends(get_session_manager)
) -> TripSession:
    """The signed-in user's trip session, started on first use."""
    return await sessions.open(current_user.id)


def get_rate_provider(request: Request) -> RateProvider:
    return request.app.state.rate_provider


def get_recommender(request: Request) -> RecommendationGenerator:
    return request.app.state.recommender
