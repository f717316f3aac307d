"""
Database engine and session management.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fairfare.core.config import settings
from fairfare.db.base import Base, CacheBase


def make_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite URLs get thread-safe settings."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # Keep one connection so the in-memory database is shared
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(engine: Engine):
    """Initialize remote store tables."""
    # Import models so SQLAlchemy registers them
    import fairfare.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def init_cache_db(engine: Engine):
    """Initialize local cache tables."""
    import fairfare.models  # noqa: F401
    CacheBase.metadata.create_all(bind=engine)


def default_engines():
    """Engines built from the environment settings."""
    return (
        make_engine(settings.DATABASE_URL, echo=settings.DB_ECHO),
        make_engine(settings.LOCAL_CACHE_URL, echo=settings.DB_ECHO),
    )
