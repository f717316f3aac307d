"""
FastAPI entrypoint for the FairFare backend application.

Run with: uvicorn fairfare.main:app
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine
from fairfare.core.config import settings
from fairfare.api.router import api_router
from fairfare.db.session import default_engines, init_cache_db, init_db, make_session_factory
from fairfare.services.cache_store import LocalCacheStore
from fairfare.services.document_store import DocumentStore
from fairfare.services.fairness_service import FairnessChecker
from fairfare.services.fx_service import RateProvider
from fairfare.services.llm_client import GeminiClient
from fairfare.services.recommendation_service import RecommendationGenerator
from fairfare.services.remote_feed import RemoteFeedAdapter
from fairfare.services.trip_session import SessionManager
from fairfare.services.write_queue import WriteQueue

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(
    store_engine: Engine = None,
    cache_engine: Engine = None,
    llm=None,
    rate_provider: RateProvider = None
) -> FastAPI:
    """
    Build the application and wire its collaborators.

    Args:
        store_engine: Engine for the remote document store
        cache_engine: Engine for the local cache
        llm: Text generator with an async generate(prompt) method
        rate_provider: Currency rate provider
    """
    if store_engine is None or cache_engine is None:
        default_store, default_cache = default_engines()
        store_engine = store_engine or default_store
        cache_engine = cache_engine or default_cache

    session_factory = make_session_factory(store_engine)
    store = DocumentStore(session_factory)
    cache = LocalCacheStore(make_session_factory(cache_engine))
    feed = RemoteFeedAdapter(store)
    write_queue = WriteQueue(maxsize=settings.WRITE_QUEUE_SIZE)
    llm = llm or GeminiClient()
    recommender = RecommendationGenerator(llm)
    sessions = SessionManager(
        store,
        cache,
        feed,
        write_queue,
        FairnessChecker(llm),
        recommender
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables, run the write queue, and flush it on shutdown."""
        init_db(store_engine)
        init_cache_db(cache_engine)
        await write_queue.start()
        logger.info(f"{settings.APP_NAME} started")
        yield
        sessions.close_all()
        await write_queue.stop()
        logger.info(f"{settings.APP_NAME} stopped")

    app = FastAPI(
        title="FairFare API",
        description="Backend API for travel budgeting with AI price checks",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.session_factory = session_factory
    app.state.document_store = store
    app.state.cache = cache
    app.state.write_queue = write_queue
    app.state.sessions = sessions
    app.state.recommender = recommender
    app.state.rate_provider = rate_provider or RateProvider()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"message": "FairFare API is running"}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "pending_writes": write_queue.pending}

    return app


app = create_app()
