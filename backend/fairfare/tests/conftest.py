"""
Shared fixtures: in-memory databases, fake collaborators, HTTP client.
"""
from datetime import datetime
from decimal import Decimal
import pytest
from fastapi.testclient import TestClient
from fairfare.db.session import init_cache_db, init_db, make_engine, make_session_factory
from fairfare.main import create_app
from fairfare.models.user import User
from fairfare.services.cache_store import LocalCacheStore
from fairfare.services.document_store import DocumentStore
from fairfare.services.remote_feed import RemoteFeedAdapter
from fairfare.services.trip_registry import TripRegistry
from fairfare.services.write_queue import WriteQueue
from fairfare.models.trip import TripStatus

OWNER_ID = "user-1"


class FakeLLM:
    """Scripted text generator."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return "Fair price for the area."


class FakeRates:
    """Rate provider returning fixed rates."""

    async def fetch(self, base_currency: str):
        if base_currency.upper() == "XXX":
            raise ValueError("ExchangeRate-API error: unsupported-code")
        return {"USD": Decimal("1"), "INR": Decimal("83.25"), "EUR": Decimal("0.92"), "THB": Decimal("36.1")}


class FakeFeed:
    """Remote feed whose snapshots are pushed by the test."""

    def __init__(self):
        self.callbacks = {}
        self.writes = []
        self.unsubscribed = []

    def subscribe(self, trip_id, on_snapshot, on_error):
        self.callbacks[trip_id] = (on_snapshot, on_error)

        def unsubscribe():
            self.unsubscribed.append(trip_id)

        return unsubscribe

    async def write(self, trip_id, expense):
        self.writes.append((trip_id, expense))
        return "remote-id"

    def push(self, trip_id, expenses):
        self.callbacks[trip_id][0](expenses)

    def fail(self, trip_id, error):
        self.callbacks[trip_id][1](error)


@pytest.fixture
def store_engine():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def cache_engine():
    engine = make_engine("sqlite://")
    init_cache_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(store_engine):
    return DocumentStore(make_session_factory(store_engine))


@pytest.fixture
def cache(cache_engine):
    return LocalCacheStore(make_session_factory(cache_engine))


@pytest.fixture
def owner(store_engine):
    factory = make_session_factory(store_engine)
    with factory() as db:
        db.add(User(id=OWNER_ID, email="traveler@example.com", display_name="Asha", hashed_password="x"))
        db.commit()
    return OWNER_ID


@pytest.fixture
def write_queue():
    return WriteQueue(maxsize=20)


@pytest.fixture
def feed(store):
    return RemoteFeedAdapter(store)


@pytest.fixture
def registry(owner, store, cache, feed, write_queue):
    return TripRegistry(owner, store, cache, feed, write_queue, default_budget=5000)


def add_trip(store, owner_id, destination="Goa", budget=5000, created_at=None, **extra):
    """Insert a trip document directly into the remote store."""
    data = {
        "owner_id": owner_id,
        "destination": destination,
        "budget": Decimal(budget),
        "duration": 3,
        "status": TripStatus.ACTIVE,
        "created_at": created_at or datetime(2026, 1, 1),
    }
    data.update(extra)
    return store.add("trips", data)


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def app(store_engine, cache_engine, llm):
    return create_app(store_engine, cache_engine, llm=llm, rate_provider=FakeRates())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(client, email="traveler@example.com", password="testpassword123"):
    """Sign up (if needed) and log in; returns bearer headers."""
    client.post("/api/auth/signup", json={"email": email, "password": password, "display_name": "Asha"})
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def drain_writes(client):
    """Block until the app's write queue is empty."""
    client.portal.call(client.app.state.write_queue.drain)
