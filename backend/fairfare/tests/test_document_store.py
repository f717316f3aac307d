"""
Tests for the document store.
"""
from decimal import Decimal
from conftest import add_trip


def test_set_creates_then_overwrites(store, owner):
    trip_id = add_trip(store, owner, "Goa")
    snapshots = []
    store.listen("expenses", "trip_id", trip_id, snapshots.append, lambda e: None)
    assert snapshots == [[]]

    store.set("expenses", "exp-1", {"trip_id": trip_id, "name": "Taxi", "cost": Decimal("100"), "location": "Goa"})
    assert store.get("expenses", "exp-1")["name"] == "Taxi"
    assert [d["id"] for d in snapshots[-1]] == ["exp-1"]

    store.set("expenses", "exp-1", {"trip_id": trip_id, "name": "Cab", "cost": Decimal("120"), "location": "Goa"})
    document = store.get("expenses", "exp-1")
    assert document["name"] == "Cab"
    assert document["cost"] == Decimal("120")
    assert len(snapshots) == 3
    assert [d["name"] for d in snapshots[-1]] == ["Cab"]


def test_listener_stops_after_unsubscribe(store, owner):
    trip_id = add_trip(store, owner, "Goa")
    snapshots = []
    unsubscribe = store.listen("expenses", "trip_id", trip_id, snapshots.append, lambda e: None)
    unsubscribe()

    store.add("expenses", {"trip_id": trip_id, "name": "Taxi", "cost": Decimal("100")})

    assert snapshots == [[]]


def test_listener_only_sees_matching_documents(store, owner):
    goa = add_trip(store, owner, "Goa")
    manali = add_trip(store, owner, "Manali")
    snapshots = []
    store.listen("expenses", "trip_id", goa, snapshots.append, lambda e: None)

    store.add("expenses", {"trip_id": manali, "name": "Tea", "cost": Decimal("20")})

    assert snapshots == [[]]


def test_delete_missing_is_noop(store):
    store.delete("trips", "missing")
    assert store.get("trips", "missing") is None
