"""
End-to-end tests for trips, expenses, analytics and tools over HTTP.
"""
from conftest import auth_headers, drain_writes

PLAN = '{"food": [{"name": "Fish thali", "cost": "250", "desc": "Local"}], "places": [], "stays": [], "travel_tips": []}'


def create_trip(client, headers, llm, destination="Goa", budget=5000):
    llm.replies.append(PLAN)
    response = client.post(
        "/api/trips",
        json={"destination": destination, "budget": budget, "duration": 3, "purpose": "Leisure"},
        headers=headers
    )
    assert response.status_code == 201
    return response.json()["trip"]


def test_empty_dashboard(client):
    headers = auth_headers(client)
    view = client.get("/api/trips/current", headers=headers).json()
    assert view["trip"] is None
    assert float(view["budget"]) == 5000
    assert view["expenses"] == []
    assert view["view_name"] == "dashboard"


def test_create_trip_stores_recommendations(client, llm):
    headers = auth_headers(client)
    trip = create_trip(client, headers, llm)

    assert trip["recommendations"]["food"][0]["name"] == "Fish thali"
    view = client.get("/api/trips/current", headers=headers).json()
    assert view["trip"]["id"] == trip["id"]
    assert "Goa" in llm.prompts[0]


def test_create_trip_invalid_plan(client, llm):
    headers = auth_headers(client)
    llm.replies.append("Sorry, no plan today.")
    response = client.post("/api/trips", json={"destination": "Goa", "budget": 5000, "duration": 3},
                           headers=headers)
    assert response.status_code == 502
    assert client.get("/api/trips", headers=headers).json() == []


def test_create_trip_validates_form(client):
    headers = auth_headers(client)
    response = client.post("/api/trips", json={"destination": "", "budget": 5000}, headers=headers)
    assert response.status_code == 422


def test_add_expense_updates_totals(client, llm):
    headers = auth_headers(client)
    create_trip(client, headers, llm)

    response = client.post("/api/expenses", json={"name": "Taxi", "cost": 250, "location": "Goa"},
                           headers=headers)
    assert response.status_code == 200
    assert response.json()["saved"] is True
    drain_writes(client)

    totals = client.get("/api/expenses/totals", headers=headers).json()
    assert float(totals["spent"]) == 250
    assert float(totals["remaining"]) == 4750
    assert totals["percent_used"] == 5.0
    expenses = client.get("/api/expenses", headers=headers).json()
    assert [e["name"] for e in expenses] == ["Taxi"]
    assert not expenses[0]["id"].startswith("pending-")


def test_incomplete_expense_is_ignored(client, llm):
    headers = auth_headers(client)
    create_trip(client, headers, llm)
    response = client.post("/api/expenses", json={"name": "Taxi", "location": "Goa"}, headers=headers)
    assert response.json()["saved"] is False
    assert client.get("/api/expenses", headers=headers).json() == []


def test_zero_cost_expense_is_ignored(client, llm):
    headers = auth_headers(client)
    create_trip(client, headers, llm)
    prompts_before = len(llm.prompts)
    response = client.post("/api/expenses", json={"name": "Water", "cost": 0, "location": "Goa"},
                           headers=headers)
    assert response.json()["saved"] is False
    assert len(llm.prompts) == prompts_before
    assert client.get("/api/expenses", headers=headers).json() == []


def test_expensive_warning_then_confirm(client, llm):
    headers = auth_headers(client)
    create_trip(client, headers, llm)
    llm.replies.append("Expensive, locals pay about 100.")

    response = client.post("/api/expenses", json={"name": "Coconut", "cost": 400, "location": "Goa"},
                           headers=headers)
    body = response.json()
    assert body["saved"] is False
    assert body["warning"] == "Expensive, locals pay about 100."
    assert client.get("/api/expenses", headers=headers).json() == []
    view = client.get("/api/trips/current", headers=headers).json()
    assert view["pending_expense"]["name"] == "Coconut"

    confirmed = client.post("/api/expenses/pending/confirm", headers=headers).json()
    assert confirmed["saved"] is True
    assert [e["name"] for e in client.get("/api/expenses", headers=headers).json()] == ["Coconut"]


def test_expensive_warning_then_cancel(client, llm):
    headers = auth_headers(client)
    create_trip(client, headers, llm)
    llm.replies.append("EXPENSIVE")
    client.post("/api/expenses", json={"name": "Coconut", "cost": 400, "location": "Goa"}, headers=headers)

    client.delete("/api/expenses/pending", headers=headers)

    assert client.get("/api/trips/current", headers=headers).json()["pending_expense"] is None
    assert client.post("/api/expenses/pending/confirm", headers=headers).json()["saved"] is False


def test_force_skips_price_check(client, llm):
    headers = auth_headers(client)
    create_trip(client, headers, llm)
    prompts_before = len(llm.prompts)
    response = client.post("/api/expenses",
                           json={"name": "Coconut", "cost": 400, "location": "Goa", "force": True},
                           headers=headers)
    assert response.json()["saved"] is True
    assert len(llm.prompts) == prompts_before


def test_completed_trip_rejects_expenses(client, llm):
    headers = auth_headers(client)
    trip = create_trip(client, headers, llm)

    response = client.post(f"/api/trips/{trip['id']}/complete", headers=headers)
    assert response.json()["status"] == "completed"

    response = client.post("/api/expenses", json={"name": "Taxi", "cost": 250, "location": "Goa"},
                           headers=headers)
    assert response.status_code == 409


def test_select_switches_dashboard(client, llm):
    headers = auth_headers(client)
    goa = create_trip(client, headers, llm, "Goa", 5000)
    client.post("/api/expenses", json={"name": "Taxi", "cost": 250, "location": "Goa", "force": True},
                headers=headers)
    drain_writes(client)
    create_trip(client, headers, llm, "Manali", 2000)

    view = client.get("/api/trips/current", headers=headers).json()
    assert view["trip"]["destination"] == "Manali"
    assert view["expenses"] == []

    view = client.post(f"/api/trips/{goa['id']}/select", headers=headers).json()
    assert view["trip"]["destination"] == "Goa"
    assert float(view["budget"]) == 5000
    assert len(view["expenses"]) == 1


def test_select_unknown_trip(client):
    headers = auth_headers(client)
    assert client.post("/api/trips/nope/select", headers=headers).status_code == 404


def test_delete_only_trip(client, llm):
    headers = auth_headers(client)
    trip = create_trip(client, headers, llm, budget=1200)
    client.post("/api/expenses", json={"name": "Taxi", "cost": 250, "location": "Goa", "force": True},
                headers=headers)

    view = client.delete(f"/api/trips/{trip['id']}", headers=headers).json()
    drain_writes(client)

    assert view["trip"] is None
    assert float(view["budget"]) == 5000
    assert view["expenses"] == []
    assert client.get("/api/trips", headers=headers).json() == []


def test_travel_stats(client, llm):
    headers = auth_headers(client)
    goa = create_trip(client, headers, llm, "Goa", 5000)
    client.post("/api/expenses", json={"name": "Taxi", "cost": 1000, "location": "Goa", "force": True},
                headers=headers)
    drain_writes(client)
    client.post(f"/api/trips/{goa['id']}/complete", headers=headers)
    create_trip(client, headers, llm, "goa", 2000)

    stats = client.get("/api/analytics/stats", headers=headers).json()
    assert stats["total_trips"] == 2
    assert stats["unique_places"] == 1
    assert float(stats["total_savings"]) == 6000

    history = client.get("/api/analytics/history", headers=headers).json()
    assert [t["destination"] for t in history["completed"]] == ["Goa"]
    assert [t["destination"] for t in history["ongoing"]] == ["goa"]


def test_last_view_saved(client):
    headers = auth_headers(client)
    response = client.put("/api/users/me/view", json={"view_name": "history"}, headers=headers)
    assert response.json()["view_name"] == "history"
    assert client.get("/api/trips/current", headers=headers).json()["view_name"] == "history"


def test_currency_conversion(client):
    headers = auth_headers(client)
    response = client.get("/api/fx-rates/convert",
                          params={"amount": 10, "from_currency": "USD", "to_currency": "INR"},
                          headers=headers)
    assert response.status_code == 200
    assert float(response.json()["converted"]) == 832.5


def test_currency_provider_error(client):
    headers = auth_headers(client)
    response = client.get("/api/fx-rates/latest", params={"base": "XXX"}, headers=headers)
    assert response.status_code == 503


def test_packing_list(client, llm):
    headers = auth_headers(client)
    llm.replies.append('```json\n{"categories": [{"name": "Clothes", "items": ["Shorts", "Hat"]}]}\n```')
    response = client.post("/api/tools/packing-list", json={"destination": "Goa"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["categories"][0]["items"] == ["Shorts", "Hat"]


def test_health_reports_queue(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_latest_rates_common_only(client):
    headers = auth_headers(client)
    all_rates = client.get("/api/fx-rates/latest", headers=headers).json()["rates"]
    common = client.get("/api/fx-rates/latest", params={"common_only": True}, headers=headers).json()["rates"]
    assert "THB" in all_rates
    assert sorted(common) == ["EUR", "INR", "USD"]
