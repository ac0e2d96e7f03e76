"""
HTTP surface tests: FastAPI routes over a mock-backed orchestrator.
"""
import pytest
from fastapi.testclient import TestClient

from velo.main import app
from velo.orchestrator import get_orchestrator


@pytest.fixture
def client(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_endpoint_returns_ok(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "source": "mock", "mode": "mock"}


def test_version_endpoint(client):
    data = client.get("/version").json()
    assert data["name"] == "Velo Altitude API"


def test_nutrition_trends(client):
    response = client.get(
        "/api/nutrition/trends",
        params={"startDate": "2025-04-01", "endDate": "2025-04-03"},
    )
    assert response.status_code == 200
    assert len(response.json()["dailyData"]) == 3


def test_nutrition_trends_rejects_bad_date(client):
    response = client.get(
        "/api/nutrition/trends",
        params={"startDate": "yesterday", "endDate": "2025-04-03"},
    )
    assert response.status_code == 400


def test_create_log_entry_invalidates_nutrition(client, source):
    client.get("/api/nutrition/plans/active")
    response = client.post("/api/nutrition/log", json={
        "date": "2025-04-01",
        "mealType": "collation",
        "foodName": "Banane",
        "portion": 1,
        "calories": 105,
        "protein": 1,
        "carbs": 27,
        "fat": 0,
    })
    assert response.status_code == 201
    assert response.json() == {"status": "created"}

    client.get("/api/nutrition/plans/active")
    assert source.calls["active_nutrition_plan"] == 2


def test_create_log_entry_validates_body(client):
    response = client.post("/api/nutrition/log", json={"date": "2025-04-01"})
    assert response.status_code == 422


def test_strava_auth_url(client):
    data = client.get("/api/strava/auth-url").json()
    assert data["authUrl"].startswith("https://www.strava.com/")


def test_ai_chat(client):
    response = client.post("/api/ai/chat", json={
        "message": "What should I drink on a hot day?",
        "language": "en",
    })
    assert response.status_code == 200
    data = response.json()
    assert "electrolytes" in data["message"]
    assert len(data["suggestedQueries"]) == 2


def test_ai_suggestions_language(client):
    data = client.get("/api/ai/suggestions", params={"language": "en"}).json()
    assert data[0].startswith("What")


def test_chat_history_endpoints(client):
    body = {"history": [{"role": "user", "content": "Bonjour"}]}
    assert client.put("/api/ai/chat/history/u1", json=body).json() == {
        "status": "saved",
        "turns": 1,
    }
    assert client.get("/api/ai/chat/history/u1").json() == body

    client.delete("/api/ai/chat/history/u1")
    assert client.get("/api/ai/chat/history/u1").json() == {"history": []}


def test_cache_stats_and_clear(client):
    client.get("/api/training/sessions/upcoming")

    stats = client.get("/cache/stats").json()
    assert stats["by_category"]["training"] == 1

    response = client.delete("/cache/training")
    assert response.json() == {"scope": "training", "cleared": 1}


def test_cache_clear_unknown_scope(client):
    assert client.delete("/cache/weather").status_code == 400
