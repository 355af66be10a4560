"""
Tests for the HTTP surface: status codes, response shape and change notifications
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from app.api.ws import websocket_manager
from app.core.db import Base, get_db
from app.schemas.auth import Caller
from app.utils import security
from app.utils.security import get_current_caller

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_routes.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CALLER = Caller(uid="route-uid", email="coach@example.com")

# Caller the overridden auth dependency returns; tests may swap it out
current = {"caller": CALLER}

@pytest.fixture
def client():
    """Test client with a scratch database and a fixed caller"""
    Base.metadata.create_all(bind=engine)
    current["caller"] = CALLER

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_caller] = lambda: current["caller"]
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def notifications(monkeypatch):
    """Capture change notifications instead of sending them"""
    sent = []

    async def record(uid, change_type, event_id=None):
        sent.append((uid, change_type, event_id))

    monkeypatch.setattr(websocket_manager, "notify_change", record)
    return sent

def event_body(**overrides):
    body = {
        "name": "Summer Cup",
        "sport_type": "Soccer",
        "date_time": "2025-07-04T18:30:00Z",
        "venues": [{"name": "Riverside Park", "address": "1 River Rd"}],
    }
    body.update(overrides)
    return body

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

def test_sport_types(client):
    response = client.get("/api/sport-types")
    assert response.status_code == 200
    assert "Soccer" in response.json()["data"]

def test_create_get_list_delete(client, notifications):
    created = client.post("/api/events", json=event_body())
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    assert body["error"] is None
    assert "status_code" not in body
    event_id = body["data"]["id"]

    fetched = client.get(f"/api/events/{event_id}")
    assert fetched.status_code == 200
    event = fetched.json()["data"]
    assert event["name"] == "Summer Cup"
    assert event["date_time"] == "2025-07-04T18:30:00Z"
    assert event["venues"][0]["name"] == "Riverside Park"

    listed = client.get("/api/events", params={"searchQuery": "summer", "limit": 1})
    assert listed.status_code == 200
    page = listed.json()["data"]
    assert page["total"] == 1
    assert page["hasMore"] is False
    assert page["items"][0]["id"] == event_id

    deleted = client.delete(f"/api/events/{event_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True, "data": None, "error": None}

    assert client.get(f"/api/events/{event_id}").status_code == 404
    assert notifications == [
        (CALLER.uid, "event_created", event_id),
        (CALLER.uid, "event_deleted", event_id),
    ]

def test_update_uses_path_id(client, notifications):
    event_id = client.post("/api/events", json=event_body()).json()["data"]["id"]

    response = client.put(
        f"/api/events/{event_id}",
        json=event_body(id="00000000-0000-0000-0000-000000000000", name="Autumn Cup", venues=[{"name": "Hall"}]),
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"id": event_id}
    event = client.get(f"/api/events/{event_id}").json()["data"]
    assert event["name"] == "Autumn Cup"
    assert [venue["name"] for venue in event["venues"]] == ["Hall"]
    assert notifications[-1] == (CALLER.uid, "event_updated", event_id)

def test_validation_failure_shape(client, notifications):
    response = client.post("/api/events", json=event_body(venues=[]))

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "data": None,
        "error": "venues: At least one venue is required",
    }
    assert notifications == []

def test_unauthenticated(client):
    current["caller"] = None

    response = client.get("/api/events")

    assert response.status_code == 401
    assert response.json()["error"] == "Not authenticated"

def test_missing_event_is_404(client):
    response = client.delete("/api/events/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"] == "Event not found"

def test_me_requires_caller(client):
    assert client.get("/auth/me").json()["data"]["uid"] == CALLER.uid

    current["caller"] = None
    assert client.get("/auth/me").status_code == 401

def test_rejected_token_means_no_caller(monkeypatch):
    """Verification errors never escape caller resolution"""
    def reject(token):
        raise ValueError("Illegal ID token provided")

    monkeypatch.setattr(security.firebase_client, "verify_id_token", reject)

    assert security.caller_from_id_token("garbage") is None

@pytest.fixture
def firebase_unconfigured(monkeypatch):
    """No credentials and no project id"""
    from app.core.config import settings
    from app.services import firebase_client

    for name in ("FIREBASE_PROJECT_ID", "FIREBASE_CREDENTIALS_JSON", "FIREBASE_CREDENTIALS_FILE", "FIREBASE_CREDENTIALS_B64"):
        monkeypatch.setattr(settings, name, None)
    monkeypatch.setattr(firebase_client.firebase_admin, "_apps", {})
    firebase_client.get_firebase_app.cache_clear()
    yield
    firebase_client.get_firebase_app.cache_clear()

def test_bearer_token_without_firebase_config_is_401(client, firebase_unconfigured):
    """Unverifiable credentials resolve to no caller, not a server error"""
    app.dependency_overrides.pop(get_current_caller)
    test_client = TestClient(app, raise_server_exceptions=False)

    response = test_client.get("/api/events", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "data": None, "error": "Not authenticated"}

def test_session_cookie_without_firebase_config_is_401(client, firebase_unconfigured):
    from app.core.config import settings

    app.dependency_overrides.pop(get_current_caller)
    test_client = TestClient(app, raise_server_exceptions=False)
    test_client.cookies.set(settings.SESSION_COOKIE_NAME, "stale-cookie")

    response = test_client.get("/api/events")

    assert response.status_code == 401
    assert response.json()["error"] == "Not authenticated"
