"""API route tests through FastAPI's TestClient."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from pharmacy_assistant.api.app import app
from pharmacy_assistant.api.deps import get_orchestrator
from pharmacy_assistant.core.exceptions import PharmacyAssistantError

from conftest import KNOWN_PHONE, NEW_PHONE


@pytest.fixture
def client(orchestrator):
    """Test client wired to the fake-backed orchestrator."""
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert "pharmacy_directory" in body["enabled_services"]


class TestChatbotRoutes:
    def test_start_known_caller(self, client):
        response = client.post("/api/chatbot/start", json={"phoneNumber": KNOWN_PHONE})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["isNewLead"] is False
        assert body["pharmacy"]["name"] == "HealthFirst Pharmacy"

    def test_message_flow(self, client, replies):
        replies.replies = ["Welcome back!"]
        client.post("/api/chatbot/start", json={"phoneNumber": NEW_PHONE})

        response = client.post(
            "/api/chatbot/message", json={"phoneNumber": NEW_PHONE, "message": "Hi"}
        )

        assert response.json() == {
            "success": True,
            "message": "Welcome back!",
            "collectingInfo": True,
            "pharmacy": None,
        }

    def test_message_without_session_is_200_with_error(self, client):
        response = client.post(
            "/api/chatbot/message", json={"phoneNumber": NEW_PHONE, "message": "Hi"}
        )
        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "message": "Please start a new conversation first.",
            "error": "session_not_found",
        }

    def test_schedule_callback(self, client, scheduler):
        client.post("/api/chatbot/start", json={"phoneNumber": KNOWN_PHONE})

        response = client.post(
            "/api/chatbot/schedule-callback",
            json={"phoneNumber": KNOWN_PHONE, "preferredTime": "Friday 10am", "notes": "pricing"},
        )

        assert response.json()["success"] is True
        _, preferred_time, notes = scheduler.schedule.call_args.args
        assert preferred_time == "Friday 10am"
        assert notes == "pricing"

    def test_send_email(self, client):
        client.post("/api/chatbot/start", json={"phoneNumber": KNOWN_PHONE})
        response = client.post("/api/chatbot/send-email", json={"phoneNumber": KNOWN_PHONE})
        assert response.json()["success"] is True

    def test_get_conversation(self, client):
        client.post("/api/chatbot/start", json={"phoneNumber": KNOWN_PHONE})
        response = client.get(f"/api/chatbot/conversation/{KNOWN_PHONE}")
        body = response.json()
        assert body["success"] is True
        assert body["context"]["phoneNumber"] == KNOWN_PHONE

    def test_get_conversation_unknown(self, client):
        body = client.get("/api/chatbot/conversation/5550000000").json()
        assert body["success"] is False
        assert body["error"] == "session_not_found"

    def test_pharmacies(self, client):
        body = client.get("/api/chatbot/pharmacies").json()
        assert body["success"] is True
        assert body["pharmacies"][0]["rxVolume"] == 8400


class TestValidation:
    def test_blank_phone_rejected(self, client):
        response = client.post("/api/chatbot/start", json={"phoneNumber": ""})
        assert response.status_code == 422

    def test_missing_message_rejected(self, client):
        response = client.post("/api/chatbot/message", json={"phoneNumber": KNOWN_PHONE})
        assert response.status_code == 422

    def test_missing_preferred_time_rejected(self, client):
        response = client.post("/api/chatbot/schedule-callback", json={"phoneNumber": KNOWN_PHONE})
        assert response.status_code == 422


def test_stray_application_error_becomes_json_500(orchestrator):
    broken = MagicMock(spec=orchestrator)
    broken.start.side_effect = PharmacyAssistantError("store offline")
    app.dependency_overrides[get_orchestrator] = lambda: broken
    try:
        with TestClient(app) as c:
            response = c.post("/api/chatbot/start", json={"phoneNumber": KNOWN_PHONE})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "application_error", "message": "store offline"}
