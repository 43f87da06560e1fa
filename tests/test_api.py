"""
Tests for the HTTP surface: webhook, direct tool access and groups.
"""
import pytest
from fastapi.testclient import TestClient

import api.routes as routes
from config import settings, ConfigurationError
from main import app

client = TestClient(app)


def text_update(text="hello", user_id=42, chat_id=42, username="ivan"):
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "chat": {"id": chat_id, "type": "private"},
            "from": {"id": user_id, "is_bot": False, "first_name": "Ivan", "username": username},
            "text": text,
        },
    }


@pytest.fixture
def pipeline_calls(monkeypatch):
    calls = []

    def fake_pipeline(**kwargs):
        calls.append(kwargs)
        return {"sent": True, "response": "ok", "error": None}

    monkeypatch.setattr(routes, "run_pipeline", fake_pipeline)
    return calls


class TestWebhook:

    def test_text_message_runs_pipeline(self, pipeline_calls):
        response = client.post("/telegram/webhook", json=text_update("What homework?"))

        assert response.status_code == 200
        assert response.json() == {"ok": True, "handled": True, "sent": True}
        assert pipeline_calls == [{
            "message": "What homework?",
            "chat_id": 42,
            "telegram_user_id": 42,
            "username": "ivan",
        }]

    def test_update_without_text_ignored(self, pipeline_calls):
        update = text_update()
        del update["message"]["text"]

        response = client.post("/telegram/webhook", json=update)

        assert response.status_code == 200
        assert response.json()["handled"] is False
        assert pipeline_calls == []

    def test_update_without_message_ignored(self, pipeline_calls):
        response = client.post("/telegram/webhook", json={"update_id": 2, "edited_message": {}})

        assert response.json()["handled"] is False
        assert pipeline_calls == []

    def test_secret_mismatch_rejected(self, pipeline_calls, monkeypatch):
        monkeypatch.setattr(settings, "telegram_webhook_secret", "s3cret")

        rejected = client.post(
            "/telegram/webhook", json=text_update(),
            headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"}
        )
        accepted = client.post(
            "/telegram/webhook", json=text_update(),
            headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"}
        )

        assert rejected.status_code == 403
        assert accepted.status_code == 200
        assert len(pipeline_calls) == 1


class TestAgentEndpoint:

    def test_chat_uses_telegram_id_as_default_chat(self, monkeypatch):
        calls = []

        def fake_turn(**kwargs):
            calls.append(kwargs)
            return "Hello!"

        monkeypatch.setattr(routes, "run_agent_turn", fake_turn)

        response = client.post("/agent/chat", json={"telegram_user_id": 42, "message": "hi"})

        assert response.status_code == 200
        assert response.json() == {"response": "Hello!", "thread_id": "telegram-42"}
        assert calls[0]["chat_id"] == 42


    def test_missing_configuration_is_503(self, monkeypatch):
        def unconfigured(**kwargs):
            raise ConfigurationError("OPENAI_API_KEY is not configured", setting="openai_api_key")

        monkeypatch.setattr(routes, "run_agent_turn", unconfigured)

        response = client.post("/agent/chat", json={"telegram_user_id": 42, "message": "hi"})

        assert response.status_code == 503
        assert response.json() == {"detail": "Service is not configured"}

    def test_error_responses_documented(self):
        responses = app.openapi()["paths"]["/agent/chat"]["post"]["responses"]

        assert responses["503"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
        assert "500" in responses


class TestToolEndpoints:

    def test_register_and_verify(self, groups):
        registered = client.post("/tools/register", json={"telegram_user_id": 42, "student_id": "st002"})
        verified = client.post("/tools/verify", json={"telegram_user_id": 42})

        assert registered.status_code == 200
        assert registered.json()["success"] is True
        assert registered.json()["student"]["access_level"] == "monitor"
        assert verified.json()["verified"] is True

    def test_failure_is_structured(self, groups):
        response = client.post("/tools/register", json={"telegram_user_id": 42, "student_id": "NOPE"})

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert "not on the authorized list" in response.json()["message"]

    def test_homework_flow(self, make_student):
        make_student(42, "ST002", access_level="monitor")

        added = client.post("/tools/homework/add", json={
            "created_by_telegram_id": 42, "title": "Essay", "due_date": "2026-11-01"
        })
        viewed = client.post("/tools/homework/view", json={"telegram_user_id": 42})

        assert added.json()["success"] is True
        homework = viewed.json()["homework_list"]
        assert [h["title"] for h in homework] == ["Essay"]
        assert homework[0]["due_date"].startswith("2026-11-01")

        deleted = client.post("/tools/homework/delete", json={
            "telegram_user_id": 42, "homework_id": homework[0]["id"]
        })
        assert deleted.json()["success"] is True

    def test_invalid_request_rejected(self):
        response = client.post("/tools/homework/delete", json={"telegram_user_id": 42})
        assert response.status_code == 422


class TestGroupsAndHealth:

    def test_list_groups_with_counts(self, make_student):
        make_student(1, "ST001", group_id=1)
        make_student(2, "ST002", group_id=1)

        response = client.get("/groups/")

        assert response.status_code == 200
        counts = {g["id"]: g["student_count"] for g in response.json()}
        assert counts == {1: 2, 2: 0, 3: 0}

    def test_health(self):
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "online"
