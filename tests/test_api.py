"""
HTTP tests for api/chat.py and main.py via FastAPI's TestClient
"""
import pytest
from fastapi.testclient import TestClient

from tripcopilot.errors import ModelProviderError
from tripcopilot.main import create_app


@pytest.fixture
def client(agent):
    with TestClient(create_app(agent)) as test_client:
        yield test_client


def chat_body(**overrides):
    body = {
        "tripId": "trip-1",
        "pageKey": "flights",
        "messages": [{"role": "user", "content": "what should I book?"}],
    }
    body.update(overrides)
    return body


class TestHealth:

    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["store"] == "in-memory"
        assert isinstance(body["origins"], list)


class TestChatRoute:

    def test_envelope(self, client):
        response = client.post("/v1/ai/chat", json=chat_body())

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        data = body["data"]
        assert data["conversationId"]
        assert data["answer"] == "Here is a practical plan."
        assert data["degraded"] is False
        assert data["suggestedActions"][0] == "Share exact flight number and date for live status"
        assert data["sources"][0]["name"] == "trip_db_context"
        assert "fetchedAt" in data["sources"][0]
        assert "detail" not in data["sources"][0]

    def test_missing_trip(self, client):
        response = client.post("/v1/ai/chat", json=chat_body(tripId=""))
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "invalid input"}

    def test_malformed_body(self, client):
        response = client.post(
            "/v1/ai/chat", content="not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "invalid request body"}

    def test_unknown_role_is_treated_as_user(self, client, model):
        client.post("/v1/ai/chat", json=chat_body(messages=[{"role": "system", "content": "hi"}]))
        _, _, messages = model.respond.await_args.args
        assert messages[0].role.value == "user"

    def test_model_failure_is_500(self, client, model):
        model.respond.side_effect = ModelProviderError("openai responses error: timeout")
        response = client.post("/v1/ai/chat", json=chat_body())
        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "openai responses error: timeout"}

    def test_user_header(self, client, repository):
        client.post("/v1/ai/chat", json=chat_body(), headers={"X-User-Id": "alice"})
        assert repository.audit_logs[0]["userId"] == "alice"

    def test_default_user(self, client, repository):
        client.post("/v1/ai/chat", json=chat_body())
        assert repository.audit_logs[0]["userId"] == "local-test-user"


class TestPlannerRoute:

    def test_draft(self, client):
        response = client.post("/v1/ai/planner/chat", json={
            "messages": [{"role": "user", "content": "Solo week, 2025-10-01 to 2025-10-07"}],
            "plannerContext": {"destination": "Peru", "mustDoExperiences": "Machu Picchu, Cooking class"},
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["sources"][0]["name"] == "planner_context"
        assert data["plannerDraft"]["destination"] == "Peru"
        assert data["plannerDraft"]["travelers"] == 1
        assert data["plannerDraft"]["itinerary"][1]["title"] == "Cooking class"
        assert "draft" not in data

    def test_overflowing_travelers_hint(self, client):
        body = '{"messages": [{"role": "user", "content": "Trip to Peru"}], "plannerContext": {"travelers": 1e400}}'
        response = client.post(
            "/v1/ai/planner/chat", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 200
        draft = response.json()["data"]["plannerDraft"]
        assert draft["destination"] == "Peru"
        assert "travelers" not in draft

    def test_no_messages(self, client):
        response = client.post("/v1/ai/planner/chat", json={"messages": []})
        assert response.status_code == 400


class TestHistoryRoutes:

    def _chat(self, client, times=1):
        conversation_id = None
        for _ in range(times):
            conversation_id = client.post("/v1/ai/chat", json=chat_body()).json()["data"]["conversationId"]
        return conversation_id

    def test_list_conversations(self, client):
        conversation_id = self._chat(client)

        response = client.get("/v1/ai/conversations/trip-1")

        assert response.status_code == 200
        [conversation] = response.json()["data"]
        assert conversation["id"] == conversation_id
        assert conversation["title"] == "Flights assistant"

    def test_list_messages(self, client):
        conversation_id = self._chat(client, times=3)

        response = client.get(f"/v1/ai/conversations/{conversation_id}/messages", params={"limit": 2})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [m["role"] for m in data] == ["assistant", "user"]

    @pytest.mark.parametrize("limit", ["0", "500", "abc"])
    def test_out_of_range_limit_falls_back(self, client, limit):
        conversation_id = self._chat(client, times=3)
        response = client.get(f"/v1/ai/conversations/{conversation_id}/messages", params={"limit": limit})
        assert len(response.json()["data"]) == 6

    def test_other_users_conversation(self, client):
        conversation_id = self._chat(client)
        response = client.get(
            f"/v1/ai/conversations/{conversation_id}/messages", headers={"X-User-Id": "mallory"}
        )
        assert response.status_code == 403
        assert response.json() == {"ok": False, "error": "unauthorized trip access"}


class TestRefreshRoute:

    def test_refresh(self, client):
        response = client.post("/v1/ai/context/refresh", json={"tripId": "trip-1", "pageKey": "finance"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["pageKey"] == "finance"
        assert data["updatedAt"].endswith("Z")

    def test_refresh_requires_page(self, client):
        response = client.post("/v1/ai/context/refresh", json={"tripId": "trip-1"})
        assert response.status_code == 400
