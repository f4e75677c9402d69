"""Tests for the chatbot HTTP API."""

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from chatbot_server.app import build_store, create_app
from chatbot_server.completion import CompletionClient
from chatbot_server.config import CompletionConfig, CORSConfig, ServerConfig, StorageConfig
from chatbot_state import MemoryBackend, RedisBackend, SessionStore

REPLY = {"choices": [{"message": {"role": "assistant", "content": "**hi**"}}]}


def session_payload(session_id: str = "chat_1700000000000_abc123xyz", name: str = "Trip") -> dict:
    return {
        "sessionId": session_id,
        "userID": "alice",
        "sessionData": {
            "sessionId": session_id,
            "name": name,
            "messages": [
                {"user": "Plan a trip", "system": "Sure!", "timestamp": "2024-01-01T00:00:00.000Z"}
            ],
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:05.000Z",
        },
    }


@pytest.fixture
def memory_store() -> SessionStore:
    return SessionStore(MemoryBackend())


@pytest.fixture
def client(memory_store: SessionStore, completion_factory) -> TestClient:
    completion = completion_factory(lambda request: httpx.Response(200, json=REPLY))
    app = create_app(ServerConfig(), store=memory_store, completion=completion)
    return TestClient(app)


class TestOperationalEndpoints:
    """Tests for health and config endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "timestamp" in response.json()

    def test_config_status_hides_values(self, client: TestClient) -> None:
        response = client.get("/api/config")
        assert response.status_code == 200
        assert response.json()["status"] == "Config loaded from environment variables"
        assert "test-key" not in response.text

    def test_request_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/api/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_is_generated(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.headers["X-Request-ID"].startswith("req-")

    def test_error_responses_carry_request_id(self, client: TestClient) -> None:
        response = client.get("/api/sessions/chat_missing", headers={"X-Request-ID": "req-7"})
        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "req-7"

    def test_cors_headers(self, memory_store: SessionStore) -> None:
        config = ServerConfig(cors=CORSConfig(enabled=True, allow_origins=["http://chat.test"]))
        client = TestClient(create_app(config, store=memory_store))
        response = client.get("/api/health", headers={"Origin": "http://chat.test"})
        assert response.headers["access-control-allow-origin"] == "http://chat.test"


class TestChatEndpoint:
    """Tests for the chat-completion proxy endpoint."""

    def test_chat_proxies_reply(self, client: TestClient) -> None:
        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "hi"}]})
        assert response.status_code == 200
        assert response.json() == REPLY

    @pytest.mark.parametrize("body", [{}, {"messages": "hi"}, {"messages": None}])
    def test_chat_requires_message_array(self, client: TestClient, body: dict) -> None:
        response = client.post("/api/chat", json=body)
        assert response.status_code == 400
        assert "Messages array is required" in response.json()["error"]

    def test_chat_without_configuration(self, memory_store: SessionStore) -> None:
        app = create_app(
            ServerConfig(),
            store=memory_store,
            completion=CompletionClient(CompletionConfig()),
        )
        response = TestClient(app).post("/api/chat", json={"messages": []})
        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error"}

    def test_chat_upstream_failure(self, memory_store: SessionStore, completion_factory) -> None:
        completion = completion_factory(lambda request: httpx.Response(500))
        app = create_app(ServerConfig(), store=memory_store, completion=completion)
        response = TestClient(app).post("/api/chat", json={"messages": []})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get AI response"}


class TestRenderEndpoint:
    """Tests for the render endpoint."""

    def test_render(self, client: TestClient) -> None:
        response = client.post("/api/render", json={"text": "# Hi\n\n**there**"})
        assert response.status_code == 200
        assert response.json()["html"] == (
            '<div class="formatted-response">'
            '<h1 class="ai-header h1">Hi</h1>'
            '<p class="ai-paragraph"><strong>there</strong></p>'
            "</div>"
        )

    def test_render_requires_text(self, client: TestClient) -> None:
        response = client.post("/api/render", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"


class TestSessionEndpoints:
    """Tests for session CRUD endpoints."""

    def test_save_and_load(self, client: TestClient) -> None:
        payload = session_payload()

        response = client.post("/api/sessions", json=payload)
        assert response.status_code == 200
        assert response.json() == {"success": True, "id": payload["sessionId"]}

        response = client.get(f"/api/sessions/{payload['sessionId']}", params={"userID": "alice"})
        assert response.status_code == 200
        assert response.json() == {"sessionData": payload["sessionData"]}

    def test_session_id_in_body_wins(self, client: TestClient) -> None:
        payload = session_payload()
        payload["sessionData"]["sessionId"] = "chat_other"

        client.post("/api/sessions", json=payload)

        response = client.get(f"/api/sessions/{payload['sessionId']}", params={"userID": "alice"})
        assert response.json()["sessionData"]["sessionId"] == payload["sessionId"]

    def test_load_missing_session(self, client: TestClient) -> None:
        response = client.get("/api/sessions/chat_missing")
        assert response.status_code == 404
        assert response.json() == {"error": "Session not found"}

    def test_sessions_are_per_user(self, client: TestClient) -> None:
        payload = session_payload()
        client.post("/api/sessions", json=payload)

        response = client.get(f"/api/sessions/{payload['sessionId']}")
        assert response.status_code == 404

    def test_list_sessions(self, client: TestClient) -> None:
        client.post("/api/sessions", json=session_payload("chat_1_a", "First"))
        later = session_payload("chat_2_b", "Second")
        later["sessionData"]["updatedAt"] = "2024-02-01T00:00:00.000Z"
        client.post("/api/sessions", json=later)

        response = client.get("/api/sessions", params={"userID": "alice"})

        assert response.status_code == 200
        listed = response.json()
        assert [item["sessionId"] for item in listed] == ["chat_2_b", "chat_1_a"]
        assert listed[0] == {
            "sessionId": "chat_2_b",
            "name": "Second",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-02-01T00:00:00.000Z",
            "messageCount": 1,
        }

    def test_delete_session(self, client: TestClient) -> None:
        payload = session_payload()
        client.post("/api/sessions", json=payload)

        response = client.delete(f"/api/sessions/{payload['sessionId']}", params={"userID": "alice"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        response = client.get(f"/api/sessions/{payload['sessionId']}", params={"userID": "alice"})
        assert response.status_code == 404

    def test_delete_missing_session_succeeds(self, client: TestClient) -> None:
        response = client.delete("/api/sessions/chat_missing")
        assert response.status_code == 200

    def test_save_requires_session_data(self, client: TestClient) -> None:
        response = client.post("/api/sessions", json={"sessionId": "chat_1_a"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert any("sessionData" in detail["loc"] for detail in body["details"])

    def test_reserved_characters_rejected(self, client: TestClient) -> None:
        response = client.get("/api/sessions/chat*")
        assert response.status_code == 400
        assert "reserved characters" in response.json()["error"]


class TestAppFactory:
    """Tests for application construction and lifecycle."""

    def test_build_store_memory(self) -> None:
        store = build_store(StorageConfig(key_prefix="s:", ttl=60))
        assert isinstance(store.backend, MemoryBackend)
        assert store.prefix == "s:"
        assert store.ttl == 60

    def test_build_store_redis(self) -> None:
        store = build_store(StorageConfig(backend="redis", redis_url="redis://cache:6379/1"))
        assert isinstance(store.backend, RedisBackend)

    def test_docs_can_be_disabled(self, memory_store: SessionStore) -> None:
        client = TestClient(create_app(ServerConfig(enable_docs=False), store=memory_store))
        assert client.get("/docs").status_code == 404

    def test_lifespan_closes_resources(self, memory_store: SessionStore) -> None:
        app = create_app(ServerConfig(), store=memory_store)
        with TestClient(app) as client:
            client.post("/api/sessions", json=session_payload())
        assert asyncio.run(memory_store.backend.keys()) == []

    def test_settings_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHATBOT_SERVER_PORT", "8080")
        monkeypatch.setenv("CHATBOT_SERVER_RENDER__COPY_LABEL", "Copy code")
        monkeypatch.setenv("AZURE_API_ENDPOINT", "https://upstream.test")
        config = ServerConfig()
        assert config.port == 8080
        assert config.render.copy_label == "Copy code"
        assert config.completion.endpoint == "https://upstream.test"
        assert json.loads(config.model_dump_json())["storage"]["backend"] == "memory"
