"""Tests for the chat-completion proxy client."""

import json

import httpx
import pytest

from chatbot.exceptions import CompletionError, MissingAPIConfigError
from chatbot_server.completion import CompletionClient
from chatbot_server.config import CompletionConfig

MESSAGES = [{"role": "user", "content": "hi"}]
REPLY = {"choices": [{"message": {"role": "assistant", "content": "hello"}}]}


class TestCompletionClient:
    """Tests for CompletionClient."""

    @pytest.mark.asyncio
    async def test_forwards_messages_with_key(self, completion_factory) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=REPLY)

        client = completion_factory(handler)
        try:
            assert await client.complete(MESSAGES) == REPLY
        finally:
            await client.close()

        request = seen[0]
        assert request.headers["api-key"] == "test-key"
        assert json.loads(request.content) == {
            "messages": [{"role": "system", "content": "You are a helpful assistant."}, *MESSAGES],
            "max_tokens": 2000,
            "temperature": 0.7,
        }

    @pytest.mark.asyncio
    async def test_missing_config(self) -> None:
        client = CompletionClient(CompletionConfig())
        with pytest.raises(MissingAPIConfigError) as exc_info:
            await client.complete(MESSAGES)
        assert exc_info.value.missing == ["AZURE_API_ENDPOINT", "AZURE_API_KEY"]

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, completion_factory) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=REPLY)

        client = completion_factory(handler)
        assert await client.complete(MESSAGES) == REPLY
        assert calls == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, completion_factory) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(502)

        client = completion_factory(handler)
        with pytest.raises(CompletionError) as exc_info:
            await client.complete(MESSAGES)
        assert exc_info.value.status_code == 502
        assert calls == 3

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self, completion_factory) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(401, json={"error": "bad key"})

        client = completion_factory(handler)
        with pytest.raises(CompletionError) as exc_info:
            await client.complete(MESSAGES)
        assert exc_info.value.status_code == 401
        assert calls == 1

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self, completion_factory) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("connection refused", request=request)

        client = completion_factory(handler)
        with pytest.raises(CompletionError, match="Upstream unreachable"):
            await client.complete(MESSAGES)
        assert calls == 3

    @pytest.mark.asyncio
    async def test_invalid_json(self, completion_factory) -> None:
        client = completion_factory(lambda request: httpx.Response(200, text="not json"))
        with pytest.raises(CompletionError, match="invalid JSON"):
            await client.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, completion_factory) -> None:
        client = completion_factory(lambda request: httpx.Response(200, json=REPLY))
        await client.complete(MESSAGES)
        await client.close()
        await client.close()
        assert client._client is None


class TestBuildPayload:
    """Tests for upstream request bodies."""

    def test_prepends_configured_system_prompt(self) -> None:
        client = CompletionClient(CompletionConfig(system_prompt="Answer in French."))
        payload = client.build_payload(MESSAGES)
        assert payload["messages"][0] == {"role": "system", "content": "Answer in French."}
        assert payload["messages"][1:] == MESSAGES

    def test_keeps_existing_system_message(self) -> None:
        client = CompletionClient(CompletionConfig(system_prompt="Answer in French."))
        messages = [{"role": "system", "content": "Be brief."}, *MESSAGES]
        assert client.build_payload(messages)["messages"] == messages

    def test_empty_conversation_gets_system_prompt(self) -> None:
        client = CompletionClient(CompletionConfig())
        assert client.build_payload([])["messages"] == [
            {"role": "system", "content": "You are a helpful assistant."}
        ]

    def test_system_prompt_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AZURE_API_SYSTEM_PROMPT", "You are terse.")
        payload = CompletionClient(CompletionConfig()).build_payload(MESSAGES)
        assert payload["messages"][0]["content"] == "You are terse."
