"""Shared pytest fixtures for chatbot tests.

Provides renderer options, in-memory session storage and a stubbed
chat-completion upstream.
"""

import httpx
import pytest

from chatbot.markdown import RenderOptions
from chatbot_server.completion import CompletionClient
from chatbot_server.config import CompletionConfig
from chatbot_state import ChatSession, MemoryBackend, SessionStore

UPSTREAM_URL = "https://upstream.test/chat/completions"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep host environment and ``.env`` files out of settings under test."""
    monkeypatch.chdir(tmp_path)
    for name in ("AZURE_API_ENDPOINT", "AZURE_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def options() -> RenderOptions:
    """Renderer options with the defaults."""
    return RenderOptions()


@pytest.fixture
def store() -> SessionStore:
    """Session store over a fresh in-memory backend."""
    return SessionStore(MemoryBackend())


@pytest.fixture
def session() -> ChatSession:
    """A session with one answered message."""
    session = ChatSession(session_id="chat_1700000000000_abc123xyz", name="Planning")
    session.add_message("What is 2+2?", "**4**")
    return session


@pytest.fixture
def completion_config() -> CompletionConfig:
    """Completion settings pointing at the stub upstream with no retry delay."""
    return CompletionConfig(
        endpoint=UPSTREAM_URL,
        key="test-key",
        max_retries=3,
        retry_backoff=0,
    )


@pytest.fixture
def completion_factory(completion_config: CompletionConfig):
    """Build completion clients whose upstream is a request handler."""

    def _make(handler, config: CompletionConfig | None = None) -> CompletionClient:
        return CompletionClient(config or completion_config, transport=httpx.MockTransport(handler))

    return _make
