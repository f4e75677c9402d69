"""chatbot state - chat session persistence.

This package provides:
- ChatSession / ChatMessage models with the browser client's JSON shape
- StateBackend protocol with in-memory and Redis implementations
- SessionStore for per-user session CRUD
"""

__version__ = "0.1.0"

from chatbot_state.backends import (
    MemoryBackend,
    RedisBackend,
    RedisConfig,
    StateBackend,
    StateConfig,
)
from chatbot_state.models import ChatMessage, ChatSession, SessionSummary
from chatbot_state.store import SessionStore

__all__ = [
    # Backends
    "StateBackend",
    "StateConfig",
    "MemoryBackend",
    "RedisBackend",
    "RedisConfig",
    # Models
    "ChatMessage",
    "ChatSession",
    "SessionSummary",
    # Session management
    "SessionStore",
]
