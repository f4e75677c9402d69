"""State backend implementations for process memory and Redis."""

from chatbot_state.backends.base import StateBackend, StateConfig
from chatbot_state.backends.memory import MemoryBackend
from chatbot_state.backends.redis import RedisBackend, RedisConfig

__all__ = [
    "StateBackend",
    "StateConfig",
    "MemoryBackend",
    "RedisBackend",
    "RedisConfig",
]
