"""chatbot server - FastAPI backend for the browser chat client.

This package provides:
- A chat-completion proxy that keeps the API key on the server
- Session CRUD endpoints backed by chatbot_state
- A render endpoint exposing the markdown renderer
- Middleware for logging and JSON error responses
- Uvicorn integration for the CLI
"""

__version__ = "0.1.0"

from chatbot_server.app import build_store, create_app
from chatbot_server.completion import CompletionClient
from chatbot_server.config import CompletionConfig, CORSConfig, ServerConfig, StorageConfig
from chatbot_server.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    error_response,
    setup_middleware,
)
from chatbot_server.run import configure_logging, run_server

__all__ = [
    # App factory
    "create_app",
    "build_store",
    # Configuration
    "ServerConfig",
    "CORSConfig",
    "CompletionConfig",
    "StorageConfig",
    # Upstream
    "CompletionClient",
    # Middleware
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "error_response",
    "setup_middleware",
    # Server runner
    "run_server",
    "configure_logging",
]
