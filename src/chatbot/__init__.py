"""chatbot - browser chat client backend.

Renders assistant replies from a small markdown subset into display markup.
"""

from chatbot.exceptions import (
    ChatbotError,
    CompletionError,
    ConfigurationError,
    InvalidArgumentError,
    InvalidSessionError,
    MissingAPIConfigError,
    SessionError,
    SessionNotFoundError,
)
from chatbot.markdown import RenderOptions, render_markdown

__version__ = "0.1.0"

__all__ = [
    # Renderer
    "render_markdown",
    "RenderOptions",
    # Base exception
    "ChatbotError",
    # Configuration
    "ConfigurationError",
    "MissingAPIConfigError",
    # Sessions
    "SessionError",
    "SessionNotFoundError",
    "InvalidSessionError",
    # Completion
    "CompletionError",
    # Validation
    "InvalidArgumentError",
]
