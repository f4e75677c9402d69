"""chatbot exception hierarchy.

Provides a unified exception hierarchy for the session store, the
chat-completion proxy and the HTTP layer. The markdown renderer never
raises: malformed input degrades to literal text instead.

Usage:
    from chatbot.exceptions import SessionNotFoundError, CompletionError

    try:
        session = await store.require_session(session_id, user_id)
    except SessionNotFoundError as e:
        print(f"Session not found: {e.session_id}")
    except ChatbotError as e:
        print(f"chatbot error: {e}")
"""


class ChatbotError(Exception):
    """Base exception for all chatbot errors.

    All chatbot-specific exceptions inherit from this class, allowing
    callers to catch them with a single except clause.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# Configuration Errors


class ConfigurationError(ChatbotError):
    """Error in chatbot configuration.

    Raised when settings loaded from the environment are invalid or
    incompatible.
    """

    pass


class MissingAPIConfigError(ConfigurationError):
    """Chat-completion endpoint or key not configured.

    Raised at request time, so the server can start (and serve sessions)
    without completion credentials.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            "Missing chat-completion configuration: " + ", ".join(missing)
        )


# Session Errors


class SessionError(ChatbotError):
    """Base class for session-related errors."""

    pass


class SessionNotFoundError(SessionError):
    """Session not found.

    Raised when a session ID doesn't match any stored session for the user.
    """

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class InvalidSessionError(SessionError):
    """Stored or submitted session data is malformed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid session data: {reason}")


# Completion Errors


class CompletionError(ChatbotError):
    """Chat-completion request failed.

    Raised when the upstream API returns an error status or cannot be
    reached after all retries.
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        message = "Chat completion failed"
        if status_code is not None:
            message += f" with status {status_code}"
        super().__init__(f"{message}: {reason}")


# Validation Errors


class InvalidArgumentError(ChatbotError):
    """Invalid request argument.

    Raised when a CLI argument or request field is invalid.
    """

    def __init__(self, argument: str, reason: str) -> None:
        self.argument = argument
        self.reason = reason
        super().__init__(f"Invalid argument '{argument}': {reason}")
