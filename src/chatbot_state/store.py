"""Per-user chat session storage."""

import logging

from pydantic import ValidationError

from chatbot.exceptions import InvalidArgumentError, InvalidSessionError, SessionNotFoundError
from chatbot_state.backends.base import StateBackend
from chatbot_state.models import ChatSession, SessionSummary

logger = logging.getLogger(__name__)

DEFAULT_USER = "anonymous"

# Characters with meaning in keys or key patterns.
_RESERVED_ID_CHARS = frozenset("*?[]\\:")


def _check_id(argument: str, value: str) -> None:
    if not value:
        raise InvalidArgumentError(argument, "must not be empty")
    if _RESERVED_ID_CHARS.intersection(value):
        raise InvalidArgumentError(argument, "contains reserved characters")


class SessionStore:
    """Stores chat sessions as JSON documents partitioned by user.

    Keys have the form ``<prefix><user_id>:<session_id>``, so one user's
    sessions can be listed without touching anybody else's.
    """

    def __init__(
        self,
        backend: StateBackend,
        prefix: str = "session:",
        ttl: int | None = None,
    ):
        """Initialize session store.

        Args:
            backend: State backend implementation (memory/Redis)
            prefix: Key prefix for namespacing sessions (default: "session:")
            ttl: Optional time-to-live in seconds applied on every save
        """
        self.backend = backend
        self.prefix = prefix
        self.ttl = ttl

    def _make_key(self, session_id: str, user_id: str) -> str:
        _check_id("userID", user_id)
        _check_id("sessionId", session_id)
        return f"{self.prefix}{user_id}:{session_id}"

    def _user_pattern(self, user_id: str) -> str:
        _check_id("userID", user_id)
        return f"{self.prefix}{user_id}:*"

    def _parse(self, key: str, value: str) -> ChatSession:
        try:
            return ChatSession.model_validate_json(value)
        except ValidationError as e:
            raise InvalidSessionError(f"stored document {key} is malformed") from e

    async def save_session(self, session: ChatSession, user_id: str = DEFAULT_USER) -> str:
        """Insert or replace a session.

        Returns:
            The stored session id
        """
        key = self._make_key(session.session_id, user_id)
        await self.backend.set(key, session.model_dump_json(by_alias=True), ttl=self.ttl)
        logger.info("Session saved", extra={"session_id": session.session_id, "user_id": user_id})
        return session.session_id

    async def load_session(self, session_id: str, user_id: str = DEFAULT_USER) -> ChatSession | None:
        """Retrieve a session, or None if it is not stored."""
        key = self._make_key(session_id, user_id)
        value = await self.backend.get(key)
        if value is None:
            return None
        return self._parse(key, value)

    async def require_session(self, session_id: str, user_id: str = DEFAULT_USER) -> ChatSession:
        """Retrieve a session that must exist.

        Raises:
            SessionNotFoundError: If no session is stored under the id
        """
        session = await self.load_session(session_id, user_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def delete_session(self, session_id: str, user_id: str = DEFAULT_USER) -> bool:
        """Delete a session.

        Deleting a missing session is not an error.

        Returns:
            True if a session was removed, False if none was stored
        """
        deleted = await self.backend.delete(self._make_key(session_id, user_id))
        if deleted:
            logger.info("Session deleted", extra={"session_id": session_id, "user_id": user_id})
        return deleted

    async def list_sessions(self, user_id: str = DEFAULT_USER) -> list[SessionSummary]:
        """List a user's sessions, most recently updated first."""
        summaries = []
        for key in await self.backend.keys(self._user_pattern(user_id)):
            value = await self.backend.get(key)
            if value is None:
                continue
            try:
                summaries.append(self._parse(key, value).summary())
            except InvalidSessionError:
                logger.warning("Skipping malformed session document", extra={"key": key})
        summaries.sort(key=lambda summary: summary.updated_at, reverse=True)
        return summaries
