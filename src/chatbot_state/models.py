"""Chat session models.

Field names serialize in camelCase so stored documents and API payloads keep
the shape the browser client sends and expects.
"""

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SESSION_NAME = "New Chat"
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."

_ID_ALPHABET = string.digits + string.ascii_lowercase


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def generate_session_id() -> str:
    """Generate a session id of the form ``chat_<epoch-ms>_<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"chat_{int(time.time() * 1000)}_{suffix}"


class ChatMessage(BaseModel):
    """One user turn and the assistant reply to it."""

    model_config = ConfigDict(populate_by_name=True)

    user: str
    system: str | None = None
    timestamp: str = Field(default_factory=now_iso)


class ChatSession(BaseModel):
    """A named conversation made of ordered messages.

    Every mutating method bumps ``updated_at``.
    """

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(default_factory=generate_session_id, alias="sessionId")
    name: str = DEFAULT_SESSION_NAME
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: str = Field(default_factory=now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=now_iso, alias="updatedAt")

    def touch(self) -> None:
        self.updated_at = now_iso()

    def rename(self, name: str | None) -> None:
        """Rename the session; a blank name restores the default."""
        self.name = (name or "").strip() or DEFAULT_SESSION_NAME
        self.touch()

    def add_message(self, user: str, system: str | None = None) -> ChatMessage:
        """Append a message and return it."""
        message = ChatMessage(user=user, system=system)
        self.messages.append(message)
        self.touch()
        return message

    def update_last_message(self, system: str) -> ChatMessage | None:
        """Attach the assistant reply to the most recent message.

        Returns:
            The updated message, or None if the session has no messages
        """
        if not self.messages:
            return None
        last = self.messages[-1]
        last.system = system
        self.touch()
        return last

    def conversation_history(
        self,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> list[dict[str, str]]:
        """Build the chat-completion message list for this session.

        Starts with the system prompt, followed by each user turn and its
        assistant reply. Empty sides of a message are skipped.
        """
        history = [{"role": "system", "content": system_prompt}]
        for message in self.messages:
            if message.user:
                history.append({"role": "user", "content": message.user})
            if message.system:
                history.append({"role": "assistant", "content": message.system})
        return history

    def to_document(self) -> dict[str, Any]:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True)

    def summary(self) -> "SessionSummary":
        return SessionSummary(
            session_id=self.session_id,
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
            message_count=len(self.messages),
        )


class SessionSummary(BaseModel):
    """Listing entry for a stored session."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    name: str
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
    message_count: int = Field(default=0, alias="messageCount")
