"""Request and response bodies for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from chatbot_state.models import ChatSession


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``.

    ``messages`` is optional at parse time so a missing array is reported
    with the same message as a wrongly typed one.
    """

    messages: Any = None


class RenderRequest(BaseModel):
    text: str


class RenderResponse(BaseModel):
    html: str


class SaveSessionRequest(BaseModel):
    """Body of ``POST /api/sessions``."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    session_data: ChatSession = Field(alias="sessionData")
    user_id: str | None = Field(default=None, alias="userID")


class SaveSessionResponse(BaseModel):
    success: bool = True
    id: str
