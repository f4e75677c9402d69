"""API routes: health, chat proxy, rendering and session CRUD."""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Query, Request

from chatbot.exceptions import InvalidArgumentError, SessionNotFoundError
from chatbot.markdown import render_markdown
from chatbot_server.completion import CompletionClient
from chatbot_server.schemas import (
    ChatRequest,
    RenderRequest,
    RenderResponse,
    SaveSessionRequest,
    SaveSessionResponse,
)
from chatbot_state.store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _store(request: Request) -> SessionStore:
    return request.app.state.store


def _completion(request: Request) -> CompletionClient:
    return request.app.state.completion


def _user(request: Request, user_id: str | None) -> str:
    return user_id or request.app.state.config.storage.default_user


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", tags=["operational"])
async def health_check() -> dict[str, str]:
    """Liveness check used by the browser client before first use."""
    return {"status": "healthy", "timestamp": _timestamp()}


@router.get("/config", tags=["operational"])
async def config_status() -> dict[str, str]:
    """Confirm configuration came from the environment without exposing it."""
    return {
        "status": "Config loaded from environment variables",
        "timestamp": _timestamp(),
    }


@router.post("/chat", tags=["chat"])
async def chat(body: ChatRequest, request: Request) -> dict[str, Any]:
    """Proxy a conversation to the chat-completion API."""
    if not isinstance(body.messages, list):
        raise InvalidArgumentError("messages", "Messages array is required")
    logger.info("Chat request", extra={"messages": len(body.messages)})
    return await _completion(request).complete(body.messages)


@router.post("/render", tags=["chat"], response_model=RenderResponse)
async def render(body: RenderRequest, request: Request) -> RenderResponse:
    """Render assistant text to display markup."""
    options = request.app.state.config.render
    return RenderResponse(html=render_markdown(body.text, options))


@router.post("/sessions", tags=["sessions"], response_model=SaveSessionResponse)
async def save_session(body: SaveSessionRequest, request: Request) -> SaveSessionResponse:
    """Insert or replace a session."""
    session = body.session_data.model_copy(update={"session_id": body.session_id})
    session_id = await _store(request).save_session(session, _user(request, body.user_id))
    return SaveSessionResponse(id=session_id)


@router.get("/sessions/{session_id}", tags=["sessions"])
async def load_session(
    session_id: str,
    request: Request,
    user_id: str | None = Query(default=None, alias="userID"),
) -> dict[str, Any]:
    """Return one session as ``{"sessionData": ...}``."""
    session = await _store(request).load_session(session_id, _user(request, user_id))
    if session is None:
        raise SessionNotFoundError(session_id)
    return {"sessionData": session.to_document()}


@router.delete("/sessions/{session_id}", tags=["sessions"])
async def delete_session(
    session_id: str,
    request: Request,
    user_id: str | None = Query(default=None, alias="userID"),
) -> dict[str, bool]:
    """Delete a session; deleting a missing session also succeeds."""
    await _store(request).delete_session(session_id, _user(request, user_id))
    return {"success": True}


@router.get("/sessions", tags=["sessions"])
async def list_sessions(
    request: Request,
    user_id: str | None = Query(default=None, alias="userID"),
) -> list[dict[str, Any]]:
    """List the user's sessions, most recently updated first."""
    summaries = await _store(request).list_sessions(_user(request, user_id))
    return [summary.model_dump(by_alias=True) for summary in summaries]
