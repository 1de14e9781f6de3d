"""API endpoints for coaching chat sessions."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request

from gameday.dependencies import extract_locale, get_game_day_coach, get_session_store
from gameday.models.schemas import ChatMessageRequest, ChatReplyResponse, ChatSessionResponse
from gameday.services.chat_session import ChatSession, ChatSessionStore
from gameday.services.game_day import GameDayCoach


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def _get_session_or_404(store: ChatSessionStore, session_id: UUID) -> ChatSession:
    session = store.get(session_id)
    if session is None:
        logger.warning("Unknown chat session requested: %s", session_id)
        raise HTTPException(status_code=404, detail="Chat session not found")
    return session


@router.post("/sessions", response_model=ChatSessionResponse, status_code=201)
async def create_session(store: ChatSessionStore = Depends(get_session_store)) -> ChatSessionResponse:
    session = store.create()
    return ChatSessionResponse(session_id=session.id, messages=list(session.messages))


@router.get("/sessions/{session_id}", response_model=ChatSessionResponse)
async def get_session(
    session_id: UUID,
    store: ChatSessionStore = Depends(get_session_store),
) -> ChatSessionResponse:
    session = _get_session_or_404(store, session_id)
    return ChatSessionResponse(session_id=session.id, messages=list(session.messages))


@router.post("/sessions/{session_id}/messages", response_model=ChatReplyResponse)
async def send_message(
    request: Request,
    session_id: UUID,
    payload: ChatMessageRequest,
    lang: str | None = None,
    store: ChatSessionStore = Depends(get_session_store),
    coach: GameDayCoach = Depends(get_game_day_coach),
) -> ChatReplyResponse:
    """
    Send an athlete message and receive the coach's reply.

    The reply always arrives: generative failures fall back to the
    rule-based responder.
    """
    session = _get_session_or_404(store, session_id)
    if not payload.text.strip():
        raise HTTPException(status_code=400, detail="Message text is empty")

    locale = extract_locale(request, lang)
    reply = await coach.send_chat_message(
        session,
        payload.text,
        payload.game.to_game(),
        payload.metrics.to_metrics(),
        locale=locale,
    )
    return ChatReplyResponse(session_id=session.id, reply=reply, messages=list(session.messages))
