"""FastAPI dependencies shared by the routers."""
from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from gameday.services.chat_session import ChatSessionStore
from gameday.services.game_day import GameDayCoach


@lru_cache()
def get_game_day_coach() -> GameDayCoach:
    return GameDayCoach()


@lru_cache()
def get_session_store() -> ChatSessionStore:
    return ChatSessionStore()


def extract_locale(request: Request, lang: str | None = None) -> str | None:
    """Determine requested locale from query parameter or Accept-Language header."""

    if lang:
        return lang.strip()

    accept_language = request.headers.get("accept-language")
    if not accept_language:
        return None

    first = accept_language.split(",")[0].strip()
    if not first:
        return None

    return first.split(";")[0].strip()
