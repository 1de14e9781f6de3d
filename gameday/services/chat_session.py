"""Append-only chat history and an in-process session store."""
from __future__ import annotations

import logging
import threading
from uuid import UUID, uuid4

from gameday.models.domain import ChatMessage, ChatRole


logger = logging.getLogger(__name__)

GREETING = (
    "Ask me anything about readiness, recovery, or pre-game priorities. "
    "I will keep guidance time-aware."
)


class ChatSession:
    """Ordered message log. Messages are only ever appended."""

    def __init__(self, session_id: UUID | None = None, greeting: str | None = GREETING) -> None:
        self.id = session_id or uuid4()
        self._messages: list[ChatMessage] = []
        if greeting:
            self.append(ChatRole.COACH, greeting)

    def append(self, role: ChatRole, text: str) -> ChatMessage:
        message = ChatMessage(role=role, text=text)
        self._messages.append(message)
        return message

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def recent(self, limit: int = 6) -> tuple[ChatMessage, ...]:
        """Return the last ``limit`` messages without touching the log."""
        if limit <= 0:
            return ()
        return tuple(self._messages[-limit:])

    def __len__(self) -> int:
        return len(self._messages)


class ChatSessionStore:
    """Process-local registry of chat sessions (not persisted)."""

    def __init__(self, max_sessions: int = 500) -> None:
        self._sessions: dict[UUID, ChatSession] = {}
        self._lock = threading.Lock()
        self._max_sessions = max_sessions

    def create(self) -> ChatSession:
        session = ChatSession()
        with self._lock:
            # FIFO eviction once full
            if len(self._sessions) >= self._max_sessions:
                oldest = next(iter(self._sessions))
                del self._sessions[oldest]
                logger.debug("Session store full - evicted %s", oldest)
            self._sessions[session.id] = session
        logger.info("Created chat session %s", session.id)
        return session

    def get(self, session_id: UUID) -> ChatSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
