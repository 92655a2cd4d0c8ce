"""Implementação de SessionRepository em memória.

Sessões vivem enquanto o processo viver (sem expiração nem persistência).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from interlight_chat.domain.protocols.session_store import SessionRepository
from interlight_chat.observability.logging import get_logger, redact_session_key

if TYPE_CHECKING:
    from interlight_chat.domain.session import Session

logger: logging.Logger = get_logger(__name__)


class InMemorySessionRepository(SessionRepository):
    """Armazenamento em memória (um processo, sem restart)."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, session_key: str) -> Session | None:
        session = self._sessions.get(session_key)
        if session is None:
            logger.debug(
                "Session not found (in-memory)",
                extra={"session_key": redact_session_key(session_key)},
            )
        return session

    def put(self, session: Session) -> None:
        self._sessions[session.session_key] = session
        logger.debug(
            "Session saved (in-memory)",
            extra={
                "session_key": redact_session_key(session.session_key),
                "history_len": len(session.history),
            },
        )

    def __len__(self) -> int:
        return len(self._sessions)
