"""SessionManager: ciclo de vida de sessão (get_or_create, merge, append).

Centraliza as mutações de sessão feitas pelo pipeline. Cada mutação roda sob
um asyncio.Lock por chave; nenhum lock é mantido durante chamadas ao oráculo
ou ao catálogo.

O mapa de locks (`_locks`) ganha uma entrada por chave e não é podado, assim
como as sessões do repositório em memória: ambos crescem com o número de
chaves distintas durante a vida do processo.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from interlight_chat.domain.protocols.session_store import SessionRepository
from interlight_chat.domain.session import Context, Session, Turn, merge_context
from interlight_chat.observability.logging import get_logger, redact_session_key


class SessionManager:
    """Gerencia sessões sobre um SessionRepository injetado."""

    def __init__(
        self,
        repository: SessionRepository,
        default_key: str = "default",
        logger: logging.Logger | None = None,
    ) -> None:
        self._repository = repository
        self._default_key = default_key
        self._logger = logger or get_logger(__name__)
        self._locks: dict[str, asyncio.Lock] = {}

    def resolve_key(self, session_key: str | None) -> str:
        """Chave informada pelo chamador ou a chave padrão."""
        key = (session_key or "").strip()
        return key or self._default_key

    def _lock_for(self, session_key: str) -> asyncio.Lock:
        lock = self._locks.get(session_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_key] = lock
        return lock

    def get_or_create(self, session_key: str | None) -> Session:
        """Recupera a sessão ou cria uma nova (histórico vazio, contexto nulo)."""
        key = self.resolve_key(session_key)
        session = self._repository.get(key)
        if session is not None:
            return session

        session = Session(session_key=key)
        self._repository.put(session)
        self._logger.info(
            "New session created",
            extra={"session_key": redact_session_key(key), "default_key": key == self._default_key},
        )
        return session

    async def merge_context(
        self, session_key: str | None, delta: Mapping[str, str | None]
    ) -> Context:
        """Aplica o delta do roteador sobre o contexto (last-write-wins)."""
        key = self.resolve_key(session_key)
        async with self._lock_for(key):
            session = self.get_or_create(key)
            session.context = merge_context(session.context, delta)
            session.updated_at = datetime.now(tz=UTC)
            self._repository.put(session)
            self._logger.debug(
                "session_context_merged",
                extra={
                    "session_key": redact_session_key(key),
                    "delta_keys": sorted(delta),
                },
            )
            return dict(session.context)

    async def append_turns(self, session_key: str | None, turns: Sequence[Turn]) -> None:
        """Anexa turnos ao histórico (append-only)."""
        key = self.resolve_key(session_key)
        async with self._lock_for(key):
            session = self.get_or_create(key)
            session.history.extend(turns)
            session.updated_at = datetime.now(tz=UTC)
            self._repository.put(session)
