"""Protocolo de domínio para o repositório de sessões."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from interlight_chat.domain.session import Session


class SessionRepository(ABC):
    """Contrato mínimo para armazenamento de Session (get/put).

    Permite trocar o armazenamento em memória por um externo sem alterar o pipeline.
    """

    @abstractmethod
    def get(self, session_key: str) -> Session | None: ...

    @abstractmethod
    def put(self, session: Session) -> None: ...
