"""Protocolo do catálogo (somente leitura)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from interlight_chat.domain.catalog import Record


class CatalogStore(ABC):
    """Executa uma consulta de leitura sobre a relação fixa do catálogo.

    Raises:
        StoreExecutionError: erro de sintaxe/semântica da consulta
        StoreUnavailableError: conexão ou timeout
    """

    @abstractmethod
    async def fetch(self, sql: str) -> tuple[Record, ...]: ...

    async def close(self) -> None:
        """Libera recursos (pool de conexões)."""
        return None
