"""Testes do repositório de sessões em memória."""

from __future__ import annotations

from interlight_chat.domain.session import Session
from interlight_chat.infra.session_store_memory import InMemorySessionRepository


class TestInMemorySessionRepository:
    def test_get_missing_returns_none(self) -> None:
        assert InMemorySessionRepository().get("nada") is None

    def test_put_and_get(self) -> None:
        repository = InMemorySessionRepository()
        session = Session(session_key="loja-1")

        repository.put(session)

        assert repository.get("loja-1") is session
        assert len(repository) == 1

    def test_put_replaces_same_key(self) -> None:
        repository = InMemorySessionRepository()
        repository.put(Session(session_key="k"))
        replacement = Session(session_key="k", context={"linha": "Flat"})

        repository.put(replacement)

        assert repository.get("k") is replacement
        assert len(repository) == 1
