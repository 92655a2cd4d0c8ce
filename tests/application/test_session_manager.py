"""Testes do SessionManager (get_or_create, merge e append)."""

from __future__ import annotations

import asyncio

import pytest

from interlight_chat.application.session_manager import SessionManager
from interlight_chat.domain.enums import TurnRole
from interlight_chat.domain.session import Turn
from interlight_chat.infra.session_store_memory import InMemorySessionRepository


@pytest.fixture()
def repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


class TestGetOrCreate:
    def test_creates_once(self, repository: InMemorySessionRepository) -> None:
        manager = SessionManager(repository)

        first = manager.get_or_create("loja-1")
        second = manager.get_or_create("loja-1")

        assert first is second
        assert len(repository) == 1

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_missing_key_uses_default(
        self, repository: InMemorySessionRepository, key: str | None
    ) -> None:
        manager = SessionManager(repository, default_key="padrao")

        assert manager.get_or_create(key).session_key == "padrao"
        assert manager.resolve_key(key) == "padrao"


class TestMutations:
    @pytest.mark.asyncio
    async def test_merge_context_returns_copy(self, repository) -> None:
        manager = SessionManager(repository)

        merged = await manager.merge_context("s", {"cor": "preto"})
        merged["cor"] = "alterado"

        assert manager.get_or_create("s").context["cor"] == "preto"

    @pytest.mark.asyncio
    async def test_append_turns(self, repository) -> None:
        manager = SessionManager(repository)

        await manager.append_turns(
            "s",
            [Turn(role=TurnRole.USER, text="oi"), Turn(role=TurnRole.ASSISTANT, text="olá")],
        )

        history = manager.get_or_create("s").history
        assert [t.role for t in history] == [TurnRole.USER, TurnRole.ASSISTANT]

    @pytest.mark.asyncio
    async def test_concurrent_appends_keep_all_turns(self, repository) -> None:
        manager = SessionManager(repository)

        await asyncio.gather(
            *(
                manager.append_turns("s", [Turn(role=TurnRole.USER, text=str(i))])
                for i in range(20)
            )
        )

        assert len(manager.get_or_create("s").history) == 20

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, repository) -> None:
        manager = SessionManager(repository)

        await manager.merge_context("a", {"linha": "Flat"})

        assert manager.get_or_create("b").context["linha"] is None


@pytest.mark.asyncio
async def test_one_lock_per_key_reused_across_mutations(repository) -> None:
    manager = SessionManager(repository)

    await manager.merge_context("loja-1", {"linha": "Flat"})
    await manager.append_turns("loja-1", [Turn(role=TurnRole.USER, text="oi")])
    lock = manager._lock_for("loja-1")
    await manager.merge_context("loja-2", {})

    assert manager._lock_for("loja-1") is lock
    assert sorted(manager._locks) == ["loja-1", "loja-2"]
    assert not lock.locked()
