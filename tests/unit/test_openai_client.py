"""Testes do OpenAIOracle com o SDK mockado."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError, APIError, APITimeoutError

from interlight_chat.ai.openai_client import OpenAIOracle
from interlight_chat.domain.errors import OracleUnavailableError

_REQUEST = httpx.Request("POST", "https://api.openai.test/v1/chat/completions")


def _response(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(create: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = create
    return client


class TestOpenAIOracleComplete:
    @pytest.mark.asyncio
    async def test_returns_stripped_content(self) -> None:
        create = AsyncMock(return_value=_response('  {"intencao": "THEORY"}  '))
        oracle = OpenAIOracle(model="gpt-4o", client=_client(create))

        result = await oracle.complete(
            "system", [{"role": "user", "content": "oi"}], purpose="intent_router"
        )

        assert result == '{"intencao": "THEORY"}'

    @pytest.mark.asyncio
    async def test_sends_system_first_and_json_mode(self) -> None:
        create = AsyncMock(return_value=_response("{}"))
        oracle = OpenAIOracle(model="gpt-4o", client=_client(create))

        await oracle.complete(
            "regras",
            [{"role": "user", "content": "pergunta"}],
            purpose="draft",
            temperature=0.3,
            json_output=True,
        )

        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"][0] == {"role": "system", "content": "regras"}
        assert kwargs["messages"][1] == {"role": "user", "content": "pergunta"}
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_plain_text_mode_has_no_response_format(self) -> None:
        create = AsyncMock(return_value=_response("SELECT 1"))
        oracle = OpenAIOracle(client=_client(create))

        await oracle.complete("s", [], purpose="sql_level_1")

        assert "response_format" not in create.call_args.kwargs

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   \n"])
    async def test_empty_content_is_oracle_failure(self, content: str | None) -> None:
        oracle = OpenAIOracle(client=_client(AsyncMock(return_value=_response(content))))

        with pytest.raises(OracleUnavailableError, match="sql_level_1"):
            await oracle.complete("s", [], purpose="sql_level_1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            APITimeoutError(request=_REQUEST),
            APIConnectionError(request=_REQUEST),
            APIError("falha", request=_REQUEST, body=None),
        ],
    )
    async def test_api_failures_become_oracle_unavailable(self, error: Exception) -> None:
        oracle = OpenAIOracle(client=_client(AsyncMock(side_effect=error)))

        with pytest.raises(OracleUnavailableError) as exc_info:
            await oracle.complete("s", [], purpose="intent_router")

        assert exc_info.value.__cause__ is error
