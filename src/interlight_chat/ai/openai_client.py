"""Cliente OpenAI usado como oráculo de raciocínio.

Fornece abstração sobre a API OpenAI para todas as etapas do pipeline:
- Roteamento de intenção (JSON, temperatura zero)
- Síntese da especificação de busca
- Geração de SQL por nível da escada
- Redação e auditoria da resposta

Retry e timeout ficam a cargo do SDK (max_retries/timeout); esgotadas as
tentativas, a falha vira OracleUnavailableError.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)

from interlight_chat.domain.errors import OracleUnavailableError
from interlight_chat.domain.protocols.oracle import ReasoningOracle
from interlight_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

_UNAVAILABLE_ERRORS = (APITimeoutError, APIConnectionError, RateLimitError, InternalServerError)


class OpenAIOracle(ReasoningOracle):
    """Oráculo baseado em chat.completions.

    Responsabilidades:
    - Inicializar cliente OpenAI com timeout e retries configurados
    - Enviar system prompt + histórico
    - Converter falhas de disponibilidade em OracleUnavailableError
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=max_retries,
        )
        self._model = model

    async def complete(
        self,
        system: str,
        messages: Sequence[dict[str, str]],
        *,
        purpose: str,
        temperature: float = 0.0,
        json_output: bool = False,
    ) -> str:
        """Executa uma chamada e retorna o texto bruto (não confiável).

        Raises:
            OracleUnavailableError: falha da API ou resposta vazia
        """
        kwargs: dict[str, object] = {}
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "system", "content": system}, *messages],
                temperature=temperature,
                **kwargs,
            )
        except _UNAVAILABLE_ERRORS as e:
            logger.error(
                "oracle_unavailable",
                extra={"purpose": purpose, "error_type": type(e).__name__},
            )
            raise OracleUnavailableError(f"Oráculo indisponível ({purpose})") from e
        except APIError as e:
            logger.error(
                "oracle_api_error",
                extra={"purpose": purpose, "error_type": type(e).__name__},
            )
            raise OracleUnavailableError(f"Falha na API do oráculo ({purpose})") from e

        content = (response.choices[0].message.content or "").strip()
        if not content:
            logger.error("oracle_empty_response", extra={"purpose": purpose})
            raise OracleUnavailableError(f"Resposta vazia do oráculo ({purpose})")
        logger.debug(
            "oracle_completed",
            extra={"purpose": purpose, "response_len": len(content)},
        )
        return content
