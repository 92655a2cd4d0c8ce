"""Protocolo do oráculo de raciocínio (LLM)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class ReasoningOracle(ABC):
    """Capacidade stateless de requisição/resposta.

    A saída é sempre texto não confiável: quem chama valida antes de usar.
    Falhas de disponibilidade devem virar OracleUnavailableError.
    """

    @abstractmethod
    async def complete(
        self,
        system: str,
        messages: Sequence[dict[str, str]],
        *,
        purpose: str,
        temperature: float = 0.0,
        json_output: bool = False,
    ) -> str: ...
