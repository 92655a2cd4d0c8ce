"""Enums de domínio para intenções, papéis de turno e desfechos da busca."""

from __future__ import annotations

from enum import StrEnum


class Intent(StrEnum):
    """Intenções possíveis de uma pergunta do cliente."""

    THEORY = "THEORY"
    PRODUCT_EXACT = "PRODUCT_EXACT"
    PRODUCT_CONSULTATIVE = "PRODUCT_CONSULTATIVE"

    @property
    def needs_retrieval(self) -> bool:
        """True quando a intenção exige consulta ao catálogo."""
        return self is not Intent.THEORY


# Rótulos alternativos aceitos do oráculo (variantes binárias e PT-BR)
INTENT_ALIASES: dict[str, Intent] = {
    "THEORY": Intent.THEORY,
    "TEORIA": Intent.THEORY,
    "PRODUCT_EXACT": Intent.PRODUCT_EXACT,
    "PRODUTO_EXATO": Intent.PRODUCT_EXACT,
    "PRODUCT_CONSULTATIVE": Intent.PRODUCT_CONSULTATIVE,
    "PRODUTO_CONSULTIVO": Intent.PRODUCT_CONSULTATIVE,
    "PRODUCT": Intent.PRODUCT_CONSULTATIVE,
    "PRODUTO": Intent.PRODUCT_CONSULTATIVE,
}


class TurnRole(StrEnum):
    """Autor de um turno no histórico da sessão."""

    USER = "user"
    ASSISTANT = "assistant"


class LevelOutcome(StrEnum):
    """Resultado de um nível da escada de busca."""

    SUCCESS = "SUCCESS"
    CONTINUE = "CONTINUE"
    ABORT = "ABORT"


class EscalationStatus(StrEnum):
    """Desfechos terminais do escalonamento."""

    FOUND = "FOUND"
    EXHAUSTED = "EXHAUSTED"
    ABORTED = "ABORTED"
    SKIPPED = "SKIPPED"
