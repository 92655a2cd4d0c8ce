"""Redação da resposta (rascunho) a partir dos registros encontrados.

Regras aplicadas depois da resposta do oráculo:
- Com registros: a tabela vem sempre de render_record_table (linhas 'Ref:'
  escritas pelo oráculo são descartadas)
- PRODUCT_EXACT: o texto começa pela tabela (preâmbulo removido)
- Demais intenções: no máximo 2 frases de introdução antes da tabela
- Sem registros: nenhuma linha de produto pode aparecer
- Oráculo indisponível com registros: rascunho determinístico (tabela)
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from interlight_chat.ai import openai_prompts
from interlight_chat.ai.knowledge_loader import KnowledgeSource
from interlight_chat.ai.openai_parser import parse_draft_response
from interlight_chat.domain.catalog import (
    Record,
    is_record_line,
    render_record_table,
    strip_record_lines,
)
from interlight_chat.domain.enums import Intent
from interlight_chat.domain.errors import OracleUnavailableError
from interlight_chat.domain.protocols.oracle import ReasoningOracle
from interlight_chat.domain.session import Turn
from interlight_chat.observability.logging import get_logger, log_fallback

logger = get_logger(__name__)

EMPTY_RESULT_FALLBACK = (
    "Não encontrei produtos no catálogo para essa busca. Pode me passar mais "
    "detalhes, como a linha, o ambiente ou a potência desejada?"
)

LEAD_IN_MAX_SENTENCES = 2

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


@dataclass(frozen=True, slots=True)
class Draft:
    """Rascunho candidato à resposta final."""

    text: str
    intent: Intent
    records: tuple[Record, ...] = ()
    found: bool | None = None
    degraded: bool = False


def _lead_with_table(text: str, table: str) -> str:
    """Tabela primeiro; do texto do oráculo só sobra o que vinha após os produtos."""
    lines = text.splitlines()
    positions = [idx for idx, line in enumerate(lines) if is_record_line(line)]
    tail = "\n".join(lines[positions[-1] + 1 :]) if positions else text
    tail = tail.strip()
    return f"{table}\n\n{tail}" if tail else table


def _lead_in(text: str, max_sentences: int = LEAD_IN_MAX_SENTENCES) -> str:
    """Primeiras frases do texto (sem linhas de produto), em um parágrafo."""
    prose = " ".join(strip_record_lines(text).split())
    sentences = [s for s in _SENTENCE_BREAK.split(prose) if s]
    return " ".join(sentences[:max_sentences])


def enforce_draft_rules(text: str, intent: Intent, records: Sequence[Record]) -> str:
    """Aplica as regras de formato independentemente do que o oráculo escreveu.

    Com registros, as linhas 'Ref:' do oráculo são descartadas e a tabela é
    sempre renderizada a partir dos registros recebidos.
    """
    if not records:
        cleaned = strip_record_lines(text)
        if not cleaned and intent.needs_retrieval:
            return EMPTY_RESULT_FALLBACK
        return cleaned

    table = render_record_table(records)
    if intent is Intent.PRODUCT_EXACT:
        return _lead_with_table(text, table)
    lead = _lead_in(text)
    return f"{lead}\n{table}" if lead else table


class DraftComposer:
    """Pede ao oráculo a redação e aplica as regras de formato."""

    def __init__(
        self,
        oracle: ReasoningOracle,
        knowledge: KnowledgeSource,
        *,
        excerpt_max_chars: int = 12000,
    ) -> None:
        self._oracle = oracle
        self._knowledge = knowledge
        self._excerpt_max_chars = excerpt_max_chars

    async def compose(
        self,
        message: str,
        intent: Intent,
        records: Sequence[Record],
        history: Sequence[Turn] = (),
    ) -> Draft:
        records = tuple(records)
        excerpt = None
        if intent is not Intent.PRODUCT_EXACT:
            excerpt = self._knowledge.excerpt(message, max_chars=self._excerpt_max_chars)

        messages = [
            *openai_prompts.format_history_messages(history),
            {"role": "user", "content": message},
        ]
        try:
            raw = await self._oracle.complete(
                openai_prompts.get_draft_prompt(intent, records, excerpt),
                messages,
                purpose="draft",
                temperature=0.3,
                json_output=True,
            )
        except OracleUnavailableError:
            if not records:
                raise
            log_fallback(logger, "draft_composer", reason="oracle_unavailable")
            return Draft(
                text=render_record_table(records),
                intent=intent,
                records=records,
                found=True,
                degraded=True,
            )

        payload = parse_draft_response(raw)
        text = enforce_draft_rules(payload.text, intent, records)
        logger.info(
            "draft_composed",
            extra={
                "intent": intent.value,
                "records": len(records),
                "found_flag": payload.found,
                "text_len": len(text),
            },
        )
        return Draft(text=text, intent=intent, records=records, found=payload.found)
