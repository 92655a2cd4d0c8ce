"""Auditoria final: veto de rascunhos que contradizem o catálogo.

Com registros encontrados, o rascunho é vetado quando:
- admite ausência ("infelizmente", "não encontrei", "sorry"...), ou
- traz encontrou_produtos=false explícito, ou
- as linhas "Ref:" não batem com os registros (produto inventado ou omitido), ou
- (opcional) o oráculo aponta contradição na segunda opinião.

No veto, o próprio auditor reescreve a resposta com a máscara obrigatória.
O auditor nunca inventa registros: só renderiza os que recebeu.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from interlight_chat.ai import openai_prompts
from interlight_chat.ai.openai_parser import parse_audit_response
from interlight_chat.application.draft_composer import Draft
from interlight_chat.domain.catalog import (
    Record,
    is_record_line,
    render_record_line,
    render_record_table,
)
from interlight_chat.domain.enums import Intent
from interlight_chat.domain.errors import OracleUnavailableError
from interlight_chat.domain.protocols.oracle import ReasoningOracle
from interlight_chat.domain.text import fold
from interlight_chat.observability.logging import get_logger, log_fallback

logger = get_logger(__name__)

# Marcadores já dobrados (minúsculas, sem acento)
ABSENCE_MARKERS: tuple[str, ...] = (
    "infelizmente",
    "nao encontrei",
    "nao encontramos",
    "nao foi possivel encontrar",
    "nao localizei",
    "desculpe",
    "lamento",
    "sem resultados",
    "nenhum produto",
    "unfortunately",
    "could not find",
    "couldn't find",
    "sorry",
    "not found",
)

REWRITE_HEADER = "Encontrei os seguintes produtos no catálogo:"


class AuditVerdict(NamedTuple):
    """Resultado da auditoria."""

    approved: bool
    final_text: str
    reason: str | None = None


def find_absence_marker(text: str) -> str | None:
    """Primeiro marcador de ausência presente no texto (ou None)."""
    folded = fold(text)
    for marker in ABSENCE_MARKERS:
        if marker in folded:
            return marker
    return None


def find_table_mismatch(text: str, records: Sequence[Record]) -> str | None:
    """Confere as linhas 'Ref:' do texto contra a máscara dos registros.

    Retorna "unknown_record_line" (linha que não vem de nenhum registro),
    "records_missing" (registro não exibido) ou None.
    """
    expected = [render_record_line(record) for record in records]
    shown = [line for line in text.splitlines() if is_record_line(line)]
    for line in shown:
        if not any(line.strip().endswith(rendered) for rendered in expected):
            return "unknown_record_line"
    for rendered in expected:
        if not any(line.strip().endswith(rendered) for line in shown):
            return "records_missing"
    return None


def render_rewrite(draft: Draft) -> str:
    """Resposta determinística com todos os registros do rascunho."""
    table = render_record_table(draft.records)
    if draft.intent is Intent.PRODUCT_EXACT:
        return table
    return f"{REWRITE_HEADER}\n{table}"


class AuditGuard:
    """Aprova o rascunho ou o reescreve a partir dos registros."""

    def __init__(self, oracle: ReasoningOracle | None = None) -> None:
        self._oracle = oracle

    def _lexical_reason(self, draft: Draft) -> str | None:
        marker = find_absence_marker(draft.text)
        if marker:
            return f"absence_marker:{marker}"
        if draft.found is False:
            return "found_flag_false"
        return find_table_mismatch(draft.text, draft.records)

    async def _oracle_contradicts(self, draft: Draft) -> bool:
        if self._oracle is None:
            return False
        try:
            raw = await self._oracle.complete(
                openai_prompts.get_audit_prompt(draft.records),
                [{"role": "user", "content": draft.text}],
                purpose="audit",
                temperature=0.0,
                json_output=True,
            )
            return parse_audit_response(raw)
        except (OracleUnavailableError, ValueError) as exc:
            log_fallback(logger, "audit_guard", reason=type(exc).__name__)
            return False

    async def review(self, draft: Draft) -> AuditVerdict:
        if not draft.records:
            return AuditVerdict(approved=True, final_text=draft.text)

        reason = self._lexical_reason(draft)
        if reason is None and await self._oracle_contradicts(draft):
            reason = "oracle_contradiction"

        if reason is None:
            logger.info("audit_approved", extra={"records": len(draft.records)})
            return AuditVerdict(approved=True, final_text=draft.text)

        logger.warning(
            "audit_veto",
            extra={"reason": reason, "records": len(draft.records), "intent": draft.intent.value},
        )
        return AuditVerdict(approved=False, final_text=render_rewrite(draft), reason=reason)
