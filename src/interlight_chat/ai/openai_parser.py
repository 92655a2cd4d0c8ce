"""Parsing estrito das respostas do oráculo.

Toda saída do oráculo é texto não confiável. Este módulo converte esse texto em
resultados tipados (ou erros explícitos) e nunca confia na forma recebida.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from interlight_chat.domain.enums import INTENT_ALIASES, Intent
from interlight_chat.domain.session import CONTEXT_ATTRIBUTES

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove blocos markdown residuais (```sql ... ```)."""
    cleaned = (text or "").strip()
    cleaned = _FENCE_OPEN.sub("", cleaned)
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def _load_json_object(text: str) -> dict[str, Any]:
    cleaned = strip_code_fences(text)
    if not cleaned.startswith("{"):
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start < 0 or end <= start:
            raise ValueError("nenhum objeto JSON encontrado")
        cleaned = cleaned[start : end + 1]
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("JSON não é um objeto")
    return data


# -----------------------------------------------------------------------------
# Roteamento de intenção
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RoutingParsed:
    """Resultado válido do roteador."""

    intent: Intent
    context_delta: dict[str, str | None] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RoutingParseError:
    """Saída do roteador fora do contrato."""

    reason: str


RoutingParseResult = RoutingParsed | RoutingParseError


def _clean_context_value(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in {"null", "none"}:
        return None
    return text


def parse_routing_response(text: str) -> RoutingParseResult:
    """Converte a saída do roteador em RoutingParsed ou RoutingParseError.

    Formato esperado:
        {"intencao": "PRODUCT_EXACT", "contexto": {"linha": "Allinear"}}

    Somente chaves presentes em "contexto" entram no delta; um valor null
    explícito é preservado (apaga o atributo na mescla).
    """
    try:
        data = _load_json_object(text)
    except (ValueError, json.JSONDecodeError) as exc:
        return RoutingParseError(reason=f"json_invalido: {type(exc).__name__}")

    raw_intent = data.get("intencao", data.get("intent"))
    if not isinstance(raw_intent, str):
        return RoutingParseError(reason="intencao_ausente")
    intent = INTENT_ALIASES.get(raw_intent.strip().upper().replace("-", "_"))
    if intent is None:
        return RoutingParseError(reason=f"intencao_desconhecida: {raw_intent[:40]}")

    raw_context = data.get("contexto", data.get("context", {}))
    if raw_context is None:
        raw_context = {}
    if not isinstance(raw_context, dict):
        return RoutingParseError(reason="contexto_nao_objeto")

    delta = {
        key: _clean_context_value(value)
        for key, value in raw_context.items()
        if key in CONTEXT_ATTRIBUTES
    }
    return RoutingParsed(intent=intent, context_delta=delta)


# -----------------------------------------------------------------------------
# Redação
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DraftPayload:
    """Texto redigido + flag explícita de produtos encontrados."""

    text: str
    found: bool | None


def parse_draft_response(text: str) -> DraftPayload:
    """Extrai {"resposta", "encontrou_produtos"}; texto livre vira found=None."""
    try:
        data = _load_json_object(text)
    except (ValueError, json.JSONDecodeError):
        return DraftPayload(text=strip_code_fences(text), found=None)

    answer = data.get("resposta")
    if not isinstance(answer, str):
        return DraftPayload(text=strip_code_fences(text), found=None)
    found = data.get("encontrou_produtos")
    return DraftPayload(text=answer.strip(), found=found if isinstance(found, bool) else None)


# -----------------------------------------------------------------------------
# Auditoria (segunda opinião)
# -----------------------------------------------------------------------------


def parse_audit_response(text: str) -> bool:
    """Retorna True se o oráculo apontou contradição.

    Raises:
        ValueError: se a saída não seguir {"contradiz": bool}
    """
    data = _load_json_object(text)
    verdict = data.get("contradiz")
    if not isinstance(verdict, bool):
        raise ValueError("campo 'contradiz' ausente ou inválido")
    return verdict
