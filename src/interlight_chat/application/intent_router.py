"""Roteador de intenção com contexto acumulado.

Fluxo:
1. Pré-checagem determinística de códigos de produto (dica para o oráculo)
2. Chamada ao oráculo em JSON, temperatura zero
3. Parse estrito (RoutingParsed | RoutingParseError)
4. Re-pergunta única em caso de JSON inválido; depois, ClassificationError
5. Mescla do delta no contexto da sessão
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from interlight_chat.ai import openai_prompts
from interlight_chat.ai.openai_parser import (
    RoutingParsed,
    RoutingParseError,
    parse_routing_response,
)
from interlight_chat.application.session_manager import SessionManager
from interlight_chat.domain.enums import Intent
from interlight_chat.domain.errors import ClassificationError
from interlight_chat.domain.protocols.oracle import ReasoningOracle
from interlight_chat.domain.session import Context, Turn
from interlight_chat.domain.text import find_product_codes
from interlight_chat.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class RoutingDecision:
    """Intenção detectada + contexto já mesclado na sessão."""

    intent: Intent
    context_delta: dict[str, str | None] = field(default_factory=dict)
    context: Context = field(default_factory=dict)
    product_codes: list[str] = field(default_factory=list)


class IntentRouter:
    """Classifica a mensagem e mescla o contexto novo."""

    def __init__(
        self,
        oracle: ReasoningOracle,
        *,
        reask: bool = True,
        history_window: int = 6,
    ) -> None:
        self._oracle = oracle
        self._reask = reask
        self._history_window = history_window

    async def classify(
        self,
        message: str,
        context: Mapping[str, str | None],
        history: Sequence[Turn] = (),
    ) -> RoutingParsed:
        """Retorna (intent, delta) ou levanta ClassificationError."""
        codes = find_product_codes(message)
        user_input = openai_prompts.format_intent_router_input(
            message, context, list(history) or None, codes
        )
        messages = [{"role": "user", "content": user_input}]
        system = openai_prompts.get_intent_router_prompt()

        raw = await self._oracle.complete(
            system, messages, purpose="intent_router", temperature=0.0, json_output=True
        )
        result = parse_routing_response(raw)

        if isinstance(result, RoutingParseError) and self._reask:
            logger.warning("intent_router_reask", extra={"reason": result.reason})
            messages = [
                *messages,
                {"role": "assistant", "content": raw},
                {"role": "user", "content": openai_prompts.get_intent_router_reask()},
            ]
            raw = await self._oracle.complete(
                system, messages, purpose="intent_router_reask", temperature=0.0, json_output=True
            )
            result = parse_routing_response(raw)

        if isinstance(result, RoutingParseError):
            logger.error("intent_router_parse_failed", extra={"reason": result.reason})
            raise ClassificationError(f"Classificação ilegível: {result.reason}")

        logger.info(
            "intent_classified",
            extra={
                "intent": result.intent.value,
                "delta_keys": sorted(result.context_delta),
                "codes_detected": len(codes),
            },
        )
        return result

    async def route(
        self,
        message: str,
        session_key: str | None,
        sessions: SessionManager,
    ) -> RoutingDecision:
        """Classifica e mescla o delta no contexto acumulado da sessão."""
        session = sessions.get_or_create(session_key)
        parsed = await self.classify(
            message, session.context, session.recent_history(self._history_window)
        )
        merged = await sessions.merge_context(session_key, parsed.context_delta)
        return RoutingDecision(
            intent=parsed.intent,
            context_delta=dict(parsed.context_delta),
            context=merged,
            product_codes=find_product_codes(message),
        )
