"""Síntese da especificação de busca (prosa, nunca SQL).

PRODUCT_EXACT é repassado direto (termo limpo + códigos detectados, sem
oráculo). Demais intenções de produto pedem ao oráculo uma descrição do que
buscar, usando glossário e trecho do manual técnico.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field

from interlight_chat.ai import openai_prompts
from interlight_chat.ai.knowledge_loader import KnowledgeSource
from interlight_chat.domain.enums import Intent
from interlight_chat.domain.protocols.oracle import ReasoningOracle
from interlight_chat.domain.text import extract_clean_term, find_product_codes
from interlight_chat.observability.logging import get_logger

logger = get_logger(__name__)


class RetrievalSpec(BaseModel):
    """Descrição do que buscar no catálogo (entrada da escada)."""

    description: str
    clean_term: str = ""
    intent: Intent
    context: dict[str, str | None] = Field(default_factory=dict)
    product_codes: list[str] = Field(default_factory=list)
    source: Literal["direct", "oracle"] = "direct"

    def render(self) -> str:
        """Texto enviado ao gerador de SQL de cada nível."""
        lines = [self.description]
        if self.clean_term and self.clean_term != self.description:
            lines.append(f"Termo limpo: {self.clean_term}")
        if self.product_codes:
            lines.append(f"Códigos citados: {', '.join(self.product_codes)}")
        filters = {k: v for k, v in self.context.items() if v}
        if filters:
            lines.append(
                "Filtros do contexto: " + ", ".join(f"{k}={v}" for k, v in filters.items())
            )
        return "\n".join(lines)


class QuerySynthesizer:
    """Transforma a pergunta numa RetrievalSpec."""

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

    async def synthesize(
        self,
        message: str,
        intent: Intent,
        context: Mapping[str, str | None],
    ) -> RetrievalSpec:
        clean_term = extract_clean_term(message)
        codes = find_product_codes(message)

        if intent is Intent.PRODUCT_EXACT:
            description = ", ".join(codes) if codes else clean_term
            logger.info(
                "query_synthesis_direct",
                extra={"codes": len(codes), "term_len": len(clean_term)},
            )
            return RetrievalSpec(
                description=description or message.strip(),
                clean_term=clean_term,
                intent=intent,
                context=dict(context),
                product_codes=codes,
                source="direct",
            )

        excerpt = self._knowledge.excerpt(message, max_chars=self._excerpt_max_chars)
        raw = await self._oracle.complete(
            openai_prompts.get_query_synthesis_prompt(excerpt),
            [
                {
                    "role": "user",
                    "content": openai_prompts.format_query_synthesis_input(
                        message, clean_term, context, intent
                    ),
                }
            ],
            purpose="query_synthesis",
            temperature=0.0,
        )
        description = raw.strip() or clean_term or message.strip()
        logger.info(
            "query_synthesis_oracle",
            extra={"intent": intent.value, "description_len": len(description)},
        )
        return RetrievalSpec(
            description=description,
            clean_term=clean_term,
            intent=intent,
            context=dict(context),
            product_codes=codes,
            source="oracle",
        )
