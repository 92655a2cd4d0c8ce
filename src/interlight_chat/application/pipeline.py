"""Pipeline do assistente do catálogo Interlight.

Fluxo (sequencial, uma pergunta por vez):
1. Validação da pergunta
2. Sessão + roteador de intenção (mescla de contexto)
3. Síntese da especificação de busca (apenas intenções de produto)
4. Escada de escalonamento no catálogo
5. Redação do rascunho
6. Auditoria (veto + reescrita)
7. Registro do par pergunta/resposta no histórico (somente em sucesso)

ORDEM GARANTIDA:
Roteador → Síntese → Escada → Redação → Auditoria → Histórico
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from interlight_chat.application.escalation import EscalationResult
from interlight_chat.domain.enums import EscalationStatus, Intent, TurnRole
from interlight_chat.domain.errors import (
    AssistantError,
    InvalidRequestError,
    QueryPolicyViolation,
)
from interlight_chat.domain.session import Turn
from interlight_chat.observability.correlation import correlation_scope
from interlight_chat.observability.logging import get_logger, redact_session_key
from interlight_chat.observability.timing import PipelineStage, timed

if TYPE_CHECKING:
    from interlight_chat.application.pipeline_config import PipelineConfig
    from interlight_chat.config.settings import Settings

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = AssistantError.public_message


class FinalAnswer(BaseModel):
    """Resposta final aprovada (ou reescrita) pelo auditor."""

    text: str
    intent: Intent
    approved: bool
    session_key: str
    records_found: int = 0
    query: str | None = None
    level: int | None = None
    escalation_status: EscalationStatus = EscalationStatus.SKIPPED
    audit_reason: str | None = None
    degraded: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Formato JSON devolvido ao chamador."""
        return {
            "resposta": self.text,
            "_metadata": {
                "sqlQueryGerada": self.query,
                "registrosEncontrados": self.records_found,
                "intencao": self.intent.value,
                "aprovado": self.approved,
                "nivel": self.level,
                "sessao": self.session_key,
            },
        }


class CatalogAssistant:
    """Orquestra as etapas do atendimento sobre dependências injetadas."""

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CatalogAssistant:
        """Atalho que delega à factory (constrói infra a partir de settings)."""
        from interlight_chat.application.factories.pipeline_factory import build_assistant

        return build_assistant(settings)

    def __init__(self, config: PipelineConfig) -> None:
        self._config = config
        self._sessions = config.sessions
        self._router = config.router
        self._synthesizer = config.synthesizer
        self._escalation = config.escalation
        self._composer = config.composer
        self._auditor = config.auditor

    async def _retrieve(self, message: str, intent: Intent, context: dict) -> EscalationResult:
        if not intent.needs_retrieval:
            logger.debug("escalation_skipped", extra={"intent": intent.value})
            return EscalationResult.skipped()

        with timed(PipelineStage.QUERY_SYNTHESIS):
            spec = await self._synthesizer.synthesize(message, intent, context)
        with timed(PipelineStage.ESCALATION):
            result = await self._escalation.run(spec)

        if result.status is EscalationStatus.ABORTED:
            raise result.violation or QueryPolicyViolation(
                "Escalonamento abortado", level=result.level
            )
        return result

    async def answer(
        self,
        message: str,
        session_key: str | None = None,
        *,
        correlation_id: str | None = None,
    ) -> FinalAnswer:
        """Processa uma pergunta e retorna a resposta final.

        Raises:
            InvalidRequestError: pergunta vazia
            AssistantError: falhas fatais de roteamento, catálogo ou oráculo
        """
        if not isinstance(message, str) or not message.strip():
            raise InvalidRequestError("Pergunta vazia")

        with correlation_scope(correlation_id):
            key = self._sessions.resolve_key(session_key)
            logger.info(
                "question_received",
                extra={"message_len": len(message), "session_key": redact_session_key(key)},
            )

            with timed(PipelineStage.INTENT_ROUTER):
                decision = await self._router.route(message, key, self._sessions)

            escalation = await self._retrieve(message, decision.intent, decision.context)

            history = self._sessions.get_or_create(key).recent_history(
                self._config.history_window
            )
            with timed(PipelineStage.DRAFT):
                draft = await self._composer.compose(
                    message, decision.intent, escalation.records, history
                )
            with timed(PipelineStage.AUDIT):
                verdict = await self._auditor.review(draft)

            await self._sessions.append_turns(
                key,
                [
                    Turn(role=TurnRole.USER, text=message),
                    Turn(role=TurnRole.ASSISTANT, text=verdict.final_text),
                ],
            )

            final = FinalAnswer(
                text=verdict.final_text,
                intent=decision.intent,
                approved=verdict.approved,
                session_key=key,
                records_found=len(escalation.records),
                query=escalation.query,
                level=escalation.level,
                escalation_status=escalation.status,
                audit_reason=verdict.reason,
                degraded=draft.degraded,
            )
            logger.info(
                "question_answered",
                extra={
                    "intent": final.intent.value,
                    "escalation_status": final.escalation_status.value,
                    "level": final.level,
                    "records": final.records_found,
                    "approved": final.approved,
                    "degraded": final.degraded,
                },
            )
            return final

    async def respond(
        self,
        message: Any,
        session_key: str | None = None,
        *,
        correlation_id: str | None = None,
    ) -> dict[str, Any]:
        """Versão JSON de `answer`: sucesso com _metadata ou {"error": ...}."""
        try:
            final = await self.answer(message, session_key, correlation_id=correlation_id)
        except AssistantError as exc:
            logger.warning(
                "question_failed",
                extra={"error_type": type(exc).__name__, "detail": str(exc)},
            )
            return {"error": exc.public_message}
        except Exception as exc:  # noqa: BLE001
            logger.exception("question_unexpected_error", extra={"error_type": type(exc).__name__})
            return {"error": GENERIC_ERROR_MESSAGE}
        return final.to_payload()

    async def close(self) -> None:
        """Libera recursos (pool do catálogo)."""
        if self._config.catalog_store is not None:
            await self._config.catalog_store.close()
