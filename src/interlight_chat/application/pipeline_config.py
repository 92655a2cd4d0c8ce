"""PipelineConfig DTO: dependências do CatalogAssistant em um único parâmetro."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from interlight_chat.application.audit_guard import AuditGuard
    from interlight_chat.application.draft_composer import DraftComposer
    from interlight_chat.application.escalation import RetrievalEscalationEngine
    from interlight_chat.application.intent_router import IntentRouter
    from interlight_chat.application.query_synthesizer import QuerySynthesizer
    from interlight_chat.application.session_manager import SessionManager
    from interlight_chat.domain.protocols.catalog_store import CatalogStore


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    sessions: SessionManager
    router: IntentRouter
    synthesizer: QuerySynthesizer
    escalation: RetrievalEscalationEngine
    composer: DraftComposer
    auditor: AuditGuard

    # Recursos fechados no shutdown
    catalog_store: CatalogStore | None = None

    # Turnos recentes repassados à redação
    history_window: int = 6
