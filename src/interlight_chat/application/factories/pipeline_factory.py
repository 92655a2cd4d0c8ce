"""Factory para construção do CatalogAssistant e do PipelineConfig.

Responsabilidades:
- Conhecer infra e settings
- Validar a configuração antes de abrir conexões
- Retornar uma instância de `CatalogAssistant`

Não conter lógica de negócio ou chamadas ao oráculo.
"""

from __future__ import annotations

from interlight_chat.ai.knowledge_loader import KnowledgeSource
from interlight_chat.application.audit_guard import AuditGuard
from interlight_chat.application.draft_composer import DraftComposer
from interlight_chat.application.escalation import RetrievalEscalationEngine
from interlight_chat.application.intent_router import IntentRouter
from interlight_chat.application.pipeline import CatalogAssistant
from interlight_chat.application.pipeline_config import PipelineConfig
from interlight_chat.application.query_synthesizer import QuerySynthesizer
from interlight_chat.application.session_manager import SessionManager
from interlight_chat.config.settings import Settings, get_settings
from interlight_chat.domain.protocols import CatalogStore, ReasoningOracle, SessionRepository
from interlight_chat.observability.logging import get_logger

logger = get_logger(__name__)


def _collect_errors(
    settings: Settings,
    *,
    need_oracle: bool,
    need_store: bool,
    need_knowledge: bool,
) -> list[str]:
    errors: list[str] = []
    errors.extend(settings.validate_escalation_config())
    errors.extend(settings.validate_session_config())
    if need_oracle:
        errors.extend(settings.validate_openai_config())
    if need_store:
        errors.extend(settings.validate_catalog_config())
    if need_knowledge:
        errors.extend(settings.validate_knowledge_config())
    return errors


def build_assistant(
    settings: Settings | None = None,
    *,
    oracle: ReasoningOracle | None = None,
    catalog_store: CatalogStore | None = None,
    session_repository: SessionRepository | None = None,
    knowledge: KnowledgeSource | None = None,
) -> CatalogAssistant:
    """Constrói e retorna `CatalogAssistant` usando infra/settings.

    Parâmetros explícitos têm prioridade; quando ausentes, a infra é criada a
    partir de `settings` (ou `get_settings()`).

    Raises:
        ValueError: configuração inválida para o que precisa ser criado.
    """
    settings = settings or get_settings()

    errors = _collect_errors(
        settings,
        need_oracle=oracle is None,
        need_store=catalog_store is None,
        need_knowledge=knowledge is None,
    )
    if errors:
        logger.error("factory: invalid configuration", extra={"errors": errors})
        raise ValueError("Configuração inválida: " + "; ".join(errors))

    if knowledge is None:
        knowledge = KnowledgeSource.from_file(settings.knowledge_path)

    if oracle is None:
        from interlight_chat.ai.openai_client import OpenAIOracle

        oracle = OpenAIOracle(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.openai_timeout_seconds,
            max_retries=settings.openai_max_retries,
        )
        logger.debug("factory: created OpenAIOracle")

    if catalog_store is None:
        from interlight_chat.infra import create_catalog_store

        catalog_store = create_catalog_store(
            settings.catalog_database_url or "",
            timeout_seconds=settings.catalog_query_timeout_seconds,
            pool_size=settings.catalog_pool_size,
        )

    if session_repository is None:
        from interlight_chat.infra import InMemorySessionRepository

        session_repository = InMemorySessionRepository()
        logger.debug("factory: created in-memory session repository")

    sessions = SessionManager(
        session_repository, default_key=settings.default_session_key, logger=logger
    )

    config = PipelineConfig(
        sessions=sessions,
        router=IntentRouter(
            oracle,
            reask=settings.intent_router_reask,
            history_window=settings.session_history_window,
        ),
        synthesizer=QuerySynthesizer(
            oracle, knowledge, excerpt_max_chars=settings.knowledge_excerpt_max_chars
        ),
        escalation=RetrievalEscalationEngine(
            oracle,
            catalog_store,
            settings.catalog_relation,
            levels=settings.escalation_levels,
            row_limit=settings.escalation_row_limit,
        ),
        composer=DraftComposer(
            oracle, knowledge, excerpt_max_chars=settings.knowledge_excerpt_max_chars
        ),
        auditor=AuditGuard(oracle if settings.audit_oracle_enabled else None),
        catalog_store=catalog_store,
        history_window=settings.session_history_window,
    )
    logger.info(
        "factory: assistant built",
        extra={
            "escalation_levels": settings.escalation_levels,
            "row_limit": settings.escalation_row_limit,
            "audit_oracle": settings.audit_oracle_enabled,
        },
    )
    return CatalogAssistant(config)
