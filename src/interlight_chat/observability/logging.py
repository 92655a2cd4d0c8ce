"""Logging estruturado do assistente (JSON em produção, texto no terminal).

Regra de conteúdo: logs levam só tamanhos, contagens, intenções, níveis e
tipos de erro. Pergunta do cliente, registros do catálogo e SQL completo
nunca são logados; a chave de sessão sai truncada (`redact_session_key`).
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from interlight_chat.observability.correlation import get_correlation_id

_JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s %(correlation_id)s %(service)s"
_TEXT_FIELDS = "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s"

# Bibliotecas que logam request a request (SDK do oráculo, pool do catálogo)
_NOISY_LOGGERS = ("openai", "httpx", "httpcore", "sqlalchemy.engine", "sqlalchemy.pool")


class CorrelationIdFilter(logging.Filter):
    """Carimba correlation_id da pergunta corrente e o nome do serviço."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else get_correlation_id()
        record.service = self._service_name
        return True


def configure_logging(
    level: str,
    service_name: str,
    log_format: str = "json",
    library_level: str = "WARNING",
) -> None:
    """Instala um handler único no root logger.

    Chamado pelos pontos de entrada (scripts); a factory não mexe em logging.
    """
    formatter: logging.Formatter
    if log_format.lower() == "text":
        formatter = logging.Formatter(_TEXT_FIELDS)
    else:
        formatter = JsonFormatter(_JSON_FIELDS, rename_fields={"levelname": "level", "name": "logger"})

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter(service_name))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def redact_session_key(session_key: str) -> str:
    """Prefixo da chave de sessão, seguro para log."""
    return session_key[:8] + "..." if len(session_key) > 8 else session_key


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra um caminho degradado (rascunho em tabela, auditoria só lexical).

    Exemplo:
        log_fallback(logger, "draft_composer", reason="oracle_unavailable")
    """
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = elapsed_ms
    logger.info("fallback_applied", extra=extra)
