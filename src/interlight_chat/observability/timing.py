"""Latência por etapa do pipeline do assistente."""

from __future__ import annotations

import contextlib
import time
from collections.abc import Generator
from enum import StrEnum

from interlight_chat.observability.logging import get_logger

logger = get_logger(__name__)


class PipelineStage(StrEnum):
    """Etapas medidas em cada pergunta, na ordem em que rodam."""

    INTENT_ROUTER = "intent_router"
    QUERY_SYNTHESIS = "query_synthesis"
    ESCALATION = "escalation"
    DRAFT = "draft"
    AUDIT = "audit"


@contextlib.contextmanager
def timed(stage: PipelineStage) -> Generator[None, None, None]:
    """Mede a etapa e loga `stage_latency` ao sair, inclusive em erro.

    Campos: stage, elapsed_ms e outcome ("ok" ou o nome da exceção).

        with timed(PipelineStage.ESCALATION):
            result = await engine.run(spec)
    """
    start = time.perf_counter()
    outcome = "ok"
    try:
        yield
    except BaseException as exc:
        outcome = type(exc).__name__
        raise
    finally:
        logger.info(
            "stage_latency",
            extra={
                "stage": str(stage),
                "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                "outcome": outcome,
            },
        )
