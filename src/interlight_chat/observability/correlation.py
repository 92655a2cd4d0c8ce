"""Correlation id por requisição (ContextVar)."""

from __future__ import annotations

import contextlib
import uuid
from collections.abc import Generator
from contextvars import ContextVar

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id corrente (ou vazio)."""

    return _correlation_id.get()


@contextlib.contextmanager
def correlation_scope(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Define um correlation_id durante o processamento de uma pergunta.

    Reaproveita o id recebido do chamador; caso contrário gera um uuid4.
    """
    value = correlation_id or str(uuid.uuid4())
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
