"""Models de sessão: Session, Turn e contexto acumulado.

Session é a memória de uma conversa:
- Uma sessão = uma chave opaca (enviada pelo chamador ou a chave padrão)
- history é append-only
- context guarda filtros acumulados (linha, cor, ambiente, tipologia)
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from interlight_chat.domain.enums import TurnRole

CONTEXT_ATTRIBUTES: tuple[str, ...] = ("linha", "cor", "ambiente", "tipologia")

Context = dict[str, str | None]


def empty_context() -> Context:
    """Mapa de atributos com todos os valores nulos."""
    return {name: None for name in CONTEXT_ATTRIBUTES}


def merge_context(old: Mapping[str, str | None], delta: Mapping[str, str | None]) -> Context:
    """Mescla delta sobre o contexto anterior (last-write-wins por chave).

    Chaves ausentes no delta passam inalteradas; um valor explícito (inclusive
    None) sobrescreve. Atributos fora do conjunto fixo são ignorados.
    """
    merged: Context = {name: old.get(name) for name in CONTEXT_ATTRIBUTES}
    for key, value in delta.items():
        if key in CONTEXT_ATTRIBUTES:
            merged[key] = value
    return merged


class Turn(BaseModel):
    """Um turno da conversa."""

    role: TurnRole
    text: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


class Session(BaseModel):
    """Estado de uma conversa com o assistente do catálogo."""

    session_key: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    history: list[Turn] = Field(default_factory=list)
    context: Context = Field(default_factory=empty_context)

    def recent_history(self, window: int) -> list[Turn]:
        """Últimos `window` turnos (para prompts)."""
        if window <= 0:
            return []
        return self.history[-window:]
