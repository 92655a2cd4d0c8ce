"""Protocolos de domínio (sessão, oráculo e catálogo)."""

from interlight_chat.domain.protocols.catalog_store import CatalogStore
from interlight_chat.domain.protocols.oracle import ReasoningOracle
from interlight_chat.domain.protocols.session_store import SessionRepository

__all__ = ["CatalogStore", "ReasoningOracle", "SessionRepository"]
