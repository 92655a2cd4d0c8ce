"""Camada de infraestrutura: adapters para serviços externos.

Este módulo exporta as factories principais:

- Catálogo: SqlAlchemyCatalogStore, create_catalog_store
- Sessão: InMemorySessionRepository

Uso típico:
    from interlight_chat.infra import create_catalog_store

Infraestrutura não decide regra de negócio; logs sem conteúdo do cliente.
"""

from interlight_chat.infra.catalog_store import SqlAlchemyCatalogStore, create_catalog_store
from interlight_chat.infra.session_store_memory import InMemorySessionRepository

__all__ = [
    "SqlAlchemyCatalogStore",
    "create_catalog_store",
    "InMemorySessionRepository",
]
