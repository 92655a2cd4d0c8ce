"""Configurações centralizadas do interlight_chat.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única
- Constantes do catálogo (CATALOG_SCHEMA, CATALOG_TABLE, MAX_ESCALATION_LEVELS)

Uso típico:
    from interlight_chat.config import get_settings
"""

from interlight_chat.config.settings import (
    CATALOG_SCHEMA,
    CATALOG_TABLE,
    MAX_ESCALATION_LEVELS,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "CATALOG_SCHEMA",
    "CATALOG_TABLE",
    "MAX_ESCALATION_LEVELS",
]
