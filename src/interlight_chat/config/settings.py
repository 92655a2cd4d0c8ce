"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars (ou arquivo .env local).
Nunca hardcode chaves de API ou strings de conexão com senha.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from interlight_chat.observability.logging import get_logger

# -----------------------------------------------------------------------------
# Catálogo Interlight (tabela única, somente leitura)
# -----------------------------------------------------------------------------
CATALOG_SCHEMA: str = "public"
CATALOG_TABLE: str = "interlight_catalog_raw"
MAX_ESCALATION_LEVELS: int = 3


class Settings(BaseSettings):
    """Configurações lidas do ambiente.

    Comentários em PT-BR são obrigatórios por diretriz do projeto.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Aplicação
    service_name: str = "interlight_chat"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # OpenAI / Oráculo
    openai_api_key: str | None = None  # Chave da API OpenAI
    openai_model: str = "gpt-4o"  # Modelo usado em todas as etapas
    openai_timeout_seconds: float = 30.0  # Timeout por chamada
    openai_max_retries: int = 2  # Retries do SDK antes de falha fatal

    # Catálogo (PostgreSQL/Supabase em produção)
    catalog_database_url: str | None = None  # ex: postgresql+asyncpg://user@host/db
    catalog_schema: str = CATALOG_SCHEMA
    catalog_table: str = CATALOG_TABLE
    catalog_query_timeout_seconds: float = 15.0
    catalog_pool_size: int = 5

    # Escada de escalonamento de busca
    escalation_levels: int = MAX_ESCALATION_LEVELS  # 1..3 níveis
    escalation_row_limit: int = 10  # LIMIT máximo de cada query gerada

    # Manual técnico (fonte de conhecimento)
    knowledge_path: Path = Path("manual_interlight.txt")
    knowledge_excerpt_max_chars: int = 12000

    # Sessão
    default_session_key: str = "default"  # Chave usada quando o chamador não envia sessão
    session_history_window: int = 6  # Turnos recentes enviados ao oráculo

    # Roteador de intenção / auditoria
    intent_router_reask: bool = True  # Re-pergunta uma vez em JSON inválido
    audit_oracle_enabled: bool = False  # Segunda opinião do oráculo na auditoria

    def validate_openai_config(self) -> list[str]:
        """Valida configuração de OpenAI.

        Retorna lista de erros (vazia = OK).
        """
        errors: list[str] = []
        if not self.openai_api_key:
            errors.append("OPENAI_API_KEY não configurado")
        if self.openai_timeout_seconds <= 0:
            errors.append("OPENAI_TIMEOUT_SECONDS deve ser > 0")
        if self.openai_max_retries < 0:
            errors.append("OPENAI_MAX_RETRIES deve ser >= 0")
        return errors

    def validate_catalog_config(self) -> list[str]:
        """Valida conexão e limites do catálogo."""
        errors: list[str] = []
        if not self.catalog_database_url:
            errors.append("CATALOG_DATABASE_URL não configurado")
        if self.catalog_query_timeout_seconds <= 0:
            errors.append("CATALOG_QUERY_TIMEOUT_SECONDS deve ser > 0")
        if not self.catalog_table.replace("_", "").isalnum():
            errors.append(f"CATALOG_TABLE '{self.catalog_table}' inválido")
        if not self.catalog_schema.replace("_", "").isalnum():
            errors.append(f"CATALOG_SCHEMA '{self.catalog_schema}' inválido")
        return errors

    def validate_escalation_config(self) -> list[str]:
        """Valida a escada de busca (níveis e cardinalidade)."""
        errors: list[str] = []
        if not 1 <= self.escalation_levels <= MAX_ESCALATION_LEVELS:
            errors.append(
                f"ESCALATION_LEVELS deve estar entre 1 e {MAX_ESCALATION_LEVELS}"
            )
        if not 1 <= self.escalation_row_limit <= 50:
            errors.append("ESCALATION_ROW_LIMIT deve estar entre 1 e 50")
        return errors

    def validate_knowledge_config(self) -> list[str]:
        """Valida o manual técnico carregado no startup."""
        errors: list[str] = []
        if not self.knowledge_path.is_file():
            errors.append(f"KNOWLEDGE_PATH não encontrado: {self.knowledge_path}")
        if self.knowledge_excerpt_max_chars < 500:
            errors.append("KNOWLEDGE_EXCERPT_MAX_CHARS deve ser >= 500")
        return errors

    def validate_session_config(self) -> list[str]:
        """Valida parâmetros de sessão."""
        errors: list[str] = []
        if not self.default_session_key.strip():
            errors.append("DEFAULT_SESSION_KEY não pode ser vazio")
        if self.session_history_window < 0:
            errors.append("SESSION_HISTORY_WINDOW deve ser >= 0")
        return errors

    def validate_all(self) -> list[str]:
        """Agrega todas as validações usadas no startup do pipeline."""
        errors: list[str] = []
        errors.extend(self.validate_openai_config())
        errors.extend(self.validate_catalog_config())
        errors.extend(self.validate_escalation_config())
        errors.extend(self.validate_knowledge_config())
        errors.extend(self.validate_session_config())
        return errors

    @property
    def catalog_relation(self) -> str:
        """Nome qualificado da tabela do catálogo (ex: "public"."interlight_catalog_raw")."""
        return f'"{self.catalog_schema}"."{self.catalog_table}"'

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")

    def model_post_init(self, __context: Any) -> None:
        """Registra o ambiente carregado (sem expor valores sensíveis)."""
        logger: logging.Logger = get_logger(__name__)
        logger.debug(
            "Configuração carregada",
            extra={
                "environment": self.environment,
                "openai_model": self.openai_model,
                "escalation_levels": self.escalation_levels,
                "openai_key_configured": bool(self.openai_api_key),
            },
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
