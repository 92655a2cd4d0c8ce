"""Catálogo Interlight via SQLAlchemy (async).

Características:
- Uma conexão por consulta, nunca comitada (a transação é descartada no close)
- Em PostgreSQL a transação é aberta como READ ONLY
- Timeout por consulta (asyncio.timeout)
- Erros de conexão → StoreUnavailableError (fatal)
- Erros de execução → StoreExecutionError (o escalonamento avança de nível)
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from interlight_chat.domain.catalog import Record, freeze_records
from interlight_chat.domain.errors import StoreExecutionError, StoreUnavailableError
from interlight_chat.domain.protocols.catalog_store import CatalogStore
from interlight_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class SqlAlchemyCatalogStore(CatalogStore):
    """Executa SELECTs gerados sobre a tabela do catálogo."""

    def __init__(self, engine: AsyncEngine, timeout_seconds: float = 15.0) -> None:
        self._engine = engine
        self._timeout = timeout_seconds

    @classmethod
    def from_url(
        cls,
        database_url: str,
        *,
        timeout_seconds: float = 15.0,
        pool_size: int = 5,
    ) -> SqlAlchemyCatalogStore:
        """Cria engine com pool e pre-ping (conexões antigas são descartadas)."""
        options: dict[str, object] = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            options["pool_size"] = pool_size
        engine = create_async_engine(database_url, **options)
        return cls(engine, timeout_seconds=timeout_seconds)

    async def fetch(self, sql: str) -> tuple[Record, ...]:
        try:
            async with asyncio.timeout(self._timeout):
                return await self._run(sql)
        except TimeoutError as exc:
            logger.error(
                "catalog_query_timeout",
                extra={"timeout_seconds": self._timeout, "sql_len": len(sql)},
            )
            raise StoreUnavailableError("Timeout ao consultar o catálogo") from exc

    async def _run(self, sql: str) -> tuple[Record, ...]:
        conn = await self._connect()
        try:
            if self._engine.dialect.name == "postgresql":
                await conn.execution_options(postgresql_readonly=True)
            result = await conn.exec_driver_sql(sql)
            rows = result.mappings().all()
        except DBAPIError as exc:
            if exc.connection_invalidated:
                logger.error("catalog_connection_lost", extra={"error": type(exc.orig).__name__})
                raise StoreUnavailableError("Conexão com o catálogo perdida") from exc
            logger.warning(
                "catalog_query_failed",
                extra={"error": type(exc.orig).__name__, "sql_len": len(sql)},
            )
            raise StoreExecutionError(f"Falha ao executar consulta: {type(exc.orig).__name__}") from exc
        except SQLAlchemyError as exc:
            logger.warning(
                "catalog_query_failed",
                extra={"error": type(exc).__name__, "sql_len": len(sql)},
            )
            raise StoreExecutionError(f"Falha ao executar consulta: {type(exc).__name__}") from exc
        finally:
            await conn.close()

        logger.debug("catalog_query_ok", extra={"rows": len(rows)})
        return freeze_records(rows)

    async def _connect(self) -> AsyncConnection:
        conn = self._engine.connect()
        try:
            await conn.start()
        except (SQLAlchemyError, OSError) as exc:
            logger.error("catalog_connect_failed", extra={"error": type(exc).__name__})
            raise StoreUnavailableError("Catálogo indisponível") from exc
        return conn

    async def close(self) -> None:
        await self._engine.dispose()


def create_catalog_store(
    database_url: str,
    *,
    timeout_seconds: float = 15.0,
    pool_size: int = 5,
) -> CatalogStore:
    """Factory para criar o catálogo a partir da URL configurada."""
    logger.info(
        "Creating catalog store",
        extra={"dialect": database_url.split(":", 1)[0]},
    )
    return SqlAlchemyCatalogStore.from_url(
        database_url, timeout_seconds=timeout_seconds, pool_size=pool_size
    )
