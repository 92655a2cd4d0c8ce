"""Taxonomia de erros do pipeline de atendimento."""

from __future__ import annotations


class AssistantError(Exception):
    """Erro base do assistente; carrega mensagem segura para o cliente."""

    public_message: str = "Erro interno no servidor."


class InvalidRequestError(AssistantError):
    """Pergunta vazia ou malformada."""

    public_message = 'A propriedade "message" é obrigatória.'


class ClassificationError(AssistantError):
    """Saída do oráculo ilegível no roteador de intenção (fatal)."""


class QueryPolicyViolation(AssistantError):
    """O oráculo gerou algo que não é uma consulta de leitura."""

    public_message = "Query gerada inválida ou insegura (apenas SELECT permitido)."

    def __init__(self, message: str, level: int | None = None) -> None:
        super().__init__(message)
        self.level = level


class StoreExecutionError(AssistantError):
    """Erro de sintaxe/semântica do catálogo (tratado como zero resultados)."""


class StoreUnavailableError(AssistantError):
    """Catálogo indisponível (conexão ou timeout)."""


class OracleUnavailableError(AssistantError):
    """Oráculo indisponível após retries do cliente."""
