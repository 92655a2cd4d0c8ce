"""Assistente do catálogo Interlight (roteamento, busca escalonada e auditoria)."""

__version__ = "0.1.0"
