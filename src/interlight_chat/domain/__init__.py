"""Modelos e regras de domínio (sem dependência de infraestrutura)."""
