"""Casos de uso do atendimento (pipeline e etapas)."""
