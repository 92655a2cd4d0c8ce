"""Testes unitários para config/settings.py.

Valida configurações, constantes e métodos de validação.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from interlight_chat.config.settings import (
    CATALOG_SCHEMA,
    CATALOG_TABLE,
    MAX_ESCALATION_LEVELS,
    Settings,
    get_settings,
)


def _valid_settings(tmp_path: Path, **overrides) -> Settings:
    manual = tmp_path / "manual.txt"
    manual.write_text("Manual técnico.", encoding="utf-8")
    values = {
        "openai_api_key": "sk-test",
        "catalog_database_url": "sqlite+aiosqlite:///:memory:",
        "knowledge_path": manual,
    }
    values.update(overrides)
    return Settings(**values)


class TestCatalogConstants:
    def test_catalog_relation_defaults(self) -> None:
        assert CATALOG_SCHEMA == "public"
        assert CATALOG_TABLE == "interlight_catalog_raw"
        assert MAX_ESCALATION_LEVELS == 3


class TestSettingsDefaults:
    """Testes para valores padrão de Settings."""

    def test_default_environment_is_development(self) -> None:
        s = Settings()
        assert s.environment == "development"
        assert s.is_development is True
        assert s.is_production is False

    def test_escalation_defaults(self) -> None:
        s = Settings()
        assert s.escalation_levels == 3
        assert s.escalation_row_limit == 10

    def test_oracle_defaults(self) -> None:
        s = Settings()
        assert s.openai_model == "gpt-4o"
        assert s.intent_router_reask is True
        assert s.audit_oracle_enabled is False

    def test_catalog_relation_is_quoted(self) -> None:
        assert Settings().catalog_relation == '"public"."interlight_catalog_raw"'

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESCALATION_LEVELS", "2")
        monkeypatch.setenv("ENVIRONMENT", "production")
        s = Settings()
        assert s.escalation_levels == 2
        assert s.is_production is True


class TestSettingsValidation:
    def test_valid_configuration(self, tmp_path: Path) -> None:
        assert _valid_settings(tmp_path).validate_all() == []

    def test_missing_api_key(self, tmp_path: Path) -> None:
        errors = _valid_settings(tmp_path, openai_api_key=None).validate_openai_config()
        assert "OPENAI_API_KEY não configurado" in errors

    def test_missing_database_url(self, tmp_path: Path) -> None:
        errors = _valid_settings(tmp_path, catalog_database_url=None).validate_catalog_config()
        assert "CATALOG_DATABASE_URL não configurado" in errors

    def test_table_name_must_be_identifier(self, tmp_path: Path) -> None:
        errors = _valid_settings(
            tmp_path, catalog_table="catalog; DROP TABLE x"
        ).validate_catalog_config()
        assert any("CATALOG_TABLE" in e for e in errors)

    @pytest.mark.parametrize("levels", [0, 4])
    def test_escalation_levels_range(self, tmp_path: Path, levels: int) -> None:
        errors = _valid_settings(tmp_path, escalation_levels=levels).validate_escalation_config()
        assert errors == ["ESCALATION_LEVELS deve estar entre 1 e 3"]

    def test_row_limit_range(self, tmp_path: Path) -> None:
        errors = _valid_settings(tmp_path, escalation_row_limit=500).validate_escalation_config()
        assert errors == ["ESCALATION_ROW_LIMIT deve estar entre 1 e 50"]

    def test_missing_manual(self, tmp_path: Path) -> None:
        errors = _valid_settings(
            tmp_path, knowledge_path=tmp_path / "nao_existe.txt"
        ).validate_knowledge_config()
        assert len(errors) == 1
        assert errors[0].startswith("KNOWLEDGE_PATH não encontrado")

    def test_blank_default_session_key(self, tmp_path: Path) -> None:
        errors = _valid_settings(tmp_path, default_session_key="  ").validate_session_config()
        assert errors == ["DEFAULT_SESSION_KEY não pode ser vazio"]


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
