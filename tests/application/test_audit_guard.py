"""Testes do auditor (veto lexical, flag explícita e segunda opinião)."""

from __future__ import annotations

import pytest

from interlight_chat.application.audit_guard import (
    REWRITE_HEADER,
    AuditGuard,
    find_absence_marker,
    find_table_mismatch,
)
from interlight_chat.application.draft_composer import Draft
from interlight_chat.domain.catalog import render_record_table
from interlight_chat.domain.enums import Intent
from interlight_chat.domain.errors import OracleUnavailableError
from tests.helpers.data import ALLINEAR_RECORD, FACHADA_RECORDS
from tests.helpers.fakes import ScriptedOracle

ALLINEAR_LINE = "Ref: 2153.S.PM | Linha: Allinear | Potência: 10 | IP: IP67"


def _draft(text: str, records=(), intent=Intent.PRODUCT_CONSULTATIVE, found=None) -> Draft:
    return Draft(text=text, intent=intent, records=tuple(records), found=found)


class TestAbsenceMarkers:
    @pytest.mark.parametrize(
        "text",
        [
            "Infelizmente não temos esse item.",
            "NÃO ENCONTREI nada no catálogo",
            "Desculpe, não há opções.",
            "Unfortunately we found nothing",
            "Sorry, product not found.",
        ],
    )
    def test_detects_markers(self, text: str) -> None:
        assert find_absence_marker(text) is not None

    def test_clean_text(self) -> None:
        assert find_absence_marker(f"Encontrei o produto:\n{ALLINEAR_LINE}") is None


class TestAuditGuard:
    @pytest.mark.asyncio
    async def test_veto_rewrites_with_records(self) -> None:
        record = {"ref": "2153.S.PM", "line": "Allinear", "w": "10", "ip": "IP67"}
        verdict = await AuditGuard().review(
            _draft("unfortunately we found nothing", [record])
        )

        assert verdict.approved is False
        assert ALLINEAR_LINE in verdict.final_text
        assert verdict.final_text.startswith(REWRITE_HEADER)
        assert verdict.reason == "absence_marker:unfortunately"

    @pytest.mark.asyncio
    async def test_veto_for_exact_has_no_header(self) -> None:
        verdict = await AuditGuard().review(
            _draft("Lamento, não localizei.", [ALLINEAR_RECORD], intent=Intent.PRODUCT_EXACT)
        )

        assert verdict.approved is False
        assert verdict.final_text == ALLINEAR_LINE

    @pytest.mark.asyncio
    async def test_found_flag_false_vetoes(self) -> None:
        verdict = await AuditGuard().review(
            _draft("Veja opções de fachada.", FACHADA_RECORDS, found=False)
        )

        assert verdict.approved is False
        assert verdict.reason == "found_flag_false"
        assert verdict.final_text.count("Ref:") == 2

    @pytest.mark.asyncio
    async def test_good_draft_is_approved(self) -> None:
        text = f"Para fachadas, IP65 ou superior.\n{ALLINEAR_LINE}"
        verdict = await AuditGuard().review(_draft(text, [ALLINEAR_RECORD], found=True))

        assert verdict.approved is True
        assert verdict.final_text == text
        assert verdict.reason is None

    @pytest.mark.asyncio
    async def test_no_records_is_approved_as_is(self) -> None:
        text = "Infelizmente não encontrei. Pode detalhar o ambiente?"
        verdict = await AuditGuard().review(_draft(text, [], found=False))

        assert verdict.approved is True
        assert verdict.final_text == text


class TestAuditOracleSecondOpinion:
    @pytest.mark.asyncio
    async def test_contradiction_triggers_rewrite(self) -> None:
        oracle = ScriptedOracle({"audit": '{"contradiz": true}'})
        verdict = await AuditGuard(oracle).review(
            _draft(f"Recomendo a linha Allinear.\n{ALLINEAR_LINE}", [ALLINEAR_RECORD], found=True)
        )

        assert verdict.approved is False
        assert verdict.reason == "oracle_contradiction"
        assert ALLINEAR_LINE in verdict.final_text

    @pytest.mark.asyncio
    async def test_no_contradiction(self) -> None:
        oracle = ScriptedOracle({"audit": '{"contradiz": false}'})
        verdict = await AuditGuard(oracle).review(
            _draft(ALLINEAR_LINE, [ALLINEAR_RECORD], found=True)
        )

        assert verdict.approved is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", [OracleUnavailableError("timeout"), "talvez"])
    async def test_failure_falls_back_to_lexical(self, reply) -> None:
        oracle = ScriptedOracle({"audit": reply})
        verdict = await AuditGuard(oracle).review(
            _draft(ALLINEAR_LINE, [ALLINEAR_RECORD], found=True)
        )

        assert verdict.approved is True

    @pytest.mark.asyncio
    async def test_lexical_veto_skips_oracle(self) -> None:
        oracle = ScriptedOracle()
        verdict = await AuditGuard(oracle).review(
            _draft("Desculpe, nada encontrado.", [ALLINEAR_RECORD])
        )

        assert verdict.approved is False
        assert oracle.calls == []


class TestTableConsistency:
    """As linhas 'Ref:' do rascunho precisam bater com os registros."""

    def test_matching_table(self) -> None:
        text = f"Sugestões:\n{render_record_table(FACHADA_RECORDS)}"
        assert find_table_mismatch(text, FACHADA_RECORDS) is None

    def test_bulleted_lines_match(self) -> None:
        assert find_table_mismatch(f"- {ALLINEAR_LINE}", [ALLINEAR_RECORD]) is None

    def test_invented_line(self) -> None:
        text = f"{ALLINEAR_LINE}\nRef: 9999.X | Linha: Inventada | Potência: 99 | IP: IP20"
        assert find_table_mismatch(text, [ALLINEAR_RECORD]) == "unknown_record_line"

    def test_missing_records(self) -> None:
        text = "Para fachadas use IP65 ou superior."
        assert find_table_mismatch(text, FACHADA_RECORDS) == "records_missing"

    @pytest.mark.asyncio
    async def test_rationale_without_products_is_rewritten(self) -> None:
        verdict = await AuditGuard().review(
            _draft("Para fachadas use IP65 ou superior.", FACHADA_RECORDS, found=True)
        )

        assert verdict.approved is False
        assert verdict.reason == "records_missing"
        assert "Ref: 5103.PT.40" in verdict.final_text
        assert "Ref: 5104.PT.40" in verdict.final_text

    @pytest.mark.asyncio
    async def test_invented_product_is_replaced(self) -> None:
        verdict = await AuditGuard().review(
            _draft(
                "Ref: 9999.X | Linha: Inventada | Potência: 99 | IP: IP20",
                [ALLINEAR_RECORD],
                intent=Intent.PRODUCT_EXACT,
                found=True,
            )
        )

        assert verdict.approved is False
        assert verdict.reason == "unknown_record_line"
        assert verdict.final_text == ALLINEAR_LINE
