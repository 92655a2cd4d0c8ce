"""Testes de normalização de texto e detecção de códigos."""

from __future__ import annotations

from interlight_chat.domain.text import (
    extract_clean_term,
    find_product_codes,
    fold,
    keywords,
)


class TestFindProductCodes:
    def test_detects_codes_in_order(self) -> None:
        message = "Qual a potência do 2153.S.PM e do 2015.AB.W.BM?"
        assert find_product_codes(message) == ["2153.S.PM", "2015.AB.W.BM"]

    def test_ignores_duplicates(self) -> None:
        assert find_product_codes("2153.S.PM ou 2153.S.PM?") == ["2153.S.PM"]

    def test_hyphen_separated_code(self) -> None:
        assert find_product_codes("modelo 5103-PT") == ["5103-PT"]

    def test_non_codes(self) -> None:
        assert find_product_codes("IP67, 10W, 2700K e 4000 lúmens") == []

    def test_empty_message(self) -> None:
        assert find_product_codes("") == []


class TestExtractCleanTerm:
    def test_keeps_code_characters(self) -> None:
        term = extract_clean_term("Qual é a potência do projetor 2015.AB.W.BM?")
        assert term == "potência projetor 2015.AB.W.BM"

    def test_removes_greetings_and_noise(self) -> None:
        term = extract_clean_term("Olá, bom dia!!! Vocês têm luminária para fachada???")
        assert term == "luminária fachada"

    def test_only_fillers(self) -> None:
        assert extract_clean_term("Oi, tudo bem? por favor") == "tudo bem"


def test_fold_removes_accents_and_case() -> None:
    assert fold("Não Encontrei Potência") == "nao encontrei potencia"


def test_keywords_are_folded_and_unique() -> None:
    assert keywords("O que é ofuscamento? Ofuscamento!") == ["ofuscamento"]
    assert keywords("IP da fachada") == ["fachada"]
