"""Esquema do catálogo Interlight e máscara de apresentação dos registros.

A máscara é o contrato de saída do atendimento: cada registro vira exatamente
uma linha, sempre na mesma ordem de campos:

    Ref: <código> | Linha: <linha> | Potência: <W> | IP: <grau de proteção>

Campos opcionais (fluxo, IRC, manual) são anexados somente quando presentes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

Record = Mapping[str, Any]

CATALOG_COLUMNS: tuple[str, ...] = (
    "referencia_completa",
    "usabilidade_principal",
    "usabilidade_secundaria",
    "tipologia",
    "sub_tipologia",
    "caracteristica_1",
    "caracteristica_2",
    "caracteristica_3",
    "linha",
    "linha_segm_1",
    "fonte",
    "lampada",
    "base_lampada",
    "potencia_w",
    "fluxo_lum_led_lm",
    "fluxo_lum_luminaria_lm",
    "eficacia_led",
    "eficacia_luminaria",
    "cct_k",
    "facho_b50",
    "intensidade_luminosa",
    "irc_ra_r1_r8",
    "irc_r9",
    "ugr",
    "tm30_18",
    "tm30_rf",
    "tm30_rg",
    "cqs",
    "vida_util",
    "sdcm",
    "grau_de_protecao",
    "led_lm_80",
    "classe",
    "tensao",
    "fator_de_potencia",
    "facho_f10",
    "cutoff",
    "d_uv",
    "frequencia",
    "subtitulo",
    "descricao",
    "material",
    "cores",
    "peso",
    "nicho",
    "acessorios",
    "apresentacao_da_linha",
    "garantia",
    "ies",
    "manual",
    "irc",
)

# Colunas sempre selecionadas pelas queries geradas (alimentam a máscara)
PRESENTATION_COLUMNS: tuple[str, ...] = (
    "referencia_completa",
    "linha",
    "potencia_w",
    "grau_de_protecao",
    "fluxo_lum_luminaria_lm",
    "irc",
    "descricao",
    "cores",
    "manual",
)

PRIMARY_IDENTIFIER = "referencia_completa"

# Abreviações usadas pelos vendedores e pelo próprio catálogo
DOMAIN_GLOSSARY: dict[str, str] = {
    "BR": "branco",
    "PT": "preto",
    "CZ": "cinza",
    "DR": "dourado",
    "BZ": "bronze",
    "GR": "grafite",
    "IP": "grau de proteção contra poeira e água (coluna grau_de_protecao)",
    "IRC": "índice de reprodução de cor (coluna irc / irc_ra_r1_r8)",
    "CCT": "temperatura de cor em Kelvin (coluna cct_k)",
    "UGR": "índice de ofuscamento unificado (coluna ugr)",
    "lm": "lúmens, fluxo luminoso (coluna fluxo_lum_luminaria_lm)",
    "W": "watts, potência (coluna potencia_w)",
}

# (rótulo, aliases aceitos, sufixo)
_REQUIRED_FIELDS: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("Ref", ("referencia_completa", "produtos", "referencia", "ref"), ""),
    ("Linha", ("linha", "line"), ""),
    ("Potência", ("potencia_w", "potencia", "w", "wattage"), ""),
    ("IP", ("grau_de_protecao", "ip"), ""),
)
_OPTIONAL_FIELDS: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("Fluxo", ("fluxo_lum_luminaria_lm", "fluxo", "flux"), " lm"),
    ("IRC", ("irc", "irc_ra_r1_r8", "cri"), ""),
    ("Manual", ("manual", "doc", "document"), ""),
)

RECORD_LINE_PREFIX = "Ref:"
_RECORD_LINE_RE = re.compile(r"^\s*[-*•]?\s*Ref:", re.IGNORECASE)


def freeze_record(row: Mapping[str, Any]) -> Record:
    """Retorna uma visão somente leitura do registro."""
    return MappingProxyType(dict(row))


def freeze_records(rows: Iterable[Mapping[str, Any]]) -> tuple[Record, ...]:
    return tuple(freeze_record(row) for row in rows)


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _lookup(record: Record, aliases: Sequence[str]) -> str | None:
    lowered = {str(k).lower(): v for k, v in record.items()}
    for alias in aliases:
        value = lowered.get(alias)
        if value is None:
            continue
        text = _format_value(value)
        if text:
            return text
    return None


def render_record_line(record: Record) -> str:
    """Renderiza um registro na máscara obrigatória (uma linha)."""
    parts: list[str] = []
    for label, aliases, suffix in _REQUIRED_FIELDS:
        value = _lookup(record, aliases)
        parts.append(f"{label}: {value}{suffix}" if value else f"{label}: -")
    for label, aliases, suffix in _OPTIONAL_FIELDS:
        value = _lookup(record, aliases)
        if value:
            parts.append(f"{label}: {value}{suffix}")
    return " | ".join(parts)


def render_record_table(records: Iterable[Record]) -> str:
    """Renderiza todos os registros, um por linha, na ordem recebida."""
    return "\n".join(render_record_line(record) for record in records)


def is_record_line(line: str) -> bool:
    """True se a linha segue o formato de produto (começa com 'Ref:')."""
    return bool(_RECORD_LINE_RE.match(line))


def strip_record_lines(text: str) -> str:
    """Remove linhas de produto de um texto (usado quando não há registros)."""
    kept = [line for line in text.splitlines() if not is_record_line(line)]
    return "\n".join(kept).strip()


def format_glossary() -> str:
    return "\n".join(f"- {abbr}: {meaning}" for abbr, meaning in DOMAIN_GLOSSARY.items())
