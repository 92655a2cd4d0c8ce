"""Normalização de texto e extração de termos de busca.

Responsabilidade:
- Remover palavras de preenchimento e ruído não alfanumérico
- Preservar caracteres relevantes para códigos (dígitos, ponto, hífen)
- Detectar códigos de produto (ex: 2153.S.PM, 2015.AB.W.BM)

Determinístico: mesma entrada = mesma saída.
"""

from __future__ import annotations

import re
import unicodedata
from re import Pattern

# Código Interlight: 3-5 dígitos seguidos de segmentos separados por ponto/hífen
_PRODUCT_CODE: Pattern[str] = re.compile(r"(?<![\w.])\d{3,5}(?:[.\-][A-Za-z0-9]+)+")
_TOKEN: Pattern[str] = re.compile(r"[0-9A-Za-zÀ-ÖØ-öø-ÿ.\-]+")

FILLER_WORDS: frozenset[str] = frozenset(
    {
        "a", "o", "as", "os", "um", "uma", "uns", "umas", "de", "da", "do", "das", "dos",
        "e", "em", "no", "na", "nos", "nas", "para", "pra", "por", "com", "sem", "que",
        "qual", "quais", "quanto", "quantos", "como", "onde", "me", "meu", "minha",
        "voce", "voces", "tem", "tenho", "ter", "ha", "existe", "existem",
        "ola", "oi", "bom", "boa", "dia", "tarde", "noite", "favor",
        "gostaria", "quero", "queria", "preciso", "procuro", "busco", "saber",
        "informacao", "informacoes", "sobre", "fale", "falar", "mostre", "mostrar",
        "produto", "produtos", "modelo", "modelos", "codigo", "referencia", "ref",
        "ai", "ja", "mais", "muito", "isso", "esse", "essa", "este", "esta", "ao",
    }
)


def fold(text: str) -> str:
    """Minúsculas sem acentos (comparações léxicas robustas)."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def find_product_codes(message: str) -> list[str]:
    """Retorna códigos de produto na ordem em que aparecem (sem repetição)."""
    seen: list[str] = []
    for match in _PRODUCT_CODE.finditer(message or ""):
        code = match.group(0).rstrip(".-")
        if code not in seen:
            seen.append(code)
    return seen


def extract_clean_term(message: str) -> str:
    """Remove preenchimento e ruído mantendo o que importa para a busca.

    Exemplos:
        >>> extract_clean_term("Qual é a potência do projetor 2015.AB.W.BM?")
        'potência projetor 2015.AB.W.BM'
    """
    tokens: list[str] = []
    for raw in _TOKEN.findall(message or ""):
        token = raw.strip(".-")
        if not token:
            continue
        if fold(token) in FILLER_WORDS:
            continue
        tokens.append(token)
    return " ".join(tokens)


def keywords(text: str, min_length: int = 3) -> list[str]:
    """Palavras relevantes (dobradas) para pontuação de trechos do manual."""
    result: list[str] = []
    for token in extract_clean_term(text).split():
        folded = fold(token)
        if len(folded) >= min_length and folded not in result:
            result.append(folded)
    return result
