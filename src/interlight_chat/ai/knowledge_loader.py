"""Carregador do manual técnico Interlight (fonte de conhecimento).

O manual é lido uma única vez no startup e mantido em memória. As etapas do
pipeline recebem apenas trechos (substrings) limitados por tamanho; o texto
nunca é alterado.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from interlight_chat.domain.text import fold, keywords
from interlight_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")


class KnowledgeSource:
    """Manual técnico em memória com seleção de trechos por relevância."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._paragraphs = [p.strip() for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]
        self._folded = [fold(p) for p in self._paragraphs]

    @classmethod
    def from_file(cls, path: Path) -> KnowledgeSource:
        """Lê o manual do disco.

        Raises:
            FileNotFoundError: Se o arquivo não existir.
        """
        if not path.is_file():
            msg = f"Manual técnico não encontrado: {path}"
            logger.error(msg)
            raise FileNotFoundError(msg)

        content = path.read_text(encoding="utf-8")
        logger.info(
            "Manual técnico carregado",
            extra={"chars": len(content), "path": str(path)},
        )
        return cls(content)

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def excerpt(self, query: str, max_chars: int = 12000) -> str:
        """Trecho do manual relevante para `query`, limitado a `max_chars`.

        Parágrafos são pontuados pela quantidade de termos da pergunta que
        contêm; os melhores entram no trecho na ordem original do documento.
        Sem nenhum termo em comum, devolve o início do manual.
        """
        if len(self._text) <= max_chars:
            return self._text

        terms = keywords(query)
        scored = [
            (sum(folded.count(term) for term in terms), idx)
            for idx, folded in enumerate(self._folded)
        ]
        ranked = [idx for score, idx in sorted(scored, key=lambda s: (-s[0], s[1])) if score > 0]
        if not ranked:
            return self._text[:max_chars]

        chosen: list[int] = []
        used = 0
        for idx in ranked:
            size = len(self._paragraphs[idx]) + 2
            if used + size > max_chars:
                continue
            chosen.append(idx)
            used += size

        if not chosen:
            return self._paragraphs[ranked[0]][:max_chars]
        return "\n\n".join(self._paragraphs[idx] for idx in sorted(chosen))
