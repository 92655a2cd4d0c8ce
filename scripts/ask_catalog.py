#!/usr/bin/env python
"""Script de diagnóstico: envia uma pergunta ao assistente do catálogo.

Testa o fluxo completo (roteador, escada de busca, redação e auditoria) com as
configurações do ambiente (.env) e imprime o JSON devolvido ao chamador.

Uso:
    python scripts/ask_catalog.py
    python scripts/ask_catalog.py "luminária para fachada externa, cor preta" --session loja-1
"""

from __future__ import annotations

import argparse
import asyncio
import json

from interlight_chat.application.pipeline import CatalogAssistant
from interlight_chat.config import get_settings
from interlight_chat.observability.logging import configure_logging

DEFAULT_QUESTION = "Qual é a potência e o fluxo luminoso do projetor 2015.AB.W.BM?"


async def ask(question: str, session_key: str | None) -> dict:
    assistant = CatalogAssistant.from_settings(get_settings())
    try:
        return await assistant.respond(question, session_key)
    finally:
        await assistant.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Pergunta ao assistente do catálogo Interlight")
    parser.add_argument("question", nargs="?", default=DEFAULT_QUESTION)
    parser.add_argument("--session", default=None, help="Chave de sessão (opcional)")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, settings.service_name, log_format="text")

    print(f'Enviando pergunta: "{args.question}"\n')
    try:
        payload = asyncio.run(ask(args.question, args.session))
    except ValueError as exc:
        print(f"❌ {exc}")
        return 1

    print("=== RESPOSTA DO AGENTE ===")
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if "error" not in payload else 1


if __name__ == "__main__":
    raise SystemExit(main())
