"""Prompts e formatação para chamadas ao oráculo.

Responsabilidades:
- Definir system prompts de cada etapa (roteamento, síntese, SQL, redação, auditoria)
- Formatar inputs com contexto da sessão
- Manter instruções JSON estruturadas
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from interlight_chat.domain.catalog import (
    CATALOG_COLUMNS,
    PRESENTATION_COLUMNS,
    Record,
    format_glossary,
)
from interlight_chat.domain.enums import Intent
from interlight_chat.domain.session import CONTEXT_ATTRIBUTES, Turn

RECORD_MASK = "Ref: [referencia_completa] | Linha: [linha] | Potência: [potencia_w] | IP: [grau_de_protecao]"


def get_intent_router_prompt() -> str:
    """Retorna system prompt do roteador de intenção."""
    attributes = ", ".join(CONTEXT_ATTRIBUTES)
    return f"""Você é o roteador de atendimento da Interlight (catálogo de iluminação).

Seu trabalho é **classificar a intenção** da mensagem e **extrair filtros** novos.

## Intenções

- THEORY: pergunta conceitual ("O que é", "Como iluminar", "Qual a diferença",
  dicas gerais). Não busca produtos.
- PRODUCT_EXACT: o cliente cita um código/referência ou o nome exato de uma linha.
- PRODUCT_CONSULTATIVE: o cliente descreve uma necessidade (ambiente, cor, uso)
  sem código exato.

## Contexto

Atributos possíveis: {attributes}.
Inclua em "contexto" APENAS os atributos mencionados na mensagem atual.
Use null somente quando o cliente pedir explicitamente para remover um filtro.

## Formato

Responda em JSON (válido) com este formato exato:
```json
{{
  "intencao": "PRODUCT_CONSULTATIVE",
  "contexto": {{"cor": "preto", "ambiente": "fachada externa"}}
}}
```

Sempre retorne JSON válido. Nunca adicione texto antes ou depois.
"""


def get_intent_router_reask() -> str:
    """Instrução corretiva quando a primeira resposta não era JSON válido."""
    return (
        "Sua resposta anterior não seguiu o formato. Responda SOMENTE o objeto JSON "
        'com as chaves "intencao" (THEORY, PRODUCT_EXACT ou PRODUCT_CONSULTATIVE) '
        'e "contexto".'
    )


def _format_context(context: Mapping[str, str | None]) -> str:
    known = {k: v for k, v in context.items() if v}
    return json.dumps(known, ensure_ascii=False) if known else "{}"


def _format_history(history: Sequence[Turn]) -> str:
    return "\n".join(f"- {turn.role.value}: {turn.text[:300]}" for turn in history)


def format_intent_router_input(
    message: str,
    context: Mapping[str, str | None],
    history: Sequence[Turn] | None = None,
    product_codes: Sequence[str] | None = None,
) -> str:
    """Formata input do roteador."""
    parts = [f"Mensagem do cliente: {message}", f"Contexto acumulado: {_format_context(context)}"]

    if product_codes:
        parts.append(f"Códigos de produto detectados: {', '.join(product_codes)}")

    if history:
        parts.append(f"Histórico recente:\n{_format_history(history)}")

    return "\n".join(parts)


def get_query_synthesis_prompt(manual_excerpt: str) -> str:
    """Retorna system prompt da síntese de especificação de busca."""
    return f"""Você é um especialista em iluminação da Interlight.

Seu trabalho é descrever, EM PROSA, o que deve ser buscado no catálogo para
atender o cliente. NÃO escreva SQL.

Indique: termos-chave (linha, tipologia, uso, cor, potência, proteção IP) e o
que é obrigatório versus desejável. Expanda abreviações usando o glossário.

## Glossário
{format_glossary()}

## Trecho do manual técnico
---
{manual_excerpt}
---

Responda em até 5 linhas, sem markdown.
"""


def format_query_synthesis_input(
    message: str,
    clean_term: str,
    context: Mapping[str, str | None],
    intent: Intent,
) -> str:
    """Formata input da síntese."""
    return "\n".join(
        [
            f"Mensagem do cliente: {message}",
            f"Termo limpo: {clean_term or '(vazio)'}",
            f"Contexto acumulado: {_format_context(context)}",
            f"Intenção: {intent.value}",
        ]
    )


def get_sql_generation_prompt(
    relation: str,
    strategy: str,
    row_limit: int,
) -> str:
    """Retorna system prompt para gerar UMA query de leitura de um nível."""
    columns = "\n".join(f"- {name}" for name in CATALOG_COLUMNS)
    select_list = ", ".join(PRESENTATION_COLUMNS)
    return f"""Você é um gerador de SQL PostgreSQL para o catálogo de iluminação Interlight.

Retorne OBRIGATORIAMENTE E APENAS um comando SELECT válido (somente leitura).
Sem crases, sem markdown, sem explicações, sem ponto e vírgula.

Tabela: {relation}
Colunas disponíveis:
{columns}

Selecione: SELECT {select_list} FROM {relation} ...

## Estratégia deste nível
{strategy}

Regras:
1. Use ILIKE para textos (ignora maiúsculas/minúsculas).
2. Use APENAS as colunas listadas.
3. Termine com LIMIT {row_limit}.
"""


def format_sql_generation_input(search_description: str) -> str:
    """Formata a especificação de busca para o gerador de SQL."""
    return f"Especificação de busca:\n{search_description}"


def _records_json(records: Sequence[Record]) -> str:
    return json.dumps([dict(r) for r in records], ensure_ascii=False, default=str)


def get_draft_prompt(
    intent: Intent,
    records: Sequence[Record],
    knowledge_excerpt: str | None,
) -> str:
    """Retorna system prompt da redação da resposta final."""
    if intent is Intent.PRODUCT_EXACT:
        tone = (
            "O cliente pediu um código/linha exata. PROIBIDO qualquer introdução ou "
            "teoria: comece DIRETAMENTE pela tabela de produtos."
        )
    elif intent is Intent.THEORY:
        tone = (
            "Pergunta teórica: aja como professor e explique o conceito usando APENAS "
            "o manual técnico. Nunca diga que não encontrou produtos."
        )
    else:
        tone = (
            "Abra com no máximo 2 frases de justificativa técnica baseadas APENAS no "
            "manual; em seguida liste os produtos."
        )

    parts = [
        "Você é um Engenheiro e Lighting Designer Sênior da Interlight.",
        "Responda de forma elegante, didática e comercial, em português.",
        "",
        f"## Tom\n{tone}",
        "",
        "## Máscara obrigatória (uma linha por produto)",
        RECORD_MASK,
        "Use somente os produtos de DADOS DO CATÁLOGO. Nunca invente produtos.",
        "Se DADOS DO CATÁLOGO estiver vazio e a pergunta pedir produtos, diga que não "
        "encontrou e peça mais detalhes (linha, ambiente, potência).",
        "",
        f"## DADOS DO CATÁLOGO\n---\n{_records_json(records)}\n---",
    ]
    if knowledge_excerpt:
        parts.extend(["", f"## MANUAL TÉCNICO\n---\n{knowledge_excerpt}\n---"])
    parts.extend(
        [
            "",
            "Responda em JSON (válido):",
            '{"resposta": "texto final", "encontrou_produtos": true}',
        ]
    )
    return "\n".join(parts)


def get_audit_prompt(records: Sequence[Record]) -> str:
    """Retorna system prompt da segunda opinião do auditor."""
    return f"""Você audita respostas do atendimento Interlight.

Produtos realmente encontrados no catálogo:
---
{_records_json(records)}
---

A resposta abaixo contradiz esses dados (nega que existam, omite todos ou
inventa produtos que não estão na lista)?

Responda em JSON (válido): {{"contradiz": true}} ou {{"contradiz": false}}
"""


def format_history_messages(history: Sequence[Turn]) -> list[dict[str, Any]]:
    """Converte turnos em mensagens do chat (role/content)."""
    return [{"role": turn.role.value, "content": turn.text} for turn in history]
