"""Escada de escalonamento de busca no catálogo.

Cada nível pede ao oráculo UMA query de leitura com estratégia própria, do
mais restritivo ao mais amplo. A máquina de estados é explícita:

    Nível(n) --SUCCESS--> FOUND
    Nível(n) --ABORT----> ABORTED   (violação de política, nada é executado)
    Nível(n) --CONTINUE-> Nível(n+1) ou EXHAUSTED após o último nível

Nunca executa mais queries do que níveis configurados, nunca repete um nível
e nunca escreve no catálogo.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from interlight_chat.ai import openai_prompts
from interlight_chat.ai.openai_parser import strip_code_fences
from interlight_chat.application.query_synthesizer import RetrievalSpec
from interlight_chat.config.settings import MAX_ESCALATION_LEVELS
from interlight_chat.domain.catalog import Record
from interlight_chat.domain.enums import EscalationStatus, LevelOutcome
from interlight_chat.domain.errors import QueryPolicyViolation, StoreExecutionError
from interlight_chat.domain.protocols.catalog_store import CatalogStore
from interlight_chat.domain.protocols.oracle import ReasoningOracle
from interlight_chat.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LevelStrategy:
    """Estratégia de um nível da escada."""

    level: int
    name: str
    instructions: str


LADDER: tuple[LevelStrategy, ...] = (
    LevelStrategy(
        level=1,
        name="exata",
        instructions=(
            "Busca EXATA pelo identificador. Filtre somente pela coluna "
            "referencia_completa, com igualdade ou ILIKE ancorado sem curingas "
            "internos (ex: referencia_completa ILIKE '2153.S.PM'). Se não houver "
            "código na especificação, use o nome exato da linha na coluna linha."
        ),
    ),
    LevelStrategy(
        level=2,
        name="parcial",
        instructions=(
            "Busca PARCIAL. Use ILIKE '%termo%' combinando com OR as colunas "
            "referencia_completa, linha, descricao e subtitulo. Aplique os filtros "
            "de contexto (cor em cores, ambiente em usabilidade_principal) quando "
            "existirem."
        ),
    ),
    LevelStrategy(
        level=3,
        name="ampla",
        instructions=(
            "Busca AMPLA por categoria. Extraia palavras-chave e use ILIKE "
            "'%palavra%' com OR nas colunas linha, tipologia, sub_tipologia, "
            "usabilidade_principal, usabilidade_secundaria e cores. Prefira "
            "trazer resultados a ser restritivo."
        ),
    ),
)

# -----------------------------------------------------------------------------
# Política de SQL (somente leitura, cardinalidade limitada)
# -----------------------------------------------------------------------------

# Literais '...' e identificadores "..." (varridos juntos, da esquerda para a direita)
_QUOTED = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"")
_LEADING_SELECT = re.compile(r"^select\b", re.IGNORECASE)
_FORBIDDEN = re.compile(
    r"\b(insert|update|delete|drop|alter|create|truncate|grant|revoke|into|copy|merge|"
    r"call|execute|do|vacuum|lock|set|reset|listen|notify)\b",
    re.IGNORECASE,
)
_TRAILING_LIMIT = re.compile(
    r"\blimit\s+(\d+|all)(\s+offset\s+\d+)?\s*$", re.IGNORECASE
)


def validate_select(sql: str, level: int | None = None) -> str:
    """Normaliza e valida uma query gerada; retorna o texto limpo.

    Raises:
        QueryPolicyViolation: não começa com SELECT, tem várias instruções,
            comentários ou palavras de escrita fora de literais e
            identificadores entre aspas.
    """
    cleaned = strip_code_fences(sql).strip().rstrip(";").strip()
    if not _LEADING_SELECT.match(cleaned):
        raise QueryPolicyViolation("Query não começa com SELECT", level=level)

    scrubbed = _QUOTED.sub(lambda m: m.group(0)[0] * 2, cleaned)
    if ";" in scrubbed:
        raise QueryPolicyViolation("Múltiplas instruções na query", level=level)
    if "--" in scrubbed or "/*" in scrubbed:
        raise QueryPolicyViolation("Comentários não são permitidos", level=level)
    forbidden = _FORBIDDEN.search(scrubbed)
    if forbidden:
        raise QueryPolicyViolation(
            f"Palavra-chave proibida: {forbidden.group(1).upper()}", level=level
        )
    return cleaned


def enforce_row_limit(sql: str, limit: int) -> str:
    """Garante LIMIT <= limit no fim da query (acrescenta ou reduz)."""
    match = _TRAILING_LIMIT.search(sql)
    if match is None:
        return f"{sql} LIMIT {limit}"

    current = match.group(1)
    if current.isdigit() and int(current) <= limit:
        return sql
    offset = match.group(2) or ""
    return f"{sql[: match.start()]}LIMIT {limit}{offset}"


# -----------------------------------------------------------------------------
# Máquina de estados
# -----------------------------------------------------------------------------

_TERMINAL_OUTCOMES: dict[LevelOutcome, EscalationStatus] = {
    LevelOutcome.SUCCESS: EscalationStatus.FOUND,
    LevelOutcome.ABORT: EscalationStatus.ABORTED,
}


def advance(level: int, outcome: LevelOutcome, max_levels: int) -> int | EscalationStatus:
    """Transição da escada: próximo nível ou status terminal."""
    terminal = _TERMINAL_OUTCOMES.get(outcome)
    if terminal is not None:
        return terminal
    if level >= max_levels:
        return EscalationStatus.EXHAUSTED
    return level + 1


@dataclass(frozen=True, slots=True)
class EscalationAttempt:
    """Registro de um nível executado (para logs e metadados)."""

    level: int
    query: str
    outcome: LevelOutcome
    rows: int = 0
    error: str | None = None


@dataclass(slots=True)
class EscalationResult:
    """Resultado da escada."""

    status: EscalationStatus
    records: tuple[Record, ...] = ()
    query: str | None = None
    level: int | None = None
    attempts: list[EscalationAttempt] = field(default_factory=list)
    violation: QueryPolicyViolation | None = None

    @property
    def found(self) -> bool:
        return self.status is EscalationStatus.FOUND

    @classmethod
    def skipped(cls) -> EscalationResult:
        return cls(status=EscalationStatus.SKIPPED)


class RetrievalEscalationEngine:
    """Executa a escada sobre o catálogo.

    Falhas de execução no catálogo contam como zero resultados (próximo nível).
    Indisponibilidade do oráculo ou do catálogo propaga (fatal).
    """

    def __init__(
        self,
        oracle: ReasoningOracle,
        store: CatalogStore,
        relation: str,
        *,
        levels: int = MAX_ESCALATION_LEVELS,
        row_limit: int = 10,
    ) -> None:
        if not 1 <= levels <= len(LADDER):
            msg = f"levels deve estar entre 1 e {len(LADDER)}"
            raise ValueError(msg)
        self._oracle = oracle
        self._store = store
        self._relation = relation
        self._ladder = LADDER[:levels]
        self._row_limit = row_limit

    @property
    def max_levels(self) -> int:
        return len(self._ladder)

    async def _generate_query(self, strategy: LevelStrategy, spec: RetrievalSpec) -> str:
        return await self._oracle.complete(
            openai_prompts.get_sql_generation_prompt(
                self._relation, strategy.instructions, self._row_limit
            ),
            [
                {
                    "role": "user",
                    "content": openai_prompts.format_sql_generation_input(spec.render()),
                }
            ],
            purpose=f"sql_level_{strategy.level}",
            temperature=0.0,
        )

    async def _run_level(
        self, strategy: LevelStrategy, spec: RetrievalSpec
    ) -> tuple[EscalationAttempt, tuple[Record, ...], QueryPolicyViolation | None]:
        raw = await self._generate_query(strategy, spec)

        try:
            sql = validate_select(raw, level=strategy.level)
        except QueryPolicyViolation as exc:
            logger.warning(
                "escalation_policy_violation",
                extra={"level": strategy.level, "reason": str(exc)},
            )
            attempt = EscalationAttempt(
                level=strategy.level, query=raw, outcome=LevelOutcome.ABORT, error=str(exc)
            )
            return attempt, (), exc

        sql = enforce_row_limit(sql, self._row_limit)
        try:
            records = await self._store.fetch(sql)
        except StoreExecutionError as exc:
            logger.info(
                "escalation_level_failed",
                extra={"level": strategy.level, "error": str(exc)},
            )
            attempt = EscalationAttempt(
                level=strategy.level, query=sql, outcome=LevelOutcome.CONTINUE, error=str(exc)
            )
            return attempt, (), None

        outcome = LevelOutcome.SUCCESS if records else LevelOutcome.CONTINUE
        attempt = EscalationAttempt(
            level=strategy.level, query=sql, outcome=outcome, rows=len(records)
        )
        return attempt, records, None

    async def run(self, spec: RetrievalSpec) -> EscalationResult:
        attempts: list[EscalationAttempt] = []
        state = 1

        while True:
            strategy = self._ladder[state - 1]
            attempt, records, violation = await self._run_level(strategy, spec)
            attempts.append(attempt)
            logger.info(
                "escalation_level_result",
                extra={
                    "level": attempt.level,
                    "strategy": strategy.name,
                    "outcome": attempt.outcome.value,
                    "rows": attempt.rows,
                },
            )

            next_state = advance(state, attempt.outcome, self.max_levels)
            if isinstance(next_state, int):
                state = next_state
                continue

            result = EscalationResult(
                status=next_state,
                records=records,
                query=attempt.query,
                level=attempt.level,
                attempts=attempts,
                violation=violation,
            )
            logger.info(
                "escalation_finished",
                extra={
                    "status": result.status.value,
                    "level": result.level,
                    "queries": len(attempts),
                    "rows": len(result.records),
                },
            )
            return result

