# app/services/planner.py

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.errors import ContentMissingError, PlanParseError, SchemaViolationError
from app.core.llm_client import LLMClient
from app.schemas.chat import QueryPlan, QuerySpec, RejectedQuery
from app.services.sql_guard import check_sql
from app.services.sql_schema import PLANNER_SYSTEM_PROMPT, SCHEMA_DESCRIPTION

logger = logging.getLogger(__name__)

# ```json ... ``` 로 한 번 감싸서 오는 경우만 벗겨낸다 (DESIGN.md 결정 3, 안쪽은 여전히 엄격한 JSON)
_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def build_planner_messages(question: str, schema: str = SCHEMA_DESCRIPTION):
    user_content = (
        f"Esquema de la base de datos:\n\n{schema.strip()}\n\n"
        f"Pregunta del usuario:\n{question}"
    )
    return [
        {"role": "system", "content": PLANNER_SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


def _strip_fence(text: str) -> str:
    text = text.strip()
    m = _FENCE_RE.match(text)
    return m.group(1) if m else text


def _to_query_spec(item: Any) -> QuerySpec:
    if not isinstance(item, dict):
        return QuerySpec()
    try:
        return QuerySpec(**item)
    except ValidationError:
        # description/sql 이 문자열이 아니면 빈 SQL 로 취급 → 검사에서 거부됨
        return QuerySpec(description=str(item.get("description") or ""))


def parse_plan(raw: str) -> QueryPlan:
    """
    LLM 응답 텍스트 → QueryPlan.
    안전 검사를 통과한 SQL만 queries 에 남기고, 나머지는 rejected 에 사유와 함께 기록한다.
    """
    if not raw or not raw.strip():
        raise ContentMissingError("El modelo no devolvió contenido para las queries.")

    try:
        parsed = json.loads(_strip_fence(raw))
    except json.JSONDecodeError as e:
        logger.error("Error al parsear JSON devuelto por el modelo:\n%s", raw)
        raise PlanParseError(f"Respuesta del modelo no es JSON válido: {e}", raw) from e

    if not isinstance(parsed, dict) or not isinstance(parsed.get("queries"), list):
        raise SchemaViolationError("El JSON no contiene un array 'queries'.")

    query_plan = QueryPlan()
    for item in parsed["queries"]:
        spec = _to_query_spec(item)
        reason = check_sql(spec.sql)
        if reason is None:
            query_plan.queries.append(spec)
            continue

        logger.warning("SQL descartada (%s): %s", reason, spec.sql)
        query_plan.rejected.append(
            RejectedQuery(description=spec.description, sql=spec.sql, reason=reason)
        )

    return query_plan


async def plan(
    llm: LLMClient,
    question: str,
    schema: str = SCHEMA_DESCRIPTION,
) -> QueryPlan:
    """
    질문 + 스키마 설명으로 LLM에게 SELECT 쿼리 목록(JSON)을 생성시킨다.
    재시도 없음. 실패하면 예외가 그대로 호출자에게 간다.
    """
    settings = get_settings()
    messages = build_planner_messages(question, schema)

    raw = await llm.chat(
        messages,
        model=settings.LLM_MODEL,
        temperature=settings.PLANNER_TEMPERATURE,
    )
    return parse_plan(raw or "")
