# app/services/answer_service.py

import json
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import AsyncIterator, Dict, List, Sequence

from app.core.config import get_settings
from app.core.llm_client import LLMClient
from app.schemas.chat import QueryResult
from app.services.sql_schema import ANSWER_SYSTEM_PROMPT


def _normalize_value(value):
    """
    DB 조회 결과를 JSON 직렬화 가능한 타입으로 변환.

    - Decimal  -> float
    - date/datetime/time -> ISO 문자열
    - timedelta (MySQL TIME) -> 초
    - bytes -> 문자열
    """
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def results_to_json(results: Sequence[QueryResult]) -> str:
    return json.dumps(
        [r.model_dump() for r in results],
        ensure_ascii=False,
        indent=2,
        default=_normalize_value,
    )


def build_answer_messages(question: str, results: Sequence[QueryResult]) -> List[Dict]:
    """
    일반/스트리밍 두 방식이 같이 쓰는 프롬프트.
    에러 sentinel 이 들어간 결과도 그대로 넘겨서 모델이 사용자에게 설명하게 한다.
    """
    user_content = (
        f"Pregunta original:\n{question}\n\n"
        "Consultas ejecutadas y sus resultados (formato JSON):\n"
        f"{results_to_json(results)}"
    )
    return [
        {"role": "system", "content": ANSWER_SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


async def synthesize(
    llm: LLMClient,
    question: str,
    results: Sequence[QueryResult],
) -> str:
    settings = get_settings()
    text = await llm.chat(
        build_answer_messages(question, results),
        model=settings.LLM_MODEL,
        temperature=settings.ANSWER_TEMPERATURE,
    )
    return (text or "").strip()


async def synthesize_stream(
    llm: LLMClient,
    question: str,
    results: Sequence[QueryResult],
) -> AsyncIterator[str]:
    """토큰(delta)이 도착하는 대로 그대로 흘려보낸다. 버퍼링 없음."""
    settings = get_settings()
    async for delta in llm.chat_stream(
        build_answer_messages(question, results),
        model=settings.LLM_MODEL,
        temperature=settings.ANSWER_TEMPERATURE,
    ):
        yield delta
