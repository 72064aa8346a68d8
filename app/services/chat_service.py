# app/services/chat_service.py

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.core.llm_client import LLMClient
from app.schemas.chat import ChatResponse, QueryPlan, QueryResult
from app.services.answer_service import synthesize
from app.services.executor import execute
from app.services.planner import plan

logger = logging.getLogger(__name__)


async def prepare_chat(
    db: Session,
    llm: LLMClient,
    question: str,
) -> Tuple[QueryPlan, List[QueryResult]]:
    """
    1) LLM으로 SQL 계획
    2) 계획된 SQL 순차 실행
    (답변 생성은 호출 쪽에서 일반/스트리밍 중 선택)
    """
    query_plan = await plan(llm, question)
    logger.info(
        "planned %d queries (%d rejected) for question=%r",
        len(query_plan.queries),
        len(query_plan.rejected),
        question,
    )

    resultados = execute(db, query_plan.queries)
    return query_plan, resultados


async def run_chat(db: Session, llm: LLMClient, question: str) -> ChatResponse:
    """
    질문 한 건 전체 처리: 계획 → 실행 → 답변
    """
    query_plan, resultados = await prepare_chat(db, llm, question)
    answer = await synthesize(llm, question, resultados)

    return ChatResponse(
        answer=answer,
        queries=query_plan.queries,
        resultados=resultados,
        rechazadas=query_plan.rejected,
    )
