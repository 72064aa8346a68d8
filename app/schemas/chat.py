# app/schemas/chat.py

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """
    프론트/클라이언트에서 보내는 요청 바디.
    예: { "message": "¿Cuántos tornillos produjo la planta 3 ayer?" }
    """
    message: Optional[str] = None


class QuerySpec(BaseModel):
    """
    LLM이 계획한(아직 실행 전) SQL 한 건
    """
    model_config = ConfigDict(extra="ignore")

    description: str = ""
    sql: str = ""


class RejectedQuery(BaseModel):
    """안전 검사에서 걸러진 SQL과 그 사유"""
    description: str = ""
    sql: str = ""
    reason: str


class QueryPlan(BaseModel):
    queries: List[QuerySpec] = Field(default_factory=list)
    rejected: List[RejectedQuery] = Field(default_factory=list)


class QueryResult(BaseModel):
    """
    QuerySpec 실행 결과.
    실패 시 rows = [{"error": "..."}], description 앞에 에러 표시가 붙는다.
    """
    description: str
    sql: str
    rows: List[Dict[str, Any]] = Field(default_factory=list)


class ChatResponse(BaseModel):
    answer: str
    queries: List[QuerySpec] = Field(default_factory=list)
    resultados: List[QueryResult] = Field(default_factory=list)
    rechazadas: List[RejectedQuery] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
