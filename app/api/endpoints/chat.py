import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.orm import Session

from app.core.llm_client import LLMClient, get_llm_client
from app.db.session import get_db
from app.schemas.chat import ChatRequest, ChatResponse, ErrorResponse
from app.services.answer_service import synthesize_stream
from app.services.chat_service import prepare_chat, run_chat

logger = logging.getLogger(__name__)

router = APIRouter()

MISSING_MESSAGE = "Falta 'message' en el body."
PIPELINE_ERROR = "Error procesando la pregunta."

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _message_of(req: Optional[ChatRequest]) -> Optional[str]:
    message = req.message if req else None
    if not message or not message.strip():
        return None
    return message


@router.post("/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat_endpoint(
    req: Optional[ChatRequest] = None,
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
):
    """
    자연어 질문 → SQL 계획/실행 → 답변.
    응답: { answer, queries, resultados, rechazadas }
    """
    message = _message_of(req)
    if message is None:
        return _error(400, MISSING_MESSAGE)

    try:
        return await run_chat(db, llm, message)
    except Exception:
        logger.exception("[chat_endpoint] pipeline error, message=%r", message)
        return _error(500, PIPELINE_ERROR)


@router.post("/chat/stream", responses=ERROR_RESPONSES)
async def chat_stream_endpoint(
    req: Optional[ChatRequest] = None,
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
):
    """
    /chat 과 같지만 최종 답변만 text/plain 으로 토큰 단위 스트리밍한다.
    계획/실행 단계 실패는 스트림 시작 전이라 500 JSON 으로 응답.
    """
    message = _message_of(req)
    if message is None:
        return _error(400, MISSING_MESSAGE)

    try:
        _, resultados = await prepare_chat(db, llm, message)
    except Exception:
        logger.exception("[chat_stream_endpoint] pipeline error, message=%r", message)
        return _error(500, PIPELINE_ERROR)

    async def answer_tokens():
        try:
            async for delta in synthesize_stream(llm, message, resultados):
                yield delta
        except Exception:
            # 헤더는 이미 나갔으므로 스트림만 끊는다
            logger.exception("[chat_stream_endpoint] stream aborted, message=%r", message)

    return StreamingResponse(answer_tokens(), media_type="text/plain; charset=utf-8")
