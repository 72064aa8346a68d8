# app/cli.py
"""
터미널 대화 모드.

실행:
    python -m app.cli
    (또는 설치 후) manolitodb-chat

'salir' 를 입력하면 종료하고 DB 풀을 닫는다.
"""

import asyncio
import logging
import sys
from typing import Callable, Optional, TextIO

from sqlalchemy.orm import Session

from app.core.llm_client import LLMClient, llm_client
from app.core.logging_config import setup_logging
from app.db.session import SessionLocal, engine
from app.services.answer_service import synthesize_stream
from app.services.chat_service import prepare_chat

logger = logging.getLogger(__name__)

EXIT_WORD = "salir"


def _should_exit(line: Optional[str]) -> bool:
    return not line or line.strip().lower() == EXIT_WORD


async def answer_question(
    db: Session,
    llm: LLMClient,
    question: str,
    out: Optional[TextIO] = None,
) -> None:
    """질문 한 건: 생성된 SQL 출력 → 실행 → 답변을 토큰 단위로 출력"""
    out = out or sys.stdout
    print("\n[Generando SQL desde la pregunta...]\n", file=out)
    query_plan, resultados = await prepare_chat(db, llm, question)

    print("[Consultas generadas por la IA:]", file=out)
    for i, q in enumerate(query_plan.queries, start=1):
        print(f"\n#{i} {q.description}\n{q.sql}\n", file=out)

    for r in query_plan.rejected:
        print(f"[Consulta descartada: {r.reason}]\n{r.sql}\n", file=out)

    print("[Respuesta de la IA basada en los datos:]\n", file=out)
    async for delta in synthesize_stream(llm, question, resultados):
        out.write(delta)
        out.flush()
    out.write("\n")
    out.flush()


async def chat_loop(
    db: Session,
    llm: LLMClient,
    read_line: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
) -> None:
    out = out or sys.stdout
    print("--ManolitoDB Chat--", file=out)
    print("Escribe 'salir' para terminar.\n", file=out)

    while True:
        try:
            pregunta = read_line("Tú: ")
        except EOFError:
            break
        if _should_exit(pregunta):
            break

        try:
            await answer_question(db, llm, pregunta, out=out)
        except Exception:
            # 한 질문이 실패해도 루프는 계속
            logger.exception("Error en el proceso")


def main() -> None:
    setup_logging()
    db = SessionLocal()
    try:
        asyncio.run(chat_loop(db, llm_client))
    except KeyboardInterrupt:
        pass
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main()
