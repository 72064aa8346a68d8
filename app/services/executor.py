# app/services/executor.py

import logging
from typing import Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.schemas.chat import QueryResult, QuerySpec

logger = logging.getLogger(__name__)

ERROR_PREFIX = "ERROR ejecutando: "


def _rows_from_result(result) -> List[dict]:
    """
    SQLAlchemy 결과를 List[dict]로 변환 (값은 드라이버 타입 그대로)
    """
    if not result.returns_rows:
        return []
    return [dict(row._mapping) for row in result]


def _run_raw(db: Session, sql: str):
    # SQL 문자열 그대로 실행 (:name 바인드 해석, % 포맷팅 없음)
    return db.connection().exec_driver_sql(
        sql, execution_options={"no_parameters": True}
    )


def execute(db: Session, queries: Iterable[QuerySpec]) -> List[QueryResult]:
    """
    QuerySpec 들을 순서대로 하나씩 실행한다.
    - 입력 1건당 결과 1건, 순서 유지
    - 한 쿼리가 실패해도 나머지는 계속 실행 (에러는 rows 안에 데이터로 담는다)
    """
    results: List[QueryResult] = []

    try:
        for q in queries:
            results.append(_execute_one(db, q))
    finally:
        # 질문 단위로 읽기 트랜잭션을 닫는다 (커밋할 것 없음)
        db.rollback()

    return results


def _execute_one(db: Session, q: QuerySpec) -> QueryResult:
    try:
        rows = _rows_from_result(_run_raw(db, q.sql))
    except SQLAlchemyError as e:
        logger.warning("Query failed: %s\n%s", q.sql, e)
        # 실패한 트랜잭션 상태를 풀어야 다음 쿼리가 실행됨
        db.rollback()
        return QueryResult(
            description=f"{ERROR_PREFIX}{q.description}",
            sql=q.sql,
            rows=[{"error": str(getattr(e, "orig", None) or e)}],
        )

    return QueryResult(description=q.description, sql=q.sql, rows=rows)
