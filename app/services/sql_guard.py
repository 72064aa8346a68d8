# app/services/sql_guard.py

from typing import Optional

import sqlglot
from sqlglot import expressions as exp
from sqlglot.errors import SqlglotError

SQL_DIALECT = "mysql"

# 하나라도 트리에 있으면 거부
FORBIDDEN_NODES = (
    exp.Insert,
    exp.Update,
    exp.Delete,
    exp.Drop,
    exp.Create,
    exp.Merge,
    exp.Command,
    exp.Into,   # SELECT ... INTO
    exp.Lock,   # SELECT ... FOR UPDATE
)

# 읽기 전용이지만 서버를 붙잡거나 파일을 읽는 MySQL 함수
DENIED_FUNCTIONS = {
    "SLEEP",
    "BENCHMARK",
    "LOAD_FILE",
    "GET_LOCK",
    "RELEASE_LOCK",
    "RELEASE_ALL_LOCKS",
}


def _function_name(func: exp.Func) -> str:
    if isinstance(func, exp.Anonymous):
        return func.name.upper()
    return func.sql_name().upper()


def is_select(sql: str) -> bool:
    """앞뒤 공백 제거 + 대문자 기준으로 SELECT 로 시작하는지"""
    return (sql or "").strip().upper().startswith("SELECT")


def check_sql(sql: str) -> Optional[str]:
    """
    LLM이 만든 SQL이 읽기 전용 단일 SELECT 인지 검사한다.
    안전하면 None, 아니면 거부 사유 문자열을 반환.

    접두어 검사만으로는 'SELECT 1; DROP TABLE x' 같은 문장이 통과하므로
    sqlglot 으로 파싱해서 문장 수와 노드 종류까지 확인한다.
    """
    if not isinstance(sql, str) or not sql.strip():
        return "SQL vacío"

    if not is_select(sql):
        return "Solo se permiten sentencias SELECT"

    try:
        statements = [s for s in sqlglot.parse(sql, read=SQL_DIALECT) if s is not None]
    except SqlglotError as e:
        return f"SQL no analizable: {e}"

    if len(statements) != 1:
        return "Solo se permite una sentencia por consulta"

    stmt = statements[0]
    if not isinstance(stmt, exp.Query):
        return "La sentencia no es una consulta de lectura"

    bad = stmt.find(*FORBIDDEN_NODES)
    if bad is not None:
        return f"Construcción no permitida en la consulta: {bad.key.upper()}"

    for func in stmt.find_all(exp.Func):
        name = _function_name(func)
        if name in DENIED_FUNCTIONS:
            return f"Función no permitida en la consulta: {name}"

    return None
