# app/services/sql_schema.py
#
# 스키마 설명은 DB에서 읽어오지 않고 손으로 관리한다.
# 테이블/컬럼이 바뀌면 여기도 같이 수정할 것.

SCHEMA_DESCRIPTION = """
Tablas principales (MySQL):

D_RDP_TORNILLOS (
  FECHA DATE,
  COD_PLANTA INT,
  COD_TIPO_TORNILLO INT,
  COD_TURNO INT,
  COD_MAQUINA INT,
  COD_OPERARIO INT,
  CANTIDAD_PRODUCIDA INT,
  CANTIDAD_RECHAZADA INT,
  TIEMPO_MAQUINA_H DECIMAL(6,2),
  TIEMPO_PARADAS_H DECIMAL(6,2)
)

DIM_PLANTA (
  COD_PLANTA INT,
  NOMBRE_PLANTA VARCHAR,
  PAIS VARCHAR,
  PROVINCIA VARCHAR,
  CIUDAD VARCHAR
)

DIM_TIPO_TORNILLO (
  COD_TIPO_TORNILLO INT,
  DESCRIPCION VARCHAR,
  MATERIAL VARCHAR
)

DIM_TURNO (
  COD_TURNO INT,
  NOMBRE_TURNO VARCHAR
)
"""


# 질문 → SQL 계획용 시스템 프롬프트
PLANNER_SYSTEM_PROMPT = """
Eres un asistente que traduce preguntas en español sobre producción de tornillos
a consultas SQL de MySQL. SOLO puedes usar SELECT (nunca INSERT, UPDATE, DELETE, DROP, etc.).

Devuelve EXCLUSIVAMENTE un JSON válido con este formato:

{
  "queries": [
    {
      "description": "explicación breve de qué calcula esta query",
      "sql": "SELECT ... "
    }
  ]
}

No incluyas texto fuera del JSON, ni explicaciones adicionales.
""".strip()


# SQL 결과 → 최종 답변용 시스템 프롬프트
ANSWER_SYSTEM_PROMPT = """
Eres un analista de datos de producción de tornillos.
Responde SIEMPRE en español, de forma muy concisa y clara.
Usa SOLO los datos proporcionados en las consultas y resultados.
Si algo no se puede responder con esos datos, dilo claramente.
""".strip()
