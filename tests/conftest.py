import os

# 테스트는 MySQL 없이 SQLite 인메모리로 돌린다 (app 모듈 import 전에 설정)
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("LLM_BASE_URL", "http://llm.test/v1")

from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.llm_client import get_llm_client
from app.db.session import get_db
from app.main import app

YESTERDAY = (date.today() - timedelta(days=1)).isoformat()


class FakeLLMClient:
    """
    LLMClient 대역. replies 는 chat() 호출 순서대로 반환,
    stream_chunks 는 chat_stream() 에서 그대로 흘려보낸다.
    """

    def __init__(self, replies=None, stream_chunks=None):
        self.replies = list(replies or [])
        self.stream_chunks = list(stream_chunks or [])
        self.calls = []

    async def chat(self, messages, model=None, temperature=None):
        self.calls.append(
            {"messages": messages, "model": model, "temperature": temperature, "stream": False}
        )
        return self.replies.pop(0)

    async def chat_stream(self, messages, model=None, temperature=None):
        self.calls.append(
            {"messages": messages, "model": model, "temperature": temperature, "stream": True}
        )
        for chunk in self.stream_chunks:
            yield chunk


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


# 공장 생산 테이블 일부만 만들어 둔다
@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE D_RDP_TORNILLOS ("
            " FECHA DATE, COD_PLANTA INT, COD_TIPO_TORNILLO INT, COD_TURNO INT,"
            " CANTIDAD_PRODUCIDA INT, CANTIDAD_RECHAZADA INT)"
        ))
        conn.execute(text(
            "CREATE TABLE DIM_PLANTA (COD_PLANTA INT, NOMBRE_PLANTA VARCHAR(50), CIUDAD VARCHAR(50))"
        ))
        conn.execute(
            text(
                "INSERT INTO D_RDP_TORNILLOS VALUES "
                "(:f, 3, 1, 1, 200, 5), (:f, 3, 2, 2, 150, 3), (:f, 1, 1, 1, 80, 1), "
                "('2020-01-01', 3, 1, 1, 999, 0)"
            ),
            {"f": YESTERDAY},
        )
        conn.execute(text(
            "INSERT INTO DIM_PLANTA VALUES (1, 'Norte', 'Bilbao'), (3, 'Levante', 'Barcelona')"
        ))

    SessionTest = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionTest()
    yield session
    session.close()
    engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session, fake_llm):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: fake_llm

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
