from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from app.core.config import get_settings

settings = get_settings()

connect_args = {}
if settings.SQLALCHEMY_DATABASE_URI.startswith("mysql"):
    connect_args["charset"] = "utf8mb4"

# 프로세스 전체에서 공유하는 커넥션 풀 (풀 설정은 라이브러리 기본값)
engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    pool_pre_ping=True,
    echo=False,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
