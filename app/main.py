# app/main.py

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.router import api_router
from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.db.session import engine

settings = get_settings()
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # 프로세스 종료 시 커넥션 풀 정리
    engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------
# CORS 설정
# ---------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------
# 요청 본문 검증 실패도 {"error": ...} 형태로 통일
# ---------------------------------------------------------
INVALID_BODY = "Cuerpo de la petición inválido."


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"error": INVALID_BODY})


# ---------------------------------------------------------
# API 라우터 (/api/...)
# ---------------------------------------------------------
app.include_router(api_router)

# ---------------------------------------------------------
# 프론트엔드 정적 파일 서빙
# 실제 위치: 프로젝트 루트/public/index.html
# ---------------------------------------------------------
PUBLIC_DIR = (
    Path(__file__)
    .resolve()
    .parent  # app/
    .parent  # 프로젝트 루트
    / settings.PUBLIC_DIR
)

if PUBLIC_DIR.exists():
    # "/" 로 들어오는 요청은 public/index.html 로 서빙
    app.mount(
        "/",
        StaticFiles(directory=str(PUBLIC_DIR), html=True),
        name="public",
    )
else:
    # 디버깅용: 프론트 폴더 못 찾을 때 메시지 반환
    @app.get("/")
    async def root():
        return {
            "message": "No se encontró el directorio de la interfaz web.",
            "expected_path": str(PUBLIC_DIR),
        }
