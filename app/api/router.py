# app/api/router.py

from fastapi import APIRouter

from app.core.config import get_settings
from .endpoints import chat

settings = get_settings()

api_router = APIRouter(prefix=settings.API_PREFIX)

# POST /api/chat, POST /api/chat/stream
api_router.include_router(chat.router, tags=["chat"])


@api_router.get("/health", tags=["health"])
async def health():
    return {"ok": True}
