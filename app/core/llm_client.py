# app/core/llm_client.py
import json
import logging
from typing import AsyncIterator, Dict, List, Optional

import httpx

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class LLMClient:
    """
    OpenAI 호환 /chat/completions 클라이언트.
    - chat(): 일반 호출, 전체 텍스트 반환
    - chat_stream(): SSE 스트리밍, delta 텍스트를 하나씩 yield
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.LLM_BASE_URL).rstrip("/")
        self.api_key = api_key or settings.LLM_API_KEY
        self.model = model or settings.LLM_MODEL
        self.timeout = timeout if timeout is not None else settings.LLM_TIMEOUT
        # 테스트에서 httpx.MockTransport 주입용
        self._transport = transport

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(
        self,
        messages: List[Dict],
        model: Optional[str],
        temperature: Optional[float],
        stream: bool,
    ) -> Dict:
        payload = {"model": model or self.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if stream:
            payload["stream"] = True
        return payload

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def chat(
        self,
        messages: List[Dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Optional[str]:
        payload = self._payload(messages, model, temperature, stream=False)

        async with self._client() as client:
            resp = await client.post(
                self.completions_url, headers=self._headers(), json=payload
            )
            resp.raise_for_status()
            data = resp.json()
            # content가 null 로 오는 모델도 있음
            return data["choices"][0]["message"].get("content")

    async def chat_stream(
        self,
        messages: List[Dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> AsyncIterator[str]:
        payload = self._payload(messages, model, temperature, stream=True)

        async with self._client() as client:
            async with client.stream(
                "POST", self.completions_url, headers=self._headers(), json=payload
            ) as resp:
                resp.raise_for_status()
                async for line in resp.aiter_lines():
                    line = line.strip()
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if data == "[DONE]":
                        break

                    chunk = json.loads(data)
                    choices = chunk.get("choices") or []
                    if not choices:
                        continue
                    delta = (choices[0].get("delta") or {}).get("content")
                    if delta:
                        yield delta


def get_llm_client() -> LLMClient:
    """FastAPI Depends 용 (테스트에서는 dependency_overrides 로 교체)"""
    return llm_client


llm_client = LLMClient()
