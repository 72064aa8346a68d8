import json

import httpx
import pytest

from app.core.llm_client import LLMClient

MESSAGES = [{"role": "user", "content": "hola"}]


def _client(handler) -> LLMClient:
    return LLMClient(
        base_url="http://llm.test/v1/",
        api_key="dummy",
        model="openai/gpt-oss-20b",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_chat_posts_openai_compatible_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": "hola!"}}]}
        )

    text = await _client(handler).chat(MESSAGES, temperature=0)

    assert text == "hola!"
    assert seen["url"] == "http://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer dummy"
    assert seen["body"] == {
        "model": "openai/gpt-oss-20b",
        "messages": MESSAGES,
        "temperature": 0,
    }


@pytest.mark.asyncio
async def test_chat_omits_temperature_when_not_given():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "temperature" not in json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": None}}]})

    assert await _client(handler).chat(MESSAGES) is None


@pytest.mark.asyncio
async def test_chat_raises_on_http_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "model not loaded"})

    with pytest.raises(httpx.HTTPStatusError):
        await _client(handler).chat(MESSAGES)


@pytest.mark.asyncio
async def test_chat_stream_yields_content_deltas_until_done():
    events = [
        {"choices": [{"delta": {"role": "assistant"}}]},
        {"choices": [{"delta": {"content": "La planta"}}]},
        {"choices": []},
        {"choices": [{"delta": {"content": " 3"}}]},
        {"choices": [{"delta": {}, "finish_reason": "stop"}]},
    ]
    body = "".join(f"data: {json.dumps(e)}\n\n" for e in events)
    body += ": keep-alive\n\ndata: [DONE]\n\n"

    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content)["stream"] is True
        return httpx.Response(
            200, content=body.encode("utf-8"), headers={"Content-Type": "text/event-stream"}
        )

    chunks = [c async for c in _client(handler).chat_stream(MESSAGES)]

    assert chunks == ["La planta", " 3"]
