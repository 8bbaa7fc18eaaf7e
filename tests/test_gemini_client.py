from __future__ import annotations

import asyncio

import httpx
import pytest

from exam_gateway.gemini_client import GeminiClient
from exam_gateway.settings import settings


@pytest.fixture(autouse=True)
def _ai_studio(monkeypatch):
    monkeypatch.setattr(settings, "gemini_provider", "ai_studio")
    monkeypatch.setattr(settings, "openrouter_api_key", None)


def _call(client: GeminiClient, prompt: str) -> str:
    async def run():
        try:
            return await client.generate(prompt)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_generate_extracts_first_candidate_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.url.params.get("key")
        seen["body"] = request.content
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "hello"}]}}]})

    client = GeminiClient(api_key="k-123", model="gemini-test", transport=httpx.MockTransport(handler))
    assert _call(client, "say hello") == "hello"
    assert seen["key"] == "k-123"
    assert b"say hello" in seen["body"]
    assert client.base_url.endswith("/models/gemini-test:generateContent")


def test_http_error_raises_without_fallback():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "boom"}))
    client = GeminiClient(api_key="k", transport=transport)
    with pytest.raises(httpx.HTTPStatusError):
        _call(client, "x")


def test_unexpected_payload_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"candidates": []}))
    client = GeminiClient(api_key="k", transport=transport)
    with pytest.raises(RuntimeError):
        _call(client, "x")


def test_openrouter_fallback(monkeypatch):
    monkeypatch.setattr(settings, "openrouter_api_key", "or-key")

    def handler(request: httpx.Request) -> httpx.Response:
        if "openrouter" in request.url.host:
            assert request.headers["Authorization"] == "Bearer or-key"
            return httpx.Response(200, json={"choices": [{"message": {"content": "from fallback"}}]})
        return httpx.Response(503)

    client = GeminiClient(api_key="k", transport=httpx.MockTransport(handler))
    assert _call(client, "x") == "from fallback"


def test_vertex_uses_header_auth(monkeypatch):
    monkeypatch.setattr(settings, "gemini_provider", "vertex")
    monkeypatch.setattr(settings, "vertex_project", "proj")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["header"] = request.headers.get("x-goog-api-key")
        seen["query"] = request.url.params.get("key")
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})

    client = GeminiClient(api_key="vk", transport=httpx.MockTransport(handler))
    assert _call(client, "x") == "ok"
    assert seen == {"header": "vk", "query": None}
    assert "/projects/proj/" in client.base_url


def test_missing_key_raises(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", None)
    with pytest.raises(ValueError):
        GeminiClient()


def test_failed_fallback_raises(monkeypatch):
    monkeypatch.setattr(settings, "openrouter_api_key", "or-key")
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    client = GeminiClient(api_key="k", transport=transport)
    with pytest.raises(RuntimeError, match="fallback via OpenRouter also failed"):
        _call(client, "x")
