"""Shared fixtures for all tests."""

import httpx
import pytest

TEST_API_KEY = "sk-test-secret-1234567890"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real DeepSeek settings (or a local .env) out of the tests."""
    for name in ("DEEPSEEK_API_KEY", "DEEPSEEK_API_URL", "DEEPSEEK_TIMEOUT", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def completion_payload() -> dict:
    """Successful chat-completions body as returned by DeepSeek."""
    return {
        "id": "abc123",
        "object": "chat.completion",
        "created": 1718000000,
        "model": "deepseek-chat",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello there!"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
    }


@pytest.fixture
def make_transport():
    """Build an httpx.MockTransport that records every request it sees.

    The returned transport has a `calls` list of httpx.Request objects.
    """
    def _make(status_code=200, json=None, text=None, content=None, exc=None, headers=None, stream=None):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if exc is not None:
                raise exc
            if stream is not None:
                return httpx.Response(status_code, headers=headers, stream=stream)
            if json is not None:
                return httpx.Response(status_code, headers=headers, json=json)
            if content is not None:
                return httpx.Response(status_code, headers=headers, content=content)
            return httpx.Response(status_code, headers=headers, text=text or "")

        transport = httpx.MockTransport(handler)
        transport.calls = calls
        return transport

    return _make


class BrokenStream(httpx.SyncByteStream):
    """Response body that fails on the first read."""

    def __iter__(self):
        raise httpx.ReadError("connection reset while reading body")
        yield b""  # pragma: no cover


@pytest.fixture
def broken_stream() -> BrokenStream:
    return BrokenStream()
