"""Tests for the OpenAI embedding client.

HTTP traffic is served by httpx.MockTransport; no network access.
"""

import json

import httpx
import pytest

from vibe.openai_embeddings import (
    EMBEDDING_DIM,
    EMBEDDING_MODEL,
    OpenAIEmbeddingClient,
    is_null_embedding,
    null_embedding,
)

DIM = 4


def _client(handler, **kwargs):
    return OpenAIEmbeddingClient(
        api_key="sk-test",
        dimension=DIM,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _ok(vector):
    def handler(request):
        return httpx.Response(200, json={"data": [{"embedding": vector, "index": 0}]})
    return handler


class TestNullEmbedding:

    def test_default_dimension(self):
        vector = null_embedding()
        assert len(vector) == EMBEDDING_DIM == 1536
        assert is_null_embedding(vector)

    def test_non_zero_vector_is_not_null(self):
        assert is_null_embedding([0.0, 0.1]) is False


class TestClientInit:

    def test_requires_api_key(self):
        with pytest.raises(ValueError, match="API key"):
            OpenAIEmbeddingClient(api_key="")

    def test_default_model(self):
        assert EMBEDDING_MODEL == "text-embedding-ada-002"


@pytest.mark.asyncio
class TestEmbed:
    """Test request shape and the never-raise contract."""

    async def test_returns_vector(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3, 0.4]}]})

        async with _client(handler) as client:
            vector = await client.embed("  def add(a, b): return a + b  ")

        assert vector == [0.1, 0.2, 0.3, 0.4]
        assert seen["auth"] == "Bearer sk-test"
        assert seen["url"] == "https://api.openai.com/v1/embeddings"
        assert seen["body"] == {"model": EMBEDDING_MODEL, "input": "def add(a, b): return a + b"}

    async def test_truncates_input(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": [{"embedding": [1.0] * DIM}]})

        async with _client(handler, max_input_chars=5) as client:
            await client.embed("abcdefghij")

        assert seen["body"]["input"] == "abcde"

    async def test_empty_input_returns_null_without_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"data": [{"embedding": [1.0] * DIM}]})

        async with _client(handler) as client:
            vector = await client.embed("   ")

        assert vector == [0.0] * DIM
        assert calls == []

    @pytest.mark.parametrize("handler", [
        lambda request: httpx.Response(500, text="server error"),
        lambda request: httpx.Response(429, json={"error": "rate limited"}),
        lambda request: httpx.Response(200, text="not json"),
        lambda request: httpx.Response(200, json={"data": []}),
        lambda request: httpx.Response(200, json={"unexpected": True}),
        lambda request: httpx.Response(200, json={"data": [{"embedding": [1.0, 2.0]}]}),
        lambda request: httpx.Response(200, json={"data": [{"embedding": [0.0] * DIM}]}),
        lambda request: httpx.Response(200, json={"data": [{"embedding": ["a", "b", "c", "d"]}]}),
    ])
    async def test_bad_responses_return_null(self, handler):
        async with _client(handler) as client:
            vector = await client.embed("some code")
        assert vector == [0.0] * DIM

    async def test_network_error_returns_null(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            vector = await client.embed("some code")

        assert is_null_embedding(vector)
        assert len(vector) == DIM

    async def test_custom_base_url(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"data": [{"embedding": [1.0] * DIM}]})

        async with _client(handler, base_url="http://localhost:1234/v1/") as client:
            await client.embed("x = 1")

        assert seen["url"] == "http://localhost:1234/v1/embeddings"
