"""OpenAI embedding client for code search.

Wraps the hosted /embeddings endpoint. Failures never raise: the client
returns the null embedding (an all-zero vector of the configured dimension)
instead, which scores as zero similarity downstream.

Usage:
    from vibe.openai_embeddings import OpenAIEmbeddingClient

    async with OpenAIEmbeddingClient(api_key="sk-...") as client:
        vector = await client.embed("def add(a, b): ...")
        if is_null_embedding(vector):
            ...
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)

OPENAI_API_BASE = "https://api.openai.com/v1"
EMBEDDING_MODEL = "text-embedding-ada-002"
EMBEDDING_DIM = 1536
MAX_INPUT_CHARS = 30000


def null_embedding(dimension: int = EMBEDDING_DIM) -> List[float]:
    """The sentinel returned for any failed embedding request."""
    return [0.0] * dimension


def is_null_embedding(vector: Sequence[float]) -> bool:
    """True for empty or all-zero vectors."""
    return not any(vector)


class EmbeddingError(Exception):
    """Internal signal for a rejected input or response; never leaves embed()."""


class OpenAIEmbeddingClient:
    """Async client for the OpenAI embeddings API.

    Attributes:
        model: Model name (default: text-embedding-ada-002)
        dimension: Expected embedding dimension (default: 1536)
    """

    def __init__(
        self,
        api_key: str,
        model: str = EMBEDDING_MODEL,
        dimension: int = EMBEDDING_DIM,
        base_url: str = OPENAI_API_BASE,
        timeout: float = 60.0,
        max_input_chars: int = MAX_INPUT_CHARS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the embedding client.

        Args:
            api_key: OpenAI API key, supplied by the caller
            model: Model name
            dimension: Expected vector length
            base_url: API base URL
            timeout: Request timeout in seconds
            max_input_chars: Inputs are truncated to this many characters
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not api_key:
            raise ValueError("OpenAI API key required for semantic search.")

        self.model = model
        self.dimension = dimension
        self.max_input_chars = max_input_chars
        self.embed_url = f"{base_url.rstrip('/')}/embeddings"

        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )

        logger.info(f"OpenAI embedding client initialized: {model}, dim={dimension}")

    def _validate(self, data: Any) -> List[float]:
        try:
            embedding = data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError):
            raise EmbeddingError("Malformed embedding response")
        if not isinstance(embedding, list) or len(embedding) != self.dimension:
            raise EmbeddingError(
                f"Unexpected embedding dim: {len(embedding) if isinstance(embedding, list) else 'n/a'} "
                f"vs {self.dimension}"
            )
        if not all(isinstance(v, (int, float)) for v in embedding):
            raise EmbeddingError("Embedding contains non-numeric values")
        if is_null_embedding(embedding):
            raise EmbeddingError("Embedding is all zeros")
        return [float(v) for v in embedding]

    async def embed(self, text: str) -> List[float]:
        """Generate an embedding for a single text.

        Args:
            text: Input text (truncated to max_input_chars)

        Returns:
            Embedding vector, or the null embedding on any failure
        """
        try:
            if not isinstance(text, str) or not text.strip():
                raise EmbeddingError("Invalid input text")

            payload = {
                "model": self.model,
                "input": text.strip()[:self.max_input_chars],
            }
            response = await self._client.post(self.embed_url, json=payload)
            if response.status_code != 200:
                raise EmbeddingError(f"OpenAI API error {response.status_code}: {response.text}")

            return self._validate(response.json())

        except Exception as e:
            logger.warning(f"Error getting embedding: {e}")
            return null_embedding(self.dimension)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "OpenAIEmbeddingClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
