"""
Embedding providers - convert text to vectors for the knowledge base.

One job only: text in, numpy vector out. The vector stores receive a
provider by injection, so retrieval can run against OpenAI in production
and against the hashing embedder in tests and local development.
"""

from __future__ import annotations

import hashlib
import os
import re

import numpy as np
from openai import OpenAI

from adaptive_rag_copilot.core.protocols import EmbeddingProvider

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class OpenAIEmbeddings:
    """
    OpenAI-based embedding provider.

    Uses text-embedding-3-small by default (1536 dimensions).
    """

    _MODEL_DIMS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: str | None = None,
    ):
        self.model = model
        self._client = OpenAI(api_key=api_key or os.environ.get("OPENAI_API_KEY"))

    @property
    def dimensions(self) -> int:
        return self._MODEL_DIMS.get(self.model, 1536)

    def embed(self, text: str) -> np.ndarray:
        response = self._client.embeddings.create(input=text, model=self.model)
        return np.array(response.data[0].embedding, dtype=np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        if not texts:
            return []

        response = self._client.embeddings.create(input=texts, model=self.model)
        return [np.array(item.embedding, dtype=np.float32) for item in response.data]


class MockEmbeddings:
    """
    Deterministic feature-hashing embedder for tests and local development.

    Each lower-cased word token is hashed into one of `dimensions` buckets
    with a signed weight, and the result is L2-normalised. Texts sharing
    vocabulary land close together under cosine similarity, which is enough
    for the seeded knowledge base to rank sensibly without an API key.
    """

    def __init__(self, dimensions: int = 256):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        vector = np.zeros(self._dimensions, dtype=np.float32)
        for token in _TOKEN_RE.findall(text.lower()):
            digest = hashlib.sha256(token.encode()).digest()
            bucket = int.from_bytes(digest[:4], "big") % self._dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign

        norm = np.linalg.norm(vector)
        if norm == 0:
            return vector
        return vector / norm

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        return [self.embed(text) for text in texts]


def get_embedding_provider(use_mock: bool = False) -> EmbeddingProvider:
    """
    Factory function to get the appropriate embedding provider.

    Args:
        use_mock: If True, return MockEmbeddings (no API calls)
    """
    if use_mock:
        return MockEmbeddings()
    return OpenAIEmbeddings()
