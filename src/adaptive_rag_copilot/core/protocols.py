"""
Core protocols defining contracts for the infrastructure the graph calls.

Every external dependency of a node (embeddings, vector store, web search)
is a Protocol here, with a production implementation, a test double and a
factory living in its own package. Nodes only ever see these contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Implementations:
    - OpenAIEmbeddings (production)
    - MockEmbeddings (testing/development)
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# VECTOR STORE PROTOCOL
# ---------------------------------------------------------------------------


@dataclass
class DocumentResult:
    """A retrieved document with similarity score."""

    id: str
    title: str
    content: str
    topics: list[str] = field(default_factory=list)
    source: str | None = None
    score: float | None = None

    def to_state(self) -> dict:
        """Plain dict form stored in graph state (checkpoint friendly)."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "topics": list(self.topics),
            "source": self.source,
            "score": self.score,
        }


@runtime_checkable
class VectorStore(Protocol):
    """
    Contract for vector similarity search.

    Implementations:
    - PgVectorStore (PostgreSQL + pgvector)
    - InMemoryVectorStore (testing/development)
    """

    def connect(self) -> None:
        """Establish connection to the store."""
        ...

    def close(self) -> None:
        """Close connection to the store."""
        ...

    def search(
        self,
        query: str,
        limit: int = 4,
        topic_filter: list[str] | None = None,
    ) -> list[DocumentResult]:
        """Search for similar documents by query text."""
        ...


# ---------------------------------------------------------------------------
# WEB SEARCH PROTOCOL
# ---------------------------------------------------------------------------


@dataclass
class WebSearchResult:
    """A single web search hit."""

    title: str
    url: str
    content: str
    score: float | None = None

    def to_state(self) -> dict:
        return {
            "id": self.url,
            "title": self.title,
            "content": self.content,
            "topics": ["web"],
            "source": self.url,
            "score": self.score,
        }


@runtime_checkable
class WebSearcher(Protocol):
    """
    Contract for web search.

    Implementations:
    - TavilyWebSearch (production)
    - StaticWebSearch (testing)
    """

    def search(self, query: str, max_results: int = 3) -> list[WebSearchResult]:
        """Search the web for the query."""
        ...
