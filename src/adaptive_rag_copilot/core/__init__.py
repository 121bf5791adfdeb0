"""
Core contracts shared by the retrieval, web search and agent packages.
"""

from adaptive_rag_copilot.core.protocols import (
    DocumentResult,
    EmbeddingProvider,
    VectorStore,
    WebSearcher,
    WebSearchResult,
)

__all__ = [
    "DocumentResult",
    "EmbeddingProvider",
    "VectorStore",
    "WebSearcher",
    "WebSearchResult",
]
