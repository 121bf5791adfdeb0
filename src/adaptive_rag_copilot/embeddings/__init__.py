"""
Embeddings module - text embedding generation.

1. Protocol (EmbeddingProvider) defines the interface
2. Production implementation (OpenAIEmbeddings)
3. Test double (MockEmbeddings), a feature-hashing embedder
4. Factory function (get_embedding_provider)
"""

from adaptive_rag_copilot.core.protocols import EmbeddingProvider
from adaptive_rag_copilot.embeddings.openai_embeddings import (
    OpenAIEmbeddings,
    MockEmbeddings,
    get_embedding_provider,
)

__all__ = [
    "EmbeddingProvider",
    "OpenAIEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
]
