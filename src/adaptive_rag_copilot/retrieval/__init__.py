"""
Retrieval module - vector similarity search for RAG.

- Document: the document model
- VectorStoreConfig: pgvector configuration
- PgVectorStore / InMemoryVectorStore: store implementations
- get_vector_store(): factory
- get_knowledge_documents() / seed_vector_store(): seed corpus
"""

from adaptive_rag_copilot.retrieval.document import Document
from adaptive_rag_copilot.retrieval.store import (
    VectorStoreConfig,
    PgVectorStore,
    InMemoryVectorStore,
    get_vector_store,
)
from adaptive_rag_copilot.retrieval.seeds import (
    get_knowledge_documents,
    seed_vector_store,
)

__all__ = [
    "Document",
    "VectorStoreConfig",
    "PgVectorStore",
    "InMemoryVectorStore",
    "get_vector_store",
    "get_knowledge_documents",
    "seed_vector_store",
]
