"""
Seed data for the retrieval system.

Content lives apart from the store code so it can change without touching
infrastructure, and tests can seed controlled data instead.
"""

from adaptive_rag_copilot.retrieval.seeds.knowledge_base import (
    get_knowledge_documents,
    seed_vector_store,
)

__all__ = ["get_knowledge_documents", "seed_vector_store"]
