"""
Retrieval node - fetches candidate documents from the vector store.

TESTABLE IN ISOLATION: the store is injected, and the only effect is the
returned state update.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from adaptive_rag_copilot.agent.state import AgentState
    from adaptive_rag_copilot.config import AgentSettings
    from adaptive_rag_copilot.core import VectorStore

logger = logging.getLogger(__name__)


def create_retrieve_node(
    store: VectorStore,
    settings: AgentSettings,
) -> Callable[[AgentState], dict]:
    """
    Factory that creates a retrieval node with an injected store.

    Args:
        store: VectorStore implementation (PgVectorStore, InMemoryVectorStore)
        settings: Provides retrieval_k

    Returns:
        A node function compatible with LangGraph
    """

    def retrieve(state: AgentState) -> dict:
        """
        Reads from state:
        - question

        Writes to state:
        - documents: replaced with the new top-k results
        - retrieval_latency_ms: cumulative over the run
        """
        start = time.time()
        results = store.search(state["question"], limit=settings.retrieval_k)
        latency = (time.time() - start) * 1000

        logger.info(f"Retrieved {len(results)} documents in {latency:.1f}ms")
        return {
            "documents": [doc.to_state() for doc in results],
            "retrieval_latency_ms": state.get("retrieval_latency_ms", 0.0) + latency,
        }

    return retrieve
