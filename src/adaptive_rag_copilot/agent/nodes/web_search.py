"""
Web search node - fetches documents from the web for out-of-scope questions
and as the fallback when the vector store keeps coming back empty.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from adaptive_rag_copilot.agent.state import AgentState
    from adaptive_rag_copilot.config import AgentSettings
    from adaptive_rag_copilot.core import WebSearcher

logger = logging.getLogger(__name__)


def create_web_search_node(
    searcher: WebSearcher,
    settings: AgentSettings,
) -> Callable[[AgentState], dict]:
    """
    Factory that creates the web search node with an injected searcher.

    Results are appended to whatever relevant documents the run already has.
    """

    def web_search(state: AgentState) -> dict:
        """
        Reads from state:
        - question, documents

        Writes to state:
        - documents: existing documents plus web results
        - web_search_used: True
        """
        results = searcher.search(
            state["question"], max_results=settings.web_search_max_results
        )
        logger.info(f"Web search returned {len(results)} results")

        seen = {doc["id"] for doc in state.get("documents", [])}
        documents = list(state.get("documents", []))
        for result in results:
            doc = result.to_state()
            if doc["id"] not in seen:
                documents.append(doc)
                seen.add(doc["id"])

        return {"documents": documents, "web_search_used": True}

    return web_search
