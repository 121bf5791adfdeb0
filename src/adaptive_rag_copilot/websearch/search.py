"""
Web search backends for questions outside the knowledge base.

TavilyWebSearch wraps the langchain-tavily tool; StaticWebSearch returns
canned results so graph tests never touch the network.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from adaptive_rag_copilot.core.protocols import WebSearcher, WebSearchResult

if TYPE_CHECKING:
    from adaptive_rag_copilot.config import AgentSettings

logger = logging.getLogger(__name__)


class WebSearchError(RuntimeError):
    """Raised when the search backend fails or returns an error payload."""


class TavilyWebSearch:
    """Tavily search through langchain_tavily.TavilySearch."""

    def __init__(self, search_depth: str = "basic", tool: Any | None = None):
        self.search_depth = search_depth
        self._tool = tool

    def _get_tool(self, max_results: int):
        if self._tool is not None:
            return self._tool
        from langchain_tavily import TavilySearch

        return TavilySearch(max_results=max_results, search_depth=self.search_depth)

    def search(self, query: str, max_results: int = 3) -> list[WebSearchResult]:
        try:
            tool = self._get_tool(max_results)
            response = tool.invoke({"query": query})
        except Exception as e:
            raise WebSearchError(f"Tavily search failed: {e}") from e

        if isinstance(response, dict) and response.get("error"):
            raise WebSearchError(f"Tavily search failed: {response['error']}")

        items = response.get("results", []) if isinstance(response, dict) else []
        results = [
            WebSearchResult(
                title=item.get("title") or item.get("url", ""),
                url=item.get("url", ""),
                content=item.get("content", ""),
                score=item.get("score"),
            )
            for item in items[:max_results]
            if item.get("content")
        ]
        logger.debug(f"Tavily returned {len(results)} results for {query!r}")
        return results


class StaticWebSearch:
    """
    Web search test double with canned results.

    Records every query so tests can assert on what the graph searched for.
    """

    def __init__(self, results: list[WebSearchResult] | None = None):
        self._results = results or []
        self.queries: list[str] = []

    def search(self, query: str, max_results: int = 3) -> list[WebSearchResult]:
        self.queries.append(query)
        return list(self._results[:max_results])


def get_web_search(settings: AgentSettings) -> WebSearcher | None:
    """
    Factory for the configured web search backend.

    Returns None when web search is disabled or TAVILY_API_KEY is unset;
    the graph then routes everything to the vector store.
    """
    if not settings.web_search_enabled:
        return None
    if not os.environ.get("TAVILY_API_KEY"):
        logger.warning("TAVILY_API_KEY is not set, web search disabled")
        return None
    return TavilyWebSearch()
