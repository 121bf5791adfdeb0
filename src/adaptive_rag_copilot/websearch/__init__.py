"""
Web search module - the non-vectorstore branch of the router.
"""

from adaptive_rag_copilot.core.protocols import WebSearcher, WebSearchResult
from adaptive_rag_copilot.websearch.search import (
    StaticWebSearch,
    TavilyWebSearch,
    WebSearchError,
    get_web_search,
)

__all__ = [
    "WebSearcher",
    "WebSearchResult",
    "StaticWebSearch",
    "TavilyWebSearch",
    "WebSearchError",
    "get_web_search",
]
