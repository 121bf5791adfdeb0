"""
Conditional edges - where the graph goes after the router and the graders.

All PURE FUNCTIONS of (state, settings). The graph closes them over
settings, so these stay testable with a plain dict.
"""

from __future__ import annotations

import logging

from adaptive_rag_copilot.agent.nodes.grade import NOT_SUPPORTED, NOT_USEFUL, USEFUL

# Runtime imports: LangGraph resolves edge annotations with get_type_hints
from adaptive_rag_copilot.agent.state import AgentState
from adaptive_rag_copilot.config import AgentSettings

logger = logging.getLogger(__name__)

_DATASOURCE_NODES = {
    "vectorstore": "retrieve",
    "web_search": "web_search",
    "clarify": "ask_human",
}


def review_enabled(settings: AgentSettings) -> bool:
    return settings.require_review and settings.max_review_rounds > 0


def _rewrites_left(state: AgentState, settings: AgentSettings) -> bool:
    return state.get("query_rewrites", 0) < settings.max_query_rewrites


def route_after_router(state: AgentState) -> str:
    """datasource -> retrieve | web_search | ask_human (unknown -> retrieve)."""
    return _DATASOURCE_NODES.get(state.get("datasource", ""), "retrieve")


def decide_to_generate(state: AgentState, settings: AgentSettings) -> str:
    """
    After document grading.

    Relevant documents go straight to generation. Otherwise the question is
    rewritten while rewrites remain, then web search gets one chance, and
    finally the model answers from whatever it has.
    """
    if state.get("documents"):
        return "generate"
    if _rewrites_left(state, settings):
        logger.info("No relevant documents, rewriting question")
        return "transform_query"
    if settings.web_search_enabled and not state.get("web_search_used"):
        logger.info("No relevant documents and rewrites exhausted, searching the web")
        return "web_search"
    return "generate"


def decide_after_grading(state: AgentState, settings: AgentSettings) -> str:
    """
    After generation grading.

    useful        -> human_review (review on) | finalize
    not_supported -> generate while attempts remain
    not_useful    -> transform_query while rewrites remain
    exhausted     -> human_review (review on) | mark_exhausted
    """
    grade = state.get("generation_grade")

    if grade == USEFUL:
        return "human_review" if review_enabled(settings) else "finalize"

    if (
        grade == NOT_SUPPORTED
        and state.get("generation_attempts", 0) < settings.max_generation_attempts
    ):
        return "generate"

    if grade == NOT_USEFUL and _rewrites_left(state, settings):
        return "transform_query"

    logger.info(f"Retries exhausted with grade {grade!r}")
    return "human_review" if review_enabled(settings) else "mark_exhausted"
