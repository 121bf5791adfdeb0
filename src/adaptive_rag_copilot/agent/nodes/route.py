"""
Routing node - picks the datasource for the question.

The model chooses between the vector store, web search and asking the
user; settings then veto choices the run cannot honour (web search off,
clarification off or already used up).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from adaptive_rag_copilot.agent.prompts import build_router_prompt
from adaptive_rag_copilot.schemas.grades import RouteQuery

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from adaptive_rag_copilot.agent.state import AgentState
    from adaptive_rag_copilot.config import AgentSettings

logger = logging.getLogger(__name__)


def can_clarify(state: AgentState, settings: AgentSettings) -> bool:
    return (
        settings.allow_clarification
        and state.get("clarifications", 0) < settings.max_clarifications
    )


def create_route_node(
    model: BaseChatModel,
    settings: AgentSettings,
) -> Callable[[AgentState], dict]:
    """
    Factory that creates the router node with an injected model.

    Args:
        model: Chat model supporting with_structured_output
        settings: Limits and feature switches

    Returns:
        A node function compatible with LangGraph
    """

    def route_question(state: AgentState) -> dict:
        """
        Reads from state:
        - question, clarifications

        Writes to state:
        - datasource: "vectorstore" | "web_search" | "clarify"
        """
        clarify_allowed = can_clarify(state, settings)
        router = model.with_structured_output(RouteQuery)
        decision = router.invoke(
            build_router_prompt(state["question"], allow_clarification=clarify_allowed)
        )
        datasource = decision.datasource

        if datasource == "clarify" and not clarify_allowed:
            datasource = "vectorstore"
        if datasource == "web_search" and not settings.web_search_enabled:
            datasource = "vectorstore"

        logger.info(f"Routed question to {datasource} (model said {decision.datasource})")
        return {"datasource": datasource}

    return route_question
