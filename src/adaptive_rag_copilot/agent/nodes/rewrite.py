"""
Query transformation node - rewrites the question for a retrieval retry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from adaptive_rag_copilot.agent.prompts import build_rewrite_prompt
from adaptive_rag_copilot.schemas.grades import RewrittenQuestion

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from adaptive_rag_copilot.agent.state import AgentState

logger = logging.getLogger(__name__)


def create_transform_query_node(
    model: BaseChatModel,
) -> Callable[[AgentState], dict]:
    """Factory for the question re-writer."""

    def transform_query(state: AgentState) -> dict:
        """
        Reads from state:
        - question, review_feedback

        Writes to state:
        - question: the rewritten question (kept if the model returns nothing)
        - query_rewrites: incremented
        """
        rewriter = model.with_structured_output(RewrittenQuestion)
        result = rewriter.invoke(
            build_rewrite_prompt(state["question"], feedback=state.get("review_feedback"))
        )
        question = result.question.strip() or state["question"]

        logger.info(f"Rewrote question to {question!r}")
        return {
            "question": question,
            "query_rewrites": state.get("query_rewrites", 0) + 1,
        }

    return transform_query
