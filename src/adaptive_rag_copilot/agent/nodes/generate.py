"""
Generation node - answers the question from the graded documents.

Prompt construction is a pure function (agent.prompts); this node only
calls the model and records attempts and latency.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from adaptive_rag_copilot.agent.prompts import build_generation_prompt

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from adaptive_rag_copilot.agent.state import AgentState

logger = logging.getLogger(__name__)


def _content_text(content) -> str:
    if isinstance(content, str):
        return content
    return "".join(
        block.get("text", "") if isinstance(block, dict) else str(block)
        for block in content
    )


def create_generate_node(
    model: BaseChatModel,
) -> Callable[[AgentState], dict]:
    """
    Factory that creates the generation node with an injected model.

    Returns:
        A node function compatible with LangGraph
    """

    def generate(state: AgentState) -> dict:
        """
        Reads from state:
        - question, documents, review_feedback

        Writes to state:
        - generation, generation_attempts, generation_latency_ms
        """
        start = time.time()
        prompt = build_generation_prompt(
            state["question"],
            state.get("documents", []),
            feedback=state.get("review_feedback"),
        )
        response = model.invoke(prompt)
        latency = (time.time() - start) * 1000

        attempts = state.get("generation_attempts", 0) + 1
        logger.info(f"Generation attempt {attempts} took {latency:.1f}ms")
        return {
            "generation": _content_text(response.content).strip(),
            "generation_attempts": attempts,
            "generation_latency_ms": state.get("generation_latency_ms", 0.0) + latency,
        }

    return generate
