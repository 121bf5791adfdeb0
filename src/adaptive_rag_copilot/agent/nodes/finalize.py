"""
Terminal nodes - release the answer to the thread.

PURE NODES: no dependencies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_core.messages import AIMessage

if TYPE_CHECKING:
    from adaptive_rag_copilot.agent.state import AgentState

logger = logging.getLogger(__name__)

_FALLBACK_MESSAGES = {
    "rejected": "I could not produce an answer the reviewer approved.",
    "exhausted": "I could not find a reliable answer to that question.",
}


def mark_exhausted(state: AgentState) -> dict:
    """
    Flag a run that ran out of rewrites and generation attempts.

    Writes to state:
    - status: "exhausted"
    """
    logger.info(
        f"Giving up after {state.get('generation_attempts', 0)} generations "
        f"and {state.get('query_rewrites', 0)} rewrites"
    )
    return {"status": "exhausted"}


def finalize(state: AgentState) -> dict:
    """
    Reads from state:
    - final_answer, generation, status

    Writes to state:
    - final_answer: the reviewed answer, else the last draft
      (None when the reviewers rejected every draft)
    - status: "completed" unless already rejected or exhausted
    - messages: the answer as an AIMessage for the chat UI
    """
    status = state.get("status")
    if status in (None, "", "running"):
        status = "completed"

    answer = state.get("final_answer")
    if answer is None and status != "rejected":
        answer = state.get("generation") or None

    content = answer or _FALLBACK_MESSAGES.get(status, "")
    logger.info(f"Run finished with status {status}")
    return {
        "final_answer": answer,
        "status": status,
        "messages": [AIMessage(content=content)],
    }
