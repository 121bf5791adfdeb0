"""
Run preparation node - normalises the input of every new run.

PURE NODE: no dependencies. A thread's checkpoint keeps the previous run's
documents, counters and answer, so each run starts by resetting them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_core.messages import BaseMessage, HumanMessage

from adaptive_rag_copilot.agent.state import reset_run_fields

if TYPE_CHECKING:
    from adaptive_rag_copilot.agent.state import AgentState

logger = logging.getLogger(__name__)


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    # Multimodal content blocks: keep the text parts
    return " ".join(
        block.get("text", "") if isinstance(block, dict) else str(block)
        for block in content
    )


def latest_human_text(messages: list[BaseMessage]) -> str | None:
    """Text of the most recent human message, if any."""
    for message in reversed(messages or []):
        if isinstance(message, HumanMessage):
            text = _message_text(message).strip()
            if text:
                return text
    return None


def prepare_run(state: AgentState) -> dict:
    """
    Start a run from the latest human message (or the `question` input).

    Reads from state:
    - messages, question

    Writes to state:
    - question, original_question and every per-run field reset

    Raises:
        ValueError: there is no question to answer
    """
    question = latest_human_text(state.get("messages", [])) or (
        state.get("question") or ""
    ).strip()
    if not question:
        raise ValueError("No question to answer: send a human message or 'question'")

    logger.info(f"Starting run for question: {question!r}")
    return reset_run_fields(question)
