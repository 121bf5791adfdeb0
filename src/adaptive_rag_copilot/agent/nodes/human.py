"""
Human nodes - the two places the graph pauses for a person.

Both call `langgraph.types.interrupt()`, which checkpoints the run and
surfaces the payload to the caller (the CopilotKit `useLangGraphInterrupt`
hook, the REST API or the CLI). Resuming with `Command(resume=value)`
re-executes the node from the top and `interrupt()` returns the value, so
everything before the `interrupt()` call must be free of side effects.

- ask_human: a HumanNode; its whole output is the user's clarification
- human_review: approves, edits or rejects the draft answer
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from langchain_core.messages import AIMessage, HumanMessage
from langgraph.types import Command, interrupt

from adaptive_rag_copilot.agent.prompts import build_clarification_prompt
from adaptive_rag_copilot.schemas.interrupts import (
    ClarificationRequest,
    ReviewRequest,
    SourceRef,
    parse_clarification,
    parse_review_decision,
)

if TYPE_CHECKING:
    from adaptive_rag_copilot.agent.state import AgentState
    from adaptive_rag_copilot.config import AgentSettings

logger = logging.getLogger(__name__)


def ask_human(state: AgentState) -> dict:
    """
    Ask the user to clarify an ambiguous question.

    Reads from state:
    - question, clarifications

    Writes to state:
    - question: the user's answer
    - clarifications: incremented
    - messages: the clarifying question and the user's answer
    """
    prompt = build_clarification_prompt(state["question"])
    request = ClarificationRequest(question=state["question"], prompt=prompt)

    value = interrupt(request.model_dump())
    answer = parse_clarification(value)

    logger.info(f"Clarification received: {answer!r}")
    return {
        "question": answer,
        "clarifications": state.get("clarifications", 0) + 1,
        "messages": [AIMessage(content=prompt), HumanMessage(content=answer)],
    }


def _sources(documents: list[dict]) -> list[SourceRef]:
    return [SourceRef(title=doc["title"], source=doc.get("source")) for doc in documents]


def create_human_review_node(
    settings: AgentSettings,
) -> Callable[[AgentState], Command]:
    """
    Factory for the review gate in front of every released answer.

    The node routes itself with Command, so the graph registers it with
    destinations=("finalize", "transform_query") instead of a conditional edge.
    """

    def human_review(state: AgentState) -> Command:
        """
        Reads from state:
        - question, generation, generation_grade, documents, review_rounds

        Writes to state (through Command.update):
        - approve: final_answer = draft, status = "completed"
        - edit: final_answer = edited answer, status = "completed"
        - reject: review_feedback, review_rounds, generation_attempts reset;
          status = "rejected" once review rounds are exhausted
        """
        review_round = state.get("review_rounds", 0) + 1
        request = ReviewRequest(
            question=state["question"],
            answer=state["generation"],
            sources=_sources(state.get("documents", [])),
            grade=state.get("generation_grade") or None,
            round=review_round,
            max_rounds=settings.max_review_rounds,
        )

        decision = parse_review_decision(interrupt(request.model_dump()))
        logger.info(f"Review round {review_round}: {decision.action}")

        if decision.action == "approve":
            return Command(
                goto="finalize",
                update={
                    "final_answer": state["generation"],
                    "status": "completed",
                    "review_rounds": review_round,
                },
            )

        if decision.action == "edit":
            return Command(
                goto="finalize",
                update={
                    "final_answer": decision.answer.strip(),
                    "status": "completed",
                    "review_rounds": review_round,
                },
            )

        if review_round >= settings.max_review_rounds:
            logger.info(f"Review rounds exhausted after {review_round} rejections")
            return Command(
                goto="finalize",
                update={
                    "final_answer": None,
                    "status": "rejected",
                    "review_rounds": review_round,
                    "review_feedback": decision.feedback,
                },
            )

        return Command(
            goto="transform_query",
            update={
                "review_feedback": decision.feedback,
                "review_rounds": review_round,
                "generation_attempts": 0,
            },
        )

    return human_review
