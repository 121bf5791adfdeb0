"""
Interrupt payloads and resume values.

These models are the contract between the paused graph and whoever
resolves it: the CopilotKit `useLangGraphInterrupt` render function, the
REST API or the CLI. The payload is what `interrupt()` surfaces (always a
plain dict, so it serialises into checkpoints and AG-UI events); the
resume value is whatever the UI passes to `resolve()`.

CopilotKit resolves with strings more often than objects, so the parsers
accept JSON strings and bare keywords as well as mappings.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

from adaptive_rag_copilot.errors import InvalidResumeValueError

REVIEW_ANSWER = "review_answer"
CLARIFICATION = "clarification"

_APPROVE_WORDS = {"approve", "approved", "accept", "yes", "y", "ok", "lgtm"}
_REJECT_WORDS = {"reject", "rejected", "no", "n"}


# ---------------------------------------------------------------------------
# PAYLOADS (graph -> UI)
# ---------------------------------------------------------------------------


class SourceRef(BaseModel):
    """A source shown next to the draft answer."""

    title: str
    source: str | None = None


class ReviewRequest(BaseModel):
    """Payload of the review interrupt raised before an answer is released."""

    type: Literal["review_answer"] = REVIEW_ANSWER
    question: str
    answer: str
    sources: list[SourceRef] = Field(default_factory=list)
    grade: str | None = None
    round: int = 1
    max_rounds: int = 3
    actions: list[str] = Field(default_factory=lambda: ["approve", "edit", "reject"])


class ClarificationRequest(BaseModel):
    """Payload of the human node asking the user to clarify the question."""

    type: Literal["clarification"] = CLARIFICATION
    question: str
    prompt: str


# ---------------------------------------------------------------------------
# RESUME VALUES (UI -> graph)
# ---------------------------------------------------------------------------


class ReviewDecision(BaseModel):
    """A reviewer's decision on a draft answer."""

    action: Literal["approve", "edit", "reject"]
    answer: str | None = None
    feedback: str | None = None

    @model_validator(mode="after")
    def _edit_needs_answer(self) -> "ReviewDecision":
        if self.action == "edit" and not (self.answer and self.answer.strip()):
            raise ValueError("an 'edit' decision needs a non-empty 'answer'")
        return self


def _decision_from_text(text: str) -> ReviewDecision:
    stripped = text.strip()
    if not stripped:
        raise InvalidResumeValueError("Review decision is empty")

    if stripped.startswith("{"):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise InvalidResumeValueError(f"Review decision is not valid JSON: {e}") from e
        return parse_review_decision(parsed)

    word = stripped.lower().rstrip(".!")
    if word in _APPROVE_WORDS:
        return ReviewDecision(action="approve")
    if word in _REJECT_WORDS:
        return ReviewDecision(action="reject")

    # Anything else is the reviewer explaining what is wrong.
    return ReviewDecision(action="reject", feedback=stripped)


def parse_review_decision(value: Any) -> ReviewDecision:
    """
    Turn a resume value into a ReviewDecision.

    Accepts a ReviewDecision, a mapping, a JSON object string, a bare
    keyword (approve/yes/ok/lgtm, reject/no) or free text (a rejection with
    that text as feedback).

    Raises:
        InvalidResumeValueError: the value cannot express a decision
    """
    if isinstance(value, ReviewDecision):
        return value
    if isinstance(value, str):
        return _decision_from_text(value)
    if isinstance(value, bool):
        return ReviewDecision(action="approve" if value else "reject")
    if isinstance(value, dict):
        try:
            return ReviewDecision.model_validate(value)
        except ValidationError as e:
            raise InvalidResumeValueError(f"Invalid review decision: {e}") from e
    raise InvalidResumeValueError(
        f"Review decision must be a string or an object, got {type(value).__name__}"
    )


def parse_clarification(value: Any) -> str:
    """
    Turn a resume value into the user's clarified question.

    Raises:
        InvalidResumeValueError: the value carries no text
    """
    if isinstance(value, dict):
        value = value.get("answer")
    if not isinstance(value, str) or not value.strip():
        raise InvalidResumeValueError("Clarification must be a non-empty string")
    return value.strip()


def validate_resume_value(payload: Any, value: Any) -> None:
    """
    Check a resume value against the pending interrupt payload.

    Called before resuming so an unusable value is rejected while the
    interrupt is still pending, instead of failing inside the graph.
    """
    kind = payload.get("type") if isinstance(payload, dict) else None
    if kind == REVIEW_ANSWER:
        parse_review_decision(value)
    elif kind == CLARIFICATION:
        parse_clarification(value)
