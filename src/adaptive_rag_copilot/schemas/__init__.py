"""
Schemas - structured LLM outputs and interrupt contracts.
"""

from adaptive_rag_copilot.schemas.grades import (
    GradeAnswer,
    GradeDocuments,
    GradeHallucinations,
    RewrittenQuestion,
    RouteQuery,
)
from adaptive_rag_copilot.schemas.interrupts import (
    CLARIFICATION,
    REVIEW_ANSWER,
    ClarificationRequest,
    ReviewDecision,
    ReviewRequest,
    SourceRef,
    parse_clarification,
    parse_review_decision,
    validate_resume_value,
)

__all__ = [
    "GradeAnswer",
    "GradeDocuments",
    "GradeHallucinations",
    "RewrittenQuestion",
    "RouteQuery",
    "CLARIFICATION",
    "REVIEW_ANSWER",
    "ClarificationRequest",
    "ReviewDecision",
    "ReviewRequest",
    "SourceRef",
    "parse_clarification",
    "parse_review_decision",
    "validate_resume_value",
]
