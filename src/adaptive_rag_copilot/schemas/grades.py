"""
Structured output schemas for the routing, grading and rewriting chains.

Every chain calls `model.with_structured_output(Schema)`, so the graph
branches on typed fields instead of parsing free text. Literal fields keep
the model from inventing a third answer ("maybe", "partially") that no
edge knows how to route.
"""

from typing import Literal

from pydantic import BaseModel, Field


class RouteQuery(BaseModel):
    """Route a user question to the most relevant datasource."""

    datasource: Literal["vectorstore", "web_search", "clarify"] = Field(
        description=(
            "Use 'vectorstore' for questions about the indexed topics, "
            "'web_search' for anything else, and 'clarify' only when the "
            "question is too ambiguous to answer without asking the user."
        )
    )


class GradeDocuments(BaseModel):
    """Binary relevance score for a retrieved document."""

    binary_score: Literal["yes", "no"] = Field(
        description="Document is relevant to the question, 'yes' or 'no'"
    )


class GradeHallucinations(BaseModel):
    """Binary score for hallucination present in a generated answer."""

    binary_score: Literal["yes", "no"] = Field(
        description="Answer is grounded in the facts, 'yes' or 'no'"
    )


class GradeAnswer(BaseModel):
    """Binary score assessing whether an answer addresses the question."""

    binary_score: Literal["yes", "no"] = Field(
        description="Answer addresses the question, 'yes' or 'no'"
    )


class RewrittenQuestion(BaseModel):
    """A question rewritten for better retrieval."""

    question: str = Field(
        description="The improved question, self-contained and specific"
    )
