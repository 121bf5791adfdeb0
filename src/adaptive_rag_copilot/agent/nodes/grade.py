"""
Grading nodes - relevance of documents, grounding and usefulness of answers.

Graders only write grades into state; the conditional edges in
agent.routing decide what to do with them. That keeps every LLM call in
a node and every branch a pure function.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from adaptive_rag_copilot.agent.prompts import (
    build_answer_grader_prompt,
    build_document_grader_prompt,
    build_hallucination_grader_prompt,
)
from adaptive_rag_copilot.schemas.grades import (
    GradeAnswer,
    GradeDocuments,
    GradeHallucinations,
)

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from adaptive_rag_copilot.agent.state import AgentState

logger = logging.getLogger(__name__)

USEFUL = "useful"
NOT_USEFUL = "not_useful"
NOT_SUPPORTED = "not_supported"


def create_grade_documents_node(
    model: BaseChatModel,
) -> Callable[[AgentState], dict]:
    """Factory for the document relevance grader."""

    def grade_documents(state: AgentState) -> dict:
        """
        Keep only the documents graded relevant to the question.

        Reads from state:
        - question, documents

        Writes to state:
        - documents: the relevant subset, original order preserved
        """
        grader = model.with_structured_output(GradeDocuments)
        relevant = []
        for doc in state["documents"]:
            grade = grader.invoke(build_document_grader_prompt(state["question"], doc))
            logger.debug(f"Document {doc['id']} graded {grade.binary_score}")
            if grade.binary_score == "yes":
                relevant.append(doc)

        logger.info(
            f"{len(relevant)}/{len(state['documents'])} documents graded relevant"
        )
        return {"documents": relevant}

    return grade_documents


def create_grade_generation_node(
    model: BaseChatModel,
) -> Callable[[AgentState], dict]:
    """Factory for the hallucination + answer grader."""

    def grade_generation(state: AgentState) -> dict:
        """
        Check the answer is grounded in the documents, then that it answers.

        With no documents there is nothing to ground against, so only the
        answer grader runs.

        Writes to state:
        - generation_grade: "useful" | "not_useful" | "not_supported"
        """
        documents = state.get("documents", [])
        generation = state["generation"]

        if documents:
            hallucination = model.with_structured_output(GradeHallucinations).invoke(
                build_hallucination_grader_prompt(documents, generation)
            )
            if hallucination.binary_score != "yes":
                logger.info("Generation is not grounded in the documents")
                return {"generation_grade": NOT_SUPPORTED}

        answer = model.with_structured_output(GradeAnswer).invoke(
            build_answer_grader_prompt(state["question"], generation)
        )
        grade = USEFUL if answer.binary_score == "yes" else NOT_USEFUL
        logger.info(f"Generation graded {grade}")
        return {"generation_grade": grade}

    return grade_generation
