"""
Prompt builders for every chain in the graph.

All PURE FUNCTIONS: same inputs, same prompt. They can be tested without
an LLM, and nodes stay focused on calling the model and updating state.
"""

from __future__ import annotations

# Must match the topics seeded in retrieval.seeds.knowledge_base
ROUTER_TOPICS = (
    "LLM-powered agents (planning, memory, tool use)",
    "prompt engineering",
    "adversarial attacks on LLMs",
    "LangGraph interrupts, checkpointers and thread ids",
    "CopilotKit interrupt handling",
    "human-in-the-loop agent design and troubleshooting",
    "adaptive RAG",
)


def format_documents(documents: list[dict]) -> str:
    """Numbered source block used by the generation and hallucination prompts."""
    if not documents:
        return "No documents."
    return "\n\n".join(
        f"[{i}] {doc['title']}\n{doc['content']}"
        for i, doc in enumerate(documents, start=1)
    )


def build_router_prompt(question: str, allow_clarification: bool) -> str:
    topics = "\n".join(f"- {topic}" for topic in ROUTER_TOPICS)
    clarify = (
        "\nChoose 'clarify' only if the question is so ambiguous that no source "
        "could answer it without asking the user what they mean."
        if allow_clarification
        else "\nNever choose 'clarify'."
    )
    return f"""You are an expert at routing a user question to a vectorstore or web search.

The vectorstore contains documents on:
{topics}

Use the vectorstore for questions on these topics. Otherwise, use web_search.{clarify}

QUESTION: {question}"""


def build_document_grader_prompt(question: str, document: dict) -> str:
    return f"""You are a grader assessing relevance of a retrieved document to a user question.

If the document contains keywords or semantic meaning related to the question,
grade it as relevant. The goal is to filter out erroneous retrievals; it does
not need to be a stringent test.

RETRIEVED DOCUMENT:
{document['title']}
{document['content']}

USER QUESTION: {question}

Give a binary score 'yes' or 'no'."""


def build_generation_prompt(
    question: str,
    documents: list[dict],
    feedback: str | None = None,
) -> str:
    feedback_block = (
        f"\nA reviewer rejected an earlier answer with this feedback; address it:\n{feedback}\n"
        if feedback
        else ""
    )
    return f"""You are an assistant for question-answering tasks.

Use the following retrieved context to answer the question. Cite sources by
their number in square brackets. If the context does not contain the answer,
say that you don't know. Use three to five sentences and keep the answer concise.
{feedback_block}
CONTEXT:
{format_documents(documents)}

QUESTION: {question}

ANSWER:"""


def build_hallucination_grader_prompt(documents: list[dict], generation: str) -> str:
    return f"""You are a grader assessing whether an LLM generation is grounded in / supported by a set of retrieved facts.

FACTS:
{format_documents(documents)}

LLM GENERATION: {generation}

Give a binary score 'yes' or 'no'. 'yes' means the answer is grounded in the facts."""


def build_answer_grader_prompt(question: str, generation: str) -> str:
    return f"""You are a grader assessing whether an answer addresses / resolves a question.

USER QUESTION: {question}

LLM GENERATION: {generation}

Give a binary score 'yes' or 'no'. 'yes' means the answer resolves the question."""


def build_rewrite_prompt(question: str, feedback: str | None = None) -> str:
    feedback_block = (
        f"\nA human reviewer said the previous answer was wrong or incomplete:\n{feedback}\n"
        "Use the feedback to make the question more precise.\n"
        if feedback
        else ""
    )
    return f"""You are a question re-writer that converts an input question to a better version
that is optimized for vectorstore retrieval. Look at the input and reason about
the underlying semantic intent / meaning.
{feedback_block}
INITIAL QUESTION: {question}

Formulate an improved question."""


def build_clarification_prompt(question: str) -> str:
    """Text shown to the user by the clarification human node."""
    return (
        f'I am not sure what you mean by "{question}". '
        "Could you rephrase it or add some detail?"
    )
