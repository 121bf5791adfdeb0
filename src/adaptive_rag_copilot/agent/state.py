"""
Agent state definition - the data flowing through the LangGraph.

The state extends CopilotKitState so the CopilotKit AG-UI bridge can read
and write `messages` (and its own `copilotkit` channel) on the same graph
the REST API and CLI drive. Everything else is plain, checkpoint-friendly
data: strings, ints and lists of dicts.
"""

from copilotkit import CopilotKitState
from langchain_core.messages import HumanMessage


class AgentState(CopilotKitState):
    """
    State that flows through the adaptive RAG graph.

    Input arrives as a human message in `messages` (CopilotKit) or as
    `question` (create_initial_state). prepare_run normalises both and
    resets the per-run fields below, since a thread's checkpoint carries
    the previous run's values into the next one.
    """

    # -------------------------------------------------------------------------
    # QUESTION
    # -------------------------------------------------------------------------
    question: str
    original_question: str
    datasource: str

    # -------------------------------------------------------------------------
    # INTERMEDIATE (populated by nodes)
    # -------------------------------------------------------------------------
    documents: list[dict]
    generation: str
    generation_grade: str
    review_feedback: str | None
    web_search_used: bool

    # -------------------------------------------------------------------------
    # LOOP COUNTERS
    # -------------------------------------------------------------------------
    query_rewrites: int
    generation_attempts: int
    review_rounds: int
    clarifications: int

    # -------------------------------------------------------------------------
    # OUTPUT
    # -------------------------------------------------------------------------
    final_answer: str | None
    status: str

    # -------------------------------------------------------------------------
    # METRICS
    # -------------------------------------------------------------------------
    retrieval_latency_ms: float
    generation_latency_ms: float


def create_initial_state(question: str) -> dict:
    """
    Build the graph input for a new run.

    Only the question is set; prepare_run resets everything else, so a
    partial input is enough and does not clobber the thread's history.
    """
    return {
        "question": question,
        "messages": [HumanMessage(content=question)],
    }


def reset_run_fields(question: str) -> dict:
    """State update that starts a fresh run for `question`."""
    return {
        "question": question,
        "original_question": question,
        "datasource": "",
        "documents": [],
        "generation": "",
        "generation_grade": "",
        "review_feedback": None,
        "web_search_used": False,
        "query_rewrites": 0,
        "generation_attempts": 0,
        "review_rounds": 0,
        "clarifications": 0,
        "final_answer": None,
        "status": "running",
        "retrieval_latency_ms": 0.0,
        "generation_latency_ms": 0.0,
    }
