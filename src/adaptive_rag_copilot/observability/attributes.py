"""
Semantic Conventions for Span Attributes

Agent namespace for graph nodes, routing decisions, grades, interrupts
and thread ids. LLM spans get their GenAI attributes from the OpenInference
instrumentors.
"""

# ---------------------------------------------------------------------------
# AGENT NAMESPACE (custom)
# ---------------------------------------------------------------------------

AGENT_NAME = "agent.name"  # "adaptive_rag"
AGENT_NODE_NAME = "agent.node.name"  # "route_question", "human_review", ...
AGENT_THREAD_ID = "agent.thread_id"
AGENT_RUN_STATUS = "agent.run.status"  # "completed", "interrupted"
AGENT_FINAL_STATUS = "agent.run.final_status"  # "completed", "rejected", "exhausted"
AGENT_LATENCY_MS = "agent.run.latency_ms"

# Routing and grading
AGENT_DATASOURCE = "agent.route.datasource"  # "vectorstore", "web_search", "clarify"
AGENT_NEXT_NODE = "agent.route.goto"  # Command target of a self-routing node
AGENT_GENERATION_GRADE = "agent.grade.generation"  # "useful", "not_useful", ...
AGENT_RETRIEVED_DOC_COUNT = "agent.retrieved_doc_count"

# Human-in-the-loop
AGENT_INTERRUPTED = "agent.interrupt.raised"  # bool
AGENT_INTERRUPT_ID = "agent.interrupt.id"
AGENT_INTERRUPT_TYPE = "agent.interrupt.type"  # "review_answer", "clarification"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def node_update_attributes(update) -> dict:
    """Attributes describing what a node wrote (a state dict or a Command)."""
    attrs = {}
    goto = getattr(update, "goto", None)
    if goto:
        attrs[AGENT_NEXT_NODE] = goto if isinstance(goto, str) else str(goto)
        update = getattr(update, "update", None)

    if not isinstance(update, dict):
        return attrs
    if update.get("datasource"):
        attrs[AGENT_DATASOURCE] = update["datasource"]
    if update.get("generation_grade"):
        attrs[AGENT_GENERATION_GRADE] = update["generation_grade"]
    if "documents" in update:
        attrs[AGENT_RETRIEVED_DOC_COUNT] = len(update["documents"])
    return attrs


def run_attributes(
    thread_id: str,
    status: str,
    final_status: str | None = None,
    interrupt_id: str | None = None,
    interrupt_type: str | None = None,
    latency_ms: float | None = None,
) -> dict:
    """Create attributes dict for an agent.run / agent.resume span."""
    attrs = {
        AGENT_THREAD_ID: thread_id,
        AGENT_RUN_STATUS: status,
    }
    if final_status:
        attrs[AGENT_FINAL_STATUS] = final_status
    if interrupt_id:
        attrs[AGENT_INTERRUPT_ID] = interrupt_id
    if interrupt_type:
        attrs[AGENT_INTERRUPT_TYPE] = interrupt_type
    if latency_ms is not None:
        attrs[AGENT_LATENCY_MS] = latency_ms
    return attrs
