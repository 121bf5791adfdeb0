"""
Adaptive RAG agent with human-in-the-loop interrupts.

- state: AgentState (extends CopilotKitState)
- nodes / routing: node factories and conditional edges
- graph: build_agent_graph() wiring
- checkpoint: CheckpointManager (memory / sqlite / postgres)
- runner: AgentRunner, the thread/interrupt correlation layer
"""

from adaptive_rag_copilot.agent.checkpoint import CheckpointManager
from adaptive_rag_copilot.agent.graph import (
    build_agent_graph,
    build_default_dependencies,
)
from adaptive_rag_copilot.agent.runner import (
    AgentRunner,
    PendingInterrupt,
    RunOutcome,
    ThreadSnapshot,
)
from adaptive_rag_copilot.agent.state import AgentState, create_initial_state

__all__ = [
    "AgentState",
    "create_initial_state",
    "build_agent_graph",
    "build_default_dependencies",
    "CheckpointManager",
    "AgentRunner",
    "RunOutcome",
    "PendingInterrupt",
    "ThreadSnapshot",
]
