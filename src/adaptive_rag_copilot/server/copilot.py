"""
CopilotKit AG-UI endpoint.

Mounts the compiled graph behind the AG-UI protocol so a CopilotKit
frontend can chat with it. When a node calls interrupt(), the endpoint
streams the payload to the frontend, where `useLangGraphInterrupt`
renders it and calls `resolve(value)`; the next request carries that
value back as the resume command for the same thread.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ag_ui_langgraph import add_langgraph_fastapi_endpoint
from copilotkit import LangGraphAGUIAgent

if TYPE_CHECKING:
    from fastapi import FastAPI
    from langgraph.graph.state import CompiledStateGraph

    from adaptive_rag_copilot.config import AgentSettings

logger = logging.getLogger(__name__)

AGENT_DESCRIPTION = (
    "Adaptive RAG agent over a knowledge base about LLM agents, prompt "
    "engineering, adversarial attacks and human-in-the-loop LangGraph apps. "
    "Asks for clarification on ambiguous questions and for review before "
    "releasing an answer."
)


def mount_copilotkit(
    app: FastAPI,
    graph: CompiledStateGraph,
    settings: AgentSettings,
) -> None:
    agent = LangGraphAGUIAgent(
        name=settings.agent_name,
        description=AGENT_DESCRIPTION,
        graph=graph,
    )
    add_langgraph_fastapi_endpoint(app=app, agent=agent, path=settings.copilotkit_path)
    logger.info(
        f"CopilotKit agent {settings.agent_name!r} mounted at {settings.copilotkit_path}"
    )
