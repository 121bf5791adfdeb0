"""
Agent node implementations.

Each node is a factory that takes its dependencies and returns a function
compatible with LangGraph, or a plain function when it has none.
"""

from adaptive_rag_copilot.agent.nodes.finalize import finalize, mark_exhausted
from adaptive_rag_copilot.agent.nodes.generate import create_generate_node
from adaptive_rag_copilot.agent.nodes.grade import (
    NOT_SUPPORTED,
    NOT_USEFUL,
    USEFUL,
    create_grade_documents_node,
    create_grade_generation_node,
)
from adaptive_rag_copilot.agent.nodes.human import ask_human, create_human_review_node
from adaptive_rag_copilot.agent.nodes.prepare import latest_human_text, prepare_run
from adaptive_rag_copilot.agent.nodes.retrieve import create_retrieve_node
from adaptive_rag_copilot.agent.nodes.rewrite import create_transform_query_node
from adaptive_rag_copilot.agent.nodes.route import can_clarify, create_route_node
from adaptive_rag_copilot.agent.nodes.web_search import create_web_search_node

__all__ = [
    "prepare_run",
    "latest_human_text",
    "create_route_node",
    "can_clarify",
    "ask_human",
    "create_retrieve_node",
    "create_grade_documents_node",
    "create_transform_query_node",
    "create_web_search_node",
    "create_generate_node",
    "create_grade_generation_node",
    "create_human_review_node",
    "finalize",
    "mark_exhausted",
    "USEFUL",
    "NOT_USEFUL",
    "NOT_SUPPORTED",
]
