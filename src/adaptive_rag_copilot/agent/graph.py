"""
Graph construction with dependency injection.

The graph is just WIRING - all logic lives in nodes, all branching in
agent.routing. This separation means:
- Nodes can be tested in isolation
- Graph structure can change without touching node logic
- Dependencies (store, web search, model, checkpointer) are injectable

Graph structure:

    START -> prepare_run -> route_question
    route_question -> retrieve | web_search | ask_human
    ask_human -> route_question
    retrieve -> grade_documents -> generate | transform_query | web_search
    transform_query -> retrieve
    web_search -> generate
    generate -> grade_generation
        -> generate | transform_query | human_review | finalize | mark_exhausted
    mark_exhausted -> finalize
    human_review -> finalize | transform_query     (Command)
    finalize -> END

ask_human and human_review pause the run with interrupt(), which needs a
checkpointer to hold the paused state until the human answers.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
from typing import TYPE_CHECKING

from langgraph.graph import END, START, StateGraph

from adaptive_rag_copilot.agent.nodes import (
    ask_human,
    create_generate_node,
    create_grade_documents_node,
    create_grade_generation_node,
    create_human_review_node,
    create_retrieve_node,
    create_route_node,
    create_transform_query_node,
    create_web_search_node,
    finalize,
    mark_exhausted,
    prepare_run,
)
from adaptive_rag_copilot.agent.routing import (
    decide_after_grading,
    decide_to_generate,
    review_enabled,
    route_after_router,
)
from adaptive_rag_copilot.agent.state import AgentState
from adaptive_rag_copilot.config import get_settings
from adaptive_rag_copilot.observability import traced_node

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from langgraph.checkpoint.base import BaseCheckpointSaver
    from langgraph.graph.state import CompiledStateGraph

    from adaptive_rag_copilot.config import AgentSettings
    from adaptive_rag_copilot.core import VectorStore, WebSearcher

logger = logging.getLogger(__name__)

# Worst case: every rewrite, every generation attempt and every review round
RECURSION_LIMIT = 100


def _bind(edge, settings: AgentSettings):
    """Close a routing function over settings; LangGraph passes only state."""

    @functools.wraps(edge)
    def bound(state: AgentState) -> str:
        return edge(state, settings)

    return bound


def create_default_model(settings: AgentSettings) -> BaseChatModel:
    from langchain_openai import ChatOpenAI

    return ChatOpenAI(model=settings.model, temperature=settings.temperature)


def build_agent_graph(
    store: VectorStore,
    searcher: WebSearcher | None = None,
    model: BaseChatModel | None = None,
    settings: AgentSettings | None = None,
    checkpointer: BaseCheckpointSaver | None = None,
) -> CompiledStateGraph:
    """
    Build the adaptive RAG graph with injected dependencies.

    Args:
        store: VectorStore for the knowledge base
        searcher: WebSearcher, or None to run without web search
        model: Chat model for every chain (ChatOpenAI from settings if None)
        settings: Limits and switches (global settings if None)
        checkpointer: Saver holding paused runs; required when review or
            clarification is enabled

    Returns:
        Compiled graph ready for ainvoke / the CopilotKit endpoint

    Raises:
        ValueError: interrupts are enabled but no checkpointer was given

    Example:
        # Testing
        store = InMemoryVectorStore(MockEmbeddings())
        seed_vector_store(store)
        graph = build_agent_graph(store, StaticWebSearch(), fake_model,
                                  settings, MemorySaver())
    """
    settings = settings or get_settings()
    if searcher is None and settings.web_search_enabled:
        logger.info("No web searcher given, web search disabled")
        settings = dataclasses.replace(settings, web_search_enabled=False)

    if checkpointer is None and settings.interrupts_enabled:
        raise ValueError(
            "Human review or clarification is enabled, so the graph needs a "
            "checkpointer to pause and resume runs"
        )

    model = model or create_default_model(settings)
    web_enabled = settings.web_search_enabled
    review_on = review_enabled(settings)

    workflow = StateGraph(AgentState)

    def add(name: str, node, **kwargs) -> None:
        workflow.add_node(name, traced_node(name, node), **kwargs)

    # Nodes with injected dependencies
    add("prepare_run", prepare_run)
    add("route_question", create_route_node(model, settings))
    add("ask_human", ask_human)
    add("retrieve", create_retrieve_node(store, settings))
    add("grade_documents", create_grade_documents_node(model))
    add("transform_query", create_transform_query_node(model))
    if web_enabled:
        add("web_search", create_web_search_node(searcher, settings))
    add("generate", create_generate_node(model))
    add("grade_generation", create_grade_generation_node(model))
    if review_on:
        add(
            "human_review",
            create_human_review_node(settings),
            destinations=("finalize", "transform_query"),
        )
    add("mark_exhausted", mark_exhausted)
    add("finalize", finalize)

    # Edges
    workflow.add_edge(START, "prepare_run")
    workflow.add_edge("prepare_run", "route_question")

    after_router = ["retrieve", "ask_human"] + (["web_search"] if web_enabled else [])
    workflow.add_conditional_edges("route_question", route_after_router, after_router)
    workflow.add_edge("ask_human", "route_question")

    workflow.add_edge("retrieve", "grade_documents")
    after_documents = ["generate", "transform_query"] + (
        ["web_search"] if web_enabled else []
    )
    workflow.add_conditional_edges(
        "grade_documents", _bind(decide_to_generate, settings), after_documents
    )
    workflow.add_edge("transform_query", "retrieve")
    if web_enabled:
        workflow.add_edge("web_search", "generate")

    workflow.add_edge("generate", "grade_generation")
    after_generation = ["generate", "transform_query", "finalize", "mark_exhausted"] + (
        ["human_review"] if review_on else []
    )
    workflow.add_conditional_edges(
        "grade_generation",
        _bind(decide_after_grading, settings),
        after_generation,
    )
    workflow.add_edge("mark_exhausted", "finalize")
    workflow.add_edge("finalize", END)

    graph = workflow.compile(checkpointer=checkpointer)
    return graph.with_config(recursion_limit=RECURSION_LIMIT)


def build_default_dependencies(
    settings: AgentSettings | None = None,
) -> tuple[VectorStore, WebSearcher | None]:
    """
    Create the store and web searcher described by settings.

    The in-memory store is seeded here; a Postgres store is expected to be
    seeded already (`adaptive-rag seed`).
    """
    from adaptive_rag_copilot.retrieval import (
        VectorStoreConfig,
        get_vector_store,
        seed_vector_store,
    )
    from adaptive_rag_copilot.websearch import get_web_search

    settings = settings or get_settings()
    store = get_vector_store(
        use_postgres=settings.use_postgres_store,
        config=VectorStoreConfig(connection_string=settings.database_url),
        use_mock_embeddings=settings.use_mock_embeddings,
    )
    store.connect()
    if not settings.use_postgres_store:
        seed_vector_store(store)

    return store, get_web_search(settings)
