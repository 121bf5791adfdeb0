"""
FastAPI application - the bridge between the chat UI and the graph.

The lifespan opens the checkpointer, builds the store, web search and
graph, and mounts the CopilotKit endpoint on that graph. The REST routes
drive the same graph through an AgentRunner.

Passing a runner (or a compiled graph) skips the lifespan wiring; tests
use that to serve a graph built from fakes.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adaptive_rag_copilot.agent import (
    AgentRunner,
    CheckpointManager,
    build_agent_graph,
    build_default_dependencies,
)
from adaptive_rag_copilot.config import get_settings
from adaptive_rag_copilot.observability import init_phoenix, shutdown_phoenix
from adaptive_rag_copilot.server.copilot import mount_copilotkit
from adaptive_rag_copilot.server.errors import setup_exception_handlers
from adaptive_rag_copilot.server.routes import router

if TYPE_CHECKING:
    from langgraph.graph.state import CompiledStateGraph

    from adaptive_rag_copilot.config import AgentSettings

logger = logging.getLogger(__name__)


def create_app(
    settings: AgentSettings | None = None,
    runner: AgentRunner | None = None,
    graph: CompiledStateGraph | None = None,
) -> FastAPI:
    """
    Create the FastAPI bridge.

    Args:
        settings: Agent settings (global settings if None)
        runner: Prebuilt runner; its graph is served as-is
        graph: Prebuilt compiled graph (wrapped in a runner)
    """
    settings = settings or get_settings()
    if runner is None and graph is not None:
        runner = AgentRunner(graph)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.runner is not None:
            yield
            return

        logger.info("Starting adaptive RAG bridge...")
        init_phoenix()
        store, searcher = build_default_dependencies(settings)
        try:
            async with CheckpointManager(settings) as saver:
                compiled = build_agent_graph(
                    store, searcher, settings=settings, checkpointer=saver
                )
                app.state.runner = AgentRunner(compiled)
                mount_copilotkit(app, compiled, settings)
                yield
        finally:
            logger.info("Shutting down adaptive RAG bridge...")
            app.state.runner = None
            store.close()
            shutdown_phoenix()

    app = FastAPI(
        title="Adaptive RAG Copilot",
        description=(
            "Adaptive RAG agent with human-in-the-loop interrupts, served to "
            "CopilotKit over AG-UI and to scripts over REST."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.runner = runner

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)
    app.include_router(router)

    if runner is not None:
        mount_copilotkit(app, runner.graph, settings)

    return app
