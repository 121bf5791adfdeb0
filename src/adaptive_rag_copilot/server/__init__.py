"""FastAPI bridge: REST routes plus the CopilotKit AG-UI endpoint."""

from adaptive_rag_copilot.server.app import create_app

__all__ = ["create_app"]
