"""
Exception handlers for the FastAPI bridge.

Run/resume protocol errors map to the HTTP status they carry. Anything
else is logged with an error id the client can quote, and answered 500.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adaptive_rag_copilot.errors import AgentRunError

logger = logging.getLogger(__name__)


async def agent_run_error_handler(request: Request, exc: AgentRunError) -> JSONResponse:
    logger.info(
        f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_type}: "
        f"{exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unhandled exception with an error id and answer 500."""
    error_id = uuid.uuid4().hex[:12]
    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"error_id": error_id, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AgentRunError, agent_run_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
