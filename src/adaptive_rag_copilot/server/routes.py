"""
REST endpoints for driving threads without the CopilotKit frontend.

The CopilotKit endpoint and these routes share one compiled graph and one
checkpointer, so a thread paused in the chat UI can be inspected (and
resumed) here, and vice versa.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from adaptive_rag_copilot.agent.runner import AgentRunner
from adaptive_rag_copilot.server.schemas import (
    ErrorResponse,
    ResumeRequest,
    RunResponse,
    StartRunRequest,
    ThreadResponse,
)

router = APIRouter()

_ERRORS = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def get_runner(request: Request) -> AgentRunner:
    runner = getattr(request.app.state, "runner", None)
    if runner is None:
        raise HTTPException(status_code=503, detail="Agent is not ready")
    return runner


@router.get("/health", summary="Health Check")
async def health_check(request: Request):
    """Liveness plus whether the graph has been built."""
    return {
        "status": "ok",
        "agent_ready": getattr(request.app.state, "runner", None) is not None,
    }


@router.post(
    "/threads/runs",
    response_model=RunResponse,
    responses=_ERRORS,
    summary="Start a run",
)
async def start_run(body: StartRunRequest, runner: AgentRunner = Depends(get_runner)):
    """
    Ask a question on a new or existing thread.

    Returns when the run completes or pauses on an interrupt; in the latter
    case `interrupt` holds the payload to show the human.
    """
    outcome = await runner.start(body.question, thread_id=body.thread_id)
    return RunResponse.from_outcome(outcome)


@router.get(
    "/threads/{thread_id}",
    response_model=ThreadResponse,
    responses=_ERRORS,
    summary="Get thread state",
)
async def get_thread(thread_id: str, runner: AgentRunner = Depends(get_runner)):
    snapshot = await runner.get_thread(thread_id)
    return ThreadResponse.from_snapshot(snapshot)


@router.post(
    "/threads/{thread_id}/resume",
    response_model=RunResponse,
    responses=_ERRORS,
    summary="Resolve the pending interrupt",
)
async def resume_thread(
    thread_id: str,
    body: ResumeRequest,
    runner: AgentRunner = Depends(get_runner),
):
    """Resolve the thread's pending interrupt exactly once and continue the run."""
    outcome = await runner.resume(thread_id, body.value, interrupt_id=body.interrupt_id)
    return RunResponse.from_outcome(outcome)
