"""Request and response models for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from adaptive_rag_copilot.agent.runner import (
    PendingInterrupt,
    RunOutcome,
    ThreadSnapshot,
)


class StartRunRequest(BaseModel):
    question: str = Field(..., min_length=1, description="The user's question")
    thread_id: str | None = Field(
        None, description="Existing thread to continue; a new one is created if omitted"
    )


class ResumeRequest(BaseModel):
    value: Any = Field(
        ...,
        description=(
            "Resume value for the pending interrupt: a review decision "
            "({'action': 'approve'|'edit'|'reject', ...} or a keyword) or a "
            "clarification string"
        ),
    )
    interrupt_id: str | None = Field(
        None, description="Pending interrupt id; rejected as stale if it no longer matches"
    )


class InterruptResponse(BaseModel):
    id: str
    type: str | None = None
    value: Any = None

    @classmethod
    def from_pending(cls, pending: PendingInterrupt | None) -> "InterruptResponse | None":
        if pending is None:
            return None
        return cls(id=pending.id, type=pending.type, value=pending.value)


class SourceResponse(BaseModel):
    title: str | None = None
    source: str | None = None


class RunResponse(BaseModel):
    thread_id: str
    status: str
    answer: str | None = None
    final_status: str | None = None
    interrupt: InterruptResponse | None = None
    sources: list[SourceResponse] = Field(default_factory=list)
    datasource: str | None = None
    latency_ms: float = 0.0

    @classmethod
    def from_outcome(cls, outcome: RunOutcome) -> "RunResponse":
        return cls(
            thread_id=outcome.thread_id,
            status=outcome.status,
            answer=outcome.answer,
            final_status=outcome.final_status,
            interrupt=InterruptResponse.from_pending(outcome.interrupt),
            sources=[SourceResponse(**s) for s in outcome.sources],
            datasource=outcome.datasource,
            latency_ms=outcome.latency_ms,
        )


class ThreadResponse(BaseModel):
    thread_id: str
    values: dict[str, Any]
    next: list[str]
    interrupt: InterruptResponse | None = None

    @classmethod
    def from_snapshot(cls, snapshot: ThreadSnapshot) -> "ThreadResponse":
        return cls(
            thread_id=snapshot.thread_id,
            values=snapshot.values,
            next=snapshot.next,
            interrupt=InterruptResponse.from_pending(snapshot.interrupt),
        )


class ErrorResponse(BaseModel):
    error_type: str
    detail: str
    thread_id: str | None = None
