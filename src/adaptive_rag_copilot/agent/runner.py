"""
Agent runner - drives runs on threads and resolves their interrupts.

A thread id (LangGraph `configurable.thread_id`) names one conversation.
The checkpointer keeps its state between runs, and while a run is paused
in interrupt() the thread has exactly one pending interrupt. The runner is
the correlation layer the REST API and CLI use:

- start():  new run on a thread (refused while the thread is paused)
- resume(): resolve the pending interrupt, exactly once
- get_thread(): state + pending interrupt

Resume values are validated against the pending payload BEFORE the graph
resumes, so a bad value leaves the interrupt pending instead of failing
mid-run. A per-thread asyncio.Lock serialises calls on the same thread,
so two concurrent resolves of one interrupt cannot both land.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator

from langchain_core.messages import BaseMessage
from langgraph.types import Command

from adaptive_rag_copilot.agent.state import create_initial_state
from adaptive_rag_copilot.errors import (
    InvalidQuestionError,
    InvalidResumeValueError,
    NoPendingInterruptError,
    StaleInterruptError,
    ThreadBusyError,
    ThreadNotFoundError,
)
from adaptive_rag_copilot.observability import get_tracer, run_attributes
from adaptive_rag_copilot.schemas.interrupts import validate_resume_value

if TYPE_CHECKING:
    from langgraph.graph.state import CompiledStateGraph
    from langgraph.types import StateSnapshot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# RESULT TYPES
# ---------------------------------------------------------------------------


@dataclass
class PendingInterrupt:
    """The interrupt a paused thread is waiting on."""

    id: str
    value: Any

    @property
    def type(self) -> str | None:
        return self.value.get("type") if isinstance(self.value, dict) else None


@dataclass
class RunOutcome:
    """Where a run (or resumed run) stopped."""

    thread_id: str
    status: str  # "completed" | "interrupted"
    answer: str | None = None
    final_status: str | None = None  # "completed" | "rejected" | "exhausted"
    interrupt: PendingInterrupt | None = None
    sources: list[dict] = field(default_factory=list)
    datasource: str | None = None
    latency_ms: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ThreadSnapshot:
    """Current state of a thread."""

    thread_id: str
    values: dict
    next: list[str]
    interrupt: PendingInterrupt | None = None

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------


def _pending_interrupt(snapshot: StateSnapshot) -> PendingInterrupt | None:
    for task in snapshot.tasks:
        for intr in task.interrupts:
            return PendingInterrupt(id=intr.id, value=intr.value)
    return None


def _thread_exists(snapshot: StateSnapshot) -> bool:
    return bool(snapshot.values) or snapshot.created_at is not None


def _message_dict(message: BaseMessage) -> dict:
    return {"type": message.type, "content": message.content}


def serialise_values(values: dict) -> dict:
    """State values as JSON-friendly data (messages become type/content dicts)."""
    result = {}
    for key, value in values.items():
        if key == "messages":
            result[key] = [_message_dict(m) for m in value]
        elif key == "copilotkit":
            continue
        else:
            result[key] = value
    return result


def _sources(documents: list[dict]) -> list[dict]:
    return [{"title": doc.get("title"), "source": doc.get("source")} for doc in documents]


# ---------------------------------------------------------------------------
# RUNNER
# ---------------------------------------------------------------------------


class AgentRunner:
    """Async runner over a compiled graph with a checkpointer."""

    def __init__(self, graph: CompiledStateGraph):
        self.graph = graph
        # thread_id -> (lock, number of holders and waiters)
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _lock(self, thread_id: str) -> AsyncIterator[None]:
        """Serialise work on a thread; the entry is dropped once nobody needs it."""
        lock, users = self._locks.get(thread_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[thread_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[thread_id]
            if users == 1:
                del self._locks[thread_id]
            else:
                self._locks[thread_id] = (lock, users - 1)

    @staticmethod
    def _config(thread_id: str) -> dict:
        return {"configurable": {"thread_id": thread_id}}

    async def _outcome(self, thread_id: str, start: float) -> RunOutcome:
        snapshot = await self.graph.aget_state(self._config(thread_id))
        values = snapshot.values
        pending = _pending_interrupt(snapshot)
        return RunOutcome(
            thread_id=thread_id,
            status="interrupted" if pending else "completed",
            answer=None if pending else values.get("final_answer"),
            final_status=None if pending else values.get("status"),
            interrupt=pending,
            sources=_sources(values.get("documents", [])),
            datasource=values.get("datasource") or None,
            latency_ms=(time.time() - start) * 1000,
        )

    async def start(self, question: str, thread_id: str | None = None) -> RunOutcome:
        """
        Start a run for `question` on a new or existing thread.

        Raises:
            InvalidQuestionError: the question is empty
            ThreadBusyError: the thread is waiting on an interrupt
        """
        question = (question or "").strip()
        thread_id = thread_id or uuid.uuid4().hex
        if not question:
            raise InvalidQuestionError("Question must not be empty", thread_id)

        async with self._lock(thread_id):
            config = self._config(thread_id)
            snapshot = await self.graph.aget_state(config)
            if _pending_interrupt(snapshot) is not None:
                raise ThreadBusyError(
                    f"Thread {thread_id} is waiting for a human; resume it first",
                    thread_id,
                )

            start = time.time()
            tracer = get_tracer()
            with tracer.start_span("agent.run") as span:
                logger.info(f"Starting run on thread {thread_id}")
                await self.graph.ainvoke(create_initial_state(question), config)
                outcome = await self._outcome(thread_id, start)
                self._annotate(span, outcome)

        self._log_outcome(outcome)
        return outcome

    async def resume(
        self,
        thread_id: str,
        value: Any,
        interrupt_id: str | None = None,
    ) -> RunOutcome:
        """
        Resolve the pending interrupt on a thread and continue the run.

        Raises:
            ThreadNotFoundError: no such thread
            NoPendingInterruptError: the thread is not paused (or already resumed)
            StaleInterruptError: interrupt_id is not the pending interrupt
            InvalidResumeValueError: value does not fit the pending interrupt
        """
        async with self._lock(thread_id):
            config = self._config(thread_id)
            snapshot = await self.graph.aget_state(config)
            if not _thread_exists(snapshot):
                raise ThreadNotFoundError(f"Unknown thread {thread_id}", thread_id)

            pending = _pending_interrupt(snapshot)
            if pending is None:
                raise NoPendingInterruptError(
                    f"Thread {thread_id} has no pending interrupt", thread_id
                )
            if interrupt_id is not None and interrupt_id != pending.id:
                raise StaleInterruptError(
                    f"Interrupt {interrupt_id} is not pending on thread {thread_id} "
                    f"(pending: {pending.id})",
                    thread_id,
                )

            try:
                validate_resume_value(pending.value, value)
            except InvalidResumeValueError as e:
                e.thread_id = thread_id
                raise

            start = time.time()
            tracer = get_tracer()
            with tracer.start_span("agent.resume") as span:
                logger.info(
                    f"Resuming thread {thread_id} from {pending.type} interrupt {pending.id}"
                )
                await self.graph.ainvoke(Command(resume=value), config)
                outcome = await self._outcome(thread_id, start)
                self._annotate(span, outcome)

        self._log_outcome(outcome)
        return outcome

    async def get_thread(self, thread_id: str) -> ThreadSnapshot:
        """
        Raises:
            ThreadNotFoundError: no such thread
        """
        snapshot = await self.graph.aget_state(self._config(thread_id))
        if not _thread_exists(snapshot):
            raise ThreadNotFoundError(f"Unknown thread {thread_id}", thread_id)
        return ThreadSnapshot(
            thread_id=thread_id,
            values=serialise_values(snapshot.values),
            next=list(snapshot.next),
            interrupt=_pending_interrupt(snapshot),
        )

    @staticmethod
    def _annotate(span, outcome: RunOutcome) -> None:
        pending = outcome.interrupt
        attrs = run_attributes(
            thread_id=outcome.thread_id,
            status=outcome.status,
            final_status=outcome.final_status,
            interrupt_id=pending.id if pending else None,
            interrupt_type=pending.type if pending else None,
            latency_ms=outcome.latency_ms,
        )
        for key, value in attrs.items():
            span.set_attribute(key, value)

    @staticmethod
    def _log_outcome(outcome: RunOutcome) -> None:
        if outcome.interrupt is not None:
            logger.info(
                f"Thread {outcome.thread_id} paused on {outcome.interrupt.type} "
                f"interrupt {outcome.interrupt.id}"
            )
        else:
            logger.info(
                f"Thread {outcome.thread_id} finished with status {outcome.final_status} "
                f"in {outcome.latency_ms:.0f}ms"
            )
