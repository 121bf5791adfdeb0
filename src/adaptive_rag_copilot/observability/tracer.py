"""
Tracer Factory and NoOp Implementations

get_tracer() returns a real OTel tracer once init_phoenix() has installed a
tracer provider, and a NoOpTracer otherwise. traced_node() wraps a graph
node in a span named after it.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Protocol

from langgraph.errors import GraphInterrupt

from adaptive_rag_copilot.observability.attributes import (
    AGENT_INTERRUPTED,
    AGENT_NODE_NAME,
    node_update_attributes,
)


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class SpanProtocol(Protocol):
    """Protocol for span operations."""

    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """Set span status (ok, error)."""
        ...

    def record_exception(self, exception: Exception) -> None:
        ...


class TracerProtocol(Protocol):
    """Protocol for tracer operations."""

    @contextmanager
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[SpanProtocol]:
        """Start a new span as context manager."""
        ...


# ---------------------------------------------------------------------------
# NOOP IMPLEMENTATIONS
# ---------------------------------------------------------------------------


class NoOpSpan:
    """No-op span that does nothing."""

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass

    def record_exception(self, exception: Exception) -> None:
        pass


class NoOpTracer:
    """No-op tracer that creates no-op spans."""

    @contextmanager
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# REAL OTEL TRACER (wrapped for our protocol)
# ---------------------------------------------------------------------------


class OTelSpan:
    """Wrapper around OTel span to match our protocol."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_status(self, status: str, description: str | None = None) -> None:
        from opentelemetry.trace import StatusCode

        code = StatusCode.OK if status == "ok" else StatusCode.ERROR
        self._span.set_status(code, description)

    def record_exception(self, exception: Exception) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    """Wrapper around OTel tracer to match our protocol."""

    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[OTelSpan]:
        # Interrupts are control flow, not failures; callers set the status.
        with self._tracer.start_as_current_span(
            name,
            attributes=attributes,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def get_tracer(service_name: str = "adaptive-rag-copilot") -> TracerProtocol:
    """
    Get the global tracer instance.

    Args:
        service_name: Service name for the tracer (used on first call only)

    Returns:
        OTelTracer when Phoenix is enabled and a provider is installed,
        NoOpTracer otherwise
    """
    global _tracer
    if _tracer is not None:
        return _tracer

    from adaptive_rag_copilot.observability.config import get_config

    if not get_config().enabled:
        _tracer = NoOpTracer()
        return _tracer

    from opentelemetry import trace
    from opentelemetry.sdk.trace import TracerProvider

    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        # init_phoenix has not run (or failed)
        _tracer = NoOpTracer()
        return _tracer

    _tracer = OTelTracer(trace.get_tracer(service_name))
    return _tracer


def reset_tracer() -> None:
    """Reset tracer (useful for testing)."""
    global _tracer
    _tracer = None


def traced_node(name: str, node: Callable) -> Callable:
    """
    Wrap a graph node in a `node.<name>` span.

    The span records what the node wrote (route, grade, document count,
    Command target). An interrupt raised by the node is marked on the span
    and re-raised untouched so LangGraph can pause the run.
    """

    @functools.wraps(node)
    def wrapper(state, *args, **kwargs):
        with get_tracer().start_span(
            f"node.{name}", attributes={AGENT_NODE_NAME: name}
        ) as span:
            try:
                update = node(state, *args, **kwargs)
            except GraphInterrupt:
                span.set_attribute(AGENT_INTERRUPTED, True)
                raise
            except Exception as e:
                span.record_exception(e)
                span.set_status("error", str(e))
                raise
            for key, value in node_update_attributes(update).items():
                span.set_attribute(key, value)
            span.set_status("ok")
            return update

    return wrapper
