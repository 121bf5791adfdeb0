"""
Observability Module - Phoenix + OpenTelemetry Integration

Traces every graph node, run and resume, plus the LLM calls underneath them
through OpenInference auto-instrumentation.

USAGE:
------
# At application startup:
from adaptive_rag_copilot.observability import init_phoenix

init_phoenix()  # Starts local Phoenix UI if PHOENIX_ENABLED=true

# In code that needs tracing:
from adaptive_rag_copilot.observability import get_tracer

with get_tracer().start_span("agent.run", attributes={...}) as span:
    span.set_attribute("agent.run.status", "completed")
"""

from __future__ import annotations

import logging

from adaptive_rag_copilot.observability.attributes import (
    AGENT_DATASOURCE,
    AGENT_GENERATION_GRADE,
    AGENT_INTERRUPT_ID,
    AGENT_INTERRUPTED,
    AGENT_NODE_NAME,
    AGENT_THREAD_ID,
    node_update_attributes,
    run_attributes,
)
from adaptive_rag_copilot.observability.config import (
    PhoenixConfig,
    get_config,
    reset_config,
)
from adaptive_rag_copilot.observability.tracer import (
    NoOpSpan,
    NoOpTracer,
    SpanProtocol,
    TracerProtocol,
    get_tracer,
    reset_tracer,
    traced_node,
)

logger = logging.getLogger(__name__)

_phoenix_initialized = False


def init_phoenix(config: PhoenixConfig | None = None) -> bool:
    """
    Initialize Phoenix observability.

    Call once at startup (the CLI and the FastAPI lifespan do). Sets up the
    OpenTelemetry tracer provider and registers the auto-instrumentors.

    Returns:
        True if Phoenix was initialized, False if disabled or failed
    """
    global _phoenix_initialized
    if _phoenix_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Phoenix observability disabled")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            SimpleSpanProcessor,
        )

        if config.collector_endpoint:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )

            exporter = OTLPSpanExporter(endpoint=config.collector_endpoint)
            logger.info(f"Phoenix connecting to remote: {config.collector_endpoint}")
        else:
            import phoenix as px
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )

            session = px.launch_app()
            exporter = OTLPSpanExporter(endpoint=f"{session.url.rstrip('/')}/v1/traces")
            logger.info(f"Phoenix UI available at: {session.url}")

        provider = TracerProvider(
            resource=Resource.create({"openinference.project.name": config.project_name})
        )
        processor = BatchSpanProcessor if config.batch_export else SimpleSpanProcessor
        provider.add_span_processor(processor(exporter))
        trace.set_tracer_provider(provider)

        from adaptive_rag_copilot.observability.instrumentation import (
            register_instrumentors,
        )

        register_instrumentors(capture_content=config.capture_llm_content)

        reset_tracer()
        _phoenix_initialized = True
        return True

    except ImportError as e:
        logger.warning(f"Phoenix not installed, observability disabled: {e}")
        return False
    except Exception as e:
        logger.error(f"Failed to initialize Phoenix: {e}")
        return False


def shutdown_phoenix() -> None:
    """Flush spans and reset the tracer."""
    global _phoenix_initialized

    if not _phoenix_initialized:
        return

    from opentelemetry import trace

    provider = trace.get_tracer_provider()
    try:
        if hasattr(provider, "shutdown"):
            provider.shutdown()
    except Exception as e:
        logger.warning(f"Error shutting down Phoenix: {e}")

    reset_tracer()
    reset_config()
    _phoenix_initialized = False


__all__ = [
    # Initialization
    "init_phoenix",
    "shutdown_phoenix",
    # Config
    "PhoenixConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    "traced_node",
    # Attributes
    "AGENT_NODE_NAME",
    "AGENT_THREAD_ID",
    "AGENT_DATASOURCE",
    "AGENT_GENERATION_GRADE",
    "AGENT_INTERRUPTED",
    "AGENT_INTERRUPT_ID",
    "node_update_attributes",
    "run_attributes",
]
