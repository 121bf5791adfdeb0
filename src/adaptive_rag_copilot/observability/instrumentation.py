"""
OpenInference Auto-Instrumentation

Registers auto-instrumentors for OpenAI and LangChain, so every chat model,
structured-output chain and embedding call is traced without code changes.
"""

from __future__ import annotations

import importlib
import logging

logger = logging.getLogger(__name__)

# (name, module, class)
INSTRUMENTORS = (
    ("openai", "openinference.instrumentation.openai", "OpenAIInstrumentor"),
    ("langchain", "openinference.instrumentation.langchain", "LangChainInstrumentor"),
)

_instrumented = False


def _load(module_name: str, class_name: str):
    return getattr(importlib.import_module(module_name), class_name)


def register_instrumentors(capture_content: bool = False) -> bool:
    """
    Register OpenInference auto-instrumentors.

    This should be called once at startup, before any LLM calls. Unless
    capture_content is set, prompts and completions are masked on the spans.

    Returns:
        True if any instrumentors were registered, False otherwise
    """
    global _instrumented
    if _instrumented:
        return True

    try:
        from openinference.instrumentation import TraceConfig
    except ImportError as e:
        logger.debug(f"OpenInference not available: {e}")
        return False

    trace_config = TraceConfig(
        hide_inputs=not capture_content,
        hide_outputs=not capture_content,
    )
    registered = []
    for name, module_name, class_name in INSTRUMENTORS:
        try:
            _load(module_name, class_name)().instrument(config=trace_config)
            registered.append(name)
        except ImportError:
            logger.debug(f"{name} instrumentor not available")
        except Exception as e:
            logger.warning(f"Failed to instrument {name}: {e}")

    if registered:
        logger.info(f"Registered instrumentors: {', '.join(registered)}")
        _instrumented = True
        return True

    return False


def uninstrument() -> None:
    """Remove all instrumentors (useful for testing)."""
    global _instrumented

    for name, module_name, class_name in INSTRUMENTORS:
        try:
            _load(module_name, class_name)().uninstrument()
        except ImportError:
            continue
        except Exception as e:
            logger.debug(f"Failed to uninstrument {name}: {e}")

    _instrumented = False
