"""
Tracing settings for the Phoenix exporter.

Kept apart from AgentSettings so the observability layer can be switched
on for any entry point (CLI, bridge, tests) without touching agent config.
Tracing is off unless PHOENIX_ENABLED is set; get_tracer() then hands out
no-op spans.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from adaptive_rag_copilot.config import env_bool

DEFAULT_PROJECT = "adaptive-rag-copilot"


@dataclass(frozen=True)
class PhoenixConfig:
    """
    Environment Variables:
        PHOENIX_ENABLED              - export spans (default: false)
        PHOENIX_PROJECT_NAME         - project shown in Phoenix
        PHOENIX_COLLECTOR_ENDPOINT   - OTLP/HTTP endpoint; a local Phoenix
                                       app is launched when unset
        PHOENIX_CAPTURE_LLM_CONTENT  - keep prompts and completions on LLM
                                       spans (default: false)
        PHOENIX_BATCH_EXPORT         - batch span export (default: true);
                                       false exports each span as it ends

    Questions, retrieved documents, draft answers and reviewer feedback all
    flow through the LLM spans, so content capture is opt-in.
    """

    enabled: bool = False
    project_name: str = DEFAULT_PROJECT
    collector_endpoint: str | None = None
    capture_llm_content: bool = False
    batch_export: bool = True

    @classmethod
    def from_env(cls) -> "PhoenixConfig":
        return cls(
            enabled=env_bool("PHOENIX_ENABLED", False),
            project_name=os.environ.get("PHOENIX_PROJECT_NAME") or DEFAULT_PROJECT,
            collector_endpoint=os.environ.get("PHOENIX_COLLECTOR_ENDPOINT") or None,
            capture_llm_content=env_bool("PHOENIX_CAPTURE_LLM_CONTENT", False),
            batch_export=env_bool("PHOENIX_BATCH_EXPORT", True),
        )


_config: PhoenixConfig | None = None


def get_config() -> PhoenixConfig:
    global _config
    if _config is None:
        _config = PhoenixConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None
