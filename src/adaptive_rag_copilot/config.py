"""
Agent settings loaded from environment variables.

One dataclass holds every knob the graph, the checkpointer, the web search
and the server read. Values come from the process environment (optionally
populated from a .env file by the CLI), so the same settings drive the
CLI, the FastAPI bridge and the tests.

Environment Variables:
    AGENT_MODEL, AGENT_TEMPERATURE       - chat model used by every chain
    RETRIEVAL_K                          - documents fetched per retrieval
    MAX_QUERY_REWRITES                   - question rewrites per run
    MAX_GENERATION_ATTEMPTS              - generations per run
    MAX_REVIEW_ROUNDS                    - human review rounds per run
    MAX_CLARIFICATIONS                   - clarifying questions per run
    REQUIRE_HUMAN_REVIEW                 - pause for review before answering
    ALLOW_CLARIFICATION                  - let the router ask the user
    WEB_SEARCH_ENABLED, WEB_SEARCH_MAX_RESULTS
    CHECKPOINTER                         - memory | sqlite | postgres
    CHECKPOINT_SQLITE_PATH, DATABASE_URL
    USE_POSTGRES, USE_MOCK_EMBEDDINGS    - vector store backend
    COPILOTKIT_AGENT_NAME, COPILOTKIT_PATH
    HOST, PORT, CORS_ORIGINS
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

CHECKPOINTER_BACKENDS = ("memory", "sqlite", "postgres")

_TRUE_VALUES = ("true", "1", "yes")


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class AgentSettings:
    """Runtime settings for the adaptive RAG agent and its bridge."""

    # LLM
    model: str = "gpt-4o-mini"
    temperature: float = 0.0

    # Retrieval and loop limits
    retrieval_k: int = 4
    max_query_rewrites: int = 2
    max_generation_attempts: int = 3
    max_review_rounds: int = 3
    max_clarifications: int = 1

    # Human-in-the-loop
    require_review: bool = True
    allow_clarification: bool = True

    # Web search
    web_search_enabled: bool = True
    web_search_max_results: int = 3

    # Persistence
    checkpointer: str = "memory"
    sqlite_path: str = "checkpoints.sqlite"
    database_url: str = "postgresql://localhost/adaptive_rag"
    use_postgres_store: bool = False
    use_mock_embeddings: bool = True

    # Bridge
    agent_name: str = "adaptive_rag"
    copilotkit_path: str = "/copilotkit"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self) -> None:
        if self.checkpointer not in CHECKPOINTER_BACKENDS:
            raise ConfigError(
                f"Unknown checkpointer {self.checkpointer!r}; "
                f"expected one of {', '.join(CHECKPOINTER_BACKENDS)}"
            )
        if self.retrieval_k < 1:
            raise ConfigError("retrieval_k must be >= 1")

    @classmethod
    def from_env(cls) -> "AgentSettings":
        """Load settings from environment variables."""
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            model=os.environ.get("AGENT_MODEL", "gpt-4o-mini"),
            temperature=_env_float("AGENT_TEMPERATURE", 0.0),
            retrieval_k=_env_int("RETRIEVAL_K", 4, minimum=1),
            max_query_rewrites=_env_int("MAX_QUERY_REWRITES", 2),
            max_generation_attempts=_env_int("MAX_GENERATION_ATTEMPTS", 3, minimum=1),
            max_review_rounds=_env_int("MAX_REVIEW_ROUNDS", 3),
            max_clarifications=_env_int("MAX_CLARIFICATIONS", 1),
            require_review=env_bool("REQUIRE_HUMAN_REVIEW", True),
            allow_clarification=env_bool("ALLOW_CLARIFICATION", True),
            web_search_enabled=env_bool("WEB_SEARCH_ENABLED", True),
            web_search_max_results=_env_int("WEB_SEARCH_MAX_RESULTS", 3, minimum=1),
            checkpointer=os.environ.get("CHECKPOINTER", "memory").strip().lower(),
            sqlite_path=os.environ.get("CHECKPOINT_SQLITE_PATH", "checkpoints.sqlite"),
            database_url=os.environ.get(
                "DATABASE_URL", "postgresql://localhost/adaptive_rag"
            ),
            use_postgres_store=env_bool("USE_POSTGRES", False),
            use_mock_embeddings=env_bool("USE_MOCK_EMBEDDINGS", True),
            agent_name=os.environ.get("COPILOTKIT_AGENT_NAME", "adaptive_rag"),
            copilotkit_path=os.environ.get("COPILOTKIT_PATH", "/copilotkit"),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8000, minimum=1),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )

    @property
    def interrupts_enabled(self) -> bool:
        """True when the graph can pause for a human."""
        return self.require_review or (
            self.allow_clarification and self.max_clarifications > 0
        )


# Global settings singleton
_settings: AgentSettings | None = None


def get_settings() -> AgentSettings:
    """Get the global settings (lazy-loaded from env)."""
    global _settings
    if _settings is None:
        _settings = AgentSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
