"""
Shared fixtures: a scripted chat model, settings, a seeded store.

No test talks to OpenAI, Tavily or a database. The scripted model stands
in for ChatOpenAI: each structured-output schema (and plain generation)
has its own queue of responses, and the last response of a queue repeats.
"""

from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage
from langgraph.checkpoint.memory import MemorySaver

from adaptive_rag_copilot.agent.graph import build_agent_graph
from adaptive_rag_copilot.config import AgentSettings, reset_settings
from adaptive_rag_copilot.core import WebSearchResult
from adaptive_rag_copilot.embeddings import MockEmbeddings
from adaptive_rag_copilot.observability import reset_config, reset_tracer
from adaptive_rag_copilot.retrieval import InMemoryVectorStore, seed_vector_store
from adaptive_rag_copilot.schemas import (
    GradeAnswer,
    GradeDocuments,
    GradeHallucinations,
    RewrittenQuestion,
    RouteQuery,
)
from adaptive_rag_copilot.websearch import StaticWebSearch

GENERATE = "generate"


class ScriptedChatModel:
    """
    Fake chat model with per-chain response queues.

    Keys are the structured-output schema classes plus GENERATE for plain
    invoke(). A string response is assigned to the schema's only field.
    """

    def __init__(self, responses: dict):
        self._queues = {key: list(values) for key, values in responses.items()}
        self.calls: list[tuple[object, str]] = []

    def _next(self, key):
        queue = self._queues.get(key)
        if not queue:
            name = getattr(key, "__name__", key)
            raise AssertionError(f"No scripted response for {name}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def prompts(self, key) -> list[str]:
        return [prompt for k, prompt in self.calls if k == key]

    def invoke(self, prompt: str) -> AIMessage:
        self.calls.append((GENERATE, prompt))
        return AIMessage(content=self._next(GENERATE))

    def with_structured_output(self, schema):
        return _StructuredChain(self, schema)


class _StructuredChain:
    def __init__(self, model: ScriptedChatModel, schema):
        self._model = model
        self._schema = schema

    def invoke(self, prompt: str):
        self._model.calls.append((self._schema, prompt))
        value = self._model._next(self._schema)
        if isinstance(value, self._schema):
            return value
        field_name = next(iter(self._schema.model_fields))
        return self._schema(**{field_name: value})


def scripted_model(
    route=("vectorstore",),
    documents=("yes",),
    answers=("LangGraph checkpointers save state per thread id [1].",),
    grounded=("yes",),
    useful=("yes",),
    rewrites=("How do LangGraph checkpointers store thread state?",),
) -> ScriptedChatModel:
    """A model that routes, grades and answers the happy path unless told otherwise."""
    return ScriptedChatModel(
        {
            RouteQuery: list(route),
            GradeDocuments: list(documents),
            GENERATE: list(answers),
            GradeHallucinations: list(grounded),
            GradeAnswer: list(useful),
            RewrittenQuestion: list(rewrites),
        }
    )


@pytest.fixture(autouse=True)
def _isolated_globals(monkeypatch):
    """Tracing off and settings rebuilt from a clean environment for every test."""
    monkeypatch.delenv("PHOENIX_ENABLED", raising=False)
    reset_config()
    reset_tracer()
    reset_settings()
    yield
    reset_config()
    reset_tracer()
    reset_settings()


@pytest.fixture
def settings() -> AgentSettings:
    return AgentSettings()


@pytest.fixture
def store() -> InMemoryVectorStore:
    store = InMemoryVectorStore(MockEmbeddings())
    seed_vector_store(store)
    return store


@pytest.fixture
def web_results() -> list[WebSearchResult]:
    return [
        WebSearchResult(
            title="Paris weather today",
            url="https://weather.example.com/paris",
            content="Paris is sunny today with a high of 21C.",
            score=0.92,
        )
    ]


@pytest.fixture
def searcher(web_results) -> StaticWebSearch:
    return StaticWebSearch(web_results)


@pytest.fixture
def make_graph(store, searcher, settings):
    """Build a graph over the seeded store with a MemorySaver."""

    def _make(model=None, settings_override=None, checkpointer="memory"):
        saver = MemorySaver() if checkpointer == "memory" else checkpointer
        return build_agent_graph(
            store,
            searcher,
            model=model or scripted_model(),
            settings=settings_override or settings,
            checkpointer=saver,
        )

    return _make


@pytest.fixture
def make_model():
    """Factory for scripted models (see scripted_model for the knobs)."""
    return scripted_model
