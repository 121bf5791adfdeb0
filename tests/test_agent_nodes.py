"""
Unit Tests for Agent Nodes

Each node is tested in isolation with injected fakes: the scripted chat
model, the seeded in-memory store, the static web search. Human nodes
are tested with interrupt() patched to return the resume value directly.
"""

import pytest
from unittest.mock import MagicMock, patch

from langchain_core.messages import AIMessage, HumanMessage
from langgraph.types import Command

from adaptive_rag_copilot.agent.nodes import (
    ask_human,
    create_generate_node,
    create_grade_documents_node,
    create_grade_generation_node,
    create_human_review_node,
    create_retrieve_node,
    create_route_node,
    create_transform_query_node,
    create_web_search_node,
    finalize,
    mark_exhausted,
    prepare_run,
)
from adaptive_rag_copilot.agent.state import create_initial_state, reset_run_fields
from adaptive_rag_copilot.config import AgentSettings
from adaptive_rag_copilot.errors import InvalidResumeValueError
from adaptive_rag_copilot.schemas import GradeHallucinations

INTERRUPT = "adaptive_rag_copilot.agent.nodes.human.interrupt"


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def run_state() -> dict:
    """State right after prepare_run for a knowledge-base question."""
    state = reset_run_fields("How do LangGraph checkpointers work?")
    state["messages"] = [HumanMessage(content=state["question"])]
    return state


@pytest.fixture
def draft_state(run_state) -> dict:
    """State holding a graded draft answer, ready for review."""
    run_state.update(
        documents=[
            {
                "id": "kb_langgraph_checkpointers",
                "title": "LangGraph checkpointers",
                "content": "Checkpointers persist graph state per thread.",
                "topics": ["langgraph"],
                "source": "kb://langgraph/checkpointers",
                "score": 0.8,
            }
        ],
        generation="Checkpointers persist graph state per thread [1].",
        generation_grade="useful",
        generation_attempts=1,
    )
    return run_state


# ---------------------------------------------------------------------------
# PREPARE RUN
# ---------------------------------------------------------------------------


class TestPrepareRun:
    """Test run preparation."""

    def test_question_from_latest_human_message(self):
        state = {
            "messages": [
                HumanMessage(content="first question"),
                AIMessage(content="an answer"),
                HumanMessage(content="  second question  "),
            ],
            "question": "stale question",
        }

        result = prepare_run(state)

        assert result["question"] == "second question"
        assert result["original_question"] == "second question"

    def test_falls_back_to_question_field(self):
        result = prepare_run({"messages": [], "question": "What is adaptive RAG?"})

        assert result["question"] == "What is adaptive RAG?"

    def test_resets_previous_run(self):
        state = create_initial_state("New question")
        state.update(review_rounds=2, final_answer="old", status="completed")

        result = prepare_run(state)

        assert result["review_rounds"] == 0
        assert result["final_answer"] is None
        assert result["status"] == "running"
        assert result["documents"] == []

    def test_multimodal_message_text(self):
        message = HumanMessage(content=[{"type": "text", "text": "What is an agent?"}])

        result = prepare_run({"messages": [message]})

        assert result["question"] == "What is an agent?"

    def test_no_question_raises(self):
        with pytest.raises(ValueError, match="No question"):
            prepare_run({"messages": [], "question": "   "})


# ---------------------------------------------------------------------------
# ROUTER
# ---------------------------------------------------------------------------


class TestRouteNode:
    """Test the router and its settings vetoes."""

    def test_routes_to_model_choice(self, run_state, make_model, settings):
        route = create_route_node(make_model(route=["web_search"]), settings)

        assert route(run_state) == {"datasource": "web_search"}

    def test_clarify_vetoed_when_disabled(self, run_state, make_model):
        settings = AgentSettings(allow_clarification=False)
        route = create_route_node(make_model(route=["clarify"]), settings)

        assert route(run_state) == {"datasource": "vectorstore"}

    def test_clarify_vetoed_when_used_up(self, run_state, make_model, settings):
        run_state["clarifications"] = settings.max_clarifications
        route = create_route_node(make_model(route=["clarify"]), settings)

        assert route(run_state) == {"datasource": "vectorstore"}

    def test_clarify_allowed(self, run_state, make_model, settings):
        route = create_route_node(make_model(route=["clarify"]), settings)

        assert route(run_state) == {"datasource": "clarify"}

    def test_web_search_vetoed_when_disabled(self, run_state, make_model):
        settings = AgentSettings(web_search_enabled=False)
        route = create_route_node(make_model(route=["web_search"]), settings)

        assert route(run_state) == {"datasource": "vectorstore"}

    def test_prompt_forbids_clarify_when_not_allowed(self, run_state, make_model):
        model = make_model()
        route = create_route_node(model, AgentSettings(allow_clarification=False))

        route(run_state)

        prompt = model.calls[0][1]
        assert "Never choose 'clarify'" in prompt
        assert run_state["question"] in prompt


# ---------------------------------------------------------------------------
# RETRIEVE
# ---------------------------------------------------------------------------


class TestRetrieveNode:
    """Test the retrieval node."""

    def test_returns_top_k_documents(self, run_state, store, settings):
        retrieve = create_retrieve_node(store, settings)

        result = retrieve(run_state)

        assert len(result["documents"]) == settings.retrieval_k
        assert {"id", "title", "content", "source", "score"} <= set(result["documents"][0])

    def test_accumulates_latency(self, run_state, store, settings):
        run_state["retrieval_latency_ms"] = 5.0
        retrieve = create_retrieve_node(store, settings)

        result = retrieve(run_state)

        assert result["retrieval_latency_ms"] >= 5.0

    def test_passes_question_and_limit(self, run_state, settings):
        mock_store = MagicMock()
        mock_store.search.return_value = []
        retrieve = create_retrieve_node(mock_store, settings)

        result = retrieve(run_state)

        mock_store.search.assert_called_once_with(
            run_state["question"], limit=settings.retrieval_k
        )
        assert result["documents"] == []


# ---------------------------------------------------------------------------
# GRADERS
# ---------------------------------------------------------------------------


class TestGradeDocumentsNode:
    """Test the document relevance grader."""

    def test_keeps_relevant_documents_in_order(self, run_state, make_model, store, settings):
        run_state["documents"] = create_retrieve_node(store, settings)(run_state)["documents"]
        ids = [doc["id"] for doc in run_state["documents"]]
        grade = create_grade_documents_node(make_model(documents=["yes", "no", "yes", "no"]))

        result = grade(run_state)

        assert [doc["id"] for doc in result["documents"]] == [ids[0], ids[2]]

    def test_no_documents(self, run_state, make_model):
        grade = create_grade_documents_node(make_model())

        assert grade(run_state) == {"documents": []}


class TestGradeGenerationNode:
    """Test the hallucination + answer grader."""

    def test_useful(self, draft_state, make_model):
        grade = create_grade_generation_node(make_model())

        assert grade(draft_state) == {"generation_grade": "useful"}

    def test_not_supported_skips_answer_grader(self, draft_state, make_model):
        model = make_model(grounded=["no"], useful=["yes"])
        grade = create_grade_generation_node(model)

        assert grade(draft_state) == {"generation_grade": "not_supported"}
        assert len(model.calls) == 1

    def test_not_useful(self, draft_state, make_model):
        grade = create_grade_generation_node(make_model(useful=["no"]))

        assert grade(draft_state) == {"generation_grade": "not_useful"}

    def test_skips_hallucination_check_without_documents(self, draft_state, make_model):
        draft_state["documents"] = []
        model = make_model(grounded=["no"])
        grade = create_grade_generation_node(model)

        assert grade(draft_state) == {"generation_grade": "useful"}
        assert model.prompts(GradeHallucinations) == []


# ---------------------------------------------------------------------------
# REWRITE / WEB SEARCH / GENERATE
# ---------------------------------------------------------------------------


class TestTransformQueryNode:
    """Test the question rewriter."""

    def test_rewrites_and_counts(self, run_state, make_model):
        rewrite = create_transform_query_node(make_model(rewrites=["Better question?"]))

        result = rewrite(run_state)

        assert result == {"question": "Better question?", "query_rewrites": 1}

    def test_uses_reviewer_feedback(self, run_state, make_model):
        run_state["review_feedback"] = "Mention thread ids"
        model = make_model()

        create_transform_query_node(model)(run_state)

        assert "Mention thread ids" in model.calls[0][1]

    def test_blank_rewrite_keeps_question(self, run_state, make_model):
        rewrite = create_transform_query_node(make_model(rewrites=["   "]))

        assert rewrite(run_state)["question"] == run_state["question"]


class TestWebSearchNode:
    """Test the web search node."""

    def test_appends_results(self, draft_state, searcher, settings):
        web_search = create_web_search_node(searcher, settings)

        result = web_search(draft_state)

        assert result["web_search_used"] is True
        assert [doc["id"] for doc in result["documents"]] == [
            "kb_langgraph_checkpointers",
            "https://weather.example.com/paris",
        ]
        assert searcher.queries == [draft_state["question"]]

    def test_skips_duplicates(self, draft_state, searcher, settings, web_results):
        draft_state["documents"] = [web_results[0].to_state()]

        result = create_web_search_node(searcher, settings)(draft_state)

        assert len(result["documents"]) == 1


class TestGenerateNode:
    """Test the generation node."""

    def test_generates_and_counts(self, draft_state, make_model):
        generate = create_generate_node(make_model(answers=["  An answer [1].  "]))

        result = generate(draft_state)

        assert result["generation"] == "An answer [1]."
        assert result["generation_attempts"] == 2
        assert result["generation_latency_ms"] >= 0

    def test_prompt_numbers_sources_and_feedback(self, draft_state, make_model):
        draft_state["review_feedback"] = "Too vague"
        model = make_model()

        create_generate_node(model)(draft_state)

        prompt = model.prompts("generate")[0]
        assert "[1] LangGraph checkpointers" in prompt
        assert "Too vague" in prompt


# ---------------------------------------------------------------------------
# HUMAN NODES
# ---------------------------------------------------------------------------


class TestAskHuman:
    """Test the clarification HumanNode."""

    def test_answer_replaces_question(self, run_state):
        with patch(INTERRUPT, return_value="How do interrupts resume?") as mock_interrupt:
            result = ask_human(run_state)

        payload = mock_interrupt.call_args.args[0]
        assert payload["type"] == "clarification"
        assert payload["question"] == run_state["question"]
        assert result["question"] == "How do interrupts resume?"
        assert result["clarifications"] == 1
        assert isinstance(result["messages"][0], AIMessage)
        assert result["messages"][1].content == "How do interrupts resume?"

    def test_accepts_mapping(self, run_state):
        with patch(INTERRUPT, return_value={"answer": " clarified "}):
            assert ask_human(run_state)["question"] == "clarified"

    def test_empty_answer_raises(self, run_state):
        with patch(INTERRUPT, return_value=""):
            with pytest.raises(InvalidResumeValueError):
                ask_human(run_state)


class TestHumanReview:
    """Test the review interrupt node."""

    def test_payload(self, draft_state, settings):
        review = create_human_review_node(settings)

        with patch(INTERRUPT, return_value="approve") as mock_interrupt:
            review(draft_state)

        payload = mock_interrupt.call_args.args[0]
        assert payload["type"] == "review_answer"
        assert payload["answer"] == draft_state["generation"]
        assert payload["round"] == 1
        assert payload["max_rounds"] == settings.max_review_rounds
        assert payload["sources"] == [
            {"title": "LangGraph checkpointers", "source": "kb://langgraph/checkpointers"}
        ]
        assert payload["actions"] == ["approve", "edit", "reject"]

    def test_approve_finalizes_draft(self, draft_state, settings):
        with patch(INTERRUPT, return_value="approve"):
            command = create_human_review_node(settings)(draft_state)

        assert isinstance(command, Command)
        assert command.goto == "finalize"
        assert command.update["final_answer"] == draft_state["generation"]
        assert command.update["status"] == "completed"
        assert command.update["review_rounds"] == 1

    def test_edit_finalizes_edited_answer(self, draft_state, settings):
        decision = {"action": "edit", "answer": "Edited answer."}
        with patch(INTERRUPT, return_value=decision):
            command = create_human_review_node(settings)(draft_state)

        assert command.goto == "finalize"
        assert command.update["final_answer"] == "Edited answer."

    def test_reject_goes_back_to_rewrite(self, draft_state, settings):
        with patch(INTERRUPT, return_value="Mention thread ids"):
            command = create_human_review_node(settings)(draft_state)

        assert command.goto == "transform_query"
        assert command.update == {
            "review_feedback": "Mention thread ids",
            "review_rounds": 1,
            "generation_attempts": 0,
        }

    def test_reject_on_last_round_finalizes_rejected(self, draft_state):
        settings = AgentSettings(max_review_rounds=2)
        draft_state["review_rounds"] = 1

        with patch(INTERRUPT, return_value={"action": "reject", "feedback": "Still wrong"}):
            command = create_human_review_node(settings)(draft_state)

        assert command.goto == "finalize"
        assert command.update["status"] == "rejected"
        assert command.update["final_answer"] is None
        assert command.update["review_rounds"] == 2


# ---------------------------------------------------------------------------
# TERMINAL NODES
# ---------------------------------------------------------------------------


class TestFinalize:
    """Test the terminal nodes."""

    def test_reviewed_answer(self, draft_state):
        draft_state.update(final_answer="Reviewed.", status="completed")

        result = finalize(draft_state)

        assert result["final_answer"] == "Reviewed."
        assert result["status"] == "completed"
        assert result["messages"][0].content == "Reviewed."

    def test_unreviewed_run_releases_draft(self, draft_state):
        result = finalize(draft_state)

        assert result["final_answer"] == draft_state["generation"]
        assert result["status"] == "completed"

    def test_rejected_releases_nothing(self, draft_state):
        draft_state.update(final_answer=None, status="rejected")

        result = finalize(draft_state)

        assert result["final_answer"] is None
        assert result["status"] == "rejected"
        assert "reviewer" in result["messages"][0].content

    def test_mark_exhausted(self, draft_state):
        assert mark_exhausted(draft_state) == {"status": "exhausted"}
        draft_state["status"] = "exhausted"

        result = finalize(draft_state)

        assert result["status"] == "exhausted"
        assert result["final_answer"] == draft_state["generation"]
