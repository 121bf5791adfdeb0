"""
Tests for interrupt payloads and resume value parsing.

Resume values arrive from CopilotKit, the REST API and the CLI in
different shapes; these tests pin down which shapes are accepted.
"""

import pytest

from adaptive_rag_copilot.errors import InvalidResumeValueError
from adaptive_rag_copilot.schemas import (
    ClarificationRequest,
    ReviewDecision,
    ReviewRequest,
    parse_clarification,
    parse_review_decision,
    validate_resume_value,
)


class TestPayloads:
    def test_review_request_defaults(self):
        payload = ReviewRequest(question="q", answer="a").model_dump()

        assert payload["type"] == "review_answer"
        assert payload["actions"] == ["approve", "edit", "reject"]
        assert payload["sources"] == []

    def test_clarification_request(self):
        payload = ClarificationRequest(question="it?", prompt="What is 'it'?").model_dump()

        assert payload == {"type": "clarification", "question": "it?", "prompt": "What is 'it'?"}


class TestParseReviewDecision:
    @pytest.mark.parametrize("value", ["approve", "Yes", "ok", "LGTM!", True])
    def test_approve_shortcuts(self, value):
        assert parse_review_decision(value).action == "approve"

    @pytest.mark.parametrize("value", ["reject", "no", False])
    def test_reject_shortcuts(self, value):
        decision = parse_review_decision(value)

        assert decision.action == "reject"
        assert decision.feedback is None

    def test_free_text_is_feedback(self):
        decision = parse_review_decision("Mention the thread id config key")

        assert decision.action == "reject"
        assert decision.feedback == "Mention the thread id config key"

    def test_mapping(self):
        decision = parse_review_decision({"action": "edit", "answer": "Better answer"})

        assert decision == ReviewDecision(action="edit", answer="Better answer")

    def test_json_string(self):
        decision = parse_review_decision('{"action": "reject", "feedback": "too short"}')

        assert decision.action == "reject"
        assert decision.feedback == "too short"

    def test_decision_passes_through(self):
        decision = ReviewDecision(action="approve")

        assert parse_review_decision(decision) is decision

    def test_edit_without_answer(self):
        with pytest.raises(InvalidResumeValueError):
            parse_review_decision({"action": "edit", "answer": "  "})

    def test_unknown_action(self):
        with pytest.raises(InvalidResumeValueError):
            parse_review_decision({"action": "maybe"})

    def test_broken_json(self):
        with pytest.raises(InvalidResumeValueError, match="JSON"):
            parse_review_decision('{"action": ')

    @pytest.mark.parametrize("value", ["", "   ", 42, None, ["approve"]])
    def test_unusable_values(self, value):
        with pytest.raises(InvalidResumeValueError):
            parse_review_decision(value)


class TestParseClarification:
    def test_string(self):
        assert parse_clarification("  the LangGraph interrupt API ") == "the LangGraph interrupt API"

    def test_mapping(self):
        assert parse_clarification({"answer": "checkpointers"}) == "checkpointers"

    @pytest.mark.parametrize("value", ["", "  ", {}, {"answer": ""}, 3])
    def test_rejects_empty(self, value):
        with pytest.raises(InvalidResumeValueError):
            parse_clarification(value)


class TestValidateResumeValue:
    def test_review_payload_checks_decision(self):
        payload = ReviewRequest(question="q", answer="a").model_dump()

        validate_resume_value(payload, "approve")
        with pytest.raises(InvalidResumeValueError):
            validate_resume_value(payload, {"action": "edit"})

    def test_clarification_payload_checks_text(self):
        payload = ClarificationRequest(question="q", prompt="p").model_dump()

        validate_resume_value(payload, "more detail")
        with pytest.raises(InvalidResumeValueError):
            validate_resume_value(payload, "")

    def test_unknown_payload_accepts_anything(self):
        validate_resume_value({"type": "custom"}, object())
        validate_resume_value("not a dict", None)
