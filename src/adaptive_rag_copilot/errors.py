"""
Errors raised while driving agent runs on a thread.

Each error carries the HTTP status the FastAPI bridge answers with, so the
REST layer maps them with a single exception handler and the CLI can print
them as-is.
"""

from __future__ import annotations


class AgentRunError(Exception):
    """Base class for run/resume protocol errors."""

    status_code: int = 500
    error_type: str = "agent_run_error"

    def __init__(self, message: str, thread_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.thread_id = thread_id

    def to_dict(self) -> dict:
        return {
            "error_type": self.error_type,
            "detail": self.message,
            "thread_id": self.thread_id,
        }


class InvalidQuestionError(AgentRunError):
    status_code = 422
    error_type = "invalid_question"


class ThreadNotFoundError(AgentRunError):
    status_code = 404
    error_type = "thread_not_found"


class ThreadBusyError(AgentRunError):
    """A new run was requested on a thread still waiting for a human."""

    status_code = 409
    error_type = "thread_busy"


class NoPendingInterruptError(AgentRunError):
    """Resume was called on a thread that is not paused (or already resolved)."""

    status_code = 409
    error_type = "no_pending_interrupt"


class StaleInterruptError(AgentRunError):
    """Resume targeted an interrupt that is no longer the pending one."""

    status_code = 409
    error_type = "stale_interrupt"


class InvalidResumeValueError(AgentRunError):
    """The resume value does not fit the pending interrupt; it stays pending."""

    status_code = 422
    error_type = "invalid_resume_value"
