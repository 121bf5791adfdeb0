"""
CLI module - the `adaptive-rag` command.

Provides entry points for asking questions, resolving interrupts on
persistent threads, inspecting threads, serving the bridge and seeding
the knowledge base.
"""

from adaptive_rag_copilot.cli.commands import (
    main,
    run_ask_cli,
    run_resume_cli,
    run_show_cli,
    run_serve_cli,
    run_seed_cli,
)

__all__ = [
    "main",
    "run_ask_cli",
    "run_resume_cli",
    "run_show_cli",
    "run_serve_cli",
    "run_seed_cli",
]
