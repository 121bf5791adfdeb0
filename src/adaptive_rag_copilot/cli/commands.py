"""
CLI commands - ask questions, answer interrupts, serve the bridge.

Each command follows the same pattern:
1. Parse arguments
2. Load environment
3. Build the graph (or app) from settings
4. Print results
5. Return exit code

Threads only outlive one command with a persistent checkpointer
(CHECKPOINTER=sqlite or postgres); `resume` and `show` need one.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Callable

from adaptive_rag_copilot.config import ConfigError, get_settings
from adaptive_rag_copilot.errors import AgentRunError, InvalidResumeValueError
from adaptive_rag_copilot.schemas.interrupts import CLARIFICATION, REVIEW_ANSWER

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _load_env() -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    load_dotenv()


def _configure_logging(level: str | None) -> None:
    level = (level or os.environ.get("LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


# ---------------------------------------------------------------------------
# RUNNER PLUMBING
# ---------------------------------------------------------------------------


async def _with_runner(action: Callable) -> Any:
    """Open the checkpointer, build the graph and call `action(runner)`."""
    from adaptive_rag_copilot.agent import (
        AgentRunner,
        CheckpointManager,
        build_agent_graph,
        build_default_dependencies,
    )

    settings = get_settings()
    store, searcher = build_default_dependencies(settings)
    try:
        async with CheckpointManager(settings) as saver:
            graph = build_agent_graph(
                store, searcher, settings=settings, checkpointer=saver
            )
            return await action(AgentRunner(graph))
    finally:
        store.close()


def _print_outcome(outcome) -> None:
    print("-" * 60)
    print(f"Thread: {outcome.thread_id}")
    if outcome.interrupt is not None:
        print(f"Paused on {outcome.interrupt.type} interrupt {outcome.interrupt.id}")
        _print_json(outcome.interrupt.value)
        return
    print(f"Status: {outcome.final_status}")
    print(f"Route:  {outcome.datasource}")
    print(f"Time:   {outcome.latency_ms:.0f}ms")
    print()
    print(outcome.answer or "(no answer)")
    for source in outcome.sources:
        print(f"  - {source['title']} ({source['source']})")


def _answer_interrupt(
    payload: dict,
    auto_approve: bool,
    input_fn: Callable[[str], str] = input,
) -> str:
    """Get a resume value for an interrupt from stdin (or auto-approve)."""
    kind = payload.get("type")
    if kind == REVIEW_ANSWER:
        if auto_approve:
            return "approve"
        print()
        print(f"DRAFT ANSWER (review round {payload['round']}/{payload['max_rounds']}):")
        print(payload["answer"])
        return input_fn("approve / reject / feedback, or a JSON decision > ")
    if kind == CLARIFICATION:
        if auto_approve:
            return payload["question"]
        print()
        return input_fn(f"{payload['prompt']}\n> ")
    return input_fn(f"{json.dumps(payload, default=str)}\n> ")


# ---------------------------------------------------------------------------
# COMMANDS
# ---------------------------------------------------------------------------


def run_ask_cli(input_fn: Callable[[str], str] = input) -> int:
    """CLI entry point for asking a question."""
    parser = argparse.ArgumentParser(description="Ask the adaptive RAG agent")
    parser.add_argument("question", help="Question to ask")
    parser.add_argument("--thread-id", help="Continue an existing thread")
    parser.add_argument(
        "--auto-approve",
        action="store_true",
        help="Approve every review without prompting",
    )
    args = parser.parse_args()

    async def ask(runner):
        outcome = await runner.start(args.question, thread_id=args.thread_id)
        while outcome.interrupt is not None:
            value = _answer_interrupt(outcome.interrupt.value, args.auto_approve, input_fn)
            try:
                outcome = await runner.resume(
                    outcome.thread_id, value, interrupt_id=outcome.interrupt.id
                )
            except InvalidResumeValueError as e:
                print(f"Invalid answer: {e.message}")
        return outcome

    _print_outcome(asyncio.run(_with_runner(ask)))
    return 0


def run_resume_cli() -> int:
    """CLI entry point for resolving a pending interrupt."""
    parser = argparse.ArgumentParser(description="Resolve a pending interrupt")
    parser.add_argument("thread_id", help="Thread waiting on an interrupt")
    parser.add_argument("value", help="Resume value (keyword, text or JSON)")
    parser.add_argument("--interrupt-id", help="Pending interrupt id to resolve")
    args = parser.parse_args()

    if get_settings().checkpointer == "memory":
        print("resume needs CHECKPOINTER=sqlite or postgres; memory threads die with the process")
        return 1

    async def resume(runner):
        return await runner.resume(args.thread_id, args.value, interrupt_id=args.interrupt_id)

    _print_outcome(asyncio.run(_with_runner(resume)))
    return 0


def run_show_cli() -> int:
    """CLI entry point for printing a thread's state."""
    parser = argparse.ArgumentParser(description="Show a thread's state")
    parser.add_argument("thread_id", help="Thread to show")
    args = parser.parse_args()

    async def show(runner):
        return await runner.get_thread(args.thread_id)

    _print_json(asyncio.run(_with_runner(show)).to_dict())
    return 0


def run_serve_cli() -> int:
    """CLI entry point for the FastAPI bridge."""
    import uvicorn

    from adaptive_rag_copilot.server import create_app

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the CopilotKit/REST bridge")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args()

    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def run_seed_cli() -> int:
    """CLI entry point for loading the knowledge base."""
    from adaptive_rag_copilot.retrieval import (
        VectorStoreConfig,
        get_vector_store,
        seed_vector_store,
    )

    settings = get_settings()
    store = get_vector_store(
        use_postgres=settings.use_postgres_store,
        config=VectorStoreConfig(connection_string=settings.database_url),
        use_mock_embeddings=settings.use_mock_embeddings,
    )
    store.connect()
    try:
        count = seed_vector_store(store)
    finally:
        store.close()

    print(f"Seeded {count} documents")
    return 0


COMMAND_NAMES = ("ask", "resume", "show", "serve", "seed")


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        adaptive-rag ask "What is a checkpointer?"
        adaptive-rag resume THREAD_ID approve
        adaptive-rag show THREAD_ID
        adaptive-rag serve --port 8000
        adaptive-rag seed
    """
    _load_env()

    parser = argparse.ArgumentParser(
        description="Adaptive RAG agent with human-in-the-loop review",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  ask       Ask a question; answer review/clarification prompts on stdin
  resume    Resolve a paused thread's interrupt (persistent checkpointer)
  show      Print a thread's state and pending interrupt
  serve     Run the FastAPI bridge with the CopilotKit endpoint
  seed      Load the knowledge base into the vector store

Examples:
  adaptive-rag ask "How do I resume an interrupt?" --auto-approve
  CHECKPOINTER=sqlite adaptive-rag resume 3f2a... '{"action": "edit", "answer": "..."}'
        """,
    )
    parser.add_argument("command", choices=COMMAND_NAMES, help="Command to run")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or WARNING)")

    # Parse just the command first
    args, remaining = parser.parse_known_args()
    _configure_logging(args.log_level)

    commands = {
        "ask": run_ask_cli,
        "resume": run_resume_cli,
        "show": run_show_cli,
        "serve": run_serve_cli,
        "seed": run_seed_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [f"{sys.argv[0]} {args.command}"] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except (AgentRunError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
