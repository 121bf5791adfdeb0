"""
Knowledge base seed data.

The router sends questions about these topics to the vector store and
everything else to web search, so the router prompt and this corpus have
to agree on what "in scope" means (see agent.prompts.ROUTER_TOPICS).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from adaptive_rag_copilot.retrieval.document import Document

if TYPE_CHECKING:
    from adaptive_rag_copilot.retrieval.store import InMemoryVectorStore, PgVectorStore

logger = logging.getLogger(__name__)


def get_knowledge_documents() -> list[Document]:
    """Seed documents for the knowledge base."""
    return [
        Document(
            id="kb_agents_overview",
            title="LLM-Powered Autonomous Agents",
            content="""An LLM-powered agent uses a language model as its core controller.
Three components complement the model:

Planning: the agent breaks large tasks into smaller subgoals (task
decomposition, e.g. chain of thought or tree of thoughts) and reflects on
past actions to refine future steps (self-reflection, ReAct, Reflexion).

Memory: short-term memory is the in-context window; long-term memory is an
external vector store queried with maximum inner product search.

Tool use: the agent calls external APIs for information missing from the
model weights, such as search engines, code execution or proprietary data.""",
            topics=["agents"],
            source="kb://agents/overview",
        ),
        Document(
            id="kb_agents_memory",
            title="Agent Memory and Retrieval",
            content="""Agent memory maps to human memory types. Sensory memory corresponds to
embedding raw inputs, short-term memory to in-context learning limited by
the context window, and long-term memory to an external vector store.
Approximate nearest neighbour algorithms such as HNSW, FAISS and ScaNN make
retrieval from long-term memory fast at the cost of a little accuracy.""",
            topics=["agents", "retrieval"],
            source="kb://agents/memory",
        ),
        Document(
            id="kb_prompt_engineering",
            title="Prompt Engineering Techniques",
            content="""Prompt engineering steers model behaviour without updating weights.
Zero-shot prompting states the task directly; few-shot prompting adds
demonstrations, whose choice and order affect results. Chain-of-thought
prompting asks the model to reason step by step before answering.
Self-consistency samples several reasoning paths and takes a majority vote.
Instruction prompting describes the task and constraints explicitly.""",
            topics=["prompt_engineering"],
            source="kb://prompting/techniques",
        ),
        Document(
            id="kb_adversarial_attacks",
            title="Adversarial Attacks on LLMs",
            content="""Adversarial attacks try to make an aligned model produce unsafe output.
Jailbreak prompts use role play, competing objectives or obfuscated
encodings to bypass safety training. Prompt injection hides instructions in
retrieved content or tool output so the model follows the attacker instead
of the user. Token-level attacks optimise adversarial suffixes with gradient
search. Mitigations include input filtering, output moderation, separating
instructions from data and adversarial training.""",
            topics=["adversarial_attacks"],
            source="kb://safety/adversarial-attacks",
        ),
        Document(
            id="kb_langgraph_interrupts",
            title="LangGraph Interrupts",
            content="""An interrupt is a pause point inside a LangGraph node. Calling
interrupt(payload) saves the graph state through the checkpointer and
surfaces the payload to the caller under __interrupt__. Execution resumes
when the caller invokes the graph again on the same thread with
Command(resume=value); interrupt() then returns that value. The node that
interrupted re-runs from its beginning on resume, so code before the
interrupt call must be safe to repeat.""",
            topics=["langgraph", "human_in_the_loop"],
            source="kb://langgraph/interrupts",
        ),
        Document(
            id="kb_langgraph_checkpointers",
            title="LangGraph Checkpointers and Thread IDs",
            content="""A checkpointer persists a snapshot of graph state after every step.
Interrupts require one: graph.compile(checkpointer=...). MemorySaver keeps
checkpoints in process memory and loses them on restart; SQLite and
Postgres savers persist them so a paused run can outlive the process.
Every invocation passes config={"configurable": {"thread_id": ...}}; the
thread id selects which checkpoint history to load and resume.""",
            topics=["langgraph", "human_in_the_loop"],
            source="kb://langgraph/checkpointers",
        ),
        Document(
            id="kb_copilotkit_interrupt_hook",
            title="Handling LangGraph Interrupts in CopilotKit",
            content="""CopilotKit's useLangGraphInterrupt hook subscribes to interrupt events
from a LangGraph agent. Its render function receives the interrupt event,
whose value is the payload passed to interrupt(), and a resolve callback.
Calling resolve(value) sends the value back through the CopilotKit runtime,
which resumes the paused run on the same thread. The backend exposes the
graph through an AG-UI endpoint (LangGraphAGUIAgent) so the runtime can
stream node events and interrupts to the UI.""",
            topics=["copilotkit", "human_in_the_loop"],
            source="kb://copilotkit/interrupts",
        ),
        Document(
            id="kb_human_nodes",
            title="Human Nodes and Approval Steps",
            content="""A human node is a graph node whose output comes entirely from a person
rather than from the model: it interrupts with a question and writes the
answer into state. Approval steps interrupt with a draft (an answer, a tool
call) and branch on the decision: approve continues, edit continues with
the corrected value, reject loops back with feedback. Routing with
Command(goto=..., update=...) lets one node both update state and choose
the next node.""",
            topics=["langgraph", "human_in_the_loop"],
            source="kb://langgraph/human-nodes",
        ),
        Document(
            id="kb_hitl_troubleshooting",
            title="Troubleshooting Human-in-the-Loop Runs",
            content="""The graph does not resume: resolve must be called exactly once per
interrupt. Calling it zero times leaves the run paused; a second call has
nothing left to resume. Stale or missing state: the checkpointer is
misconfigured, for example a fresh MemorySaver per request or a different
thread id on resume, so the paused checkpoint cannot be found. Repeated
side effects: code placed before interrupt() runs again on resume.""",
            topics=["human_in_the_loop", "troubleshooting"],
            source="kb://hitl/troubleshooting",
        ),
        Document(
            id="kb_adaptive_rag",
            title="Adaptive RAG",
            content="""Adaptive RAG routes each question to the best source: a vector store for
questions about indexed topics, web search for everything else. Retrieved
documents are graded for relevance; if none survive, the question is
rewritten and retrieval retried. The generated answer is checked for
hallucinations against the documents and for whether it resolves the
question, looping back to generation or rewriting when it fails.""",
            topics=["retrieval", "agents"],
            source="kb://rag/adaptive",
        ),
    ]


def seed_vector_store(store: InMemoryVectorStore | PgVectorStore) -> int:
    """
    Load the knowledge base into a store.

    Returns:
        Number of documents inserted
    """
    docs = get_knowledge_documents()
    store.create_schema()
    store.insert_documents_batch(docs)
    logger.info(f"Seeded vector store with {len(docs)} documents")
    return len(docs)
