"""
adaptive-rag-copilot: an Adaptive RAG LangGraph agent with human-in-the-loop
interrupts, served to a CopilotKit frontend.
"""

__version__ = "0.1.0"
