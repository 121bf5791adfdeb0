"""
Document model for the knowledge base.

This is the internal representation held by the vector stores; search
returns DocumentResult (core.protocols) instead.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class Document:
    """A knowledge-base entry with its embedding."""

    id: str
    title: str
    content: str
    topics: list[str] = field(default_factory=list)  # used for topic filtering
    source: str | None = None
    embedding: np.ndarray | None = None
    score: float | None = None

    @property
    def embedding_text(self) -> str:
        return f"{self.title}\n{self.content}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "topics": self.topics,
            "source": self.source,
            "score": self.score,
        }
