"""
Vector store implementations.

Pattern: Protocol -> Production impl -> Test double -> Factory

1. VectorStoreConfig - Configuration dataclass
2. PgVectorStore - PostgreSQL with pgvector
3. InMemoryVectorStore - numpy cosine similarity, no database
4. get_vector_store() - Factory function
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from adaptive_rag_copilot.core import DocumentResult, EmbeddingProvider
from adaptive_rag_copilot.retrieval.document import Document

logger = logging.getLogger(__name__)

# psycopg/pgvector come with the "postgres" extra
try:
    import psycopg
    from pgvector.psycopg import register_vector

    PGVECTOR_AVAILABLE = True
except ImportError:
    PGVECTOR_AVAILABLE = False


# ---------------------------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------------------------


@dataclass
class VectorStoreConfig:
    """Configuration for the pgvector store."""

    connection_string: str = "postgresql://localhost/adaptive_rag"
    embedding_dim: int = 1536
    table_name: str = "knowledge_documents"


def _embed_missing(embeddings: EmbeddingProvider, docs: list[Document]) -> None:
    """Fill in embeddings for documents that do not carry one, in one batch."""
    pending = [doc for doc in docs if doc.embedding is None]
    if not pending:
        return
    vectors = embeddings.embed_batch([doc.embedding_text for doc in pending])
    for doc, vector in zip(pending, vectors):
        doc.embedding = vector


# ---------------------------------------------------------------------------
# PGVECTOR STORE
# ---------------------------------------------------------------------------


class PgVectorStore:
    """
    PostgreSQL vector store using pgvector.

    Embeddings are injected so the same store runs against OpenAI or the
    hashing embedder. Topics are stored as a TEXT[] column with a GIN index
    so topic filters combine with the HNSW similarity search in one query.
    """

    def __init__(self, config: VectorStoreConfig, embeddings: EmbeddingProvider):
        self.config = config
        self._embeddings = embeddings
        self._conn = None

    def connect(self) -> None:
        if not PGVECTOR_AVAILABLE:
            raise ImportError(
                "pgvector not available. Install with: "
                "pip install 'adaptive-rag-copilot[postgres]'"
            )

        self._conn = psycopg.connect(self.config.connection_string, autocommit=True)
        self._conn.execute("CREATE EXTENSION IF NOT EXISTS vector")
        register_vector(self._conn)

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def _connection(self):
        if not self._conn:
            self.connect()
        return self._conn

    def create_schema(self) -> None:
        """Create the documents table and indexes."""
        conn = self._connection()
        table = self.config.table_name

        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                topics TEXT[],
                source TEXT,
                embedding vector({self.config.embedding_dim})
            )
            """
        )
        conn.execute(
            f"""
            CREATE INDEX IF NOT EXISTS {table}_embedding_idx
            ON {table}
            USING hnsw (embedding vector_cosine_ops)
            WITH (m = 16, ef_construction = 64)
            """
        )
        conn.execute(
            f"""
            CREATE INDEX IF NOT EXISTS {table}_topics_idx
            ON {table}
            USING GIN (topics)
            """
        )

    def insert_document(self, doc: Document) -> None:
        self.insert_documents_batch([doc])

    def insert_documents_batch(self, docs: list[Document]) -> None:
        _embed_missing(self._embeddings, docs)
        conn = self._connection()

        for doc in docs:
            conn.execute(
                f"""
                INSERT INTO {self.config.table_name}
                    (id, title, content, topics, source, embedding)
                VALUES (%s, %s, %s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE SET
                    title = EXCLUDED.title,
                    content = EXCLUDED.content,
                    topics = EXCLUDED.topics,
                    source = EXCLUDED.source,
                    embedding = EXCLUDED.embedding
                """,
                (doc.id, doc.title, doc.content, doc.topics, doc.source, doc.embedding),
            )

    def search(
        self,
        query: str,
        limit: int = 4,
        topic_filter: list[str] | None = None,
    ) -> list[DocumentResult]:
        conn = self._connection()
        query_embedding = self._embeddings.embed(query)

        if topic_filter:
            rows = conn.execute(
                f"""
                SELECT id, title, content, topics, source,
                       embedding <=> %s AS distance
                FROM {self.config.table_name}
                WHERE topics && %s
                ORDER BY distance
                LIMIT %s
                """,
                (query_embedding, topic_filter, limit),
            ).fetchall()
        else:
            rows = conn.execute(
                f"""
                SELECT id, title, content, topics, source,
                       embedding <=> %s AS distance
                FROM {self.config.table_name}
                ORDER BY distance
                LIMIT %s
                """,
                (query_embedding, limit),
            ).fetchall()

        return [
            DocumentResult(
                id=row[0],
                title=row[1],
                content=row[2],
                topics=row[3] or [],
                source=row[4],
                score=1 - row[5],  # cosine distance -> similarity
            )
            for row in rows
        ]


# ---------------------------------------------------------------------------
# IN-MEMORY STORE
# ---------------------------------------------------------------------------


class InMemoryVectorStore:
    """
    In-memory vector store for development/testing.

    Same interface as PgVectorStore; ranks with cosine similarity.
    """

    def __init__(self, embeddings: EmbeddingProvider):
        self._embeddings = embeddings
        self._documents: dict[str, Document] = {}

    def connect(self) -> None:
        pass

    def close(self) -> None:
        pass

    def create_schema(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._documents)

    def insert_document(self, doc: Document) -> None:
        self.insert_documents_batch([doc])

    def insert_documents_batch(self, docs: list[Document]) -> None:
        _embed_missing(self._embeddings, docs)
        for doc in docs:
            self._documents[doc.id] = doc

    @staticmethod
    def _cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
        denom = float(np.linalg.norm(a) * np.linalg.norm(b))
        if denom == 0.0:
            return 0.0
        return float(np.dot(a, b) / denom)

    def search(
        self,
        query: str,
        limit: int = 4,
        topic_filter: list[str] | None = None,
    ) -> list[DocumentResult]:
        query_emb = self._embeddings.embed(query)

        scored = []
        for doc in self._documents.values():
            if topic_filter and not set(topic_filter) & set(doc.topics):
                continue
            if doc.embedding is None:
                continue
            scored.append((doc, self._cosine_similarity(query_emb, doc.embedding)))

        scored.sort(key=lambda x: x[1], reverse=True)

        return [
            DocumentResult(
                id=doc.id,
                title=doc.title,
                content=doc.content,
                topics=list(doc.topics),
                source=doc.source,
                score=score,
            )
            for doc, score in scored[:limit]
        ]


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_vector_store(
    use_postgres: bool = False,
    embeddings: EmbeddingProvider | None = None,
    config: VectorStoreConfig | None = None,
    use_mock_embeddings: bool = True,
) -> PgVectorStore | InMemoryVectorStore:
    """
    Factory function to get the appropriate vector store.

    Args:
        use_postgres: Use the PostgreSQL store
        embeddings: Embedding provider (created if not provided)
        config: pgvector configuration (defaults if not provided)
        use_mock_embeddings: Use the hashing embedder when creating one.
            Ignored for Postgres, whose column is sized for OpenAI vectors.
    """
    if embeddings is None:
        from adaptive_rag_copilot.embeddings import get_embedding_provider

        embeddings = get_embedding_provider(
            use_mock=use_mock_embeddings and not use_postgres
        )

    if use_postgres:
        if not PGVECTOR_AVAILABLE:
            raise ImportError(
                "USE_POSTGRES is set but psycopg/pgvector are not installed"
            )
        logger.info("Using pgvector store")
        return PgVectorStore(config or VectorStoreConfig(), embeddings)

    return InMemoryVectorStore(embeddings)
