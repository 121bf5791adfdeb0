"""
Checkpointer selection and lifecycle.

interrupt() only works on a graph compiled with a checkpointer: the paused
run is written there and read back when the human answers. Which saver
holds it decides how long a paused run survives:

- memory:   MemorySaver, gone when the process exits
- sqlite:   AsyncSqliteSaver over aiosqlite, survives restarts
- postgres: AsyncPostgresSaver over a psycopg pool, shared by replicas

The async savers bind to the running event loop when constructed, so they
are created in open() and the graph is compiled after it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from langgraph.checkpoint.memory import MemorySaver

if TYPE_CHECKING:
    from langgraph.checkpoint.base import BaseCheckpointSaver

    from adaptive_rag_copilot.config import AgentSettings

logger = logging.getLogger(__name__)


class CheckpointManager:
    """
    Owns the checkpointer and the connection behind it.

    Usage:
        async with CheckpointManager(settings) as saver:
            graph = build_agent_graph(store, searcher, settings=settings,
                                      checkpointer=saver)
    """

    def __init__(self, settings: AgentSettings):
        self.backend = settings.checkpointer
        self._sqlite_path = settings.sqlite_path
        self._database_url = settings.database_url
        self._saver: BaseCheckpointSaver | None = (
            MemorySaver() if self.backend == "memory" else None
        )
        self._resource: Any = None

    @property
    def is_open(self) -> bool:
        return self._saver is not None

    @property
    def saver(self) -> BaseCheckpointSaver:
        """The checkpointer; persistent backends need open() first."""
        if self._saver is None:
            raise RuntimeError(
                f"{self.backend} checkpointer is not open; call 'await open()' first"
            )
        return self._saver

    async def open(self) -> BaseCheckpointSaver:
        """Connect and create the checkpoint tables (idempotent)."""
        if self._saver is not None:
            return self._saver

        if self.backend == "sqlite":
            import aiosqlite
            from langgraph.checkpoint.sqlite.aio import AsyncSqliteSaver

            conn = await aiosqlite.connect(self._sqlite_path)
            self._resource = conn
            saver = AsyncSqliteSaver(conn)
            logger.info(f"Using SQLite checkpointer at {self._sqlite_path}")
        elif self.backend == "postgres":
            from langgraph.checkpoint.postgres.aio import AsyncPostgresSaver
            from psycopg.rows import dict_row
            from psycopg_pool import AsyncConnectionPool

            pool = AsyncConnectionPool(
                conninfo=self._database_url,
                open=False,
                kwargs={
                    "autocommit": True,
                    "prepare_threshold": 0,
                    "row_factory": dict_row,
                },
            )
            await pool.open()
            self._resource = pool
            saver = AsyncPostgresSaver(pool)
            logger.info("Using Postgres checkpointer")
        else:
            raise ValueError(f"Unknown checkpointer backend {self.backend!r}")

        try:
            await saver.setup()
        except Exception:
            # __aexit__ does not run when __aenter__ raises
            await self._release()
            raise
        self._saver = saver
        return saver

    async def _release(self) -> None:
        if self._resource is not None:
            await self._resource.close()
            self._resource = None

    async def close(self) -> None:
        """Release the connection; a memory saver is simply dropped."""
        if self._resource is not None:
            await self._release()
            self._saver = None
        logger.debug(f"Closed {self.backend} checkpointer")

    async def __aenter__(self) -> BaseCheckpointSaver:
        return await self.open()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
