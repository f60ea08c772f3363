"""
Vector index batching task.

Collects embedded chunks and writes them to the vector index in fixed-size
batches. A batch lives for one file only.

Dependencies: fastapi.concurrency, botkb.boundary.vdb
System role: Vector index stage of document ingestion pipeline
"""

import logging

from fastapi.concurrency import run_in_threadpool

from botkb.boundary.vdb.vector_schemas import VectorIndex
from botkb.observability.log_utils import log_exception_with_context
from ..models import Chunk

logger = logging.getLogger(__name__)


class VectorStoreTask:
    """Buffer chunks and flush them to the vector index in batches."""

    def __init__(self, vector_store: VectorIndex, batch_size: int = 5) -> None:
        """
        Args:
            vector_store: Target vector index
            batch_size: Chunks per index write

        Raises:
            ValueError: When batch_size is not positive
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._vector_store = vector_store
        self._batch_size = batch_size
        self._batch: list[Chunk] = []
        self.indexed = 0
        self.failed_flushes = 0

    @property
    def pending(self) -> int:
        return len(self._batch)

    async def add(self, chunk: Chunk) -> None:
        """Queue a chunk, flushing once the batch is full."""
        self._batch.append(chunk)
        if len(self._batch) >= self._batch_size:
            await self.flush()

    async def flush(self) -> int:
        """
        Write the pending batch to the index in a single call.

        Failures are logged and the batch is dropped; rows already
        persisted for these chunks stay in place.

        Returns:
            int: Number of chunks written (0 on failure or empty batch)
        """
        if not self._batch:
            return 0

        batch = list(self._batch)
        try:
            await run_in_threadpool(
                self._vector_store.add_embeddings,
                [chunk.content for chunk in batch],
                [chunk.embedding for chunk in batch],
                [chunk.vector_metadata() for chunk in batch],
                [chunk.id for chunk in batch],
            )
            self.indexed += len(batch)
            logger.debug(f"{__name__}:flush - Indexed batch of {len(batch)} chunks")
            return len(batch)
        except Exception as e:
            self.failed_flushes += 1
            log_exception_with_context(
                logger,
                f"{__name__}:flush - Vector index write failed, dropping batch",
                e,
                bot_id=batch[0].bot_id,
                filename=batch[0].filename,
                batch_size=len(batch),
            )
            return 0
        finally:
            self._batch.clear()
