"""
Document ingestion pipeline orchestrator.

Streams one uploaded file through extraction, chunking, per-chunk
embedding and persistence, and batched vector-index writes. Chunk rows
are committed one by one, so a failure part way through keeps every chunk
stored before it.

Dependencies: All task modules, configs, fastapi.concurrency
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
import uuid
from contextlib import closing

from fastapi.concurrency import run_in_threadpool
from langchain_core.embeddings import Embeddings
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.boundary.vdb.vector_schemas import VectorIndex
from botkb.core.exceptions import (
    DocumentProcessingError,
    EmbeddingError,
    PersistenceError,
    ValidationError,
)
from botkb.observability.log_utils import log_exception_with_context
from .configs import IngestionSettings, get_ingestion_settings
from .models import Chunk, FileIngestionResult, IngestionStatus, UploadedFile
from .tasks import (
    EmbeddingTask,
    ParsingTask,
    SavingTask,
    StreamingChunker,
    VectorStoreTask,
    resolve_kind,
)

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Orchestrate ingestion: validate -> extract -> chunk -> embed -> save -> index."""

    def __init__(
        self,
        vector_store: VectorIndex,
        embeddings: Embeddings | None = None,
        embedding_dimension: int = 768,
        settings: IngestionSettings | None = None,
        embedding_task: EmbeddingTask | None = None,
        saving_task: SavingTask | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Args:
            vector_store: Vector index receiving chunk batches
            embeddings: Embeddings client (ignored when embedding_task is given)
            embedding_dimension: Expected vector size
            settings: Ingestion settings (uses environment defaults if None)
            embedding_task: Preconfigured embedding task
            saving_task: Preconfigured chunk saving task
        """
        self._settings = settings or get_ingestion_settings()
        self._vector_store = vector_store

        if embedding_task is None:
            if embeddings is None:
                raise ValueError("Either embeddings or embedding_task must be provided")
            embedding_task = EmbeddingTask(
                embeddings,
                dimension=embedding_dimension,
                max_attempts=self._settings.embedding_max_attempts,
            )
        self._embedding_task = embedding_task
        self._saving_task = saving_task or SavingTask()
        self._parsing_task = ParsingTask(
            max_text_length=self._settings.max_text_length,
            read_size=self._settings.chunk_size,
        )

    @property
    def settings(self) -> IngestionSettings:
        return self._settings

    def validate(self, upload: UploadedFile) -> None:
        """
        Per-file checks run before any text is read.

        Raises:
            ValidationError: When the file is too large or of an unsupported type
        """
        if upload.size > self._settings.max_file_size:
            raise ValidationError(
                f"File exceeds the {self._settings.max_file_size} byte limit",
                field="size",
                details={"filename": upload.filename, "size": upload.size},
            )
        content_type = (upload.content_type or "").split(";")[0].strip().lower()
        if resolve_kind(upload) is None or (
            content_type not in self._settings.allowed_content_types
            and content_type not in ("", "application/octet-stream")
        ):
            raise ValidationError(
                f"Unsupported file type: {upload.content_type}",
                field="content_type",
                details={"filename": upload.filename},
            )

    async def process(
        self,
        db: AsyncSession,
        bot_id: str,
        upload: UploadedFile,
    ) -> FileIngestionResult:
        """
        Ingest one file for a bot.

        Does not touch the retrieval cache; the caller invalidates once per
        upload request.

        Args:
            db: Async database session
            bot_id: Owning bot
            upload: File to ingest

        Returns:
            FileIngestionResult: INGESTED, SKIPPED (validation) or FAILED (extraction)
        """
        start_time = time.perf_counter()
        filename = upload.filename

        try:
            self.validate(upload)
        except ValidationError as e:
            logger.warning(f"{__name__}:process - Skipping {filename}: {e.message}")
            return FileIngestionResult(
                filename=filename,
                status=IngestionStatus.SKIPPED,
                message=e.message,
            )

        chunker = StreamingChunker(self._settings.chunk_size, self._settings.chunk_overlap)
        batch = VectorStoreTask(self._vector_store, self._settings.batch_size)
        stored = 0
        skipped = 0
        chunk_index = 0

        try:
            with closing(self._parsing_task.iter_text(upload)) as pieces:
                for text in chunker.chunk(pieces):
                    index = chunk_index
                    chunk_index += 1
                    chunk = await self._embed_and_save(db, bot_id, filename, index, text)
                    if chunk is None:
                        skipped += 1
                        continue
                    stored += 1
                    await batch.add(chunk)
        except DocumentProcessingError as e:
            await batch.flush()
            log_exception_with_context(
                logger,
                f"{__name__}:process - Ingestion aborted for {filename}",
                e,
                bot_id=bot_id,
                filename=filename,
                stored_chunks=stored,
            )
            return FileIngestionResult(
                filename=filename,
                status=IngestionStatus.FAILED,
                chunk_count=stored,
                skipped_chunks=skipped,
                message=e.message,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        await batch.flush()

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:process - Ingested {filename}: {stored} chunks stored, "
            f"{skipped} skipped, {batch.indexed} indexed in {elapsed_ms:.0f}ms"
        )
        return FileIngestionResult(
            filename=filename,
            status=IngestionStatus.INGESTED,
            chunk_count=stored,
            skipped_chunks=skipped,
            processing_time_ms=elapsed_ms,
        )

    async def _embed_and_save(
        self,
        db: AsyncSession,
        bot_id: str,
        filename: str,
        index: int,
        text: str,
    ) -> Chunk | None:
        """Embed and persist one chunk; None when the chunk had to be skipped."""
        try:
            vector = await run_in_threadpool(self._embedding_task.embed, text, filename)
            chunk = Chunk(
                id=str(uuid.uuid4()),
                bot_id=bot_id,
                filename=filename,
                chunk_index=index,
                content=text,
                embedding=vector,
            )
            await self._saving_task.save(db, chunk)
            return chunk
        except (EmbeddingError, PersistenceError) as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_embed_and_save - Skipping chunk {index} of {filename}",
                e,
                level=logging.WARNING,
                bot_id=bot_id,
                filename=filename,
                chunk_index=index,
            )
            return None
