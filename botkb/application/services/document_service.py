"""
Document service orchestrator.

Coordinates upload, listing and deletion of a bot's knowledge base.
Every corpus change follows the same order: chunk rows, then the vector
index, then the bot's retrieval cache. The three stores are not updated
atomically; a failed index delete is logged and reported so it can be
retried, and the cache is invalidated regardless.

Dependencies: botkb.boundary.db, botkb.boundary.vdb, botkb.core
System role: Document management orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.boundary.db.CRUD.bot_crud import bot_crud
from botkb.boundary.db.CRUD.chunk_crud import chunk_crud
from botkb.boundary.vdb.vector_schemas import VectorIndex
from botkb.core.document_processing.configs import IngestionSettings
from botkb.core.document_processing.entrypoint import IngestionPipeline
from botkb.core.document_processing.models import FileIngestionResult, UploadedFile
from botkb.core.exceptions import (
    BotNotFoundError,
    ChunkNotFoundError,
    PersistenceError,
    ValidationError,
    VectorStoreError,
)
from botkb.core.retrieval_cache import RetrievalCache
from botkb.models.document import DeletionResult, FileSummary, UploadReport
from botkb.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document service orchestrator.

    Handles the knowledge base lifecycle of a bot: upload, listing and
    deletion by chunk, by file or for the whole bot.
    """

    def __init__(
        self,
        db: AsyncSession,
        pipeline: IngestionPipeline,
        vector_store: VectorIndex,
        cache: RetrievalCache,
    ) -> None:
        """
        Args:
            db: AsyncSession scoped to the request
            pipeline: Ingestion pipeline sharing vector_store
            vector_store: Vector index mirrored on deletion
            cache: Retrieval cache invalidated after every corpus change
        """
        self.db = db
        self._pipeline = pipeline
        self._vector_store = vector_store
        self._cache = cache

    @property
    def settings(self) -> IngestionSettings:
        return self._pipeline.settings

    def validate_request(self, files: Sequence[UploadedFile]) -> None:
        """
        Request-level checks, applied before any file is read.

        Raises:
            ValidationError: When the request as a whole is not acceptable
        """
        settings = self.settings
        if not files:
            raise ValidationError("No files provided", field="files")
        if len(files) > settings.max_files_per_upload:
            raise ValidationError(
                f"Too many files: maximum is {settings.max_files_per_upload}",
                field="files",
                details={"count": len(files)},
            )
        total_size = sum(f.size for f in files)
        if total_size > settings.max_total_upload_size:
            raise ValidationError(
                f"Total upload size exceeds {settings.max_total_upload_size} bytes",
                field="files",
                details={"total_size": total_size},
            )
        for f in files:
            if not f.filename or not f.filename.strip():
                raise ValidationError("Filename is required", field="filename")
            if ".." in f.filename:
                raise ValidationError(
                    "Filename must not contain '..'",
                    field="filename",
                    details={"filename": f.filename},
                )

    async def upload(self, bot_id: UUID, files: Sequence[UploadedFile]) -> UploadReport:
        """
        Ingest a batch of files into a bot's knowledge base.

        Files are processed one after another, each as a single stream.
        A file that fails validation or extraction does not stop the rest.
        The bot's cache is invalidated once, after the last file.

        Args:
            bot_id: Owning bot
            files: Uploaded files

        Returns:
            UploadReport: Per-file outcomes and the total chunk count

        Raises:
            ValidationError: When the request fails request-level validation
            BotNotFoundError: When the bot does not exist
        """
        self.validate_request(files)
        if not await bot_crud.exists(self.db, bot_id):
            raise BotNotFoundError(str(bot_id))

        results: list[FileIngestionResult] = []
        try:
            for upload in files:
                results.append(await self._pipeline.process(self.db, str(bot_id), upload))
        finally:
            await self._cache.invalidate(str(bot_id))

        report = UploadReport(
            bot_id=str(bot_id),
            total_chunks=sum(r.chunk_count for r in results),
            results=results,
        )
        logger.info(
            f"{__name__}:upload - bot_id={bot_id} files={len(files)} "
            f"chunks={report.total_chunks} skipped={len(report.skipped)} failed={len(report.failed)}"
        )
        return report

    async def delete_chunk(self, chunk_id: UUID) -> DeletionResult:
        """
        Delete a single chunk.

        Raises:
            ChunkNotFoundError: When the chunk does not exist
        """
        chunk = await chunk_crud.get_by_id(self.db, chunk_id)
        if chunk is None:
            raise ChunkNotFoundError(str(chunk_id))
        return await self._delete_chunks(chunk.bot_id, [chunk.id], filename=chunk.filename)

    async def delete_file(self, bot_id: UUID, filename: str) -> DeletionResult:
        """
        Delete every chunk of one of a bot's files.

        Chunks of the bot's other files are untouched.
        """
        ids = await chunk_crud.get_ids_by_filename(self.db, bot_id, filename)
        if not ids:
            logger.info(f"{__name__}:delete_file - No chunks for bot_id={bot_id} filename={filename}")
            return DeletionResult(bot_id=str(bot_id), filename=filename)
        return await self._delete_chunks(bot_id, ids, filename=filename)

    async def delete_bot_documents(self, bot_id: UUID) -> DeletionResult:
        """Delete a bot's entire knowledge base, e.g. before the bot is removed."""
        ids = await chunk_crud.get_ids_by_bot(self.db, bot_id)
        if not ids:
            return DeletionResult(bot_id=str(bot_id))
        return await self._delete_chunks(bot_id, ids)

    async def list_files(self, bot_id: UUID) -> list[FileSummary]:
        """
        List a bot's source files with their chunk counts, ordered by filename.
        """
        counts = await chunk_crud.count_by_filename(self.db, bot_id)
        return [FileSummary(filename=filename, chunk_count=count) for filename, count in counts]

    async def _delete_chunks(
        self,
        bot_id: UUID,
        ids: list[UUID],
        filename: str | None = None,
    ) -> DeletionResult:
        try:
            deleted = await chunk_crud.delete_by_ids(self.db, ids)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(
                f"Failed to delete chunks: {e}",
                filename=filename,
                details={"bot_id": str(bot_id), "chunk_count": len(ids)},
            ) from e

        index_synced = True
        try:
            await run_in_threadpool(self._vector_store.delete, [str(chunk_id) for chunk_id in ids])
        except VectorStoreError as e:
            index_synced = False
            log_exception_with_context(
                logger,
                f"{__name__}:_delete_chunks - Vector index delete failed; rows already removed",
                e,
                bot_id=bot_id,
                filename=filename,
                chunk_count=len(ids),
            )
        finally:
            await self._cache.invalidate(str(bot_id))

        logger.info(
            f"{__name__}:_delete_chunks - Deleted {deleted} chunks bot_id={bot_id} filename={filename}"
        )
        return DeletionResult(
            bot_id=str(bot_id),
            filename=filename,
            deleted_chunks=deleted,
            index_synced=index_synced,
        )
