"""
Tests for the document ingestion pipeline.

Runs uploads end-to-end through extraction, chunking, embedding, the
in-memory SQLite chunk table and a recording vector index.

Dependencies: pytest, pytest-asyncio, aiosqlite
System role: Ingestion pipeline verification
"""

from unittest.mock import MagicMock, patch

import pytest
from langchain_core.documents import Document
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.boundary.db.CRUD.chunk_crud import chunk_crud
from botkb.core.document_processing.entrypoint import IngestionPipeline
from botkb.core.document_processing.models import IngestionStatus
from botkb.core.document_processing.tasks.embedding_task import EmbeddingTask
from botkb.core.exceptions import VectorStoreError

UNBROKEN_TEXT = ("abcdefghij" * 400)


@pytest.fixture
def pipeline(vector_index, hash_embeddings, ingestion_settings) -> IngestionPipeline:
    return IngestionPipeline(
        vector_store=vector_index,
        embeddings=hash_embeddings,
        embedding_dimension=4,
        settings=ingestion_settings,
    )


def _failing_on_call(failing_call: int) -> MagicMock:
    """Embeddings mock raising on one specific embed_query call."""
    calls = {"count": 0}

    def embed_query(text: str) -> list[float]:
        calls["count"] += 1
        if calls["count"] == failing_call:
            raise RuntimeError("embedding service unavailable")
        return [0.1, 0.2, 0.3, 0.4]

    embeddings = MagicMock()
    embeddings.embed_query.side_effect = embed_query
    return embeddings


class TestIngestionPipelineInit:
    """Test suite for pipeline construction."""

    def test_requires_embeddings_or_task(self, vector_index, ingestion_settings) -> None:
        with pytest.raises(ValueError):
            IngestionPipeline(vector_store=vector_index, settings=ingestion_settings)


class TestIngestionPipelineValidation:
    """Test suite for per-file validation."""

    @pytest.mark.asyncio
    async def test_oversized_file_is_skipped(
        self, pipeline, test_async_db, bot, vector_index, upload_factory
    ) -> None:
        upload = upload_factory("hello", size=6 * 1024 * 1024)

        result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.SKIPPED
        assert result.chunk_count == 0
        assert "byte limit" in result.message
        assert vector_index.add_calls == []

    @pytest.mark.asyncio
    async def test_unsupported_type_is_skipped(
        self, pipeline, test_async_db, bot, upload_factory
    ) -> None:
        upload = upload_factory(b"\x89PNG", filename="logo.png", content_type="image/png")

        result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.SKIPPED
        assert "Unsupported file type" in result.message

    def test_octet_stream_falls_back_to_extension(self, pipeline, upload_factory) -> None:
        upload = upload_factory("text", filename="readme.md", content_type="application/octet-stream")

        pipeline.validate(upload)

    @pytest.mark.asyncio
    async def test_x_markdown_is_ingested(self, pipeline, test_async_db, bot, upload_factory) -> None:
        upload = upload_factory("# Hours\nOur store opens at 9am.", filename="hours.md", content_type="text/x-markdown")

        pipeline.validate(upload)
        result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.INGESTED
        assert result.chunk_count == 1


class TestIngestionPipelineProcess:
    """Test suite for chunk storage and indexing."""

    @pytest.mark.asyncio
    async def test_text_file_is_stored_and_indexed(
        self,
        pipeline: IngestionPipeline,
        test_async_db: AsyncSession,
        bot,
        vector_index,
        upload_factory,
    ) -> None:
        # Arrange
        upload = upload_factory(UNBROKEN_TEXT, filename="manual.txt")

        # Act
        result = await pipeline.process(test_async_db, str(bot.id), upload)

        # Assert
        assert result.status == IngestionStatus.INGESTED
        assert result.chunk_count == 10
        assert result.skipped_chunks == 0

        rows = await chunk_crud.get_by_filename(test_async_db, bot.id, "manual.txt")
        assert [row.chunk_index for row in rows] == list(range(10))
        assert {str(row.id) for row in rows} == set(vector_index.entries)
        assert all(len(row.content) <= 500 for row in rows)
        assert all(len(row.embedding) == 4 for row in rows)

    @pytest.mark.asyncio
    async def test_line_file_chunks_overlap_on_line_boundaries(
        self, pipeline, test_async_db, bot, upload_factory
    ) -> None:
        # Arrange
        text = "".join(f"{i:02d}" + "x" * 97 + "\n" for i in range(1, 13))
        upload = upload_factory(text, filename="lines.txt")

        # Act
        result = await pipeline.process(test_async_db, str(bot.id), upload)

        # Assert
        assert len(text) == 1200
        assert result.status == IngestionStatus.INGESTED
        assert result.chunk_count == 3
        rows = await chunk_crud.get_by_filename(test_async_db, bot.id, "lines.txt")
        assert [row.chunk_index for row in rows] == [0, 1, 2]
        assert rows[0].content == text[:500].strip()
        assert rows[1].content.startswith(text[:500][-100:].strip())
        assert rows[2].content.startswith("09")
        assert rows[2].content.endswith("12" + "x" * 97)

    @pytest.mark.asyncio
    async def test_index_writes_are_batched(
        self, pipeline, test_async_db, bot, vector_index, upload_factory
    ) -> None:
        upload = upload_factory(UNBROKEN_TEXT)

        await pipeline.process(test_async_db, str(bot.id), upload)

        assert [len(ids) for ids in vector_index.add_calls] == [5, 5]

    @pytest.mark.asyncio
    async def test_vector_metadata_carries_bot_and_file(
        self, pipeline, test_async_db, bot, vector_index, upload_factory
    ) -> None:
        upload = upload_factory("Our store opens at 9am.", filename="hours.txt")

        await pipeline.process(test_async_db, str(bot.id), upload)

        (entry,) = vector_index.entries.values()
        assert entry["metadata"] == {"bot_id": str(bot.id), "filename": "hours.txt", "chunk_index": 0}
        assert entry["text"] == "Our store opens at 9am."

    @pytest.mark.asyncio
    async def test_embedding_failure_skips_only_that_chunk(
        self, test_async_db, bot, vector_index, ingestion_settings, upload_factory
    ) -> None:
        """Failing the fourth of ten embeddings stores the other nine."""
        # Arrange
        task = EmbeddingTask(_failing_on_call(4), dimension=4, max_attempts=1)
        pipeline = IngestionPipeline(
            vector_store=vector_index,
            settings=ingestion_settings,
            embedding_task=task,
        )
        upload = upload_factory(UNBROKEN_TEXT, filename="manual.txt")

        # Act
        result = await pipeline.process(test_async_db, str(bot.id), upload)

        # Assert
        assert result.status == IngestionStatus.INGESTED
        assert result.chunk_count == 9
        assert result.skipped_chunks == 1

        rows = await chunk_crud.get_by_filename(test_async_db, bot.id, "manual.txt")
        assert [row.chunk_index for row in rows] == [0, 1, 2, 4, 5, 6, 7, 8, 9]
        assert len(vector_index.entries) == 9

    @pytest.mark.asyncio
    async def test_index_failure_keeps_stored_rows(
        self, pipeline, test_async_db, bot, vector_index, upload_factory
    ) -> None:
        vector_index.add_embeddings = MagicMock(side_effect=VectorStoreError("index down", operation="add"))
        upload = upload_factory(UNBROKEN_TEXT)

        result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.INGESTED
        assert result.chunk_count == 10
        assert vector_index.add_embeddings.call_count == 2
        rows = await chunk_crud.get_by_filename(test_async_db, bot.id, "notes.txt")
        assert len(rows) == 10

    @pytest.mark.asyncio
    async def test_whitespace_file_stores_nothing(
        self, pipeline, test_async_db, bot, vector_index, upload_factory
    ) -> None:
        upload = upload_factory("   \n\n   \n")

        result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.INGESTED
        assert result.chunk_count == 0
        assert vector_index.add_calls == []


class TestIngestionPipelineLoaders:
    """Test suite for PDF extraction through the document loader."""

    @pytest.mark.asyncio
    async def test_pdf_pages_are_joined_into_chunks(
        self, pipeline, test_async_db, bot, vector_index, upload_factory
    ) -> None:
        upload = upload_factory(b"%PDF-1.4", filename="guide.pdf", content_type="application/pdf")

        with patch("botkb.core.document_processing.tasks.parsing_task.PyPDFLoader") as loader_cls:
            loader_cls.return_value.lazy_load.return_value = iter(
                [Document(page_content="Page one text."), Document(page_content="Page two text.")]
            )
            result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.INGESTED
        assert result.chunk_count == 1
        (entry,) = vector_index.entries.values()
        assert entry["text"] == "Page one text.\nPage two text."

    @pytest.mark.asyncio
    async def test_extraction_failure_marks_file_failed(
        self, pipeline, test_async_db, bot, vector_index, upload_factory
    ) -> None:
        upload = upload_factory(b"%PDF-broken", filename="broken.pdf", content_type="application/pdf")

        with patch("botkb.core.document_processing.tasks.parsing_task.PyPDFLoader") as loader_cls:
            loader_cls.return_value.lazy_load.side_effect = RuntimeError("bad xref table")
            result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.FAILED
        assert result.chunk_count == 0
        assert "bad xref table" in result.message
        assert vector_index.entries == {}

    @pytest.mark.asyncio
    async def test_pdf_without_text_fails(
        self, pipeline, test_async_db, bot, upload_factory
    ) -> None:
        upload = upload_factory(b"%PDF-1.4", filename="scan.pdf", content_type="application/pdf")

        with patch("botkb.core.document_processing.tasks.parsing_task.PyPDFLoader") as loader_cls:
            loader_cls.return_value.lazy_load.return_value = iter([Document(page_content="  ")])
            result = await pipeline.process(test_async_db, str(bot.id), upload)

        assert result.status == IngestionStatus.FAILED
        assert result.message == "Document contains no extractable text"
