"""
Unit tests for the ingestion stage tasks.

Covers file-kind resolution, streaming text extraction, embedding retries
and vector index batching.

Dependencies: pytest, unittest.mock
System role: Ingestion task verification
"""

import io
from unittest.mock import MagicMock

import pytest

from botkb.core.document_processing.models import Chunk, UploadedFile
from botkb.core.document_processing.tasks.embedding_task import EmbeddingTask
from botkb.core.document_processing.tasks.parsing_task import ParsingTask, resolve_kind
from botkb.core.document_processing.tasks.vector_store_task import VectorStoreTask
from botkb.core.exceptions import EmbeddingError, ExtractionError


def _chunk(index: int) -> Chunk:
    return Chunk(
        id=f"00000000-0000-0000-0000-{index:012d}",
        bot_id="bot-1",
        filename="faq.txt",
        chunk_index=index,
        content=f"chunk {index}",
        embedding=[0.1, 0.2],
    )


class TestResolveKind:
    """Test suite for upload classification."""

    @pytest.mark.parametrize(
        "filename,content_type,expected",
        [
            ("a.txt", "text/plain", "text"),
            ("a.md", "text/markdown; charset=utf-8", "text"),
            ("a.pdf", "application/pdf", "pdf"),
            (
                "a.docx",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "docx",
            ),
            ("a.PDF", "application/octet-stream", "pdf"),
            ("a.png", "image/png", None),
            ("archive", "", None),
        ],
    )
    def test_resolves_kind(self, upload_factory, filename, content_type, expected) -> None:
        upload = upload_factory(b"", filename=filename, content_type=content_type)

        assert resolve_kind(upload) == expected


class TestParsingTask:
    """Test suite for text extraction."""

    def test_plain_text_is_read_in_bounded_lines(self, upload_factory) -> None:
        # Arrange
        text = "short line\n" + "x" * 25 + "\nlast"
        upload = upload_factory(text)
        task = ParsingTask(read_size=10)

        # Act
        pieces = list(task.iter_text(upload))

        # Assert
        assert "".join(pieces) == text
        assert all(len(piece) <= 10 for piece in pieces)
        assert pieces[0] == "short line"

    def test_plain_text_leaves_stream_open(self, upload_factory) -> None:
        upload = upload_factory("line one\nline two\n")

        list(ParsingTask().iter_text(upload))

        assert not upload.stream.closed

    def test_invalid_utf8_is_replaced(self, upload_factory) -> None:
        upload = upload_factory(b"caf\xe9 menu\n")

        text = "".join(ParsingTask().iter_text(upload))

        assert text.startswith("caf")
        assert text.endswith(" menu\n")

    def test_unsupported_kind_raises(self) -> None:
        upload = UploadedFile(filename="logo.png", content_type="image/png", size=3, stream=io.BytesIO(b"png"))

        with pytest.raises(ExtractionError):
            list(ParsingTask().iter_text(upload))


class TestEmbeddingTask:
    """Test suite for per-chunk embedding."""

    def test_retries_transient_failure(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_query.side_effect = [RuntimeError("503"), [0.5, 0.5, 0.5]]
        task = EmbeddingTask(embeddings, dimension=3, max_attempts=3, wait_initial=0, wait_max=0)

        vector = task.embed("hello", filename="faq.txt")

        assert vector == [0.5, 0.5, 0.5]
        assert embeddings.embed_query.call_count == 2

    def test_gives_up_after_max_attempts(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_query.side_effect = RuntimeError("quota exceeded")
        task = EmbeddingTask(embeddings, dimension=3, max_attempts=2, wait_initial=0, wait_max=0)

        with pytest.raises(EmbeddingError) as exc_info:
            task.embed("hello", filename="faq.txt")

        assert embeddings.embed_query.call_count == 2
        assert exc_info.value.details["filename"] == "faq.txt"

    def test_rejects_wrong_dimension(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_query.return_value = [0.1, 0.2]
        task = EmbeddingTask(embeddings, dimension=3, max_attempts=1)

        with pytest.raises(EmbeddingError):
            task.embed("hello")


class TestVectorStoreTask:
    """Test suite for batched index writes."""

    @pytest.mark.asyncio
    async def test_flushes_when_batch_is_full(self, vector_index) -> None:
        task = VectorStoreTask(vector_index, batch_size=2)

        for index in range(5):
            await task.add(_chunk(index))

        assert [len(ids) for ids in vector_index.add_calls] == [2, 2]
        assert task.pending == 1

        await task.flush()
        assert task.indexed == 5
        assert task.pending == 0

    @pytest.mark.asyncio
    async def test_failed_flush_drops_batch(self) -> None:
        store = MagicMock()
        store.add_embeddings.side_effect = RuntimeError("index unavailable")
        task = VectorStoreTask(store, batch_size=10)
        await task.add(_chunk(0))

        written = await task.flush()

        assert written == 0
        assert task.failed_flushes == 1
        assert task.pending == 0

    @pytest.mark.asyncio
    async def test_empty_flush_is_noop(self, vector_index) -> None:
        task = VectorStoreTask(vector_index)

        assert await task.flush() == 0
        assert vector_index.add_calls == []

    def test_rejects_non_positive_batch(self, vector_index) -> None:
        with pytest.raises(ValueError):
            VectorStoreTask(vector_index, batch_size=0)
