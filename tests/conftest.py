"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database, fake Redis, in-memory vector index,
deterministic embeddings, upload helpers
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import fnmatch
import hashlib
import io
import uuid
from typing import Any

import pytest
from langchain_core.embeddings import Embeddings

from botkb.boundary.vdb.vector_schemas import VectorMetadata, VectorSearchResult
from botkb.core.document_processing.configs import IngestionSettings
from botkb.core.document_processing.models import UploadedFile
from botkb.core.retrieval_cache import RetrievalCache

EMBEDDING_DIMENSION = 4


class FakeRedis:
    """Dict-backed stand-in for redis.asyncio.Redis (decode_responses=True)."""

    def __init__(self) -> None:
        self.store: dict[str, str | bytes] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        value = self.store.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.store[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def scan_iter(self, match: str | None = None, count: int | None = None):
        for key in list(self.store):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key


class InMemoryVectorIndex:
    """Vector index double recording every call."""

    def __init__(self) -> None:
        self.entries: dict[str, dict[str, Any]] = {}
        self.add_calls: list[list[str]] = []
        self.delete_calls: list[list[str]] = []
        self.search_calls: list[tuple[str, int, str]] = []

    def add_embeddings(self, texts, embeddings, metadatas, ids):
        self.add_calls.append(list(ids))
        for text, embedding, metadata, chunk_id in zip(texts, embeddings, metadatas, ids):
            self.entries[chunk_id] = {"text": text, "embedding": embedding, "metadata": metadata}
        return list(ids)

    def delete(self, ids):
        self.delete_calls.append(list(ids))
        for chunk_id in ids:
            self.entries.pop(chunk_id, None)

    def similarity_search(self, query, k, bot_id):
        self.search_calls.append((query, k, bot_id))
        results = []
        for chunk_id, entry in self.entries.items():
            if entry["metadata"]["bot_id"] != bot_id:
                continue
            results.append(
                VectorSearchResult(
                    chunk_id=chunk_id,
                    content=entry["text"],
                    metadata=VectorMetadata(**entry["metadata"]),
                    similarity_score=1.0,
                )
            )
        return results[:k]


class HashEmbeddings(Embeddings):
    """Deterministic embeddings derived from a SHA-256 of the text."""

    def __init__(self, dimension: int = EMBEDDING_DIMENSION) -> None:
        self.dimension = dimension
        self.calls = 0

    def embed_query(self, text: str) -> list[float]:
        self.calls += 1
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [digest[i] / 255.0 for i in range(self.dimension)]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(text) for text in texts]


def make_upload(
    content: bytes | str,
    filename: str = "notes.txt",
    content_type: str = "text/plain",
    size: int | None = None,
) -> UploadedFile:
    """Build an UploadedFile over an in-memory stream."""
    data = content.encode("utf-8") if isinstance(content, str) else content
    return UploadedFile(
        filename=filename,
        content_type=content_type,
        size=len(data) if size is None else size,
        stream=io.BytesIO(data),
    )


def make_result(bot_id: str, text: str, filename: str = "doc.txt", index: int = 0) -> VectorSearchResult:
    return VectorSearchResult(
        chunk_id=str(uuid.uuid4()),
        content=text,
        metadata=VectorMetadata(bot_id=bot_id, filename=filename, chunk_index=index),
        similarity_score=0.9,
    )


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with every botkb table created
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from botkb.boundary.db.base import Base
    from botkb.boundary.db.models import BotChunkModel, BotModel  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def bot(test_async_db):
    """Persist a bot with two instruction lines."""
    from botkb.boundary.db.CRUD.bot_crud import bot_crud

    instance = await bot_crud.create(
        test_async_db,
        name="Support Bot",
        instructions=["You answer questions about Acme products.", "Be brief."],
    )
    await test_async_db.commit()
    return instance


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def retrieval_cache(fake_redis: FakeRedis) -> RetrievalCache:
    return RetrievalCache(client=fake_redis, prefix="query", ttl_seconds=3600)


@pytest.fixture
def vector_index() -> InMemoryVectorIndex:
    return InMemoryVectorIndex()


@pytest.fixture
def hash_embeddings() -> HashEmbeddings:
    return HashEmbeddings()


@pytest.fixture
def ingestion_settings() -> IngestionSettings:
    """Production limits with a single embedding attempt so failures are immediate."""
    return IngestionSettings(embedding_max_attempts=1)


@pytest.fixture
def upload_factory():
    """Factory fixture building in-memory uploads."""
    return make_upload


@pytest.fixture
def result_factory():
    """Factory fixture building search results."""
    return make_result
