"""
Dependency injection container.

Factory functions wiring the services to their collaborators. Usable as
FastAPI dependencies by the surrounding HTTP layer.

Dependencies: fastapi, botkb.configs, botkb.application, botkb.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.application.services import ChatService, DocumentService
from botkb.boundary.cache import get_redis_client
from botkb.boundary.db import get_async_db
from botkb.boundary.vdb.vector_store_factory import get_embeddings, get_vector_store
from botkb.configs import get_settings
from botkb.core.agentic_system.agent.rag_agent import RAGAgent
from botkb.core.document_processing.entrypoint import IngestionPipeline
from botkb.core.retrieval_cache import RetrievalCache
from botkb.core.retriever import Retriever


@lru_cache
def get_retrieval_cache() -> RetrievalCache:
    """Process-wide retrieval cache on the shared Redis client."""
    settings = get_settings().cache
    return RetrievalCache(
        client=get_redis_client(),
        prefix=settings.key_prefix,
        ttl_seconds=settings.ttl_seconds,
    )


@lru_cache
def get_ingestion_pipeline() -> IngestionPipeline:
    settings = get_settings()
    return IngestionPipeline(
        vector_store=get_vector_store(),
        embeddings=get_embeddings(),
        embedding_dimension=settings.vector_store.embedding_dimension,
        settings=settings.ingestion,
    )


@lru_cache
def get_rag_agent() -> RAGAgent:
    settings = get_settings()
    retriever = Retriever(
        vector_store=get_vector_store(),
        cache=get_retrieval_cache(),
        default_top_k=settings.vector_store.top_k,
    )
    return RAGAgent(retriever=retriever, settings=settings.llm)


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Request-scoped database session

    Returns:
        DocumentService: Document service instance
    """
    return DocumentService(
        db=db,
        pipeline=get_ingestion_pipeline(),
        vector_store=get_vector_store(),
        cache=get_retrieval_cache(),
    )


def get_chat_service(db: AsyncSession = Depends(get_async_db)) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Request-scoped database session

    Returns:
        ChatService: Chat service instance
    """
    return ChatService(db=db, rag_agent=get_rag_agent())
