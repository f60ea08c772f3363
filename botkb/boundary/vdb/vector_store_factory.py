"""
Vector store factory for selecting between FAISS (dev) and PGVector (prod).

Depends on VECTOR_STORE_STORE_TYPE. Both stores share the same embeddings
so query vectors match the stored chunk vectors.

Dependencies: botkb.boundary.vdb, botkb.configs
System role: Vector store and embeddings instantiation
"""

import logging
from functools import lru_cache

from botkb.boundary.vdb.embeddings_wrapper import FixedDimensionEmbeddings
from botkb.configs import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_embeddings() -> FixedDimensionEmbeddings:
    """Shared embeddings client configured from VectorStoreSettings."""
    settings = get_settings().vector_store
    return FixedDimensionEmbeddings(
        model=settings.embedding_model,
        output_dimensionality=settings.embedding_dimension,
        request_timeout=settings.embedding_timeout,
    )


@lru_cache
def get_vector_store():
    """
    Get the configured vector store (one instance per process).

    Returns:
        FAISSVectorsStore or PGVectorStore: Configured vector store instance

    Raises:
        ValueError: If the store type is invalid
    """
    settings = get_settings()
    store_type = settings.vector_store.store_type.lower()

    if store_type == "faiss":
        from botkb.boundary.vdb.faiss_vectors_store import FAISSVectorsStore

        logger.info(f"{__name__}:get_vector_store - Creating FAISS vector store (local dev mode)")
        return FAISSVectorsStore(
            embeddings=get_embeddings(),
            dimension=settings.vector_store.embedding_dimension,
            index_dir=settings.vector_store.faiss_index_dir,
            index_name=settings.vector_store.collection_name,
            fetch_k_multiplier=settings.vector_store.fetch_k_multiplier,
        )

    if store_type == "pgvector":
        from botkb.boundary.vdb.pgvector_store import PGVectorStore

        logger.info(f"{__name__}:get_vector_store - Creating PGVector store (production mode)")
        return PGVectorStore(
            embeddings=get_embeddings(),
            connection=settings.database.psycopg_url,
            collection_name=settings.vector_store.collection_name,
            query_timeout=settings.vector_store.query_timeout,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        f"Must be 'faiss' (dev) or 'pgvector' (production)."
    )
