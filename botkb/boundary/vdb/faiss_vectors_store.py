"""
FAISS vector store for local development.

Same interface as PGVectorStore, backed by a LangChain FAISS index
persisted to disk. Metadata filtering on bot_id happens inside FAISS
after over-fetching candidates.

Dependencies: faiss-cpu, langchain_community
System role: Local vector store for development RAG
"""

import logging
import threading
from pathlib import Path
from typing import Any

import faiss
from langchain_community.docstore.in_memory import InMemoryDocstore
from langchain_community.vectorstores import FAISS
from langchain_core.embeddings import Embeddings

from botkb.boundary.vdb.vector_schemas import VectorSearchResult, to_search_result
from botkb.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


class FAISSVectorsStore:
    """
    FAISS vector store for local development.

    Writes are serialized with a lock since calls arrive from the threadpool.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        index_dir: str | Path = ".faiss_index",
        index_name: str = "bot_chunks",
        fetch_k_multiplier: int = 4,
    ) -> None:
        """
        Args:
            embeddings: Embeddings used to embed search queries
            dimension: Vector size, used when creating a fresh index
            index_dir: Directory the index is loaded from and saved to
            index_name: File stem of the persisted index
            fetch_k_multiplier: Candidates fetched per requested result before filtering
        """
        self._embeddings = embeddings
        self._dimension = dimension
        self._index_dir = Path(index_dir)
        self._index_name = index_name
        self._fetch_k_multiplier = fetch_k_multiplier
        self._lock = threading.Lock()

        self._index_dir.mkdir(parents=True, exist_ok=True)
        self._vector_store = self._load_or_create_index()

    def _load_or_create_index(self) -> FAISS:
        """Load the persisted index, or create an empty one."""
        if (self._index_dir / f"{self._index_name}.faiss").exists():
            logger.info(f"{__name__}:_load_or_create_index - Loading index from {self._index_dir}")
            return FAISS.load_local(
                str(self._index_dir),
                self._embeddings,
                index_name=self._index_name,
                allow_dangerous_deserialization=True,
            )

        logger.info(
            f"{__name__}:_load_or_create_index - Creating new FAISS index with dimension={self._dimension}"
        )
        return FAISS(
            embedding_function=self._embeddings,
            index=faiss.IndexFlatL2(self._dimension),
            docstore=InMemoryDocstore(),
            index_to_docstore_id={},
        )

    def _save(self) -> None:
        self._vector_store.save_local(str(self._index_dir), index_name=self._index_name)

    def add_embeddings(
        self,
        texts: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
        ids: list[str],
    ) -> list[str]:
        """
        Add precomputed embeddings and persist the index.

        Raises:
            VectorStoreError: When the insert fails
        """
        try:
            with self._lock:
                added = self._vector_store.add_embeddings(
                    text_embeddings=list(zip(texts, embeddings)),
                    metadatas=metadatas,
                    ids=ids,
                )
                self._save()
            logger.info(f"{__name__}:add_embeddings - Added {len(added)} vectors")
            return added
        except Exception as e:
            raise VectorStoreError(f"Failed to add vectors: {e}", operation="add") from e

    def delete(self, ids: list[str]) -> None:
        """
        Delete vectors by id, ignoring ids the index does not hold.

        Raises:
            VectorStoreError: When the delete fails
        """
        if not ids:
            return
        try:
            with self._lock:
                known = set(self._vector_store.index_to_docstore_id.values())
                present = [chunk_id for chunk_id in ids if chunk_id in known]
                if not present:
                    return
                self._vector_store.delete(ids=present)
                self._save()
            logger.info(f"{__name__}:delete - Deleted {len(present)} vectors")
        except Exception as e:
            raise VectorStoreError(f"Failed to delete vectors: {e}", operation="delete") from e

    def similarity_search(self, query: str, k: int, bot_id: str) -> list[VectorSearchResult]:
        """
        Search a single bot's chunks.

        Args:
            query: Search query text
            k: Number of results to return
            bot_id: Only chunks of this bot are eligible

        Returns:
            list[VectorSearchResult]: Results ordered by relevance

        Raises:
            VectorStoreError: When the search fails
        """
        if self._vector_store.index.ntotal == 0:
            return []
        try:
            results = self._vector_store.similarity_search_with_relevance_scores(
                query,
                k=k,
                filter={"bot_id": bot_id},
                fetch_k=k * self._fetch_k_multiplier,
            )
        except Exception as e:
            raise VectorStoreError(f"Similarity search failed: {e}", operation="search") from e

        logger.info(
            f"{__name__}:similarity_search - Found {len(results)} results",
            extra={"bot_id": bot_id, "k": k},
        )
        return [to_search_result(doc, score) for doc, score in results]
