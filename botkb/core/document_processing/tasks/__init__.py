"""
Task modules for document ingestion pipeline.

Exports: ParsingTask, StreamingChunker, EmbeddingTask, SavingTask, VectorStoreTask
"""

from .chunking_task import StreamingChunker
from .embedding_task import EmbeddingTask
from .parsing_task import ParsingTask, resolve_kind
from .saving_task import SavingTask
from .vector_store_task import VectorStoreTask

__all__ = [
    "ParsingTask",
    "resolve_kind",
    "StreamingChunker",
    "EmbeddingTask",
    "SavingTask",
    "VectorStoreTask",
]
