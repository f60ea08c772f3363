"""
Models for document ingestion pipeline.

Exports: Chunk, UploadedFile, FileIngestionResult, IngestionStatus
"""

from .chunk import Chunk
from .ingestion_result import FileIngestionResult, IngestionStatus
from .uploaded_file import UploadedFile

__all__ = [
    "Chunk",
    "UploadedFile",
    "FileIngestionResult",
    "IngestionStatus",
]
