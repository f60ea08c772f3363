"""
Document ingestion pipeline.

Streams an uploaded file through extraction, chunking, per-chunk embedding
and persistence, and batched vector-index writes.

Dependencies: langchain_community, langchain_google_genai, pydantic, tenacity
System role: Document ingestion pipeline package

The orchestrator lives in `entrypoint` and is imported from there so the
settings module stays importable from `botkb.configs`.
"""

from .configs import IngestionSettings, get_ingestion_settings
from .models import Chunk, FileIngestionResult, IngestionStatus, UploadedFile

__all__ = [
    "IngestionSettings",
    "get_ingestion_settings",
    "Chunk",
    "FileIngestionResult",
    "IngestionStatus",
    "UploadedFile",
]
