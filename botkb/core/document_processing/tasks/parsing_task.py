"""
Text extraction task.

Turns an uploaded file into a lazy stream of text pieces for the chunker.
Plain text is read line by line straight from the upload stream; PDF and
DOCX go through LangChain document loaders page by page.

Dependencies: langchain_community.document_loaders (pypdf, docx2txt)
System role: Extraction stage of document ingestion pipeline
"""

import io
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterator

from langchain_community.document_loaders import Docx2txtLoader, PyPDFLoader

from botkb.core.exceptions import ExtractionError
from ..models import UploadedFile

logger = logging.getLogger(__name__)

PLAIN_TEXT_TYPES = {"text/plain", "text/markdown", "text/x-markdown"}
PDF_TYPES = {"application/pdf"}
DOCX_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}

EXTENSION_KINDS = {
    ".txt": "text",
    ".md": "text",
    ".pdf": "pdf",
    ".docx": "docx",
}


def resolve_kind(upload: UploadedFile) -> str | None:
    """
    Classify an upload as 'text', 'pdf' or 'docx'.

    The declared content type wins; the file extension is used when the
    client sent a generic type such as application/octet-stream.
    """
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type in PLAIN_TEXT_TYPES:
        return "text"
    if content_type in PDF_TYPES:
        return "pdf"
    if content_type in DOCX_TYPES:
        return "docx"
    return EXTENSION_KINDS.get(Path(upload.filename).suffix.lower())


class ParsingTask:
    """Extract text from uploads as a stream of bounded pieces."""

    def __init__(self, max_text_length: int = 1_000_000, read_size: int = 500) -> None:
        """
        Args:
            max_text_length: Cap on extracted characters for PDF/DOCX sources
            read_size: Upper bound on the length of a single yielded piece
        """
        self._max_text_length = max_text_length
        self._read_size = read_size

    def iter_text(self, upload: UploadedFile) -> Iterator[str]:
        """
        Yield the file's text in source order.

        Args:
            upload: File to extract

        Yields:
            str: Text pieces no longer than read_size, newlines preserved

        Raises:
            ExtractionError: When the file type is unsupported or extraction fails
        """
        kind = resolve_kind(upload)
        if kind == "text":
            yield from self._iter_plain_text(upload)
        elif kind == "pdf":
            yield from self._iter_loader(upload, PyPDFLoader, ".pdf")
        elif kind == "docx":
            yield from self._iter_loader(upload, Docx2txtLoader, ".docx")
        else:
            raise ExtractionError(
                "Unsupported file type",
                filename=upload.filename,
                content_type=upload.content_type,
            )

    def _iter_plain_text(self, upload: UploadedFile) -> Iterator[str]:
        reader = io.TextIOWrapper(upload.stream, encoding="utf-8", errors="replace", newline="")
        try:
            while True:
                piece = reader.readline(self._read_size)
                if not piece:
                    break
                yield piece
        except (OSError, ValueError) as e:
            raise ExtractionError(
                f"Failed to read text file: {e}",
                filename=upload.filename,
                content_type=upload.content_type,
            ) from e
        finally:
            # Hand the binary stream back to the caller unclosed
            reader.detach()

    def _iter_loader(self, upload: UploadedFile, loader_cls, suffix: str) -> Iterator[str]:
        fd, tmp_path = tempfile.mkstemp(suffix=suffix)
        try:
            with os.fdopen(fd, "wb") as tmp:
                shutil.copyfileobj(upload.stream, tmp)

            remaining = self._max_text_length
            emitted = False
            try:
                for document in loader_cls(tmp_path).lazy_load():
                    if remaining <= 0:
                        logger.warning(
                            f"{__name__}:_iter_loader - Truncated {upload.filename} "
                            f"at {self._max_text_length} characters"
                        )
                        break
                    text = document.page_content[:remaining]
                    remaining -= len(text)
                    for piece in self._split(text):
                        emitted = emitted or bool(piece.strip())
                        yield piece
                    yield "\n"
            except MemoryError as e:
                raise ExtractionError(
                    "File is too large to extract",
                    filename=upload.filename,
                    content_type=upload.content_type,
                ) from e
            except Exception as e:
                raise ExtractionError(
                    f"Failed to extract text: {e}",
                    filename=upload.filename,
                    content_type=upload.content_type,
                ) from e

            if not emitted:
                raise ExtractionError(
                    "Document contains no extractable text",
                    filename=upload.filename,
                    content_type=upload.content_type,
                )
        finally:
            Path(tmp_path).unlink(missing_ok=True)

    def _split(self, text: str) -> Iterator[str]:
        for line in text.splitlines(keepends=True):
            for start in range(0, len(line), self._read_size):
                yield line[start:start + self._read_size]
