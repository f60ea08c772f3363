"""
Document domain models and schemas.

Result schemas for upload, listing and deletion of a bot's knowledge base.

Dependencies: pydantic
System role: Document service contracts
"""

from pydantic import BaseModel, Field

from botkb.core.document_processing.models import FileIngestionResult, IngestionStatus


class UploadReport(BaseModel):
    """Outcome of one upload request."""

    bot_id: str
    total_chunks: int = Field(description="Chunks persisted across every file")
    results: list[FileIngestionResult] = Field(default_factory=list)

    @property
    def ingested(self) -> list[str]:
        return [r.filename for r in self.results if r.status == IngestionStatus.INGESTED]

    @property
    def skipped(self) -> list[str]:
        return [r.filename for r in self.results if r.status == IngestionStatus.SKIPPED]

    @property
    def failed(self) -> list[str]:
        return [r.filename for r in self.results if r.status == IngestionStatus.FAILED]


class FileSummary(BaseModel):
    """One source file in a bot's knowledge base."""

    filename: str
    chunk_count: int


class DeletionResult(BaseModel):
    """Rows removed by a delete operation."""

    bot_id: str
    filename: str | None = None
    deleted_chunks: int = 0
    index_synced: bool = Field(
        default=True,
        description="False when the vector index delete failed and needs a retry",
    )
