"""Pydantic schemas for uploaded files."""

from uuid import UUID

from pydantic import BaseModel

from eduassist.schemas.ai import DocumentAnalysis
from eduassist.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class UploadedFileRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Uploaded file metadata."""

    user_id: UUID
    session_id: UUID | None
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    is_processed: bool


class FileUploadResponse(BaseModel):
    """Upload result. ``analysis`` is present only when PDF analysis succeeded."""

    file: UploadedFileRead
    analysis: DocumentAnalysis | None = None
    message: str
