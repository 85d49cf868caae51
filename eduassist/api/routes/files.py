"""API routes for uploading study material."""

import logging
from uuid import UUID, uuid4

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from eduassist.api.deps import CurrentUser, DbSession, verify_ownership_or_404
from eduassist.config import get_settings
from eduassist.db import repository
from eduassist.db.models import ALLOWED_UPLOAD_TYPES
from eduassist.errors import AIGatewayError
from eduassist.messages import t
from eduassist.schemas.ai import DocumentAnalysis
from eduassist.schemas.files import FileUploadResponse, UploadedFileRead
from eduassist.services import ai_gateway, pdf_processor, s3_service
from eduassist.services.s3 import StorageError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/files", tags=["files"])
settings = get_settings()

_CHUNK_SIZE = 64 * 1024


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    """Read the upload in chunks, failing as soon as it grows past ``limit`` bytes."""
    chunks = []
    size = 0
    while chunk := await file.read(_CHUNK_SIZE):
        size += len(chunk)
        if size > limit:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=t("file_too_large"))
        chunks.append(chunk)
    return b"".join(chunks)


async def _analyze_pdf(data: bytes, file_name: str) -> DocumentAnalysis | None:
    """Extract text and ask the AI gateway about it. None if either step fails."""
    extraction = await pdf_processor.extract_text(data)
    if not extraction.ok:
        logger.warning("Text extraction failed for %s: %s", file_name, extraction.error)
        return None
    try:
        return await ai_gateway.analyze_document(extraction.text, file_name=file_name)
    except AIGatewayError as e:
        logger.warning("Document analysis failed for %s: %s", file_name, e.__cause__ or e)
        return None


# =============================================================================
# UPLOAD
# =============================================================================


@router.post("/upload", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    current_user: CurrentUser,
    db: DbSession,
    file: UploadFile | None = File(None),
    session_id: UUID | None = Form(None),
) -> FileUploadResponse:
    """
    Upload a PDF or Word document.

    Flow:
    1. Reject unsupported types and anything over the size limit
    2. Write the bytes to S3
    3. Record the file metadata (is_processed=false)
    4. For PDFs, extract the text and analyze it; mark processed on success

    An analysis failure does not fail the upload.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=t("no_file"))
    if file.content_type not in ALLOWED_UPLOAD_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=t("unsupported_file_type"))

    if session_id is not None:
        session = await repository.get_chat_session(db, session_id)
        verify_ownership_or_404(session, current_user, "session_not_found")

    data = await _read_limited(file, settings.max_upload_size_bytes)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=t("no_file"))

    file_name = file.filename or "upload"
    file_key = s3_service.build_key(current_user.id, uuid4(), file_name)
    try:
        await s3_service.upload_file(file_key, data, file.content_type)
    except StorageError:
        logger.exception("Storage write failed for user %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=t("upload_failed")
        )

    try:
        uploaded = await repository.create_uploaded_file(
            db,
            user_id=current_user.id,
            session_id=session_id,
            file_name=file_name,
            file_path=file_key,
            file_size=len(data),
            mime_type=file.content_type,
        )
        await db.commit()
    except Exception:
        # An object without a metadata row is unreachable
        try:
            await s3_service.delete_file(file_key)
        except StorageError:
            logger.exception("Could not remove orphaned object %s", file_key)
        raise
    logger.info("Stored upload %s (%d bytes) at %s", uploaded.id, len(data), file_key)

    if file.content_type != "application/pdf":
        return FileUploadResponse(file=UploadedFileRead.model_validate(uploaded), message=t("upload_ok"))

    analysis = await _analyze_pdf(data, file_name)
    if analysis is None:
        return FileUploadResponse(
            file=UploadedFileRead.model_validate(uploaded),
            message=t("upload_not_analyzed"),
        )

    uploaded = await repository.update_file_process_status(db, uploaded.id, True)
    await db.commit()
    return FileUploadResponse(
        file=UploadedFileRead.model_validate(uploaded),
        analysis=analysis,
        message=t("upload_analyzed"),
    )


@router.get("", response_model=list[UploadedFileRead])
async def list_files(current_user: CurrentUser, db: DbSession) -> list[UploadedFileRead]:
    """List the caller's uploads, newest first."""
    files = await repository.list_user_files(db, current_user.id)
    return [UploadedFileRead.model_validate(f) for f in files]
