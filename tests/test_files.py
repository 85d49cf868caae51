"""Upload endpoint tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from eduassist.db import repository
from eduassist.db.models import MAX_UPLOAD_BYTES, UploadedFile
from eduassist.errors import AIGatewayError
from eduassist.messages import t
from eduassist.schemas.ai import DocumentAnalysis
from eduassist.services import ai_gateway, pdf_processor, s3_service
from eduassist.services.pdf_processor import ExtractionResult

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _stored_file(**kwargs) -> UploadedFile:
    return UploadedFile(id=uuid4(), is_processed=False, created_at=datetime.now(timezone.utc), **kwargs)


@pytest.fixture
def storage():
    with patch.object(s3_service, "upload_file", AsyncMock()) as upload, \
         patch.object(s3_service, "delete_file", AsyncMock()) as delete:
        yield upload, delete


@pytest.fixture
def create_row():
    mock = AsyncMock(side_effect=lambda db, **kwargs: _stored_file(**kwargs))
    with patch.object(repository, "create_uploaded_file", mock):
        yield mock


async def test_upload_word_document(client, auth_as, user, storage, create_row):
    auth_as()
    upload, _ = storage

    response = await client.post(
        "/api/files/upload", files={"file": ("notes.docx", b"PK\x03\x04 word body", DOCX)}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == t("upload_ok")
    assert body["analysis"] is None
    assert body["file"]["mime_type"] == DOCX
    assert body["file"]["is_processed"] is False

    key = upload.await_args.args[0]
    assert key.startswith(f"users/{user.id}/uploads/")
    assert key.endswith("_notes.docx")
    assert create_row.await_args.kwargs["file_path"] == key
    assert create_row.await_args.kwargs["file_size"] == len(b"PK\x03\x04 word body")


async def test_unsupported_type_is_rejected_without_storage(client, auth_as, storage, create_row):
    auth_as()
    upload, _ = storage

    response = await client.post("/api/files/upload", files={"file": ("photo.png", b"\x89PNG....", "image/png")})

    assert response.status_code == 400
    assert response.json()["message"] == t("unsupported_file_type")
    upload.assert_not_awaited()
    create_row.assert_not_awaited()


async def test_oversize_upload_is_rejected_before_storage(client, auth_as, storage, create_row):
    auth_as()
    upload, _ = storage

    response = await client.post(
        "/api/files/upload",
        files={"file": ("big.pdf", b"%" * (MAX_UPLOAD_BYTES + 1), "application/pdf")},
    )

    assert response.status_code == 400
    assert response.json()["message"] == t("file_too_large")
    upload.assert_not_awaited()
    create_row.assert_not_awaited()


async def test_missing_file(client, auth_as, storage):
    auth_as()

    response = await client.post("/api/files/upload", data={"session_id": str(uuid4())})

    assert response.status_code == 400
    assert response.json()["message"] == t("no_file")


async def test_upload_into_foreign_session_is_not_found(client, auth_as, make_user, make_session, storage, create_row):
    auth_as()
    foreign = make_session(make_user().id)
    upload, _ = storage

    with patch.object(repository, "get_chat_session", AsyncMock(return_value=foreign)):
        response = await client.post(
            "/api/files/upload",
            data={"session_id": str(foreign.id)},
            files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
        )

    assert response.status_code == 404
    upload.assert_not_awaited()
    create_row.assert_not_awaited()


async def test_pdf_is_analyzed_and_marked_processed(client, auth_as, storage, create_row):
    auth_as()
    analysis = DocumentAnalysis(subject="Biology", topics=["Cells", "DNA"], summary="Intro to cells.")

    async def mark_processed(db, file_id, is_processed):
        row = create_row.await_args.kwargs
        return UploadedFile(id=file_id, is_processed=is_processed, created_at=datetime.now(timezone.utc), **row)

    with patch.object(pdf_processor, "extract_text", AsyncMock(return_value=ExtractionResult(text="Cells...", page_count=1))), \
         patch.object(ai_gateway, "analyze_document", AsyncMock(return_value=analysis)) as analyze, \
         patch.object(repository, "update_file_process_status", AsyncMock(side_effect=mark_processed)):
        response = await client.post("/api/files/upload", files={"file": ("bio.pdf", b"%PDF-1.4", "application/pdf")})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == t("upload_analyzed")
    assert body["analysis"] == {"subject": "Biology", "topics": ["Cells", "DNA"], "summary": "Intro to cells."}
    assert body["file"]["is_processed"] is True
    assert analyze.await_args.kwargs["file_name"] == "bio.pdf"


async def test_pdf_analysis_failure_still_reports_upload(client, auth_as, storage, create_row):
    auth_as()
    upload, _ = storage

    with patch.object(pdf_processor, "extract_text", AsyncMock(return_value=ExtractionResult(text="Cells...", page_count=1))), \
         patch.object(ai_gateway, "analyze_document", AsyncMock(side_effect=AIGatewayError(t("document_failed")))), \
         patch.object(repository, "update_file_process_status", AsyncMock()) as mark:
        response = await client.post("/api/files/upload", files={"file": ("bio.pdf", b"%PDF-1.4", "application/pdf")})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == t("upload_not_analyzed")
    assert body["analysis"] is None
    assert body["file"]["is_processed"] is False
    upload.assert_awaited_once()
    mark.assert_not_awaited()


async def test_storage_object_removed_when_row_insert_fails(client, auth_as, storage):
    auth_as()
    upload, delete = storage

    with patch.object(repository, "create_uploaded_file", AsyncMock(side_effect=RuntimeError("db down"))):
        response = await client.post("/api/files/upload", files={"file": ("notes.docx", b"word", DOCX)})

    assert response.status_code == 500
    delete.assert_awaited_once_with(upload.await_args.args[0])


async def test_list_files(client, auth_as, user):
    auth_as()
    rows = [
        _stored_file(user_id=user.id, session_id=None, file_name="a.pdf", file_path="k/a", file_size=10, mime_type="application/pdf"),
    ]

    with patch.object(repository, "list_user_files", AsyncMock(return_value=rows)):
        response = await client.get("/api/files")

    assert response.status_code == 200
    assert [f["file_name"] for f in response.json()] == ["a.pdf"]
