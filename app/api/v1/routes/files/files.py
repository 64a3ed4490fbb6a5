# app/api/v1/routes/files/files.py

import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.user import User
from app.schemas.case_files import CaseFileCreate, CaseFileOut, StoredFileOut
from app.services.catalog import case_file_service
from app.services.storage_service import public_url, resolve_path, store_bytes
from app.utils.enums import Role

router = APIRouter(tags=["files"])

logger = get_logger("routes.files")

admin_only = require_roles(Role.admin)

CASE_FILE_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/html",
    "image/png",
    "image/jpeg",
    "image/gif",
}


async def _read_upload(file: Optional[UploadFile]) -> bytes:
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")
    return await file.read()


@router.post("/upload", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def upload_file(file: UploadFile = File(None)):
    content = await _read_upload(file)
    key = await store_bytes(data=content, filename=file.filename)
    stored = StoredFileOut(
        filename=key.rsplit("/", 1)[-1],
        url=public_url(key=key),
        size=len(content),
        type=file.content_type,
    )
    logger.info(f"Uploaded {file.filename} as {key}")
    return success_response(msg="File uploaded successfully", data=stored)


@router.post(
    "/upload/case-file",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseModel,
)
async def upload_case_file(
    file: UploadFile = File(None),
    description: Optional[str] = Form(None),
    current_user: User = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    content = await _read_upload(file)
    if file.content_type not in CASE_FILE_MIME_TYPES:
        raise ValidationError(
            "File type not allowed. Please upload PDF, DOC, DOCX, TXT, HTML, or image files."
        )

    key = await store_bytes(data=content, filename=file.filename)
    stored_path = resolve_path(key=key)
    case_file = await case_file_service.create_case_file(
        db,
        CaseFileCreate(
            filename=key.rsplit("/", 1)[-1],
            original_name=file.filename,
            filepath=str(stored_path) if stored_path else key,
            url=public_url(key=key),
            filesize=len(content),
            mime_type=file.content_type,
            description=description or None,
        ),
        uploaded_by=current_user.id,
    )
    return success_response(
        msg="Case file uploaded successfully",
        data=CaseFileOut.model_validate(case_file),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/files/{file_path:path}")
async def serve_file(file_path: str):
    path = resolve_path(key=file_path)
    if path is None:
        raise NotFoundError("File not found")

    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(
        path,
        media_type=media_type,
        headers={"Cache-Control": f"public, max-age={settings.FILE_CACHE_MAX_AGE}"},
    )
