"""File upload endpoint used for ``file`` fields of application forms."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.core.config import settings
from app.db.supabase import SupabaseBackend, get_supabase
from app.models.upload import UploadResponse
from app.services.storage import FileTooLargeError, upload_file

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload(
    file: UploadFile | None = File(default=None),
    client: SupabaseBackend = Depends(get_supabase),
) -> UploadResponse:
    """Store one file (at most ``MAX_UPLOAD_BYTES``) and return its URL."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    # One byte past the limit is enough to detect an oversize file
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    try:
        return upload_file(client, content, file.filename, file.content_type)
    except FileTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    except Exception as exc:
        logger.error(
            "file_upload_failed",
            extra={"file_name": file.filename, "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to upload file") from exc
