"""File upload to Supabase Storage.

Files are stored under ``<epoch-millis>-<original name>`` in the configured
bucket and addressed by their public URL.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from app.core.config import settings
from app.core.exceptions import InvalidRequestError
from app.models.upload import UploadResponse

logger = logging.getLogger(__name__)


class FileTooLargeError(InvalidRequestError):
    """Upload exceeds ``settings.MAX_UPLOAD_BYTES``."""


def storage_name(original_name: str) -> str:
    """Return the object key for *original_name*."""
    base = original_name.replace("/", "_").replace("\\", "_") or "upload"
    return f"{int(time.time() * 1000)}-{base}"


def upload_file(
    client: Any,
    content: bytes,
    filename: str,
    content_type: str | None = None,
    bucket: str | None = None,
    max_bytes: int | None = None,
) -> UploadResponse:
    """Store *content* and return its public URL.

    The size limit is checked before anything is written.
    """
    limit = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES
    if len(content) > limit:
        raise FileTooLargeError(f"File exceeds the {limit // (1024 * 1024)}MB limit")

    bucket_name = bucket or settings.STORAGE_BUCKET
    key = storage_name(filename)
    store = client.storage.from_(bucket_name)
    store.upload(
        key,
        content,
        {"content-type": content_type or "application/octet-stream"},
    )
    public_url = store.get_public_url(key)

    logger.info(
        "file_uploaded",
        extra={"bucket": bucket_name, "object_key": key, "size": len(content)},
    )
    return UploadResponse(url=public_url, file_name=key, size=len(content))
