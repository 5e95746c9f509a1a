"""Public avatar upload endpoint.

Images are written to <PUBLIC_UPLOAD_PATH>/avatars and served by the
/public static mount in main.py.
"""

import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from ..config import get_settings
from ..domain.documents import MAX_AVATAR_SIZE, is_avatar_mime_type
from ..observability.metrics import documents_rejected_total
from .schemas import AvatarUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/file-handle", tags=["File Handle"])

AVATAR_FOLDER = "avatars"

_EXTENSIONS_BY_MIME = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def avatar_filename(original_filename: Optional[str], content_type: str) -> str:
    """``{epoch_ms}-{random}{ext}``, keeping the client extension when it is an image one."""
    ext = os.path.splitext(original_filename or "")[1].lower()
    if ext not in _EXTENSIONS_BY_MIME.values() and ext != ".jpeg":
        ext = _EXTENSIONS_BY_MIME[content_type]
    return f"{int(time.time() * 1000)}-{secrets.randbelow(1_000_000_000)}{ext}"


@router.post("/image/avatar", response_model=AvatarUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_avatar(file: Optional[UploadFile] = File(None)):
    """Upload a company logo or profile avatar (no authentication).

    Raises:
        HTTPException 400: No file, or not a JPEG/PNG/GIF/WEBP image
        HTTPException 413: Image larger than 5 MB
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    if not is_avatar_mime_type(file.content_type):
        documents_rejected_total.labels(reason="mime_type").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only images allowed")

    content = file.file.read()
    if len(content) > MAX_AVATAR_SIZE:
        documents_rejected_total.labels(reason="size").inc()
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image too large. Maximum size is {MAX_AVATAR_SIZE // (1024 * 1024)} MB",
        )

    folder = Path(get_settings().PUBLIC_UPLOAD_PATH) / AVATAR_FOLDER
    folder.mkdir(parents=True, exist_ok=True)

    filename = avatar_filename(file.filename, file.content_type)
    (folder / filename).write_bytes(content)

    logger.info(f"Avatar uploaded: {filename} ({len(content)} bytes)")
    return AvatarUploadResponse(filename=filename, url=f"/public/{AVATAR_FOLDER}/{filename}")
