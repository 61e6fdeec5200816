"""
Local image storage for player and team pictures
"""
import logging
import uuid
from pathlib import Path

from app.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

UPLOAD_URL_PREFIX = "/uploads"


class ImageUploadError(ValueError):
    pass


def upload_root() -> Path:
    return Path(settings.UPLOAD_DIR)


def save_image(content: bytes, content_type: str, kind: str) -> str:
    """
    Write an uploaded image under UPLOAD_DIR/<kind>/ and return its public URL.
    kind is "players" or "teams".
    """
    ext = ALLOWED_IMAGE_TYPES.get(content_type)
    if ext is None:
        raise ImageUploadError(
            f"Unsupported image type '{content_type}'. Allowed: {', '.join(ALLOWED_IMAGE_TYPES)}"
        )
    if not content:
        raise ImageUploadError("Image file is empty")
    if len(content) > settings.MAX_IMAGE_BYTES:
        raise ImageUploadError(f"Image exceeds {settings.MAX_IMAGE_BYTES:,} bytes")

    folder = upload_root() / kind
    folder.mkdir(parents=True, exist_ok=True)
    filename = f"{uuid.uuid4().hex}.{ext}"
    (folder / filename).write_bytes(content)

    logger.info("Stored %s image %s (%s bytes)", kind, filename, len(content))
    return f"{UPLOAD_URL_PREFIX}/{kind}/{filename}"
