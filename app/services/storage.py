"""
Object storage service

Uploads gallery images, certificate files and stall attachments to
Cloudinary and returns their public URL.
"""

import os
import uuid
import logging
from io import BytesIO
from typing import Iterable, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.exceptions

from app.core.config import settings
from app.core.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)


def _configure() -> None:
    if not settings.CLOUDINARY_CLOUD_NAME:
        raise ExternalServiceError("object_store", "Object storage is not configured")

    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


def validate_upload(data: bytes, content_type: Optional[str], allowed_types: Iterable[str]) -> None:
    """Reject empty, oversized or unexpected files before they reach the store"""
    allowed = list(allowed_types)
    if not data:
        raise ValidationError("Uploaded file is empty", field="file")

    if len(data) > settings.max_upload_bytes:
        raise ValidationError(
            f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_SIZE_MB}MB",
            field="file"
        )

    if content_type not in allowed:
        raise ValidationError(
            f"Invalid file type. Allowed types: {', '.join(allowed)}",
            field="file"
        )


def build_path(prefix: str, filename: Optional[str]) -> str:
    """Unique object path under ``prefix``, keeping the original extension"""
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{prefix.strip('/')}/{uuid.uuid4().hex}{ext}"


def upload(path: str, data: bytes, content_type: Optional[str] = None) -> str:
    """Upload bytes to ``path`` and return the public URL"""
    _configure()

    # Images are transformed by Cloudinary; everything else is stored as-is
    is_image = bool(content_type and content_type.startswith("image/"))
    resource_type = "image" if is_image else "raw"
    public_id = os.path.splitext(path)[0] if is_image else path

    try:
        result = cloudinary.uploader.upload(
            BytesIO(data),
            public_id=public_id,
            folder=settings.CLOUDINARY_FOLDER,
            resource_type=resource_type,
            use_filename=False,
            unique_filename=False,
            overwrite=True,
        )
    except cloudinary.exceptions.Error as e:
        logger.error(f"Error uploading {path} to Cloudinary: {e}")
        raise ExternalServiceError("object_store") from e

    url = result["secure_url"]
    logger.info(f"Uploaded {path} ({len(data)} bytes) to {url}")
    return url
