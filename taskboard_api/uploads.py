"""
Profile image uploads, stored on local disk and served under /uploads.
"""

import logging
import os
import re
import time

from fastapi import UploadFile

from taskboard_core.constants import ALLOWED_IMAGE_TYPES, DEFAULT_UPLOAD_DIR
from taskboard_core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_upload_dir: str = DEFAULT_UPLOAD_DIR


def init_uploads(upload_dir: str) -> str:
    """Set and create the upload directory. Returns its path."""
    global _upload_dir
    _upload_dir = upload_dir
    os.makedirs(_upload_dir, exist_ok=True)
    return _upload_dir


def get_upload_dir() -> str:
    return _upload_dir


def save_image(image: UploadFile) -> str:
    """Validate and write an uploaded image. Returns the stored filename."""
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Only JPEG, PNG, and GIF are allowed.")

    safe_name = re.sub(r"[^a-zA-Z0-9._-]+", "_", image.filename or "image")
    filename = f"{int(time.time() * 1000)}-{safe_name}"

    os.makedirs(_upload_dir, exist_ok=True)
    with open(os.path.join(_upload_dir, filename), "wb") as f:
        f.write(image.file.read())

    logger.info("Stored uploaded image %s", filename)
    return filename
