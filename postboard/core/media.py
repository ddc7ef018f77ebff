# postboard/core/media.py

import os
import time
import uuid
import shutil
import logging
from pathlib import Path
from fastapi import UploadFile
from postboard.config import settings


logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif"}
ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/gif"}


def image_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def validate_image(upload: UploadFile) -> list[str]:
    """
    Returns the validation messages for an uploaded image (empty when valid).
    """
    errors = []
    if image_extension(upload.filename) not in ALLOWED_IMAGE_EXTENSIONS:
        errors.append("The image must be a file of type: png, jpg, jpeg, gif.")
    elif upload.content_type and upload.content_type not in ALLOWED_IMAGE_TYPES:
        errors.append("The image must be an image.")
    return errors


class MediaStorage:
    """
    Stores uploaded images on local disk. Posts keep only the returned
    filename; the public URL is derived from it.
    """

    def __init__(self, root: Path | None = None, base_url: str | None = None):
        self.root = Path(root or settings.images_dir)
        self.base_url = (base_url or settings.app_url).rstrip("/")

    def save(self, upload: UploadFile) -> str:
        os.makedirs(self.root, exist_ok=True)
        name = f"{int(time.time())}-{uuid.uuid4().hex}.{image_extension(upload.filename)}"
        path = self.root / name
        with path.open("wb") as buffer:
            shutil.copyfileobj(upload.file, buffer)
        logger.debug("Stored image %s", name)
        return name

    def delete(self, name: str | None) -> bool:
        if not name:
            return False
        path = self.root / name
        if path.exists():
            os.remove(path)
            logger.debug("Removed image %s", name)
            return True
        return False

    def url(self, name: str | None) -> str | None:
        if not name:
            return None
        return f"{self.base_url}/images/{name}"


def get_media_storage() -> MediaStorage:
    return MediaStorage()
