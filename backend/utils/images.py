# backend/utils/images.py
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import UploadFile

from config import settings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpeg", "png", "jpg", "gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/jpg"}


def _extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def _size_in_bytes(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    pos = upload.file.tell()
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(pos)
    return size


class ImageStore:
    """
    Product image files kept in one flat directory.

    A product owns at most one file here; NO_IMAGE is the sentinel for
    "nothing uploaded" and is never written or removed.
    """

    def __init__(self, directory, sentinel: str = "noimg.jpg", max_kb: int = 2048):
        self.directory = Path(directory)
        self.sentinel = sentinel
        self.max_kb = max_kb

    def is_sentinel(self, filename: Optional[str]) -> bool:
        return not filename or filename == self.sentinel

    def path_for(self, filename: str) -> Path:
        # Stored names never contain separators; strip anything path-like
        return self.directory / Path(filename).name

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def exists(self, filename: str) -> bool:
        return not self.is_sentinel(filename) and self.path_for(filename).is_file()

    def validate(self, upload: UploadFile) -> List[str]:
        """Return validation messages for the upload; empty when acceptable."""
        errors = []
        ext = _extension(upload.filename)
        if ext not in ALLOWED_EXTENSIONS or (
            upload.content_type and upload.content_type not in ALLOWED_CONTENT_TYPES
        ):
            errors.append("The image must be a file of type: jpeg, png, jpg, gif.")
        if _size_in_bytes(upload) > self.max_kb * 1024:
            errors.append(f"The image may not be greater than {self.max_kb} kilobytes.")
        return errors

    def save(self, upload: UploadFile) -> str:
        """Write the upload under a fresh unique name and return that name."""
        self.ensure_directory()
        filename = f"{uuid.uuid4().hex}.{_extension(upload.filename)}"
        try:
            upload.file.seek(0)
            with open(self.path_for(filename), "wb") as buffer:
                shutil.copyfileobj(upload.file, buffer)
        finally:
            upload.file.close()
        logger.info("Stored product image %s", filename)
        return filename

    def delete(self, filename: Optional[str]) -> bool:
        """Best-effort removal. Returns True only if a file was removed."""
        if self.is_sentinel(filename):
            return False
        try:
            self.path_for(filename).unlink()
        except FileNotFoundError:
            logger.warning("Product image %s already missing", filename)
            return False
        except OSError as e:
            logger.error(f"Failed to remove product image {filename}: {e}")
            return False
        return True

    def replace(self, old_filename: Optional[str], upload: UploadFile) -> str:
        # Old file goes first; the new one is written even if removal fails
        if not self.is_sentinel(old_filename):
            self.delete(old_filename)
        return self.save(upload)


def image_errors(store: ImageStore, upload: Optional[UploadFile]) -> Dict[str, List[str]]:
    if upload is None:
        return {}
    messages = store.validate(upload)
    return {"image": messages} if messages else {}


def get_image_store() -> ImageStore:
    return ImageStore(settings.UPLOAD_DIR, sentinel=settings.NO_IMAGE, max_kb=settings.MAX_IMAGE_KB)
