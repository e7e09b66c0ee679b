"""File storage for uploaded product images."""

import logging
import os
import secrets
import time
from pathlib import Path
from werkzeug.utils import secure_filename

from errors import UploadError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


class UploadService:
    """Write uploaded files under a fixed directory served at /uploads."""

    def __init__(self, upload_dir):
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_name(original_name: str) -> str:
        """Millisecond timestamp plus a short random suffix, keeping the original extension."""
        ext = os.path.splitext(secure_filename(original_name or ""))[1].lower()
        return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"

    def store(self, file_bytes: bytes, original_name: str) -> str:
        """
        Save file bytes to the upload directory.

        Returns:
            str: Path the file is served at, e.g. /uploads/1700000000000-1a2b3c4d.jpg

        Raises:
            UploadError: no bytes were provided
        """
        if not file_bytes:
            raise UploadError("Image is required")

        filename = self.generate_name(original_name)
        path = self.upload_dir / filename
        # "xb" never overwrites an existing file
        with open(path, "xb") as f:
            f.write(file_bytes)

        logger.info(f"Stored upload {original_name!r} as {filename} ({len(file_bytes)} bytes)")
        return f"{UPLOAD_URL_PREFIX}/{filename}"

    def remove(self, served_path: str):
        """Delete a file previously returned by store(); missing files are ignored."""
        filename = served_path.rsplit("/", 1)[-1]
        (self.upload_dir / filename).unlink(missing_ok=True)
        logger.info(f"Removed upload {filename}")
