"""
Managed upload namespace: files written under UPLOAD_DIR and served at /uploads/.
"""

import logging
import os
import random
import time
from typing import Optional

from config.database_config import UPLOAD_URL_PREFIX

logger = logging.getLogger(__name__)


def generate_filename(extension: str, prefix: str = "") -> str:
    """Collision-resistant name: ``<prefix><millis>-<random 0..1e9><extension>``."""
    millis = int(time.time() * 1000)
    return f"{prefix}{millis}-{random.randint(0, 10**9)}{extension}"


class LocalUploadStore:
    """Writes uploaded images to a local directory."""

    def __init__(self, directory: str, url_prefix: str = UPLOAD_URL_PREFIX):
        self.directory = directory
        self.url_prefix = url_prefix

    def ensure_directory(self) -> None:
        os.makedirs(self.directory, exist_ok=True)

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}{filename}"

    def owns(self, url: Optional[str]) -> bool:
        return bool(url) and url.startswith(self.url_prefix)

    def path_for(self, url: str) -> Optional[str]:
        """Local path behind an /uploads/ URL, or None if it escapes the directory."""
        if not self.owns(url):
            return None
        name = url[len(self.url_prefix):]
        if not name or name != os.path.basename(name) or name in (".", ".."):
            return None
        return os.path.join(self.directory, name)

    def save(self, filename: str, data: bytes) -> str:
        """Write ``data`` synchronously and return its public URL."""
        self.ensure_directory()
        with open(os.path.join(self.directory, filename), "wb") as f:
            f.write(data)
        return self.url_for(filename)

    def remove(self, url: str) -> bool:
        """Best-effort delete. Failures are logged, never raised."""
        path = self.path_for(url)
        if path is None:
            logger.warning(f"Refusing to delete file outside upload directory: {url}")
            return False
        try:
            os.remove(path)
            return True
        except OSError as e:
            logger.error(f"Error deleting file: {e}")
            return False
