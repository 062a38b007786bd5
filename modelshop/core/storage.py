"""Local file storage for uploaded work-order and task documents."""

import shutil
import time
import uuid
from pathlib import Path
from typing import BinaryIO

from modelshop.core.config import settings
from modelshop.core.observability import get_logger

logger = get_logger(__name__)


class FileStorage:
    """
    Stores uploads under a directory and hands back the URL path they are
    served from.
    """

    def __init__(self, root: Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _unique_name(self, original_name: str | None) -> str:
        suffix = Path(original_name or "").suffix.lower()
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{suffix}"

    def save(self, stream: BinaryIO, original_name: str | None) -> str:
        """Copy ``stream`` into storage and return its retrievable path."""
        self.ensure_root()
        name = self._unique_name(original_name)
        target = self.root / name
        with target.open("wb") as out:
            shutil.copyfileobj(stream, out)

        path = f"{self.url_prefix}/{name}"
        logger.info(
            "File stored",
            original_name=original_name,
            stored_path=path,
            size_bytes=target.stat().st_size,
        )
        return path

    def resolve(self, path: str) -> Path:
        """Map a stored URL path back to its location on disk."""
        name = path.removeprefix(self.url_prefix).lstrip("/")
        return self.root / name

    def delete(self, path: str) -> None:
        """Remove a stored file; a file that is already gone is not an error."""
        self.resolve(path).unlink(missing_ok=True)
        logger.info("File removed", stored_path=path)


file_storage = FileStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
