"""Local directory media store."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from live_grouping.exceptions import MediaUploadError
from live_grouping.models import LocalFile

logger = logging.getLogger(__name__)


class LocalMediaStore:
    """Store uploaded files in a directory and serve them under a URL prefix."""

    def __init__(self, media_dir: str | Path, base_url: str = "/media") -> None:
        self.media_dir = Path(media_dir)
        self.media_dir.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def upload_image(self, file: LocalFile) -> dict[str, str]:
        """Write the file and return its public URL."""
        name = f"{uuid.uuid4().hex}{Path(file.filename).suffix.lower()}"
        try:
            (self.media_dir / name).write_bytes(file.content)
        except OSError as exc:
            raise MediaUploadError(f"Upload of {file.filename} failed: {exc}") from exc
        logger.debug("Stored %s as %s", file.filename, name)
        return {"url": f"{self.base_url}/{name}"}
