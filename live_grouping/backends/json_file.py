"""JSON file document backend."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from live_grouping.backends.base import MediaBackend
from live_grouping.backends.memory import InMemoryBackend
from live_grouping.exceptions import BackendError

logger = logging.getLogger(__name__)


class JsonFileBackend(InMemoryBackend):
    """Document backend persisted to a single JSON file.

    The file is rewritten after every committed mutation (temp file +
    replace) and loaded when the backend starts.
    """

    FILENAME = "live_grouping.json"

    def __init__(
        self,
        data_dir: str | Path,
        pretty: bool = False,
        media: MediaBackend | None = None,
    ) -> None:
        """Initialize JSON file backend.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding the document file.
        pretty : bool
            Pretty-print JSON output.
        media : MediaBackend | None
            Host for gallery images and brochures.
        """
        super().__init__(media=media)
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self.path = self.data_dir / self.FILENAME
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise BackendError(f"Cannot read {self.path}: {exc}") from exc

        self._projects = data.get("projects", {})
        self._towers = data.get("towers", {})
        self._units = data.get("units", {})
        logger.debug("Loaded %d projects from %s", len(self._projects), self.path)

    def _persist(self) -> None:
        data = {"projects": self._projects, "towers": self._towers, "units": self._units}
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=".live_grouping-", suffix=".json")
        except OSError as exc:
            raise BackendError(f"Cannot write {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(data, f, indent=2, ensure_ascii=False, default=str)
                else:
                    json.dump(data, f, ensure_ascii=False, default=str)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise BackendError(f"Cannot write {self.path}: {exc}") from exc
