"""Flat-file persistence for extracted pages.

The whole page collection is stored as one JSON document: a list of
``{"title": ..., "paragraphs": [...]}`` objects in insertion order. There
is no schema version and no incremental update; every save rewrites the
file.

Saves are transactional. The new document is written to a temporary
file in the same directory, flushed to disk, and then renamed over the
target with ``os.replace``, so an interrupted save leaves the previous
file intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from . import config
from .errors import PersistenceError
from .models import Page

logger = logging.getLogger(__name__)


class PageStore:
    def __init__(self, path: str = config.STORE_PATH) -> None:
        self.path = Path(path)

    def load(self) -> List[Page]:
        """Return the saved pages, or an empty list if there are none.

        A missing or undecodable file is treated as "no saved pages".
        """
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("Page file does not contain a list")
            return [Page.from_dict(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable page file %s: %s", self.path, exc)
            return []

    def save(self, pages: Iterable[Page]) -> None:
        """Replace the page file with ``pages``.

        Raises ``PersistenceError`` if the file cannot be written.
        """
        payload = [page.to_dict() for page in pages]
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc
        logger.debug("Saved %d pages to %s", len(payload), self.path)
