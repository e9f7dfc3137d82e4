"""
Device-local draft cache.

Each user has a single slot holding their in-progress submission, so a
refresh or a dropped connection never loses wizard input. Slots are plain
JSON files named after the storage key.
"""

import json
import logging
import os
from pathlib import Path

from client.config import client_settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "propertyDraft_"


def draft_key(user_id: int | str) -> str:
    return f"{KEY_PREFIX}{user_id}"


class LocalDraftStore:
    def __init__(self, cache_dir: str | Path | None = None):
        self.cache_dir = Path(cache_dir or client_settings.cache_dir)

    def _path(self, user_id: int | str) -> Path:
        return self.cache_dir / f"{draft_key(user_id)}.json"

    def load(self, user_id: int | str) -> dict | None:
        path = self._path(user_id)
        if not path.exists():
            return None
        try:
            with path.open(encoding="utf-8") as f:
                draft = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable draft cache {path.name}: {e}")
            return None
        if not isinstance(draft, dict):
            logger.warning(f"Ignoring malformed draft cache {path.name}")
            return None
        return draft

    def save(self, user_id: int | str, draft: dict) -> None:
        """Write the slot atomically: readers see the old or the new draft, never half."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(user_id)
        tmp = path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(draft, f, ensure_ascii=False)
        os.replace(tmp, path)

    def clear(self, user_id: int | str) -> None:
        self._path(user_id).unlink(missing_ok=True)
