"""
History persistence.

Saves the lookup history to a JSON file so it survives restarts. The base
path can be configured via environment variable.

Directory structure:
    {PARALLEL_VERSIONS_PATH}/
    └── history.json
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from core import config
from .history_cache import HistoryCache

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "history.json"


class HistoryStorage:
    """
    Reads and writes the history file.

    A missing or unreadable file loads as an empty history; the next
    save overwrites it.
    """

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = Path(base_path or config.DATA_PATH)

    @property
    def history_path(self) -> Path:
        return self.base_path / HISTORY_FILENAME

    def load(self, capacity: Optional[int] = None) -> HistoryCache:
        """
        Load the saved history.

        Args:
            capacity: Capacity for the restored cache (defaults to config)

        Returns:
            HistoryCache, empty if nothing usable was saved
        """
        capacity = capacity or config.HISTORY_CAPACITY
        path = self.history_path
        if not path.exists():
            return HistoryCache(capacity)

        try:
            with open(path, encoding="utf-8") as f:
                saved = json.load(f)
            cache = HistoryCache.from_dict(saved["data"], capacity=capacity)
        except (json.JSONDecodeError, IOError, AttributeError, KeyError,
                TypeError, ValueError) as e:
            logger.warning(f"Failed to read history file {path}: {e}")
            return HistoryCache(capacity)

        logger.debug(f"Loaded {len(cache)} history entries from {path}")
        return cache

    def save(self, cache: HistoryCache) -> bool:
        """
        Write the history to disk.

        Written to a temp file and swapped in with os.replace().

        Returns:
            True if written, False on I/O error
        """
        path = self.history_path
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump({
                    "_saved_at": datetime.now().isoformat(),
                    "data": cache.to_dict(),
                }, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        except (IOError, OSError) as e:
            logger.warning(f"Failed to write history file {path}: {e}")
            return False

        logger.debug(f"Saved {len(cache)} history entries to {path}")
        return True

    def delete(self) -> None:
        if self.history_path.exists():
            self.history_path.unlink()
