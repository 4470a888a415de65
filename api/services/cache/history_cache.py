"""
History Cache

Bounded, most-recent-first history of verse lookups, keyed by canonical
reference. Writing a reference moves it to the front; reading does not.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional

from services.references.gateway_client import LookupResult

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 25


@dataclass(frozen=True)
class HistoryEntry:
    """A previous lookup."""
    reference: str
    result: LookupResult

    def to_dict(self) -> Dict[str, Any]:
        return {"reference": self.reference, "result": self.result.to_dict()}


class HistoryCache:
    """
    Capacity-bounded lookup history.

    At most one entry per reference. put() inserts at the front and
    evicts from the back; get() leaves the order alone. Safe to share
    between request threads.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        # Front (first) is the most recent entry
        self._entries: "OrderedDict[str, LookupResult]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, reference: str) -> bool:
        with self._lock:
            return reference in self._entries

    def get(self, reference: str) -> Optional[LookupResult]:
        """Get the cached result for a reference, without touching recency."""
        with self._lock:
            return self._entries.get(reference)

    def put(self, reference: str, result: LookupResult) -> None:
        """Store a result as the most recent entry, replacing any older one."""
        with self._lock:
            self._entries.pop(reference, None)
            self._entries[reference] = result
            self._entries.move_to_end(reference, last=False)

            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=True)
                logger.debug(f"Evicted {evicted} from history")

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {count} history entries")

    def entries(self) -> tuple[HistoryEntry, ...]:
        """Snapshot of the history, most recent first."""
        with self._lock:
            items = list(self._entries.items())
        return tuple(HistoryEntry(reference, result) for reference, result in items)

    def references(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize capacity and entries (most recent first)."""
        return {
            "capacity": self._capacity,
            "entries": [entry.to_dict() for entry in self.entries()],
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], capacity: Optional[int] = None
    ) -> "HistoryCache":
        """
        Restore a history saved with to_dict().

        Args:
            data: Serialized history
            capacity: Overrides the saved capacity; when smaller, only the
                      most recent entries are kept

        Raises:
            AttributeError, KeyError, TypeError, ValueError: On malformed data
        """
        cache = cls(capacity or data.get("capacity") or DEFAULT_CAPACITY)
        # Saved most recent first, so load oldest first
        for item in reversed(data.get("entries", [])):
            result = LookupResult.from_dict(item["result"])
            cache.put(item.get("reference") or result.reference, result)
        return cache
