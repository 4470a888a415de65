"""
Cache Services

Bounded history of verse lookups and its JSON persistence.
"""

from .history_cache import DEFAULT_CAPACITY, HistoryCache, HistoryEntry
from .history_storage import HistoryStorage

__all__ = ["DEFAULT_CAPACITY", "HistoryCache", "HistoryEntry", "HistoryStorage"]
