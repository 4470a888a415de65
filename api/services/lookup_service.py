# api/services/lookup_service.py
"""
Parallel verse lookup with a read-through history.

Ties together the reference resolver, the Bible Gateway client and the
history cache. Callers resolve text to a reference, then look it up;
repeated lookups are served from history without touching the network.
"""

import logging
import threading
from typing import Optional

from core import config
from services.cache import HistoryCache, HistoryEntry, HistoryStorage
from services.references import BibleGatewayClient, LookupResult, ReferenceResolver

logger = logging.getLogger(__name__)


class LookupService:
    """
    Entry point for verse lookups.

    Usage:
        service = LookupService()

        ref = service.resolve("For God so loved the world John 3:16", caret=34)
        result = service.lookup(ref)
        for record in result.translations:
            print(f"{record.label}: {record.text}")

        # History, most recent first
        for entry in service.history.entries():
            print(entry.reference)

    With a HistoryStorage the history is loaded on construction and saved
    after every change. One instance may serve concurrent requests; history
    writes and saves are serialized, fetches are not.
    """

    def __init__(
        self,
        client: Optional[BibleGatewayClient] = None,
        history: Optional[HistoryCache] = None,
        resolver: Optional[ReferenceResolver] = None,
        storage: Optional[HistoryStorage] = None,
    ):
        self.client = client or BibleGatewayClient()
        self.resolver = resolver or ReferenceResolver(window=config.REFERENCE_WINDOW)
        self.storage = storage
        self._write_lock = threading.Lock()

        if history is not None:
            self._history = history
        elif storage is not None:
            self._history = storage.load(config.HISTORY_CAPACITY)
        else:
            self._history = HistoryCache(config.HISTORY_CAPACITY)

    @property
    def history(self) -> HistoryCache:
        return self._history

    def resolve(self, text: Optional[str], caret: Optional[int] = None) -> Optional[str]:
        """
        Resolve free text to a canonical reference.

        Args:
            text: Search input, or an editor line when caret is given
            caret: Caret offset into text

        Returns:
            Canonical reference, or None if no valid reference was found
        """
        return self.resolver.resolve(text, caret)

    def lookup(self, reference: Optional[str]) -> Optional[LookupResult]:
        """
        Look up all parallel translations of a verse.

        Served from history when present; otherwise fetched once and
        added to history. A failed fetch leaves history untouched.

        Args:
            reference: Canonical reference from resolve()

        Returns:
            LookupResult, or None if the fetch failed
        """
        reference = (reference or "").strip()
        if not reference:
            return None

        cached = self._history.get(reference)
        if cached is not None:
            logger.debug(f"History hit for {reference}")
            return cached

        result = self.client.fetch(reference)
        if result is None:
            logger.info(f"No parallel versions for {reference}")
            return None

        with self._write_lock:
            self._history.put(reference, result)
            self._save()
        return result

    def lookup_text(
        self, text: Optional[str], caret: Optional[int] = None
    ) -> Optional[LookupResult]:
        """Resolve text and look up the reference it contains."""
        reference = self.resolve(text, caret)
        if reference is None:
            return None
        return self.lookup(reference)

    def history_entries(self) -> tuple[HistoryEntry, ...]:
        return self._history.entries()

    def clear_history(self) -> None:
        with self._write_lock:
            self._history.clear()
            self._save()

    def _save(self) -> None:
        if self.storage is not None:
            self.storage.save(self._history)
