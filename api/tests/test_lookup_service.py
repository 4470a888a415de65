"""
Tests for lookup_service.py - read-through lookups over the history cache.
"""

import os
import sys
import tempfile
import threading

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.cache import HistoryCache, HistoryStorage
from services.lookup_service import LookupService
from services.references import BibleGatewayClient
from verse_fixtures import FakeClient, JOHN_3_16_CODES, make_result, mock_session


def test_cold_then_warm_lookup():
    """Test that a second lookup is served from history."""
    print("\n=== Testing cold and warm lookup ===")

    session = mock_session()
    service = LookupService(client=BibleGatewayClient(session=session), history=HistoryCache())

    ref = service.resolve("For God so loved the world John 3:16 that...", caret=34)
    assert ref == "John 3:16"

    first = service.lookup(ref)
    assert session.get.call_count == 1
    assert [t.code for t in first.translations] == JOHN_3_16_CODES
    print("✓ Cold lookup fetches once and keeps page order")

    second = service.lookup(ref)
    assert session.get.call_count == 1
    assert second is first
    print("✓ Warm lookup makes no request and returns the same result")

    assert [e.reference for e in service.history_entries()] == ["John 3:16"]
    print("✓ Result recorded in history")


def test_failed_lookup_leaves_history():
    """Test that a failed fetch does not touch history."""
    print("\n=== Testing failed lookup ===")

    history = HistoryCache()
    history.put("Romans 8:28", make_result("Romans 8:28"))
    service = LookupService(
        client=BibleGatewayClient(session=mock_session(status_code=404, text="")),
        history=history,
    )

    assert service.lookup("John 3:16") is None
    assert history.get("John 3:16") is None
    assert history.references() == ["Romans 8:28"]
    print("✓ 404 gives None and history is unchanged")

    client = FakeClient(fail=True)
    service = LookupService(client=client, history=history)
    assert service.lookup("John 3:16") is None
    assert service.lookup("John 3:16") is None
    assert client.calls == ["John 3:16", "John 3:16"]
    print("✓ Failures are not cached; each lookup tries once")


def test_lookup_order_and_refresh():
    """Test that history order follows fetches."""
    print("\n=== Testing history order ===")

    client = FakeClient()
    service = LookupService(client=client, history=HistoryCache(capacity=2))

    service.lookup("John 3:16")
    service.lookup("Romans 8:28")
    service.lookup("John 3:16")
    assert service.history.references() == ["Romans 8:28", "John 3:16"]
    print("✓ Cache hits do not reorder history")

    service.lookup("Genesis 1:1")
    assert service.history.references() == ["Genesis 1:1", "Romans 8:28"]
    assert client.calls == ["John 3:16", "Romans 8:28", "Genesis 1:1"]
    print("✓ Oldest entry evicted at capacity")

    service.lookup("John 3:16")
    assert client.calls[-1] == "John 3:16"
    print("✓ Evicted reference is fetched again")


def test_blank_reference():
    print("\n=== Testing blank reference ===")

    client = FakeClient()
    service = LookupService(client=client, history=HistoryCache())
    assert service.lookup(None) is None
    assert service.lookup("") is None
    assert service.lookup("  ") is None
    assert client.calls == []
    print("✓ Blank reference makes no fetch")

    assert service.lookup("John 3:16 ").reference == "John 3:16"
    assert service.lookup(" John 3:16") is service.lookup("John 3:16")
    assert service.history.references() == ["John 3:16"]
    assert client.calls == ["John 3:16"]
    print("✓ Surrounding whitespace is stripped from the history key")


def test_lookup_text():
    """Test resolve + lookup in one call."""
    print("\n=== Testing lookup_text ===")

    client = FakeClient()
    service = LookupService(client=client, history=HistoryCache())

    result = service.lookup_text("see rom 8:28")
    assert result.reference == "Romans 8:28"
    assert client.calls == ["Romans 8:28"]
    print("✓ Text resolved then looked up")

    assert service.lookup_text("no reference here") is None
    assert client.calls == ["Romans 8:28"]
    print("✓ Unresolvable text makes no fetch")


def test_clear_history():
    print("\n=== Testing clear_history ===")

    client = FakeClient()
    service = LookupService(client=client, history=HistoryCache())
    service.lookup("John 3:16")
    service.clear_history()
    assert service.history.get("John 3:16") is None

    service.lookup("John 3:16")
    assert client.calls == ["John 3:16", "John 3:16"]
    print("✓ Cleared reference is fetched again")


def test_persistent_history():
    """Test that history is saved and restored through storage."""
    print("\n=== Testing persistent history ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        storage = HistoryStorage(base_path=tmpdir)

        service = LookupService(client=FakeClient(), storage=storage)
        service.lookup("John 3:16")
        service.lookup("Romans 8:28")
        assert storage.history_path.exists()
        print("✓ History saved after lookup")

        client = FakeClient()
        restored = LookupService(client=client, storage=storage)
        assert restored.history.references() == ["Romans 8:28", "John 3:16"]
        assert restored.lookup("John 3:16").reference == "John 3:16"
        assert client.calls == []
        print("✓ New service starts from saved history without fetching")

        restored.clear_history()
        assert len(LookupService(client=FakeClient(), storage=storage).history) == 0
        print("✓ Cleared history is saved")


def test_concurrent_lookups():
    """Test lookups from several threads sharing one service and storage."""
    print("\n=== Testing concurrent lookups ===")

    refs = [f"Psalm {n}:1" for n in range(1, 21)]

    with tempfile.TemporaryDirectory() as tmpdir:
        storage = HistoryStorage(base_path=tmpdir)
        service = LookupService(client=FakeClient(), history=HistoryCache(capacity=25), storage=storage)

        def worker(offset):
            for i in range(len(refs)):
                service.lookup(refs[(i + offset) % len(refs)])
                service.history_entries()

        threads = [threading.Thread(target=worker, args=(n * 5,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(service.history.references()) == sorted(refs)
        restored = storage.load(capacity=25)
        assert restored.references() == service.history.references()
        print("✓ Saved history matches memory after concurrent lookups")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Lookup Service Test Suite")
    print("=" * 60)

    test_cold_then_warm_lookup()
    test_failed_lookup_leaves_history()
    test_lookup_order_and_refresh()
    test_blank_reference()
    test_lookup_text()
    test_clear_history()
    test_persistent_history()
    test_concurrent_lookups()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
