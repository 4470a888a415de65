"""
Tests for reference_resolver.py - search and caret resolution.
"""

import os
import sys

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.references import (
    DisplayMode,
    ReferenceCandidate,
    ReferenceMatcher,
    ReferenceParseError,
    ReferenceResolver,
)


class RecordingMatcher(ReferenceMatcher):
    """Matcher that records the text it was asked to search."""

    def __init__(self, candidates=None, display="John 3:16", error=None):
        self.candidates = candidates or []
        self.display = display
        self.error = error
        self.searched = []

    def find_candidates(self, text):
        self.searched.append(text)
        return self.candidates

    def canonicalize(self, candidate, mode=DisplayMode.FULL):
        if self.error:
            raise self.error
        return self.display


def test_resolve_search():
    """Test resolving a search box entry."""
    print("\n=== Testing resolve without caret ===")

    resolver = ReferenceResolver()
    assert resolver.resolve("John 3:16") == "John 3:16"
    assert resolver.resolve("jn 3:16") == "John 3:16"
    assert resolver.resolve_search("rom 8:28") == "Romans 8:28"
    print("✓ Single references canonicalize")

    assert resolver.resolve("read john 3:16-18 and Rom 8:28") == "John 3:16"
    print("✓ First candidate wins, first verse of a range")


def test_resolve_no_match():
    """Test that non-matching input gives None, never an exception."""
    print("\n=== Testing resolve with no match ===")

    resolver = ReferenceResolver()
    for text in [None, "", "   ", "hello world", "1234", "::", "Foo 1:1", "\n\n"]:
        assert resolver.resolve(text) is None, f"{text!r} should not resolve"
        assert resolver.resolve(text, caret=2) is None
    print("✓ Empty, plain and invalid text give None")


def test_resolve_at_caret():
    """Test the reference under the caret."""
    print("\n=== Testing resolve with caret ===")

    resolver = ReferenceResolver()
    text = "For God so loved the world John 3:16 that..."

    caret = text.index("3:16") + 2
    assert resolver.resolve(text, caret) == "John 3:16"
    print("✓ Caret inside the verse numbers")

    assert resolver.resolve(text, text.index("John")) == "John 3:16"
    assert resolver.resolve(text, text.index("3:16") + 4) == "John 3:16"
    print("✓ Caret at the start and right at the end")

    assert resolver.resolve(text, text.index("world") + 1) is None
    assert resolver.resolve(text, text.index("that") + 2) is None
    print("✓ Caret away from the reference gives None")


def test_resolve_picks_reference_under_caret():
    print("\n=== Testing caret with several references ===")

    resolver = ReferenceResolver()
    line = "Compare Rom 8:28 with Gen 50:20"
    assert resolver.resolve(line, line.index("8:28")) == "Romans 8:28"
    assert resolver.resolve(line, line.index("50")) == "Genesis 50:20"
    assert resolver.resolve_at_cursor(line, len(line)) == "Genesis 50:20"
    print("✓ Each caret position picks its own reference")


def test_resolve_caret_lines():
    """Test that only the caret's line is searched."""
    print("\n=== Testing caret line clipping ===")

    resolver = ReferenceResolver()
    text = "John 3:16\nnothing here\nRom 8:28"
    assert resolver.resolve(text, text.index("nothing") + 3) is None
    assert resolver.resolve(text, text.index("Rom") + 1) == "Romans 8:28"
    assert resolver.resolve(text, 2) == "John 3:16"
    print("✓ References on other lines are ignored")


def test_resolve_caret_clamped():
    print("\n=== Testing out-of-range caret ===")

    resolver = ReferenceResolver()
    assert resolver.resolve("John 3:16", 1000) == "John 3:16"
    assert resolver.resolve("John 3:16", -5) == "John 3:16"
    print("✓ Caret is clamped to the text")


def test_window():
    """Test the window handed to the matcher."""
    print("\n=== Testing caret window ===")

    matcher = RecordingMatcher()
    resolver = ReferenceResolver(matcher=matcher, window=25)
    line = "x" * 100 + "\n" + "y" * 100
    resolver.resolve(line, 50)
    assert matcher.searched[-1] == "x" * 50
    print("✓ Window is ±25 characters")

    resolver.resolve(line, 10)
    assert matcher.searched[-1] == "x" * 35
    resolver.resolve(line, 95)
    assert matcher.searched[-1] == "x" * 30
    print("✓ Window is clipped to line boundaries")

    resolver.resolve(line, 105)
    assert matcher.searched[-1] == "y" * 29
    print("✓ Window stays on the caret's line")


def test_custom_matcher():
    """Test delegation to a custom matcher."""
    print("\n=== Testing custom matcher ===")

    candidate = ReferenceCandidate(0, 4, "JN316")
    resolver = ReferenceResolver(matcher=RecordingMatcher([candidate], display="John 3:16"))
    assert resolver.resolve("JN316") == "John 3:16"
    print("✓ Matcher output is returned")

    resolver = ReferenceResolver(matcher=RecordingMatcher([candidate], display=None))
    assert resolver.resolve("JN316") is None
    resolver = ReferenceResolver(matcher=RecordingMatcher([candidate], display=""))
    assert resolver.resolve("JN316") is None
    print("✓ Matcher reporting no valid reference gives None")

    resolver = ReferenceResolver(
        matcher=RecordingMatcher([candidate], error=ReferenceParseError("bad"))
    )
    assert resolver.resolve("JN316") is None
    assert resolver.resolve("JN316", caret=2) is None
    print("✓ ReferenceParseError gives None")


def test_invalid_window():
    print("\n=== Testing invalid window ===")

    try:
        ReferenceResolver(window=0)
        assert False, "Should have raised ValueError"
    except ValueError:
        print("✓ Non-positive window rejected")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Reference Resolver Test Suite")
    print("=" * 60)

    test_resolve_search()
    test_resolve_no_match()
    test_resolve_at_caret()
    test_resolve_picks_reference_under_caret()
    test_resolve_caret_lines()
    test_resolve_caret_clamped()
    test_window()
    test_custom_matcher()
    test_invalid_window()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
