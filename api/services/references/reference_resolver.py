# api/services/references/reference_resolver.py
"""
Turn free text (a search box entry or an editor line plus caret) into a
canonical reference string.

All grammar lives in the ReferenceMatcher; this module only narrows the
text around the caret and picks which candidate the user meant.
"""

import logging
from typing import Optional

from .reference_parser import (
    DisplayMode,
    ReferenceCandidate,
    ReferenceMatcher,
    ReferenceParseError,
    ReferenceParserMatcher,
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 25


class ReferenceResolver:
    """
    Resolve text to a canonical reference like "John 3:16".

    Usage:
        resolver = ReferenceResolver()

        # Search box: first reference in the text
        resolver.resolve("john 3:16")                # "John 3:16"

        # Editor: the reference under the caret
        line = "Compare Rom 8:28 with Gen 50:20"
        resolver.resolve(line, caret=line.index("50"))  # "Genesis 50:20"

    No match is a normal outcome and comes back as None.
    """

    def __init__(
        self,
        matcher: Optional[ReferenceMatcher] = None,
        window: int = DEFAULT_WINDOW,
        mode: DisplayMode = DisplayMode.FIRST,
    ):
        if window < 1:
            raise ValueError(f"window must be positive, got {window}")
        self.matcher = matcher or ReferenceParserMatcher()
        self.window = window
        self.mode = mode

    def resolve(self, text: Optional[str], caret: Optional[int] = None) -> Optional[str]:
        """
        Resolve text to a canonical reference.

        Args:
            text: Free text; may span several lines
            caret: Offset into text. When given, only a window around it
                   on the caret's line is searched, and the candidate must
                   contain the caret or end right at it.

        Returns:
            Canonical reference string, or None if nothing matched
        """
        if not text:
            return None

        if caret is None:
            candidates = self._find(text)
            if not candidates:
                logger.debug(f"No reference found in {text!r}")
                return None
            return self._canonicalize(candidates[0])

        fragment, loc = self._window(text, caret)
        for candidate in self._find(fragment):
            if candidate.begin <= loc <= candidate.end:
                return self._canonicalize(candidate)

        logger.debug(f"No reference at caret {caret} in {fragment!r}")
        return None

    def resolve_search(self, text: Optional[str]) -> Optional[str]:
        """Resolve a search box entry."""
        return self.resolve(text)

    def resolve_at_cursor(self, line: Optional[str], column: int) -> Optional[str]:
        """Resolve the reference under the cursor on a single editor line."""
        return self.resolve(line, caret=column)

    def _window(self, text: str, caret: int) -> tuple[str, int]:
        """
        Cut the caret's line down to ±window characters around the caret.

        Returns:
            (fragment, caret offset within fragment)
        """
        caret = max(0, min(caret, len(text)))

        line_start = text.rfind("\n", 0, caret) + 1
        line_end = text.find("\n", caret)
        if line_end == -1:
            line_end = len(text)

        begin = max(line_start, caret - self.window)
        end = min(line_end, caret + self.window)
        return text[begin:end], caret - begin

    def _find(self, text: str) -> list[ReferenceCandidate]:
        try:
            return list(self.matcher.find_candidates(text) or [])
        except ReferenceParseError as e:
            logger.debug(f"Matcher rejected {text!r}: {e}")
            return []

    def _canonicalize(self, candidate: ReferenceCandidate) -> Optional[str]:
        try:
            display = self.matcher.canonicalize(candidate, self.mode)
        except ReferenceParseError as e:
            logger.debug(f"Invalid reference {candidate.raw!r}: {e}")
            return None
        return display or None
