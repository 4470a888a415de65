# api/services/references/reference_parser.py
"""
Scripture reference parser and default reference matcher.

Handles the formats people actually type into notes:
- Full names: "Genesis 1:1"
- Abbreviations: "Gen 1:1", "Gen. 1:1"
- Numbered books: "1 John 3:16", "1John 3:16", "I John 3:16"
- Verse ranges: "Genesis 1:1-3"
- Chapter-only: "Psalm 23" (full book names only, to avoid false positives)

The matcher half of this module finds candidate references inside free
text together with their character spans, which is what the resolver
needs to pick the reference under a caret.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class DisplayMode(str, Enum):
    """How a validated reference is rendered."""
    FULL = "full"    # "John 3:16-18"
    FIRST = "first"  # "John 3:16" (first verse only)
    OSIS = "osis"    # "John.3.16-John.3.18"


@dataclass(frozen=True)
class ReferenceCandidate:
    """
    A possible reference found in text.

    Attributes:
        begin: Offset of the first character in the searched text
        end: Offset just past the last character
        raw: The matched text as written
    """
    begin: int
    end: int
    raw: str


@dataclass
class ParsedReference:
    """
    A parsed scripture reference.

    Attributes:
        book: Canonical book name (e.g., "Genesis", "1 John")
        chapter: Chapter number
        verse_start: Starting verse (1 for chapter-only references)
        verse_end: Ending verse (None for single verse or chapter)
        original: Original input string
        is_chapter: True if this is a chapter-only reference
    """
    book: str
    chapter: int
    verse_start: int
    verse_end: Optional[int] = None
    original: str = ""
    is_chapter: bool = False

    @property
    def normalized(self) -> str:
        """Return normalized reference string."""
        if self.is_chapter:
            return f"{self.book} {self.chapter}"
        if self.verse_end and self.verse_end != self.verse_start:
            return f"{self.book} {self.chapter}:{self.verse_start}-{self.verse_end}"
        return f"{self.book} {self.chapter}:{self.verse_start}"

    @property
    def first_verse(self) -> str:
        """Return the first verse only (e.g., "John 3:16" for "John 3:16-18")."""
        return f"{self.book} {self.chapter}:{self.verse_start}"

    @property
    def verse_count(self) -> int:
        if self.is_chapter:
            return 0  # Unknown without verse count data
        if self.verse_end:
            return self.verse_end - self.verse_start + 1
        return 1

    def to_osis_format(self) -> str:
        """Convert to OSIS format: Gen.1.1-Gen.1.3"""
        osis = BOOK_TO_OSIS.get(self.book, self.book[:3])
        if self.is_chapter:
            return f"{osis}.{self.chapter}"
        if self.verse_end and self.verse_end != self.verse_start:
            return f"{osis}.{self.chapter}.{self.verse_start}-{osis}.{self.chapter}.{self.verse_end}"
        return f"{osis}.{self.chapter}.{self.verse_start}"

    def display(self, mode: DisplayMode = DisplayMode.FULL) -> str:
        if mode == DisplayMode.FIRST:
            return self.first_verse
        if mode == DisplayMode.OSIS:
            return self.to_osis_format()
        return self.normalized


# (canonical name, OSIS abbreviation, aliases)
# Aliases are lowercase without periods. Numbered books list only the
# base aliases; the number prefixes are generated below.
_BOOKS = [
    # Torah/Pentateuch
    ("Genesis", "Gen", ["genesis", "gen", "gn"]),
    ("Exodus", "Exod", ["exodus", "exod", "exo", "ex"]),
    ("Leviticus", "Lev", ["leviticus", "lev", "lv"]),
    ("Numbers", "Num", ["numbers", "num", "nm", "nu"]),
    ("Deuteronomy", "Deut", ["deuteronomy", "deut", "deu", "dt"]),
    # Historical Books
    ("Joshua", "Josh", ["joshua", "josh", "jos"]),
    ("Judges", "Judg", ["judges", "judg", "jdg", "jg"]),
    ("Ruth", "Ruth", ["ruth", "rth", "ru"]),
    ("Ezra", "Ezra", ["ezra", "ezr"]),
    ("Nehemiah", "Neh", ["nehemiah", "neh", "ne"]),
    ("Esther", "Esth", ["esther", "esth", "est", "es"]),
    # Wisdom/Poetry
    ("Job", "Job", ["job", "jb"]),
    ("Psalms", "Ps", ["psalms", "psalm", "psa", "pss", "ps"]),
    ("Proverbs", "Prov", ["proverbs", "proverb", "prov", "prv", "pr"]),
    ("Ecclesiastes", "Eccl", ["ecclesiastes", "qoheleth", "eccl", "ecc", "qoh", "ec"]),
    ("Song of Solomon", "Song", [
        "song of solomon", "song of songs", "canticles", "song", "cant", "sos", "ss", "sg",
    ]),
    # Major Prophets
    ("Isaiah", "Isa", ["isaiah", "isa", "is"]),
    ("Jeremiah", "Jer", ["jeremiah", "jer", "je"]),
    ("Lamentations", "Lam", ["lamentations", "lam", "la"]),
    ("Ezekiel", "Ezek", ["ezekiel", "ezek", "eze", "ez"]),
    ("Daniel", "Dan", ["daniel", "dan", "dn", "da"]),
    # Minor Prophets
    ("Hosea", "Hos", ["hosea", "hos", "ho"]),
    ("Joel", "Joel", ["joel", "joe", "jl"]),
    ("Amos", "Amos", ["amos", "am"]),
    ("Obadiah", "Obad", ["obadiah", "obad", "ob"]),
    ("Jonah", "Jonah", ["jonah", "jnh", "jon"]),
    ("Micah", "Mic", ["micah", "mic", "mi"]),
    ("Nahum", "Nah", ["nahum", "nah", "na"]),
    ("Habakkuk", "Hab", ["habakkuk", "hab", "hb"]),
    ("Zephaniah", "Zeph", ["zephaniah", "zeph", "zep"]),
    ("Haggai", "Hag", ["haggai", "hag", "hg"]),
    ("Zechariah", "Zech", ["zechariah", "zech", "zec", "zc"]),
    ("Malachi", "Mal", ["malachi", "mal", "ml"]),
    # Gospels and Acts
    ("Matthew", "Matt", ["matthew", "matt", "mat", "mt"]),
    ("Mark", "Mark", ["mark", "mk", "mr"]),
    ("Luke", "Luke", ["luke", "lk", "lu"]),
    ("John", "John", ["john", "joh", "jn"]),
    ("Acts", "Acts", ["acts", "act", "ac"]),
    # Pauline Epistles
    ("Romans", "Rom", ["romans", "rom", "ro", "rm"]),
    ("Galatians", "Gal", ["galatians", "gal", "ga"]),
    ("Ephesians", "Eph", ["ephesians", "eph", "ep"]),
    ("Philippians", "Phil", ["philippians", "phil", "php", "pp"]),
    ("Colossians", "Col", ["colossians", "col"]),
    ("Titus", "Titus", ["titus", "tit"]),
    ("Philemon", "Phlm", ["philemon", "philem", "phlm", "phm", "pm"]),
    # General Epistles
    ("Hebrews", "Heb", ["hebrews", "heb"]),
    ("James", "Jas", ["james", "jas", "jm", "ja"]),
    ("Jude", "Jude", ["jude", "jud", "jd"]),
    ("Revelation", "Rev", ["revelation", "apocalypse", "apoc", "rev", "re", "rv"]),
]

# (base name, OSIS stem, highest number, base aliases)
_NUMBERED_BOOKS = [
    ("Samuel", "Sam", 2, ["samuel", "sam", "sa"]),
    ("Kings", "Kgs", 2, ["kings", "kgs", "ki"]),
    ("Chronicles", "Chr", 2, ["chronicles", "chron", "chr", "ch"]),
    ("Corinthians", "Cor", 2, ["corinthians", "cor", "co"]),
    ("Thessalonians", "Thess", 2, ["thessalonians", "thess", "th"]),
    ("Timothy", "Tim", 2, ["timothy", "tim", "ti"]),
    ("Peter", "Pet", 2, ["peter", "pet", "pe", "pt"]),
    ("John", "John", 3, ["john", "jn", "jo"]),
]

_ROMAN = {1: "i", 2: "ii", 3: "iii"}


def _build_tables() -> tuple[dict, dict]:
    names = {}
    osis = {}
    for canonical, abbrev, aliases in _BOOKS:
        osis[canonical] = abbrev
        for alias in aliases:
            names[alias] = canonical
    for base, stem, highest, aliases in _NUMBERED_BOOKS:
        for n in range(1, highest + 1):
            canonical = f"{n} {base}"
            osis[canonical] = f"{n}{stem}"
            for alias in aliases:
                names[f"{n} {alias}"] = canonical
                names[f"{n}{alias}"] = canonical
                names[f"{_ROMAN[n]} {alias}"] = canonical
    return names, osis


# Lowercase alias -> canonical book name
BOOK_NAMES, BOOK_TO_OSIS = _build_tables()

# Only full names may stand alone as a chapter reference ("Psalm 23")
_CHAPTER_ONLY_ALIASES = {
    alias for alias, canonical in BOOK_NAMES.items()
    if alias.replace(" ", "") == canonical.lower().replace(" ", "")
} | {"psalm"}


def _alias_regex(alias: str) -> str:
    # "1 john" also matches "1  John"; "1john" stays tight
    return r"\s+".join(re.escape(part) for part in alias.split(" "))


_BOOK_ALTERNATION = "|".join(
    _alias_regex(alias) for alias in sorted(BOOK_NAMES, key=len, reverse=True)
)

_REFERENCE_RE = re.compile(
    rf"(?<![A-Za-z0-9])(?P<book>{_BOOK_ALTERNATION})\.?\s*"
    r"(?P<chapter>\d{1,3})"
    r"(?::(?P<verse>\d{1,3})(?:\s*[-–—]\s*(?P<verse_end>\d{1,3}))?)?"
    r"(?![\d:A-Za-z])",
    re.IGNORECASE,
)


class ReferenceParseError(Exception):
    """Raised when a reference cannot be parsed."""
    pass


def _book_key(name: str) -> str:
    key = name.lower().replace(".", "").strip()
    return re.sub(r"\s+", " ", key)


def normalize_book_name(name: str) -> str:
    """
    Normalize book name to standard form.

    Args:
        name: Book name in any format

    Returns:
        Canonical book name (e.g., "Genesis", "1 John"), or the
        title-cased input when the book is unknown
    """
    key = _book_key(name)
    if key in BOOK_NAMES:
        return BOOK_NAMES[key]
    return name.title()


def _from_match(match: re.Match, original: str) -> Optional[ParsedReference]:
    book_key = _book_key(match.group("book"))
    canonical = BOOK_NAMES.get(book_key)
    if canonical is None:
        return None

    chapter = int(match.group("chapter"))
    verse = match.group("verse")
    verse_end = match.group("verse_end")

    if verse is None:
        if book_key not in _CHAPTER_ONLY_ALIASES or chapter < 1:
            return None
        return ParsedReference(
            book=canonical,
            chapter=chapter,
            verse_start=1,
            original=original,
            is_chapter=True,
        )

    start = int(verse)
    end = int(verse_end) if verse_end else None
    if chapter < 1 or start < 1 or (end is not None and end < start):
        return None

    return ParsedReference(
        book=canonical,
        chapter=chapter,
        verse_start=start,
        verse_end=end,
        original=original,
        is_chapter=False,
    )


def parse_reference(ref_string: str) -> Optional[ParsedReference]:
    """
    Parse a scripture reference string.

    The whole string must be a single reference; use find_references()
    to pull references out of running text.

    Args:
        ref_string: The reference string to parse

    Returns:
        ParsedReference object or None if parsing fails
    """
    if not ref_string:
        return None

    ref_string = re.sub(r"\s+", " ", ref_string.strip())
    match = _REFERENCE_RE.fullmatch(ref_string)
    if not match:
        return None
    return _from_match(match, ref_string)


def find_reference_spans(text: str) -> list[ReferenceCandidate]:
    """
    Find candidate references in text, with their offsets.

    Candidates come back in text order. Chapter-only matches on short
    abbreviations ("Is 5", "Am 3") are dropped.
    """
    if not text:
        return []

    candidates = []
    for match in _REFERENCE_RE.finditer(text):
        if _from_match(match, match.group()) is None:
            continue
        candidates.append(ReferenceCandidate(match.start(), match.end(), match.group()))
    return candidates


def find_references(text: str) -> list[ParsedReference]:
    """
    Find all scripture references in a text block.

    Args:
        text: Text to search for references

    Returns:
        List of ParsedReference objects found, without duplicates
    """
    refs = []
    seen = set()

    for candidate in find_reference_spans(text):
        parsed = parse_reference(candidate.raw)
        if parsed and parsed.normalized not in seen:
            refs.append(parsed)
            seen.add(parsed.normalized)

    return refs


def is_valid_reference(ref_string: str) -> bool:
    return parse_reference(ref_string) is not None


class ReferenceMatcher(ABC):
    """
    Reference-matching engine used by the resolver.

    Implementations find candidate references in text and turn a
    candidate into a canonical display string. The resolver only relies
    on these two calls, so any engine can be plugged in.
    """

    @abstractmethod
    def find_candidates(self, text: str) -> list[ReferenceCandidate]:
        """
        Find candidate references in text.

        Args:
            text: Text to search

        Returns:
            Candidates in text order, offsets relative to text
        """
        pass

    @abstractmethod
    def canonicalize(
        self,
        candidate: ReferenceCandidate,
        mode: DisplayMode = DisplayMode.FULL,
    ) -> Optional[str]:
        """
        Validate a candidate and render it.

        Args:
            candidate: A candidate returned by find_candidates()
            mode: Display form to produce

        Returns:
            Display string, or None if the candidate is not a valid reference

        Raises:
            ReferenceParseError: Engines may raise instead of returning None
        """
        pass


class ReferenceParserMatcher(ReferenceMatcher):
    """Default matcher backed by the regex book table in this module."""

    def find_candidates(self, text: str) -> list[ReferenceCandidate]:
        return find_reference_spans(text)

    def canonicalize(
        self,
        candidate: ReferenceCandidate,
        mode: DisplayMode = DisplayMode.FULL,
    ) -> Optional[str]:
        parsed = parse_reference(candidate.raw)
        if parsed is None:
            logger.debug(f"Not a valid reference: {candidate.raw!r}")
            return None
        return parsed.display(mode)
