# api/services/references/__init__.py
"""
Scripture reference resolution and parallel version retrieval.

This package provides:
- ReferenceResolver: Find the reference in free text or under a caret
- ReferenceMatcher: Interface for reference-matching engines
- ReferenceParserMatcher: Default regex-based matcher
- BibleGatewayClient: Fetch and parse parallel translations of a verse
- LookupResult / TranslationRecord: Parsed verse data
- VERSION_NAMES: Translation code to full name table
"""

from .reference_parser import (
    DisplayMode,
    ParsedReference,
    ReferenceCandidate,
    ReferenceMatcher,
    ReferenceParseError,
    ReferenceParserMatcher,
    parse_reference,
    find_references,
    find_reference_spans,
    normalize_book_name,
    is_valid_reference,
    BOOK_NAMES,
    BOOK_TO_OSIS,
)
from .reference_resolver import ReferenceResolver
from .versions import VERSION_NAMES, version_name
from .gateway_client import (
    BibleGatewayClient,
    LookupResult,
    TranslationRecord,
    parse_versions,
)

__all__ = [
    # Resolution
    "ReferenceResolver",
    "ReferenceMatcher",
    "ReferenceParserMatcher",
    "ReferenceCandidate",
    "DisplayMode",
    # Bible Gateway
    "BibleGatewayClient",
    "LookupResult",
    "TranslationRecord",
    "parse_versions",
    "VERSION_NAMES",
    "version_name",
    # Reference parsing
    "ParsedReference",
    "ReferenceParseError",
    "parse_reference",
    "find_references",
    "find_reference_spans",
    "normalize_book_name",
    "is_valid_reference",
    "BOOK_NAMES",
    "BOOK_TO_OSIS",
]
