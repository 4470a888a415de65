#!/usr/bin/env python3
"""
Show parallel Bible versions for a scripture reference.

Run from the api directory.

Usage:
    python -m scripts.lookup_verse "John 3:16"
    python -m scripts.lookup_verse "so loved the world John 3:16 that" --caret 24
    python -m scripts.lookup_verse --history
    python -m scripts.lookup_verse --clear

Examples:
    # Look up a verse (served from history on repeat)
    cd api && python -m scripts.lookup_verse "Rom 8:28"

    # Only show some translations
    cd api && python -m scripts.lookup_verse "Rom 8:28" --versions KJV NIV ESV
"""

import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import MESSAGES
from services.cache import HistoryStorage
from services.lookup_service import LookupService


def print_result(result, versions=None):
    """
    Print a lookup result, one translation per paragraph.

    Returns:
        Number of translations printed
    """
    print(result.title)
    print("-" * 60)
    wanted = {v.upper() for v in versions} if versions else None
    printed = 0
    for record in result.translations:
        if wanted and record.code.upper() not in wanted:
            continue
        print(f"{record.label}")
        print(f"    {record.text}")
        print()
        printed += 1

    if printed == 0:
        available = ", ".join(t.code for t in result.translations) or "none"
        print(f"No matching versions (available: {available})")
    return printed


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Show parallel Bible versions from Bible Gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scripts.lookup_verse "John 3:16"             # Look up a verse
  python -m scripts.lookup_verse "text John 3:16" --caret 8   # Reference at caret
  python -m scripts.lookup_verse --history                # List history
  python -m scripts.lookup_verse --clear                  # Clear history
        """
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Scripture reference, or text containing one"
    )
    parser.add_argument(
        "--caret",
        type=int,
        default=None,
        help="Caret offset into the text; picks the reference under it"
    )
    parser.add_argument(
        "--versions",
        nargs="+",
        metavar="CODE",
        help="Only print these translations (e.g., KJV NIV)"
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="List previous lookups and exit"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear lookup history and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    service = LookupService(storage=HistoryStorage())

    # Handle --clear
    if args.clear:
        service.clear_history()
        print("History cleared")
        return 0

    # Handle --history
    if args.history:
        entries = service.history_entries()
        print(f"History: {len(entries)}/{service.history.capacity}")
        for entry in entries:
            print(f"  - {entry.reference} ({len(entry.result)} versions)")
        return 0

    if not args.text:
        parser.print_usage()
        return 2

    ref = service.resolve(args.text, args.caret)
    if ref is None:
        print(MESSAGES["invalid_scripture"])
        return 1

    result = service.lookup(ref)
    if result is None:
        print(MESSAGES["no_result"])
        return 1

    if print_result(result, args.versions) == 0:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
