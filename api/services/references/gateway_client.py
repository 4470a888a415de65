# api/services/references/gateway_client.py
"""
Bible Gateway verse client.

Fetches the "all English versions" page for a single verse and parses it
into one record per translation. One request per call, no retries, and
failures come back as None rather than exceptions.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup, Comment, NavigableString

from core import config
from .versions import version_name

logger = logging.getLogger(__name__)

# Marks each translation row on the verse page
ROW_SELECTOR = ".singleverse-row"

PILCROW = "¶"


@dataclass(frozen=True)
class TranslationRecord:
    """
    One translation of a verse.

    Attributes:
        code: Translation abbreviation (e.g., "NIV")
        full_name: Full translation name, or the code when unknown
        text: Verse text with pilcrows and markup removed
    """
    code: str
    full_name: str
    text: str

    @property
    def label(self) -> str:
        """Display label, e.g. "NIV • New International Version"."""
        if self.full_name and self.full_name != self.code:
            return f"{self.code} • {self.full_name}"
        return self.code

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "full_name": self.full_name,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TranslationRecord":
        """
        Rebuild a record saved with to_dict().

        Raises:
            ValueError: If the code is missing or blank
        """
        code = (data.get("code") or "").strip()
        if not code:
            raise ValueError(f"Translation record has no code: {data!r}")
        return cls(
            code=code,
            full_name=data.get("full_name") or version_name(code),
            text=data.get("text", ""),
        )


@dataclass(frozen=True)
class LookupResult:
    """
    All parallel translations of one verse.

    Attributes:
        reference: Canonical reference (e.g., "John 3:16")
        translations: Records in the order the site lists them
    """
    reference: str
    translations: tuple[TranslationRecord, ...] = ()

    @property
    def title(self) -> str:
        return self.reference.upper()

    def __len__(self) -> int:
        return len(self.translations)

    def get(self, code: str) -> Optional[TranslationRecord]:
        """Return the record for a translation code, if present."""
        code = code.upper()
        for record in self.translations:
            if record.code.upper() == code:
                return record
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "reference": self.reference,
            "translations": [t.to_dict() for t in self.translations],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LookupResult":
        return cls(
            reference=data["reference"],
            translations=tuple(
                TranslationRecord.from_dict(t) for t in data.get("translations", [])
            ),
        )


def clean_verse_text(text: str) -> str:
    """Strip pilcrows and collapse whitespace."""
    text = text.replace(PILCROW, "")
    return re.sub(r"\s+", " ", text).strip()


def _node_text(node) -> str:
    if isinstance(node, NavigableString):
        return str(node)
    return node.get_text()


def parse_row(row) -> Optional[TranslationRecord]:
    """
    Parse one translation row.

    A row holds two nodes: the translation code, then the verse text.
    Missing text gives an empty string; a row without a code is skipped
    because there is nothing to identify it by.
    """
    nodes = [
        n for n in row.children
        if not isinstance(n, Comment) and _node_text(n).strip()
    ]

    code_node = nodes[0] if len(nodes) > 0 else None
    text_node = nodes[1] if len(nodes) > 1 else None

    code = _node_text(code_node).strip() if code_node is not None else ""
    if not code:
        logger.debug(f"Skipping translation row without a code: {row}")
        return None

    if text_node is None:
        logger.debug(f"Translation row {code} has no verse text")
        text = ""
    else:
        text = clean_verse_text(_node_text(text_node))

    return TranslationRecord(code=code, full_name=version_name(code), text=text)


def parse_versions(html: str) -> list[TranslationRecord]:
    """
    Parse a Bible Gateway verse page.

    Args:
        html: Page markup

    Returns:
        One TranslationRecord per row, in document order
    """
    soup = BeautifulSoup(html, "html.parser")
    records = []
    for row in soup.select(ROW_SELECTOR):
        record = parse_row(row)
        if record is not None:
            records.append(record)
    return records


class BibleGatewayClient:
    """
    Client for Bible Gateway verse pages.

    Usage:
        client = BibleGatewayClient()
        result = client.fetch("John 3:16")
        if result:
            for record in result.translations:
                print(f"{record.label}: {record.text}")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or config.BIBLE_GATEWAY_URL
        self.timeout = timeout if timeout is not None else config.BIBLE_GATEWAY_TIMEOUT
        self.session = session or requests.Session()
        self.headers = {"User-Agent": config.USER_AGENT}

    def url_for(self, reference: str) -> str:
        return self.base_url + quote(reference.strip())

    def fetch(self, reference: str) -> Optional[LookupResult]:
        """
        Fetch all translations of a verse.

        Args:
            reference: Canonical reference (e.g., "John 3:16")

        Returns:
            LookupResult, or None if the request or parse failed
        """
        if not reference or not reference.strip():
            return None

        url = self.url_for(reference)

        try:
            logger.debug(f"Fetching {url}")
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Network error fetching {reference}: {e}")
            return None

        if response.status_code != 200:
            if response.status_code == 404:
                logger.info(f"Verse not found: {reference}")
            else:
                logger.warning(f"Bible Gateway returned {response.status_code} for {reference}")
            return None

        try:
            records = parse_versions(response.text)
        except Exception as e:
            logger.warning(f"Failed to parse verse page for {reference}: {e}")
            return None

        logger.info(f"Fetched {len(records)} translations of {reference}")
        return LookupResult(reference=reference, translations=tuple(records))
