"""
Deck source contract.

Each deck-building site has one extractor. The dispatch strategy picks the
extractor by canonical domain, checks that it recognises the URL, then asks
it for the deck. Extractors never raise on transport or parse failures:
they log and return None.
"""

import re
from typing import Protocol, runtime_checkable
from uuid import UUID

from proxyprinter.models.deck import DeckDetails

# Scheme and "www." are optional on every source URL
URL_PREFIX = r"^(?:https?://)?(?:www\.)?"


@runtime_checkable
class DeckExtractor(Protocol):
    """Retrieves decks from one deck-building site."""

    domain: str

    def extract_reference(self, url: str) -> str | None:
        """Site-specific deck reference (id or relative path), or None if unrecognised."""
        ...

    async def retrieve(self, reference: str) -> DeckDetails | None:
        """Fetch and parse the deck, or None if it cannot be retrieved."""
        ...


@runtime_checkable
class RedirectingExtractor(DeckExtractor, Protocol):
    """A hub source whose pages may only mirror a deck hosted elsewhere."""

    async def find_original_deck_link(self, reference: str) -> tuple[str | None, str | None]:
        """
        Look for the originating deck URL.

        Returns:
            (original deck URL or None, raw page content or None)
        """
        ...

    def parse_content(self, content: str) -> DeckDetails:
        """Parse already-fetched page content into a deck."""
        ...


def match_reference(pattern: re.Pattern[str], url: str, group: str = "ref") -> str | None:
    """Apply a source URL pattern; empty captures count as no match."""
    if not url:
        return None
    match = pattern.match(url.strip())
    if not match:
        return None
    return match.group(group) or None


def parse_uuid(value: object) -> UUID | None:
    """UUID from a string, or None if it is not one."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        return None


def parse_quantity(value: object) -> int:
    """Quantity from raw source data; anything unparseable counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.isdigit():
            return int(value)
    return 0
