"""
Archidekt deck source.

Uses the public JSON API: GET https://archidekt.com/api/decks/<id>/
"""

import logging
import re
from typing import Any

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.config import settings
from proxyprinter.models.card import CardEntry
from proxyprinter.models.deck import DeckDetails
from proxyprinter.scrapers.base import URL_PREFIX, match_reference, parse_quantity, parse_uuid

logger = logging.getLogger(__name__)

# Matches: archidekt.com/decks/123/name and archidekt.com/api/decks/123/
DECK_URL_PATTERN = re.compile(
    URL_PREFIX + r"archidekt\.com/(?:api/)?decks/(?P<ref>\d+)(?:[/?#].*)?$",
    re.IGNORECASE,
)

# Categories that are not part of the printed deck
EXCLUDED_CATEGORIES = frozenset({"maybeboard"})


class ArchidektExtractor:
    """DeckExtractor for archidekt.com."""

    domain = "archidekt.com"

    def __init__(self, transport: HttpTransport, api_url: str | None = None) -> None:
        self.transport = transport
        self.api_url = (api_url or settings.archidekt_api_url).rstrip("/")

    def extract_reference(self, url: str) -> str | None:
        return match_reference(DECK_URL_PATTERN, url)

    async def retrieve(self, reference: str) -> DeckDetails | None:
        data = await self.transport.get_json(f"{self.api_url}/decks/{reference}/")
        if data is None:
            logger.error("Archidekt deck %s not loaded", reference)
            return None

        try:
            return parse_deck(data)
        except (AttributeError, KeyError, TypeError) as e:
            logger.error("Archidekt deck %s has an unexpected shape: %s", reference, e)
            return None


def parse_deck(data: dict[str, Any]) -> DeckDetails:
    """Convert an Archidekt deck payload into DeckDetails."""
    deck = DeckDetails(name=data.get("name") or "")

    for row in data.get("cards") or []:
        categories = {str(c).lower() for c in row.get("categories") or []}
        if categories & EXCLUDED_CATEGORIES:
            continue

        entry = _parse_card(row)
        if entry is not None:
            deck.cards.append(entry)

    return deck


def _parse_card(row: dict[str, Any]) -> CardEntry | None:
    card = row.get("card") or {}
    name = ((card.get("oracleCard") or {}).get("name") or "").strip()
    quantity = parse_quantity(row.get("quantity"))
    if quantity <= 0 or not name:
        return None

    edition_code = (card.get("edition") or {}).get("editioncode")
    modifier = str(row.get("modifier") or "").lower()

    return CardEntry(
        name=name,
        quantity=quantity,
        id=parse_uuid(card.get("uid")),
        expansion_code=edition_code.lower() if edition_code else None,
        collector_number=card.get("collectorNumber") or None,
        foil=modifier == "foil",
        etched=modifier == "etched",
    )
