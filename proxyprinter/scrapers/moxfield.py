"""
Moxfield deck source.

Uses the JSON API: GET https://api2.moxfield.com/v3/decks/all/<public id>
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

DECK_URL_PATTERN = re.compile(
    URL_PREFIX + r"moxfield\.com/decks/(?P<ref>[\w\-.~]+)/?(?:[?#].*)?$",
    re.IGNORECASE,
)

# Boards that are never printed
EXCLUDED_BOARDS = frozenset({"maybeboard", "tokens"})


class MoxfieldExtractor:
    """DeckExtractor for moxfield.com."""

    domain = "moxfield.com"

    def __init__(self, transport: HttpTransport, api_url: str | None = None) -> None:
        self.transport = transport
        self.api_url = (api_url or settings.moxfield_api_url).rstrip("/")

    def extract_reference(self, url: str) -> str | None:
        return match_reference(DECK_URL_PATTERN, url)

    async def retrieve(self, reference: str) -> DeckDetails | None:
        data = await self.transport.get_json(f"{self.api_url}/decks/all/{reference}")
        if data is None:
            logger.error("Moxfield deck %s not loaded", reference)
            return None

        try:
            return parse_deck(data)
        except (AttributeError, KeyError, TypeError) as e:
            logger.error("Moxfield deck %s has an unexpected shape: %s", reference, e)
            return None


def parse_deck(data: dict[str, Any]) -> DeckDetails:
    """Convert a Moxfield deck payload into DeckDetails, board by board."""
    deck = DeckDetails(name=data.get("name") or "")

    for board_name, board in (data.get("boards") or {}).items():
        if board_name.lower() in EXCLUDED_BOARDS:
            continue
        for row in ((board or {}).get("cards") or {}).values():
            entry = _parse_card(row)
            if entry is not None:
                deck.cards.append(entry)

    return deck


def _parse_card(row: dict[str, Any]) -> CardEntry | None:
    card = row.get("card") or {}
    name = (card.get("name") or "").strip()
    quantity = parse_quantity(row.get("quantity"))
    if quantity <= 0 or not name:
        return None

    finish = str(row.get("finish") or "").lower()
    set_code = card.get("set")

    return CardEntry(
        name=name,
        quantity=quantity,
        id=parse_uuid(card.get("scryfall_id")),
        expansion_code=set_code.lower() if set_code else None,
        collector_number=card.get("cn") or None,
        foil=finish == "foil",
        etched=finish == "etched",
    )
