"""
MTGGoldfish deck source.

Scrapes the deck page HTML; deck and archetype pages share the same
deck table layout.

Note: Web scraping is inherently fragile. Page structure may change.
"""

import logging
import re

from bs4 import BeautifulSoup, Tag

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.config import settings
from proxyprinter.models.card import CardEntry
from proxyprinter.models.deck import DeckDetails
from proxyprinter.scrapers.base import URL_PREFIX, match_reference, parse_quantity, parse_uuid

logger = logging.getLogger(__name__)

# Matches: mtggoldfish.com/deck/7496197 and mtggoldfish.com/archetype/mono-red-aggro
DECK_URL_PATTERN = re.compile(
    URL_PREFIX + r"mtggoldfish\.com/(?P<ref>(?:deck|archetype)/.+)$",
    re.IGNORECASE,
)


class GoldfishExtractor:
    """DeckExtractor for mtggoldfish.com."""

    domain = "mtggoldfish.com"

    def __init__(self, transport: HttpTransport, base_url: str | None = None) -> None:
        self.transport = transport
        self.base_url = (base_url or settings.mtggoldfish_url).rstrip("/")

    def extract_reference(self, url: str) -> str | None:
        return match_reference(DECK_URL_PATTERN, url)

    async def retrieve(self, reference: str) -> DeckDetails | None:
        html = await self.transport.get_text(f"{self.base_url}/{reference}")
        if html is None:
            logger.error("MTGGoldfish deck %s not loaded", reference)
            return None

        return parse_deck_page(html)


def parse_deck_page(html: str) -> DeckDetails:
    """
    Parse a deck page.

    Each card row of the deck table has a right-aligned quantity cell and a
    link carrying `data-card-id`. Header rows ("Creatures (16)") have neither
    and are skipped, as are rows whose quantity does not parse.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = soup.select_one("h1.title")
    deck = DeckDetails(name=_first_line(title) if title else "")

    for row in soup.select("table.deck-view-deck-table tr"):
        if row.find("td") is None:
            continue

        quantity_cell = row.select_one("td.text-right")
        name_link = row.select_one("td a[data-card-id]")
        if quantity_cell is None or name_link is None:
            continue

        quantity = parse_quantity(quantity_cell.get_text())
        name = name_link.get_text(strip=True)
        if quantity <= 0 or not name:
            continue

        card_id = name_link.get("data-card-id")
        deck.cards.append(
            CardEntry(
                name=name,
                quantity=quantity,
                id=parse_uuid(card_id if isinstance(card_id, str) else None),
            )
        )

    return deck


def _first_line(tag: Tag) -> str:
    """Title text without the nested author/format line."""
    for text in tag.stripped_strings:
        return text
    return ""
