"""
EDHREC deck source.

EDHREC deck previews often mirror a deck built on another site and link
to it in a "Source:" block. The dispatch strategy follows that link first
and falls back to scraping the EDHREC page itself.
"""

import logging
import re

from bs4 import BeautifulSoup

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.config import settings
from proxyprinter.models.card import CardEntry
from proxyprinter.models.deck import DeckDetails
from proxyprinter.scrapers.base import URL_PREFIX, match_reference

logger = logging.getLogger(__name__)

# Matches: edhrec.com/deckpreview/<id> and edhrec.com/commanders/<slug>
DECK_URL_PATTERN = re.compile(
    URL_PREFIX + r"edhrec\.com/(?P<ref>(?:commanders|deckpreview)/.+)$",
    re.IGNORECASE,
)

CARD_NAME_CLASS = re.compile(r"Card_name__")
HEADER_CLASS = re.compile(r"CoolHeader_container")


class EdhrecExtractor:
    """RedirectingExtractor for edhrec.com."""

    domain = "edhrec.com"

    def __init__(self, transport: HttpTransport, base_url: str | None = None) -> None:
        self.transport = transport
        self.base_url = (base_url or settings.edhrec_url).rstrip("/")

    def extract_reference(self, url: str) -> str | None:
        return match_reference(DECK_URL_PATTERN, url)

    async def retrieve(self, reference: str) -> DeckDetails | None:
        html = await self._fetch(reference)
        if html is None:
            return None
        return self.parse_content(html)

    async def find_original_deck_link(self, reference: str) -> tuple[str | None, str | None]:
        html = await self._fetch(reference)
        if html is None:
            return None, None
        return find_source_link(html), html

    def parse_content(self, content: str) -> DeckDetails:
        return parse_deck_page(content)

    async def _fetch(self, reference: str) -> str | None:
        html = await self.transport.get_text(f"{self.base_url}/{reference}")
        if html is None:
            logger.error("EDHREC deck %s not loaded", reference)
        return html


def find_source_link(html: str) -> str | None:
    """Link inside the `<div>Source: <a href=...>` block, if present."""
    soup = BeautifulSoup(html, "html.parser")

    for div in soup.find_all("div"):
        own_text = "".join(div.find_all(string=True, recursive=False))
        if "Source:" not in own_text:
            continue
        link = div.find("a", href=True)
        if link is not None:
            href = str(link["href"]).strip()
            if href:
                return href

    return None


def parse_deck_page(html: str) -> DeckDetails:
    """Deck name from the page header, one entry per listed card."""
    soup = BeautifulSoup(html, "html.parser")
    deck = DeckDetails()

    heading = soup.find("h3", string=re.compile("Deck with"))
    if heading is None:
        header = soup.find("div", class_=HEADER_CLASS)
        heading = header.find("h3") if header is not None else None
    if heading is not None:
        deck.name = heading.get_text(strip=True)

    for span in soup.find_all("span", class_=CARD_NAME_CLASS):
        name = span.get_text(strip=True)
        if name:
            deck.cards.append(CardEntry(name=name, quantity=1))

    return deck
