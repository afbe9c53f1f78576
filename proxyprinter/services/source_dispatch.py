"""
Deck source dispatch.

Picks the extractor that owns a deck URL (by exact canonical domain) and
follows hub sources to the site that actually hosts the deck.

Redirection is an explicit loop over visited domains:
- a hub that names an originating URL is re-dispatched to that URL
- if nobody owns the originating domain, or the URL is not recognised, or
  the domain was already visited, the hub parses the page it already fetched
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.models.deck import DeckDetails
from proxyprinter.parsers.url import domain_of
from proxyprinter.scrapers.archidekt import ArchidektExtractor
from proxyprinter.scrapers.base import DeckExtractor, RedirectingExtractor
from proxyprinter.scrapers.edhrec import EdhrecExtractor
from proxyprinter.scrapers.moxfield import MoxfieldExtractor
from proxyprinter.scrapers.mtggoldfish import GoldfishExtractor

logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """Maps canonical domains to extractors. Each domain has exactly one owner."""

    def __init__(self, extractors: Iterable[DeckExtractor] = ()) -> None:
        self._by_domain: dict[str, DeckExtractor] = {}
        for extractor in extractors:
            self.register(extractor)

    def register(self, extractor: DeckExtractor) -> None:
        domain = extractor.domain.lower()
        if domain in self._by_domain:
            raise ValueError(f"Domain {domain!r} already has an extractor registered")
        self._by_domain[domain] = extractor

    def get(self, domain: str) -> DeckExtractor | None:
        return self._by_domain.get(domain)

    def for_url(self, url: str) -> DeckExtractor | None:
        return self.get(domain_of(url))

    @property
    def domains(self) -> list[str]:
        return sorted(self._by_domain)


def default_registry(transport: HttpTransport) -> ExtractorRegistry:
    """Registry with every supported deck site."""
    return ExtractorRegistry(
        [
            ArchidektExtractor(transport),
            EdhrecExtractor(transport),
            GoldfishExtractor(transport),
            MoxfieldExtractor(transport),
        ]
    )


@dataclass
class _HubFallback:
    """Page content a hub already fetched, kept in case redirection fails."""

    extractor: RedirectingExtractor
    content: str
    url: str


class DeckRetrieveStrategy:
    """Retrieves a deck from whichever site owns its URL."""

    def __init__(self, registry: ExtractorRegistry) -> None:
        self.registry = registry

    def supports(self, deck_url: str) -> bool:
        """True if some extractor owns the URL's domain."""
        return self.registry.for_url(deck_url) is not None

    async def get_deck(self, deck_url: str) -> DeckDetails | None:
        """
        Retrieve the deck behind `deck_url`.

        Returns:
            DeckDetails (possibly with no cards), or None when no extractor
            matches or retrieval failed
        """
        visited: set[str] = set()
        fallback: _HubFallback | None = None
        url = deck_url

        while True:
            domain = domain_of(url)
            extractor = self.registry.get(domain)

            if extractor is None:
                if fallback is not None:
                    logger.warning("No deck source for %s, using the page it was linked from", url)
                    return self._parse_fallback(fallback, url)
                logger.info("No deck source registered for %r", domain or url)
                return None

            if domain in visited:
                logger.warning("Redirect cycle detected at %s", url)
                return self._parse_fallback(fallback, url) if fallback is not None else None
            visited.add(domain)

            reference = extractor.extract_reference(url)
            if reference is None:
                if fallback is not None:
                    logger.warning("Could not get deck from link %s", url)
                    return self._parse_fallback(fallback, url)
                logger.info("URL %s is not a recognised %s deck link", url, extractor.domain)
                return None

            if not isinstance(extractor, RedirectingExtractor):
                deck = await extractor.retrieve(reference)
                if deck is None and fallback is not None:
                    logger.warning("Could not get deck from link %s", url)
                    return self._parse_fallback(fallback, url)
                if deck is not None:
                    deck.source_url = url
                return deck

            original_url, content = await extractor.find_original_deck_link(reference)
            if content is not None:
                fallback = _HubFallback(extractor=extractor, content=content, url=url)

            if original_url is None:
                if fallback is None:
                    return None
                return self._parse_fallback(fallback, url)

            logger.info("Deck at %s is hosted at %s", url, original_url)
            url = original_url

    def _parse_fallback(self, fallback: _HubFallback, failed_url: str) -> DeckDetails:
        if failed_url != fallback.url:
            logger.debug("Parsing %s instead of %s", fallback.url, failed_url)
        deck = fallback.extractor.parse_content(fallback.content)
        deck.source_url = fallback.url
        return deck
