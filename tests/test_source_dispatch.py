"""Tests for deck source dispatch and hub redirection."""

import re

import pytest

from proxyprinter.models.card import CardEntry
from proxyprinter.models.deck import DeckDetails
from proxyprinter.scrapers.base import URL_PREFIX, match_reference
from proxyprinter.services.source_dispatch import (
    DeckRetrieveStrategy,
    ExtractorRegistry,
    default_registry,
)


class FakeExtractor:
    """Plain extractor serving one canned deck."""

    def __init__(self, domain: str, deck: DeckDetails | None) -> None:
        self.domain = domain
        self.deck = deck
        self.pattern = re.compile(URL_PREFIX + re.escape(domain) + r"/decks/(?P<ref>\w+)")
        self.retrieved: list[str] = []

    def extract_reference(self, url: str) -> str | None:
        return match_reference(self.pattern, url)

    async def retrieve(self, reference: str) -> DeckDetails | None:
        self.retrieved.append(reference)
        return self.deck


class FakeHub(FakeExtractor):
    """Redirecting extractor pointing at `original_url`."""

    def __init__(
        self, domain: str, original_url: str | None, content: str | None = "<html>hub</html>"
    ) -> None:
        super().__init__(domain, DeckDetails(name="Hub deck", cards=[CardEntry(name="Sol Ring")]))
        self.original_url = original_url
        self.content = content
        self.parsed: list[str] = []

    async def find_original_deck_link(self, reference: str) -> tuple[str | None, str | None]:
        return self.original_url, self.content

    def parse_content(self, content: str) -> DeckDetails:
        self.parsed.append(content)
        return DeckDetails(name="Hub deck", cards=[CardEntry(name="Sol Ring")])


def origin_deck() -> DeckDetails:
    return DeckDetails(name="Origin deck", cards=[CardEntry(name="Atraxa", quantity=1)])


class TestExtractorRegistry:
    def test_duplicate_domain_rejected(self) -> None:
        registry = ExtractorRegistry([FakeExtractor("archidekt.com", None)])

        with pytest.raises(ValueError, match="archidekt.com"):
            registry.register(FakeExtractor("archidekt.com", None))

    def test_lookup_by_url(self) -> None:
        extractor = FakeExtractor("archidekt.com", None)
        registry = ExtractorRegistry([extractor])

        assert registry.for_url("https://www.archidekt.com/decks/1") is extractor
        assert registry.for_url("https://sub.archidekt.com/decks/1") is None

    def test_default_registry_covers_all_sites(self) -> None:
        registry = default_registry(transport=None)  # type: ignore[arg-type]

        assert registry.domains == [
            "archidekt.com",
            "edhrec.com",
            "moxfield.com",
            "mtggoldfish.com",
        ]


class TestGetDeck:
    async def test_unregistered_domain(self) -> None:
        strategy = DeckRetrieveStrategy(ExtractorRegistry([FakeExtractor("a.com", origin_deck())]))

        assert not strategy.supports("https://b.com/decks/1")
        assert await strategy.get_deck("https://b.com/decks/1") is None

    async def test_direct_retrieval_sets_source_url(self) -> None:
        strategy = DeckRetrieveStrategy(ExtractorRegistry([FakeExtractor("a.com", origin_deck())]))

        deck = await strategy.get_deck("https://a.com/decks/1")

        assert deck is not None
        assert deck.name == "Origin deck"
        assert deck.source_url == "https://a.com/decks/1"

    async def test_unrecognised_url_is_not_retrieved(self) -> None:
        extractor = FakeExtractor("a.com", origin_deck())
        strategy = DeckRetrieveStrategy(ExtractorRegistry([extractor]))

        assert await strategy.get_deck("https://a.com/users/someone") is None
        assert extractor.retrieved == []

    async def test_failed_retrieval(self) -> None:
        strategy = DeckRetrieveStrategy(ExtractorRegistry([FakeExtractor("a.com", None)]))

        assert await strategy.get_deck("https://a.com/decks/1") is None

    async def test_redirect_matches_direct_retrieval(self) -> None:
        """A hub deck hosted elsewhere is retrieved from its origin."""
        origin = FakeExtractor("a.com", origin_deck())
        hub = FakeHub("hub.com", original_url="https://a.com/decks/42")
        strategy = DeckRetrieveStrategy(ExtractorRegistry([origin, hub]))

        via_hub = await strategy.get_deck("https://hub.com/decks/x")
        direct = await strategy.get_deck("https://a.com/decks/42")

        assert via_hub == direct
        assert origin.retrieved == ["42", "42"]
        assert hub.parsed == []

    async def test_unregistered_origin_falls_back_to_hub_page(self) -> None:
        hub = FakeHub("hub.com", original_url="https://elsewhere.com/decks/1")
        strategy = DeckRetrieveStrategy(ExtractorRegistry([hub]))

        deck = await strategy.get_deck("https://hub.com/decks/x")

        assert deck is not None
        assert deck.name == "Hub deck"
        assert deck.source_url == "https://hub.com/decks/x"
        assert hub.parsed == ["<html>hub</html>"]

    async def test_unrecognised_origin_url_falls_back(self) -> None:
        origin = FakeExtractor("a.com", origin_deck())
        hub = FakeHub("hub.com", original_url="https://a.com/collection/1")
        strategy = DeckRetrieveStrategy(ExtractorRegistry([origin, hub]))

        deck = await strategy.get_deck("https://hub.com/decks/x")

        assert deck is not None
        assert deck.name == "Hub deck"
        assert origin.retrieved == []

    async def test_failed_origin_falls_back(self) -> None:
        origin = FakeExtractor("a.com", None)
        hub = FakeHub("hub.com", original_url="https://a.com/decks/1")
        strategy = DeckRetrieveStrategy(ExtractorRegistry([origin, hub]))

        deck = await strategy.get_deck("https://hub.com/decks/x")

        assert deck is not None
        assert deck.name == "Hub deck"

    async def test_hub_without_origin_parses_own_page(self) -> None:
        hub = FakeHub("hub.com", original_url=None)
        strategy = DeckRetrieveStrategy(ExtractorRegistry([hub]))

        deck = await strategy.get_deck("https://hub.com/decks/x")

        assert deck is not None
        assert hub.parsed == ["<html>hub</html>"]

    async def test_hub_page_not_loaded(self) -> None:
        hub = FakeHub("hub.com", original_url=None, content=None)
        strategy = DeckRetrieveStrategy(ExtractorRegistry([hub]))

        assert await strategy.get_deck("https://hub.com/decks/x") is None

    async def test_redirect_cycle_terminates(self) -> None:
        """Two hubs pointing at each other stop at the first repeated domain."""
        first = FakeHub("one.com", original_url="https://two.com/decks/b", content="one")
        second = FakeHub("two.com", original_url="https://one.com/decks/a", content="two")
        strategy = DeckRetrieveStrategy(ExtractorRegistry([first, second]))

        deck = await strategy.get_deck("https://one.com/decks/a")

        assert deck is not None
        assert second.parsed == ["two"]
        assert first.parsed == []

    async def test_self_redirect_terminates(self) -> None:
        hub = FakeHub("hub.com", original_url="https://hub.com/decks/x")
        strategy = DeckRetrieveStrategy(ExtractorRegistry([hub]))

        deck = await strategy.get_deck("https://hub.com/decks/x")

        assert deck is not None
        assert hub.parsed == ["<html>hub</html>"]
