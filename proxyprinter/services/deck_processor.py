"""
Deck processing run.

Loads a deck from a URL or a local card list, resolves every entry against
the card catalog and appends tokens/emblems.

Per-entry lookups run concurrently (bounded by a semaphore); each task only
writes to its own entry. Token expansion aggregates across entries, so it
starts only after every lookup has finished.

Progress is reported per finished entry through the processor's
ProgressReporter. A run can be cancelled between entries: entries that have
not started yet stay unresolved.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from proxyprinter.clients.scryfall import ScryfallClient
from proxyprinter.clients.transport import HttpTransport
from proxyprinter.config import SUPPORTED_LANGUAGES, settings
from proxyprinter.models.card import CardEntry
from proxyprinter.models.deck import DeckDetails
from proxyprinter.models.failure import FailureKind, UsageError
from proxyprinter.models.progress import ProgressCallback, ProgressReporter, ProgressStage
from proxyprinter.parsers.card_list import parse_card_list
from proxyprinter.services.card_resolver import CardIdentityResolver
from proxyprinter.services.source_dispatch import DeckRetrieveStrategy, default_registry
from proxyprinter.services.token_expander import TokenExpander

logger = logging.getLogger(__name__)


@dataclass
class ResolveOptions:
    """
    Options of a resolution run.

    Attributes:
        language_code: Preferred card language (catalog code, e.g. "de")
        token_copies: Copies of each token; 0 disables token expansion
        group_tokens: Print each distinct token name only once
        include_emblems: Add emblems related to the cards (one copy each)
    """

    language_code: str | None = None
    token_copies: int = 0
    group_tokens: bool = False
    include_emblems: bool = False

    @property
    def include_tokens(self) -> bool:
        return self.token_copies > 0

    def validate(self) -> None:
        """
        Raises:
            UsageError: If the language or the token copy count is invalid
        """
        if self.language_code is not None and self.language_code.lower() not in SUPPORTED_LANGUAGES:
            raise UsageError(
                kind=FailureKind.INVALID_INPUT,
                message=f"Unknown language code: {self.language_code}",
                suggestion=f"Language codes: {', '.join(sorted(SUPPORTED_LANGUAGES))}",
            )
        if self.token_copies < 0 or self.token_copies > settings.max_token_copies:
            raise UsageError(
                kind=FailureKind.INVALID_INPUT,
                message=(
                    f"Number of copies for each token must be between 0 and "
                    f"{settings.max_token_copies}, got {self.token_copies}."
                ),
            )


class DeckProcessor:
    """Runs deck retrieval, card resolution and token expansion."""

    def __init__(
        self,
        strategy: DeckRetrieveStrategy,
        resolver: CardIdentityResolver,
        expander: TokenExpander,
        max_concurrency: int | None = None,
        progress: ProgressReporter | None = None,
    ) -> None:
        self.strategy = strategy
        self.resolver = resolver
        self.expander = expander
        self.max_concurrency = max(1, max_concurrency or settings.max_concurrent_lookups)
        self.progress = progress or ProgressReporter()
        self._cancelled = False

    @classmethod
    def create(cls, transport: HttpTransport) -> "DeckProcessor":
        """Processor wired to every supported deck site and Scryfall."""
        catalog = ScryfallClient(transport)
        return cls(
            strategy=DeckRetrieveStrategy(default_registry(transport)),
            resolver=CardIdentityResolver(catalog),
            expander=TokenExpander(catalog),
        )

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register a progress callback; returns the unsubscribe function."""
        return self.progress.subscribe(callback)

    def cancel(self) -> None:
        """Stop the current run before its next entry."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def load_deck(
        self, deck_url: str | None = None, card_list: str | None = None
    ) -> DeckDetails | None:
        """
        Load the deck from a URL or, failing that, a card list text.

        Returns:
            DeckDetails, or None if the deck site returned nothing usable

        Raises:
            UsageError: If no reference is given or no site handles the URL
        """
        if deck_url:
            if not self.strategy.supports(deck_url):
                raise UsageError(
                    kind=FailureKind.UNSUPPORTED_SOURCE,
                    message=f"No supported deck site for {deck_url}",
                    suggestion=f"Supported sites: {', '.join(self.strategy.registry.domains)}",
                )
            return await self.strategy.get_deck(deck_url)

        if card_list is not None and card_list.strip():
            return parse_card_list(card_list)

        raise UsageError(
            kind=FailureKind.MISSING_REQUIRED,
            message="You have to provide a deck URL or a card list.",
        )

    async def resolve_deck(
        self, deck: DeckDetails, options: ResolveOptions | None = None
    ) -> DeckDetails:
        """
        Resolve every entry of `deck` in place and append tokens/emblems.

        Unresolved entries stay in the deck with no sides. Starts a new run:
        an earlier `cancel()` is forgotten.
        """
        self._cancelled = False
        return await self._resolve(deck, options or ResolveOptions())

    async def _resolve(self, deck: DeckDetails, options: ResolveOptions) -> DeckDetails:
        options.validate()

        entries = list(deck.cards)
        total = len(entries)
        finished = 0
        semaphore = asyncio.Semaphore(self.max_concurrency)

        self.progress.start(ProgressStage.RESOLVE_CARDS)

        async def resolve_entry(entry: CardEntry) -> None:
            nonlocal finished
            async with semaphore:
                if self._cancelled:
                    return
                if entry.quantity > 0:
                    resolved = await self.resolver.apply(
                        entry,
                        language_code=options.language_code,
                        include_tokens=options.include_tokens,
                        include_emblems=options.include_emblems,
                    )
                    if not resolved:
                        self.progress.error(
                            ProgressStage.RESOLVE_CARDS,
                            f"Card {entry.name} was not found and will not be printed",
                        )

            finished += 1
            self.progress.report(ProgressStage.RESOLVE_CARDS, finished / total * 100)

        await asyncio.gather(*(resolve_entry(entry) for entry in entries))

        if self._cancelled:
            logger.warning("Run cancelled after %d of %d cards", finished, total)
            return deck

        if total == 0:
            self.progress.report(ProgressStage.RESOLVE_CARDS, 100.0)

        if options.include_tokens or options.include_emblems:
            await self.expander.expand(deck.cards, options.token_copies, options.group_tokens)

        logger.info(
            "Resolved %d of %d cards in %s",
            sum(1 for entry in entries if entry.is_resolved),
            total,
            deck.name or "deck",
        )
        return deck

    async def process(
        self,
        deck_url: str | None = None,
        card_list: str | None = None,
        options: ResolveOptions | None = None,
    ) -> DeckDetails | None:
        """
        Load and resolve a deck in one go.

        A `cancel()` issued while the deck is loading leaves every entry unresolved.
        """
        options = options or ResolveOptions()
        options.validate()
        self._cancelled = False

        deck = await self.load_deck(deck_url=deck_url, card_list=card_list)
        if deck is None:
            return None
        return await self._resolve(deck, options)
