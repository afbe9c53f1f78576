from dataclasses import dataclass, field

from proxyprinter.models.card import CardEntry


@dataclass
class DeckDetails:
    """
    A retrieved deck.

    Attributes:
        name: Deck name as reported by the source (may be empty)
        cards: Card entries in print order
        source_url: URL the deck was finally retrieved from, if any
    """

    name: str = ""
    cards: list[CardEntry] = field(default_factory=list)
    source_url: str | None = None

    def total_quantity(self) -> int:
        """Total copies across all entries."""
        return sum(card.quantity for card in self.cards)

    def printable_cards(self) -> list[CardEntry]:
        """Entries that will actually be printed."""
        return [card for card in self.cards if card.is_resolved and card.quantity > 0]

    def unresolved_cards(self) -> list[CardEntry]:
        """Entries the resolver could not match to any image."""
        return [card for card in self.cards if not card.is_resolved]
