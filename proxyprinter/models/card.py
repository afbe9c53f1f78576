from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, slots=True)
class CardSide:
    """
    One printable face of a card.

    Attributes:
        name: Face name (for split/double-faced cards, the face's own name)
        image_url: Catalog URL of the face image
    """

    name: str
    image_url: str


@dataclass(slots=True)
class CardToken:
    """
    A token or emblem related to a resolved card.

    Attributes:
        id: Catalog id of the token, when the catalog reports it
        name: Token name
        uri: Catalog API URI of the token record
        is_emblem: True for emblems (always printed once)
    """

    name: str
    id: UUID | None = None
    uri: str | None = None
    is_emblem: bool = False


@dataclass
class CardEntry:
    """
    One physical card to print.

    Attributes:
        name: Card name used for catalog lookup
        quantity: Copies to print
        id: Exact catalog id, when the deck source knows it
        expansion_code: Set code narrowing the lookup (e.g. "mh2")
        collector_number: Collector number within the set
        etched: Etched foil printing requested
        foil: Foil printing requested
        art: Art series printing requested (front illustration only)
        sides: Printable faces, filled in by the resolver
        related_tokens: Tokens/emblems, filled in by the resolver on request
    """

    name: str
    quantity: int = 1
    id: UUID | None = None
    expansion_code: str | None = None
    collector_number: str | None = None
    etched: bool = False
    foil: bool = False
    art: bool = False
    sides: list[CardSide] = field(default_factory=list)
    related_tokens: list[CardToken] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"Quantity must be >= 0, got {self.quantity} for {self.name!r}")

    @property
    def is_resolved(self) -> bool:
        """True once at least one printable side is attached."""
        return bool(self.sides)

    def set_sides(self, sides: list[CardSide]) -> None:
        """Replace all sides, dropping repeats while keeping face order."""
        self.sides = list(dict.fromkeys(sides))
