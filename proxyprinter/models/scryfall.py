"""
Scryfall card records.

Only the fields the resolver needs are modelled; everything else in the
payload is ignored. See https://scryfall.com/docs/api/cards
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

COMPONENT_TOKEN = "token"
TYPE_LINE_EMBLEM = "Emblem"


class ImageUris(BaseModel):
    """Image URLs by size."""

    model_config = ConfigDict(extra="ignore")

    small: str | None = None
    normal: str | None = None
    large: str | None = None
    png: str | None = None
    art_crop: str | None = None
    border_crop: str | None = None

    def get(self, size: str) -> str | None:
        """Return the URL for `size`, or None if that size is missing."""
        value = getattr(self, size, None)
        return value if isinstance(value, str) and value else None


class CardFace(BaseModel):
    """One face of a multi-faced card."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    image_uris: ImageUris | None = None


class RelatedPart(BaseModel):
    """Cross-reference to a related card (token, emblem, meld piece...)."""

    model_config = ConfigDict(extra="ignore")

    id: UUID | None = None
    name: str | None = None
    component: str | None = None
    uri: str | None = None
    type_line: str | None = None

    @property
    def is_token(self) -> bool:
        return self.component == COMPONENT_TOKEN

    @property
    def is_emblem(self) -> bool:
        return TYPE_LINE_EMBLEM in (self.type_line or "")


class ScryfallCard(BaseModel):
    """A single printing of a card."""

    model_config = ConfigDict(extra="ignore")

    id: UUID | None = None
    name: str | None = None
    lang: str | None = None
    set: str | None = None
    collector_number: str | None = None
    tcgplayer_etched_id: int | None = None
    image_uris: ImageUris | None = None
    card_faces: list[CardFace] | None = None
    all_parts: list[RelatedPart] | None = None

    @property
    def is_etched_variant(self) -> bool:
        return self.tcgplayer_etched_id is not None

    @property
    def is_dual_sided(self) -> bool:
        """
        Faces carry their own images and the card has no top-level image.

        Adventure and split cards have faces but a single shared image, so
        they print as one side.
        """
        return self.card_faces is not None and self.image_uris is None

    def name_matches(self, name: str) -> bool:
        """Case-insensitive match on the full name or any ` // ` sub-name."""
        if not self.name:
            return False
        wanted = name.casefold()
        if self.name.casefold() == wanted:
            return True
        return any(part.casefold() == wanted for part in self.name.split(" // "))


class ScryfallCardList(BaseModel):
    """A page of search results."""

    model_config = ConfigDict(extra="ignore")

    data: list[ScryfallCard] = Field(default_factory=list)
    has_more: bool = False
    total_cards: int | None = None
