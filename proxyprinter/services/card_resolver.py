"""
Card identity resolution.

Maps a deck entry (name plus optional set, collector number, finish and
language hints) onto exactly one catalog printing, then derives the sides
to print and the related tokens/emblems.

Matching rules, applied to candidates in catalog order (first match wins):
1. Name equals the entry name, or one of its " // " halves (case-insensitive)
2. Etched entries require an etched printing
3. Entries with a set code require that exact set
4. A requested language must match

A language miss retries the whole lookup without language.
"""

import logging
from dataclasses import dataclass, field

from proxyprinter.clients.scryfall import CatalogProvider
from proxyprinter.config import settings
from proxyprinter.models.card import CardEntry, CardSide, CardToken
from proxyprinter.models.scryfall import ScryfallCard

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Outcome of resolving one entry."""

    record: ScryfallCard
    sides: list[CardSide]
    tokens: list[CardToken] = field(default_factory=list)


def matches_entry(record: ScryfallCard, entry: CardEntry, language_code: str | None) -> bool:
    """True if `record` is an acceptable printing for `entry`."""
    if not record.name_matches(entry.name):
        return False
    if entry.etched and not record.is_etched_variant:
        return False
    if entry.expansion_code is not None and record.set != entry.expansion_code:
        return False
    if language_code is not None and (record.lang or "").lower() != language_code.lower():
        return False
    return True


def derive_sides(
    record: ScryfallCard, art_only: bool = False, image_size: str | None = None
) -> list[CardSide] | None:
    """
    Printable sides of a record.

    Double-faced cards give one side per imaged face, or only the front face
    for art-only requests. Single-faced cards need a top-level image.

    Returns:
        Sides in print order, or None if the record has no usable image
    """
    size = image_size or settings.image_size
    name = record.name or ""

    if record.is_dual_sided:
        faces = record.card_faces or []
        if art_only:
            front = faces[0] if faces else None
            url = front.image_uris.get(size) if front and front.image_uris else None
            if url is None:
                logger.error("Card %s has no image on its front face", name)
                return None
            return [CardSide(name=name, image_url=url)]

        sides: list[CardSide] = []
        for face in faces:
            url = face.image_uris.get(size) if face.image_uris else None
            if url is None:
                continue
            side = CardSide(name=face.name or "", image_url=url)
            if side not in sides:
                sides.append(side)
        if not sides:
            logger.error("Card %s has no face with a picture", name)
            return None
        return sides

    url = record.image_uris.get(size) if record.image_uris else None
    if url is None:
        logger.error("Card %s does not have any url to its picture", name)
        return None
    return [CardSide(name=name, image_url=url)]


def related_tokens(
    record: ScryfallCard, include_tokens: bool, include_emblems: bool
) -> list[CardToken]:
    """Tokens and/or emblems the record links to. A part may qualify under both rules."""
    tokens: list[CardToken] = []
    parts = record.all_parts or []

    if include_tokens:
        for part in parts:
            if part.is_token:
                tokens.append(CardToken(id=part.id, name=part.name or "", uri=part.uri))

    if include_emblems:
        for part in parts:
            if part.is_emblem:
                tokens.append(
                    CardToken(id=part.id, name=part.name or "", uri=part.uri, is_emblem=True)
                )

    return tokens


class CardIdentityResolver:
    """Resolves deck entries against a CatalogProvider."""

    def __init__(self, catalog: CatalogProvider, image_size: str | None = None) -> None:
        self.catalog = catalog
        self.image_size = image_size or settings.image_size

    async def find_record(
        self, entry: CardEntry, language_code: str | None = None
    ) -> ScryfallCard | None:
        """Catalog record for the entry under one language constraint (no fallback)."""
        if entry.id is not None:
            return await self.catalog.get_card(entry.id)

        if entry.expansion_code and entry.collector_number:
            found = await self.catalog.find_card(
                entry.name, entry.expansion_code, entry.collector_number, language_code
            )
            candidates = [found] if found is not None else []
        else:
            include_extras = entry.expansion_code is not None or entry.etched or entry.art
            candidates = (
                await self.catalog.search_cards(
                    entry.name,
                    include_extras=include_extras,
                    filter_by_language=language_code is not None,
                )
                or []
            )

        return next((c for c in candidates if matches_entry(c, entry, language_code)), None)

    async def resolve(
        self,
        entry: CardEntry,
        language_code: str | None = None,
        include_tokens: bool = False,
        include_emblems: bool = False,
    ) -> Resolution | None:
        """
        Resolve one entry without modifying it.

        Returns:
            Resolution, or None if the card is unresolved (already logged)
        """
        record = await self.find_record(entry, language_code)
        if record is None and language_code is not None:
            logger.warning(
                "Card %s in [%s] was not found in the catalog, trying any language",
                entry.name,
                language_code,
            )
            record = await self.find_record(entry)

        if record is None:
            logger.error("Card %s was not found in the catalog and will be ignored", entry.name)
            return None

        sides = derive_sides(record, art_only=entry.art, image_size=self.image_size)
        if sides is None:
            return None

        return Resolution(
            record=record,
            sides=sides,
            tokens=related_tokens(record, include_tokens, include_emblems),
        )

    async def apply(
        self,
        entry: CardEntry,
        language_code: str | None = None,
        include_tokens: bool = False,
        include_emblems: bool = False,
    ) -> bool:
        """
        Resolve `entry` and write sides and related tokens back to it.

        Previous sides and tokens are replaced, so re-resolving is safe.

        Returns:
            True if the entry now has printable sides
        """
        resolution = await self.resolve(entry, language_code, include_tokens, include_emblems)
        if resolution is None:
            return entry.is_resolved

        entry.set_sides(resolution.sides)
        entry.related_tokens = resolution.tokens
        return entry.is_resolved
