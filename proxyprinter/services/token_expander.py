"""
Token and emblem expansion.

Runs after every entry is resolved: collects the related tokens of all
entries, optionally keeps one token per name, looks each one up and appends
it to the deck as its own printable entry.

Quantities:
- emblems are printed once
- tokens are printed `copies_per_token` times per surviving token
"""

import logging
from uuid import UUID

from proxyprinter.clients.scryfall import CatalogProvider
from proxyprinter.config import settings
from proxyprinter.models.card import CardEntry, CardSide, CardToken
from proxyprinter.models.scryfall import ScryfallCard
from proxyprinter.parsers.url import last_path_segment
from proxyprinter.scrapers.base import parse_uuid

logger = logging.getLogger(__name__)


def token_identity(token: CardToken) -> UUID | None:
    """Catalog id of a token: its own id, else the id at the end of its URI."""
    if token.id is not None:
        return token.id
    if not token.uri:
        return None
    return parse_uuid(last_path_segment(token.uri))


def collect_tokens(entries: list[CardEntry], group_by_name: bool) -> list[CardToken]:
    """All related tokens in deck order; one per name when grouping."""
    tokens = [token for entry in entries for token in entry.related_tokens]
    if not group_by_name:
        return tokens

    seen: set[str] = set()
    grouped: list[CardToken] = []
    for token in tokens:
        if token.name in seen:
            continue
        seen.add(token.name)
        grouped.append(token)
    return grouped


class TokenExpander:
    """Appends tokens and emblems as printable entries."""

    def __init__(self, catalog: CatalogProvider, image_size: str | None = None) -> None:
        self.catalog = catalog
        self.image_size = image_size or settings.image_size

    async def expand(
        self,
        entries: list[CardEntry],
        copies_per_token: int,
        group_by_name: bool = False,
    ) -> list[CardEntry]:
        """
        Append token/emblem entries to `entries` in place.

        Args:
            entries: Resolved deck entries; their related tokens are read
            copies_per_token: Quantity for each token entry (emblems get 1)
            group_by_name: Keep only the first token of each name

        Returns:
            The entries that were appended
        """
        added: list[CardEntry] = []

        for token in collect_tokens(entries, group_by_name):
            token_id = token_identity(token)
            if token_id is None:
                logger.error("Token %s does not have a valid catalog reference", token.name)
                continue

            record = await self.catalog.get_card(token_id)
            if record is None:
                logger.error("Token %s (%s) was not found in the catalog", token.name, token_id)
                continue

            side = self._token_side(record)
            if side is None:
                logger.error("Token %s does not have any url to its picture", token.name)
                continue

            entry = CardEntry(
                name=token.name,
                quantity=1 if token.is_emblem else copies_per_token,
                id=token_id,
                expansion_code=record.set,
                sides=[side],
            )
            added.append(entry)

        entries.extend(added)
        logger.info("Added %d token/emblem entries", len(added))
        return added

    def _token_side(self, record: ScryfallCard) -> CardSide | None:
        """Single image of a token; double-faced tokens use their front face."""
        if record.image_uris is not None:
            url = record.image_uris.get(self.image_size)
            return CardSide(name=record.name or "", image_url=url) if url else None

        for face in record.card_faces or []:
            url = face.image_uris.get(self.image_size) if face.image_uris else None
            if url:
                return CardSide(name=record.name or "", image_url=url)
        return None
