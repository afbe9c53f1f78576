"""
Scryfall catalog client.

Implements the three lookups the card resolver depends on:
- get_card: exact record by Scryfall id
- find_card: exact printing by set code and collector number
- search_cards: all printings matching a card name

API docs: https://scryfall.com/docs/api
"""

import logging
from typing import Any, Protocol
from urllib.parse import quote
from uuid import UUID

from pydantic import ValidationError

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.config import settings
from proxyprinter.models.scryfall import ScryfallCard, ScryfallCardList

logger = logging.getLogger(__name__)


class CatalogProvider(Protocol):
    """Card data source used by the resolver and the token expander."""

    async def get_card(self, card_id: UUID) -> ScryfallCard | None: ...

    async def find_card(
        self,
        name: str,
        expansion_code: str,
        collector_number: str,
        language_code: str | None = None,
    ) -> ScryfallCard | None: ...

    async def search_cards(
        self,
        name: str,
        include_extras: bool = False,
        filter_by_language: bool = False,
    ) -> list[ScryfallCard] | None: ...


def build_search_query(name: str) -> str:
    """Exact-name search query, e.g. `!"Fire // Ice"`."""
    return '!"{}"'.format(name.replace('"', '\\"'))


class ScryfallClient:
    """CatalogProvider backed by the public Scryfall API."""

    def __init__(self, transport: HttpTransport, base_url: str | None = None) -> None:
        self.transport = transport
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")

    async def get_card(self, card_id: UUID) -> ScryfallCard | None:
        data = await self.transport.get_json(f"{self.base_url}/cards/{card_id}")
        return _parse_card(data, f"id {card_id}")

    async def find_card(
        self,
        name: str,
        expansion_code: str,
        collector_number: str,
        language_code: str | None = None,
    ) -> ScryfallCard | None:
        path = f"/cards/{quote(expansion_code.lower())}/{quote(collector_number)}"
        if language_code:
            path += f"/{quote(language_code)}"

        data = await self.transport.get_json(f"{self.base_url}{path}")
        return _parse_card(data, f"{name} ({expansion_code}) {collector_number}")

    async def search_cards(
        self,
        name: str,
        include_extras: bool = False,
        filter_by_language: bool = False,
    ) -> list[ScryfallCard] | None:
        """
        Search all printings of `name`.

        Only the first result page is read; candidates keep Scryfall's order.
        """
        params = {"q": build_search_query(name), "unique": "prints"}
        if include_extras:
            params["include_extras"] = "true"
        if filter_by_language:
            # Searches only return English printings unless asked otherwise
            params["include_multilingual"] = "true"

        data = await self.transport.get_json(f"{self.base_url}/cards/search", params=params)
        if data is None:
            return None

        try:
            result = ScryfallCardList.model_validate(data)
        except ValidationError as e:
            logger.error("Unexpected search payload for %s: %s", name, e)
            return None

        logger.debug("Search for %s returned %d candidates", name, len(result.data))
        return result.data


def _parse_card(data: Any | None, label: str) -> ScryfallCard | None:
    if data is None:
        return None
    try:
        return ScryfallCard.model_validate(data)
    except ValidationError as e:
        logger.error("Unexpected card payload for %s: %s", label, e)
        return None
