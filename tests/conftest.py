from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

import pytest

from proxyprinter.clients.transport import HttpTransport, RetryConfig
from proxyprinter.models.scryfall import ScryfallCard


@dataclass
class FakeCatalog:
    """In-memory CatalogProvider recording every lookup."""

    by_id: dict[UUID, ScryfallCard] = field(default_factory=dict)
    exact: dict[tuple[str, str, str | None], ScryfallCard] = field(default_factory=dict)
    searches: dict[str, list[ScryfallCard]] = field(default_factory=dict)
    calls: list[tuple[Any, ...]] = field(default_factory=list)

    async def get_card(self, card_id: UUID) -> ScryfallCard | None:
        self.calls.append(("get_card", card_id))
        return self.by_id.get(card_id)

    async def find_card(
        self,
        name: str,
        expansion_code: str,
        collector_number: str,
        language_code: str | None = None,
    ) -> ScryfallCard | None:
        self.calls.append(("find_card", name, expansion_code, collector_number, language_code))
        return self.exact.get((expansion_code, collector_number, language_code))

    async def search_cards(
        self,
        name: str,
        include_extras: bool = False,
        filter_by_language: bool = False,
    ) -> list[ScryfallCard] | None:
        self.calls.append(("search_cards", name, include_extras, filter_by_language))
        return self.searches.get(name)


def make_card(
    name: str,
    image: str | None = None,
    *,
    lang: str = "en",
    set_code: str = "tst",
    faces: list[tuple[str, str | None]] | None = None,
    etched: bool = False,
    parts: list[dict[str, Any]] | None = None,
    card_id: str | None = None,
) -> ScryfallCard:
    """Build a catalog record the way Scryfall shapes it."""
    payload: dict[str, Any] = {"name": name, "lang": lang, "set": set_code}
    if card_id is not None:
        payload["id"] = card_id
    if image is not None:
        payload["image_uris"] = {"normal": image + "?normal", "large": image}
    if faces is not None:
        payload["card_faces"] = [
            {"name": face_name, **({"image_uris": {"large": url}} if url else {})}
            for face_name, url in faces
        ]
    if etched:
        payload["tcgplayer_etched_id"] = 98765
    if parts is not None:
        payload["all_parts"] = parts
    return ScryfallCard.model_validate(payload)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def card_factory():
    """Factory for Scryfall-shaped card records."""
    return make_card


@pytest.fixture
async def transport():
    """Transport without retry delays."""
    async with HttpTransport(retry=RetryConfig(max_retries=2, base_delay=0.0)) as transport:
        yield transport
