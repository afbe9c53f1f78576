"""
Deck API endpoints.

Resolves a deck URL or a pasted card list into printable card images.
"""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.models.card import CardEntry
from proxyprinter.models.deck import DeckDetails
from proxyprinter.models.failure import ApiResponse, FailureKind
from proxyprinter.services.deck_processor import DeckProcessor, ResolveOptions

router = APIRouter(prefix="/decks", tags=["decks"])


class ResolveDeckRequest(BaseModel):
    """Request body for deck resolution. One of deck_url / card_list is required."""

    deck_url: str | None = None
    card_list: str | None = None
    language_code: str | None = None
    token_copies: int = Field(default=0, ge=0)
    group_tokens: bool = False
    include_emblems: bool = False


class CardSideResponse(BaseModel):
    name: str
    image_url: str


class CardEntryResponse(BaseModel):
    """A deck entry with its printable sides."""

    name: str
    quantity: int
    id: UUID | None = None
    expansion_code: str | None = None
    collector_number: str | None = None
    sides: list[CardSideResponse] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: CardEntry) -> "CardEntryResponse":
        return cls(
            name=entry.name,
            quantity=entry.quantity,
            id=entry.id,
            expansion_code=entry.expansion_code,
            collector_number=entry.collector_number,
            sides=[CardSideResponse(name=s.name, image_url=s.image_url) for s in entry.sides],
        )


class DeckResponse(BaseModel):
    """Resolved deck. `unresolved` lists cards that will not be printed."""

    name: str
    source_url: str | None = None
    cards: list[CardEntryResponse]
    unresolved: list[str]
    count: int

    @classmethod
    def from_deck(cls, deck: DeckDetails) -> "DeckResponse":
        printable = deck.printable_cards()
        return cls(
            name=deck.name,
            source_url=deck.source_url,
            cards=[CardEntryResponse.from_entry(entry) for entry in printable],
            unresolved=[entry.name for entry in deck.unresolved_cards()],
            count=sum(entry.quantity for entry in printable),
        )


async def get_deck_processor() -> AsyncGenerator[DeckProcessor, None]:
    """Processor with its own HTTP transport for the duration of a request."""
    async with HttpTransport() as transport:
        yield DeckProcessor.create(transport)


@router.post("/resolve", response_model=ApiResponse[DeckResponse])
async def resolve_deck(
    request: ResolveDeckRequest,
    processor: Annotated[DeckProcessor, Depends(get_deck_processor)],
) -> ApiResponse[DeckResponse] | JSONResponse:
    """
    Retrieve a deck and resolve every card to its images.

    Cards that cannot be resolved are reported in `unresolved`; the request
    still succeeds. Usage errors are returned as known failures with 400.
    """
    options = ResolveOptions(
        language_code=request.language_code,
        token_copies=request.token_copies,
        group_tokens=request.group_tokens,
        include_emblems=request.include_emblems,
    )

    deck = await processor.process(
        deck_url=request.deck_url,
        card_list=request.card_list,
        options=options,
    )
    if deck is None:
        failure = ApiResponse.known_failure(
            kind=FailureKind.NOT_FOUND,
            message="The deck could not be retrieved.",
            detail=request.deck_url,
            suggestion="Check that the deck is public and the link is correct.",
        )
        return JSONResponse(status_code=404, content=failure.model_dump(mode="json"))

    return ApiResponse[DeckResponse].success(DeckResponse.from_deck(deck))
