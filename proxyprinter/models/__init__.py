from proxyprinter.models.card import CardEntry, CardSide, CardToken
from proxyprinter.models.deck import DeckDetails
from proxyprinter.models.failure import (
    ApiResponse,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    UsageError,
)
from proxyprinter.models.progress import (
    ProgressCallback,
    ProgressEvent,
    ProgressReporter,
    ProgressStage,
)
from proxyprinter.models.scryfall import (
    CardFace,
    ImageUris,
    RelatedPart,
    ScryfallCard,
    ScryfallCardList,
)

__all__ = [
    "ApiResponse",
    "CardEntry",
    "CardFace",
    "CardSide",
    "CardToken",
    "DeckDetails",
    "FailureDetail",
    "FailureKind",
    "ImageUris",
    "KnownError",
    "OutcomeType",
    "ProgressCallback",
    "ProgressEvent",
    "ProgressReporter",
    "ProgressStage",
    "RelatedPart",
    "ScryfallCard",
    "ScryfallCardList",
    "UsageError",
]
