"""
ProxyPrinter services.

Deck retrieval, card resolution, token expansion and image download.
"""

from proxyprinter.services.card_resolver import CardIdentityResolver, Resolution
from proxyprinter.services.deck_processor import DeckProcessor, ResolveOptions
from proxyprinter.services.image_download import ImageDownloader
from proxyprinter.services.source_dispatch import (
    DeckRetrieveStrategy,
    ExtractorRegistry,
    default_registry,
)
from proxyprinter.services.token_expander import TokenExpander

__all__ = [
    "CardIdentityResolver",
    "DeckProcessor",
    "DeckRetrieveStrategy",
    "ExtractorRegistry",
    "ImageDownloader",
    "Resolution",
    "ResolveOptions",
    "TokenExpander",
    "default_registry",
]
