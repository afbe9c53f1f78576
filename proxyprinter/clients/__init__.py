from proxyprinter.clients.scryfall import CatalogProvider, ScryfallClient
from proxyprinter.clients.transport import HttpTransport, RetryConfig

__all__ = [
    "CatalogProvider",
    "HttpTransport",
    "RetryConfig",
    "ScryfallClient",
]
