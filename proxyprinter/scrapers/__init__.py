from proxyprinter.scrapers.archidekt import ArchidektExtractor
from proxyprinter.scrapers.base import DeckExtractor, RedirectingExtractor
from proxyprinter.scrapers.edhrec import EdhrecExtractor
from proxyprinter.scrapers.moxfield import MoxfieldExtractor
from proxyprinter.scrapers.mtggoldfish import GoldfishExtractor

__all__ = [
    "ArchidektExtractor",
    "DeckExtractor",
    "EdhrecExtractor",
    "GoldfishExtractor",
    "MoxfieldExtractor",
    "RedirectingExtractor",
]
