from proxyprinter.parsers.card_list import parse_card_line, parse_card_list
from proxyprinter.parsers.url import domain_of, last_path_segment

__all__ = [
    "domain_of",
    "last_path_segment",
    "parse_card_line",
    "parse_card_list",
]
